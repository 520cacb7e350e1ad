"""Shared fixtures for Flickr OAuth tests."""

import json
from unittest import mock
from urllib.parse import parse_qsl, urlsplit

import pytest
import requests

from flickr_oauth.config import FlickrOAuthConfig
from flickr_oauth.tokens import TokenPair


def make_response(status_code: int = 200, text: str = "") -> mock.Mock:
    """Create a fake requests.Response; ``json()`` parses ``text``."""
    response = mock.Mock(spec=requests.Response)
    response.status_code = status_code
    response.text = text
    response.json.side_effect = lambda: json.loads(text)
    return response


@pytest.fixture
def config():
    """Create test OAuth config."""
    return FlickrOAuthConfig(api_key="K", api_secret="S")


@pytest.fixture
def credentials(config):
    """Application credentials matching the test config."""
    return config.credentials


@pytest.fixture
def token_pair():
    """A complete, previously negotiated token pair."""
    return TokenPair(
        user_id="123@N00", access_token="AT", access_token_secret="ATS"
    )


@pytest.fixture
def http():
    """Stub HTTP session; tests set ``http.get.side_effect``/``return_value``."""
    return mock.Mock(spec=requests.Session)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real Flickr credentials in the environment out of tests."""
    for name in (
        "FLICKR_API_KEY",
        "FLICKR_API_SECRET",
        "FLICKR_CALLBACK",
        "FLICKR_PERMS",
        "FLICKR_TIMEOUT",
        "FLICKR_USER_ID",
        "FLICKR_ACCESS_TOKEN",
        "FLICKR_ACCESS_TOKEN_SECRET",
    ):
        monkeypatch.delenv(name, raising=False)


def sent_urls(http) -> list:
    """All URLs passed to the stub session's get()."""
    return [c.args[0] for c in http.get.call_args_list]


def query_of(url: str) -> dict:
    """Decode the query string of a signed URL."""
    return dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))
