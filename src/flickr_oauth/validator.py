"""
Access token validation against the provider.

This module checks whether a previously negotiated access token is still
accepted by calling ``flickr.auth.oauth.checkToken``. Validation has three
distinct outcomes; a transport failure is reported as NETWORK_ERROR and
never as an invalid token.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import requests

from .config import Credentials, FlickrOAuthConfig
from .exceptions import MalformedResponseError
from .signer import oauth_parameters, signed_url
from .tokens import TokenPair

logger = logging.getLogger(__name__)

CHECK_TOKEN_METHOD = "flickr.auth.oauth.checkToken"


class TokenStatus(Enum):
    """Outcome of a token check."""

    VALID = "valid"  # Provider accepted the token
    INVALID = "invalid"  # Missing, partial, or rejected by the provider
    NETWORK_ERROR = "network_error"  # Transport failure, token state unknown


@dataclass
class ValidationResult:
    """
    Result of :meth:`TokenValidator.check_token`.

    Attributes:
        status: Validation outcome
        detail: Human-readable explanation
        error: Underlying transport exception (NETWORK_ERROR only)
        perms: Permission level reported by the provider (VALID only)
    """

    status: TokenStatus
    detail: str = ""
    error: Optional[Exception] = None
    perms: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        return self.status is TokenStatus.VALID


class TokenValidator:
    """
    Checks access tokens with a single signed GET.

    No retries are attempted; callers decide what to do with a
    NETWORK_ERROR result.
    """

    def __init__(
        self, config: FlickrOAuthConfig, session: Optional[requests.Session] = None
    ):
        """
        Initialize token validator.

        Args:
            config: OAuth configuration (endpoints and timeout)
            session: HTTP session (creates a new one if not provided)
        """
        self.config = config
        self.session = session or requests.Session()

    def check_token(
        self, credentials: Credentials, token_pair: Optional[TokenPair]
    ) -> ValidationResult:
        """
        Check whether an access token is still valid.

        Args:
            credentials: Application credentials
            token_pair: Previously negotiated tokens (may be None or partial)

        Returns:
            ValidationResult with VALID, INVALID or NETWORK_ERROR status

        Raises:
            MalformedResponseError: If a 2xx response body cannot be parsed
        """
        if token_pair is None or not token_pair.is_complete:
            logger.info("No complete access token available, skipping check")
            return ValidationResult(TokenStatus.INVALID, detail="no access token")

        params = oauth_parameters(
            credentials.api_key,
            method=CHECK_TOKEN_METHOD,
            oauth_token=token_pair.access_token,
            format="json",
            nojsoncallback="1",
        )
        url = signed_url(
            "GET",
            self.config.rest_url,
            params,
            credentials.api_secret,
            token_pair.access_token_secret,
        )

        try:
            response = self.session.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            logger.error(f"Network error during token check: {e}")
            return ValidationResult(
                TokenStatus.NETWORK_ERROR, detail=str(e), error=e
            )

        if not 200 <= response.status_code < 300:
            logger.warning(f"Token check rejected with status {response.status_code}")
            return ValidationResult(
                TokenStatus.INVALID,
                detail=f"HTTP {response.status_code}: {response.text}",
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Unparseable checkToken response: {response.text!r}"
            ) from e

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Unexpected checkToken response: {response.text!r}"
            )

        if data.get("stat") == "fail":
            message = data.get("message", "token rejected")
            logger.warning(f"Access token rejected by provider: {message}")
            return ValidationResult(TokenStatus.INVALID, detail=message)

        perms = _content(_content_dict(data.get("oauth")).get("perms"))
        logger.info(f"Access token for {token_pair.user_id} is valid")
        return ValidationResult(TokenStatus.VALID, detail="ok", perms=perms)


def _content_dict(value: object) -> dict:
    return value if isinstance(value, dict) else {}


def _content(value: object) -> Optional[str]:
    """Unwrap Flickr's ``{"_content": ...}`` JSON convention."""
    if isinstance(value, dict):
        return value.get("_content")
    return value if isinstance(value, str) else None
