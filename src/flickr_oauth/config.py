"""
OAuth configuration for Flickr API integration.

This module provides configuration management for OAuth 1.0a authentication
with Flickr (or any provider exposing the same three OAuth endpoints).
Configuration can be loaded from environment variables or provided
programmatically.
"""

import os
from dataclasses import dataclass

from .exceptions import ConfigurationError

VALID_PERMS = ("read", "write", "delete")


@dataclass(frozen=True)
class Credentials:
    """
    Application credentials issued by the provider.

    Attributes:
        api_key: Application key (the OAuth consumer key)
        api_secret: Application secret (the OAuth consumer secret)
    """

    api_key: str
    api_secret: str

    def __post_init__(self) -> None:
        if not self.api_key:
            raise ConfigurationError("api_key cannot be empty")

        if not self.api_secret:
            raise ConfigurationError("api_secret cannot be empty")

    def __repr__(self) -> str:
        return f"Credentials(api_key={self.api_key!r}, api_secret='***')"


@dataclass
class FlickrOAuthConfig:
    """
    Configuration for Flickr OAuth 1.0a.

    Attributes:
        api_key: Flickr application key
        api_secret: Flickr application secret
        callback: "oob" for out-of-band (verifier code) flows, or a callback URL
        perms: Permission level requested from the user (read, write, delete)
        rest_url: Flickr REST endpoint (used for checkToken)
        request_token_url: OAuth request token endpoint
        authorize_url: OAuth user authorization page
        access_token_url: OAuth access token endpoint
        timeout: HTTP timeout in seconds for every provider call
    """

    # Required - from https://www.flickr.com/services/apps/create/apply
    api_key: str
    api_secret: str

    # Handshake options
    callback: str = "oob"
    perms: str = "read"

    # Flickr endpoints
    rest_url: str = "https://api.flickr.com/services/rest"
    request_token_url: str = "https://www.flickr.com/services/oauth/request_token"
    authorize_url: str = "https://www.flickr.com/services/oauth/authorize"
    access_token_url: str = "https://www.flickr.com/services/oauth/access_token"

    timeout: float = 30

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.api_key or not self.api_secret:
            raise ConfigurationError(
                "Please pass a valid Flickr API key and secret. "
                "Visit https://www.flickr.com/services/apps/create/apply to get one."
            )

        if not self.callback:
            raise ConfigurationError("callback cannot be empty (use 'oob' or a URL)")

        if self.perms not in VALID_PERMS:
            raise ConfigurationError(
                f"perms must be one of {', '.join(VALID_PERMS)}, got {self.perms!r}"
            )

        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @property
    def credentials(self) -> Credentials:
        """Immutable application credentials."""
        return Credentials(api_key=self.api_key, api_secret=self.api_secret)

    @property
    def is_out_of_band(self) -> bool:
        """True when the user is expected to paste a verifier code."""
        return self.callback == "oob"

    @classmethod
    def from_env(cls) -> "FlickrOAuthConfig":
        """
        Load configuration from environment variables.

        Required environment variables:
            FLICKR_API_KEY: Flickr application key
            FLICKR_API_SECRET: Flickr application secret

        Optional environment variables:
            FLICKR_CALLBACK: "oob" or callback URL (default: oob)
            FLICKR_PERMS: read, write or delete (default: read)
            FLICKR_TIMEOUT: HTTP timeout in seconds (default: 30)

        Returns:
            FlickrOAuthConfig instance

        Raises:
            ConfigurationError: If required environment variables are missing
        """
        api_key = os.environ.get("FLICKR_API_KEY")
        api_secret = os.environ.get("FLICKR_API_SECRET")

        if not api_key or not api_secret:
            raise ConfigurationError(
                "Missing Flickr API credentials. Set environment variables:\n"
                "  FLICKR_API_KEY=your_api_key\n"
                "  FLICKR_API_SECRET=your_api_secret\n"
                "\n"
                "Get credentials from: https://www.flickr.com/services/apps/create/apply"
            )

        try:
            timeout = float(os.environ.get("FLICKR_TIMEOUT", "30"))
        except ValueError as e:
            raise ConfigurationError(f"FLICKR_TIMEOUT must be a number: {e}") from e

        return cls(
            api_key=api_key,
            api_secret=api_secret,
            callback=os.environ.get("FLICKR_CALLBACK", "oob"),
            perms=os.environ.get("FLICKR_PERMS", "read"),
            timeout=timeout,
        )
