"""
OAuth exception classes for Flickr API integration.

This module defines the exception hierarchy for all OAuth-related errors.
Note that an invalid token is not an exception: it is a normal outcome of
token validation (see :class:`~flickr_oauth.validator.TokenStatus`).
"""

from typing import Optional


class FlickrOAuthError(Exception):
    """Base exception for all Flickr OAuth errors."""

    pass


class ConfigurationError(FlickrOAuthError):
    """OAuth configuration error (missing or invalid configuration)."""

    pass


class MalformedResponseError(FlickrOAuthError):
    """Provider returned a body that could not be parsed."""

    pass


class NetworkError(FlickrOAuthError):
    """
    Transport-level failure (DNS, timeout, connection reset).

    Attributes:
        cause: The underlying exception raised by the HTTP layer
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class NegotiationFailedError(FlickrOAuthError):
    """
    A handshake step was rejected by the provider.

    Attributes:
        step: Handshake step that failed ("request_token", "access_token", ...)
        reason: Provider-supplied reason, if any
        session: The FAILED negotiation session, when one was in progress
    """

    def __init__(self, step: str, reason: str, session: Optional[object] = None):
        super().__init__(f"OAuth negotiation failed at {step}: {reason}")
        self.step = step
        self.reason = reason
        self.session = session


class CredentialSinkError(FlickrOAuthError):
    """Credential sink could not persist the negotiated tokens."""

    pass


class ApiBuilderError(FlickrOAuthError):
    """API builder raised while constructing the client object."""

    pass
