"""
OAuth 1.0a credential negotiation for the Flickr API.

This module validates previously obtained access tokens and, when they are
missing or rejected, drives the three-legged OAuth1 handshake to obtain a
new user-bound access token pair.

Public API:
    FlickrOAuthConfig: OAuth configuration management
    Credentials: Application key/secret
    TokenPair: User-bound access token pair
    TokenValidator: Access token validation
    TokenNegotiator: Request token -> access token handshake
    AuthController: High-level authentication interface

Exceptions:
    FlickrOAuthError: Base exception
    ConfigurationError: Configuration error
    MalformedResponseError: Unparseable provider response
    NetworkError: Transport failure
    NegotiationFailedError: Handshake step rejected
    CredentialSinkError: Credential sink failed
    ApiBuilderError: API builder failed
"""

from .config import Credentials, FlickrOAuthConfig
from .controller import AuthController, AuthOutcome, AuthResult
from .exceptions import (
    ApiBuilderError,
    ConfigurationError,
    CredentialSinkError,
    FlickrOAuthError,
    MalformedResponseError,
    NegotiationFailedError,
    NetworkError,
)
from .negotiator import NegotiationSession, NegotiationState, TokenNegotiator
from .sinks import ConsoleExportSink, DotEnvFileSink, chain_sinks
from .tokens import RequestToken, TokenPair
from .validator import TokenStatus, TokenValidator, ValidationResult

__version__ = "1.0.0"

__all__ = [
    # Configuration
    "FlickrOAuthConfig",
    "Credentials",
    # Tokens
    "TokenPair",
    "RequestToken",
    # Validation
    "TokenValidator",
    "TokenStatus",
    "ValidationResult",
    # Negotiation
    "TokenNegotiator",
    "NegotiationSession",
    "NegotiationState",
    # Controller
    "AuthController",
    "AuthOutcome",
    "AuthResult",
    # Credential sinks
    "ConsoleExportSink",
    "DotEnvFileSink",
    "chain_sinks",
    # Exceptions
    "FlickrOAuthError",
    "ConfigurationError",
    "MalformedResponseError",
    "NetworkError",
    "NegotiationFailedError",
    "CredentialSinkError",
    "ApiBuilderError",
]
