"""
Authentication controller for high-level OAuth operations.

This module provides the main interface for OAuth operations. It validates
an existing access token first and only falls back to the full handshake
when the token is missing or rejected. Whatever happens, the caller receives
exactly one terminal :class:`AuthResult`.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import requests

from .config import Credentials, FlickrOAuthConfig
from .exceptions import (
    ApiBuilderError,
    ConfigurationError,
    CredentialSinkError,
    FlickrOAuthError,
    NetworkError,
)
from .negotiator import TokenNegotiator, VerifierSupplier
from .tokens import TokenPair
from .validator import TokenStatus, TokenValidator

logger = logging.getLogger(__name__)

CredentialSink = Callable[[TokenPair], None]
ApiBuilder = Callable[[Credentials, Optional[TokenPair]], Any]


class AuthOutcome(Enum):
    """Terminal outcome of :meth:`AuthController.authenticate`."""

    ALREADY_AUTHENTICATED = "already_authenticated"  # Supplied token was valid
    NEGOTIATED = "negotiated"  # New token obtained via handshake
    FAILED = "failed"


@dataclass
class AuthResult:
    """
    Result of an authentication attempt.

    Attributes:
        outcome: Terminal outcome
        token_pair: Valid credentials (success outcomes only)
        error: What went wrong (FAILED only)
        api: Whatever the API builder returned, if one was supplied
    """

    outcome: AuthOutcome
    token_pair: Optional[TokenPair] = None
    error: Optional[FlickrOAuthError] = None
    api: Any = None

    @property
    def success(self) -> bool:
        return self.outcome is not AuthOutcome.FAILED


class AuthController:
    """
    High-level coordinator for OAuth authentication.

    Collaborators are injected: the verifier supplier performs the
    interactive consent step, the credential sink receives newly negotiated
    tokens, and the API builder turns credentials into an API object.

    Example:
        controller = AuthController(
            FlickrOAuthConfig.from_env(),
            verifier_supplier=lambda url: input(f"Visit {url}\\nVerifier: "),
            credential_sink=ConsoleExportSink(),
        )
        result = controller.authenticate(token_pair=TokenPair.from_env())
        if result.success:
            print(result.token_pair.user_id)
    """

    def __init__(
        self,
        config: FlickrOAuthConfig,
        verifier_supplier: Optional[VerifierSupplier] = None,
        credential_sink: Optional[CredentialSink] = None,
        api_builder: Optional[ApiBuilder] = None,
        validator: Optional[TokenValidator] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize authentication controller.

        Args:
            config: OAuth configuration
            verifier_supplier: Receives the authorization URL, returns the
                verifier code (required only when negotiation is needed)
            credential_sink: Receives newly negotiated tokens
            api_builder: Builds an API object from credentials and tokens
            validator: Token validator (creates default if not provided)
            session: HTTP session shared by validator and negotiators
        """
        self.config = config
        self.verifier_supplier = verifier_supplier
        self.credential_sink = credential_sink
        self.api_builder = api_builder
        self.session = session or requests.Session()
        self.validator = validator or TokenValidator(config, self.session)

    def authenticate(
        self,
        credentials: Optional[Credentials] = None,
        token_pair: Optional[TokenPair] = None,
    ) -> AuthResult:
        """
        Ensure we have a valid access token, negotiating one if needed.

        Args:
            credentials: Application credentials (defaults to the config's)
            token_pair: Previously negotiated tokens, if any

        Returns:
            AuthResult with ALREADY_AUTHENTICATED, NEGOTIATED or FAILED outcome

        Raises:
            ConfigurationError: If credentials are missing, or negotiation is
                needed but no verifier supplier was given
        """
        credentials = credentials or self.config.credentials

        try:
            check = self.validator.check_token(credentials, token_pair)
        except FlickrOAuthError as e:
            logger.error(f"Token validation failed: {e}")
            return AuthResult(AuthOutcome.FAILED, error=e)

        if check.status is TokenStatus.VALID:
            logger.info("Already authenticated")
            return self._succeed(AuthOutcome.ALREADY_AUTHENTICATED, credentials, token_pair)

        if check.status is TokenStatus.NETWORK_ERROR:
            logger.error(f"Could not reach provider to validate token: {check.detail}")
            error = NetworkError(
                f"Token validation failed: {check.detail}", cause=check.error
            )
            return AuthResult(AuthOutcome.FAILED, error=error)

        if self.verifier_supplier is None:
            raise ConfigurationError(
                "Access token is missing or invalid and no verifier supplier "
                "was provided to run the OAuth handshake"
            )

        logger.info(f"No valid access token ({check.detail}), starting OAuth negotiation")
        negotiator = TokenNegotiator(credentials, self.config, self.session)
        try:
            negotiated = negotiator.negotiate(self.verifier_supplier)
        except FlickrOAuthError as e:
            logger.error(f"OAuth negotiation failed: {e}")
            return AuthResult(AuthOutcome.FAILED, error=e)

        try:
            self._store(negotiated)
        except CredentialSinkError as e:
            logger.error(f"Credential sink failed: {e}")
            return AuthResult(AuthOutcome.FAILED, error=e)

        return self._succeed(AuthOutcome.NEGOTIATED, credentials, negotiated)

    def token_only(self, credentials: Optional[Credentials] = None) -> Any:
        """
        Build an API object for unauthenticated calls, skipping OAuth.

        Returns:
            The API builder's result

        Raises:
            ConfigurationError: If no API builder was provided
        """
        if self.api_builder is None:
            raise ConfigurationError("token_only requires an api_builder")
        return self.api_builder(credentials or self.config.credentials, None)

    def _store(self, token_pair: TokenPair) -> None:
        """Hand newly negotiated tokens to the credential sink, if any."""
        if self.credential_sink is None:
            return
        try:
            self.credential_sink(token_pair)
        except CredentialSinkError:
            raise
        except Exception as e:
            raise CredentialSinkError(f"Credential sink failed: {e}") from e

    def _succeed(
        self, outcome: AuthOutcome, credentials: Credentials, token_pair: TokenPair
    ) -> AuthResult:
        try:
            api = self._build_api(credentials, token_pair)
        except ApiBuilderError as e:
            logger.error(f"API builder failed: {e}")
            return AuthResult(AuthOutcome.FAILED, error=e)
        return AuthResult(outcome, token_pair=token_pair, api=api)

    def _build_api(self, credentials: Credentials, token_pair: TokenPair) -> Any:
        if self.api_builder is None:
            return None
        try:
            return self.api_builder(credentials, token_pair)
        except Exception as e:
            raise ApiBuilderError(f"API builder failed: {e}") from e
