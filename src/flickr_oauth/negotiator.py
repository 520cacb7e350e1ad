"""
Three-legged OAuth 1.0a handshake.

The handshake is modelled as an explicit state machine over an immutable
:class:`NegotiationSession`. Each step takes the session it needs and
returns the next one:

    START -> REQUEST_TOKEN_PENDING -> AWAITING_USER_AUTHORIZATION
          -> ACCESS_TOKEN_PENDING -> COMPLETE

Any state may move to FAILED. There are no retries: a failed or completed
session is terminal and the caller starts a fresh negotiation.

Example:
    negotiator = TokenNegotiator(config.credentials, config)

    session = negotiator.request_token()
    print(f"Authorize at: {session.authorization_url}")
    verifier = input("Verifier code: ")

    session = negotiator.access_token(session, verifier)
    print(session.token_pair)
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Dict, FrozenSet, NoReturn, Optional
from urllib.parse import urlencode

import requests

from .config import Credentials, FlickrOAuthConfig
from .exceptions import MalformedResponseError, NegotiationFailedError, NetworkError
from .query import parse_response
from .signer import oauth_parameters, signed_url
from .tokens import RequestToken, TokenPair

logger = logging.getLogger(__name__)

VerifierSupplier = Callable[[str], str]


class NegotiationState(Enum):
    """States of a single handshake attempt."""

    START = "start"
    REQUEST_TOKEN_PENDING = "request_token_pending"
    AWAITING_USER_AUTHORIZATION = "awaiting_user_authorization"
    ACCESS_TOKEN_PENDING = "access_token_pending"
    COMPLETE = "complete"
    FAILED = "failed"


# Valid state transitions for the handshake state machine
VALID_TRANSITIONS: Dict[NegotiationState, FrozenSet[NegotiationState]] = {
    NegotiationState.START: frozenset(
        {NegotiationState.REQUEST_TOKEN_PENDING, NegotiationState.FAILED}
    ),
    NegotiationState.REQUEST_TOKEN_PENDING: frozenset(
        {NegotiationState.AWAITING_USER_AUTHORIZATION, NegotiationState.FAILED}
    ),
    NegotiationState.AWAITING_USER_AUTHORIZATION: frozenset(
        {NegotiationState.ACCESS_TOKEN_PENDING, NegotiationState.FAILED}
    ),
    NegotiationState.ACCESS_TOKEN_PENDING: frozenset(
        {NegotiationState.COMPLETE, NegotiationState.FAILED}
    ),
    NegotiationState.COMPLETE: frozenset(),
    NegotiationState.FAILED: frozenset(),
}


def can_transition(from_state: NegotiationState, to_state: NegotiationState) -> bool:
    """Check if a transition is valid from the current state."""
    return to_state in VALID_TRANSITIONS.get(from_state, frozenset())


@dataclass(frozen=True)
class NegotiationSession:
    """
    Ephemeral state of one handshake attempt.

    Attributes:
        state: Current handshake state
        request_token: Unauthorized request token (cleared once terminal)
        authorization_url: Where the user grants access
        token_pair: Final access credentials (COMPLETE only)
        failure_reason: Why the session failed (FAILED only)
    """

    state: NegotiationState = NegotiationState.START
    request_token: Optional[RequestToken] = None
    authorization_url: Optional[str] = None
    token_pair: Optional[TokenPair] = None
    failure_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self.state]

    def advance(self, to_state: NegotiationState, **changes) -> "NegotiationSession":
        """
        Return the session moved to ``to_state``.

        Raises:
            NegotiationFailedError: If the transition is not valid
        """
        if not can_transition(self.state, to_state):
            raise NegotiationFailedError(
                to_state.value,
                f"invalid transition from '{self.state.value}'; "
                f"start a new negotiation",
            )
        return replace(self, state=to_state, **changes)

    def fail(self, reason: str) -> "NegotiationSession":
        """Move to FAILED, discarding the request token."""
        return self.advance(
            NegotiationState.FAILED,
            request_token=None,
            token_pair=None,
            failure_reason=reason,
        )


class TokenNegotiator:
    """
    Drives the request token -> authorization -> access token exchange.

    A negotiator holds no handshake state of its own; everything lives in
    the session values it returns.
    """

    def __init__(
        self,
        credentials: Credentials,
        config: FlickrOAuthConfig,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize token negotiator.

        Args:
            credentials: Application credentials used to sign every step
            config: OAuth configuration (endpoints, callback, perms, timeout)
            session: HTTP session (creates a new one if not provided)
        """
        self.credentials = credentials
        self.config = config
        self.http = session or requests.Session()

    def request_token(
        self, session: Optional[NegotiationSession] = None
    ) -> NegotiationSession:
        """
        Obtain an unauthorized request token.

        Args:
            session: A fresh session (defaults to a new START session)

        Returns:
            Session in AWAITING_USER_AUTHORIZATION with the request token
            and the authorization URL

        Raises:
            NegotiationFailedError: If the provider rejects the request or
                omits token fields
            NetworkError: On transport failure
        """
        step = "request_token"
        session = (session or NegotiationSession()).advance(
            NegotiationState.REQUEST_TOKEN_PENDING
        )

        logger.info("Requesting OAuth request token")
        params = oauth_parameters(
            self.credentials.api_key, oauth_callback=self.config.callback
        )
        url = signed_url(
            "GET", self.config.request_token_url, params, self.credentials.api_secret
        )
        fields = self._fetch(session, step, url)

        token = fields.get("oauth_token")
        secret = fields.get("oauth_token_secret")
        if not token or not secret:
            self._abort(session, step, f"response lacks token information: {sorted(fields)}")

        if fields.get("oauth_callback_confirmed") == "false":
            self._abort(session, step, "provider did not confirm the callback")

        request_token = RequestToken(key=token, secret=secret)
        logger.info("Received request token, awaiting user authorization")
        return session.advance(
            NegotiationState.AWAITING_USER_AUTHORIZATION,
            request_token=request_token,
            authorization_url=self.authorization_url(request_token),
        )

    def authorization_url(self, request_token: RequestToken) -> str:
        """
        Build the URL where the user grants access.

        Args:
            request_token: Token returned by :meth:`request_token`

        Returns:
            Authorization page URL carrying the token and requested perms
        """
        query = urlencode({"oauth_token": request_token.key, "perms": self.config.perms})
        return f"{self.config.authorize_url}?{query}"

    def access_token(self, session: NegotiationSession, verifier: str) -> NegotiationSession:
        """
        Exchange an authorized request token for access credentials.

        Args:
            session: Session in AWAITING_USER_AUTHORIZATION
            verifier: Code the user obtained while granting access

        Returns:
            COMPLETE session holding the TokenPair; the request token is dropped

        Raises:
            NegotiationFailedError: If the session cannot be resumed or the
                provider rejects the verifier
            NetworkError: On transport failure
        """
        step = "access_token"
        request_token = session.request_token
        session = session.advance(NegotiationState.ACCESS_TOKEN_PENDING)

        if request_token is None:
            self._abort(session, step, "session has no request token")

        if not verifier or not verifier.strip():
            self._abort(session, step, "empty verifier code")

        logger.info("Exchanging verifier for access token")
        params = oauth_parameters(
            self.credentials.api_key,
            oauth_token=request_token.key,
            oauth_verifier=verifier.strip(),
        )
        url = signed_url(
            "GET",
            self.config.access_token_url,
            params,
            self.credentials.api_secret,
            request_token.secret,
        )
        fields = self._fetch(session, step, url)

        token_pair = TokenPair(
            user_id=fields.get("user_nsid"),
            access_token=fields.get("oauth_token"),
            access_token_secret=fields.get("oauth_token_secret"),
        )
        if not token_pair.is_complete:
            self._abort(session, step, f"response lacks token information: {sorted(fields)}")

        logger.info(f"OAuth negotiation complete for user {token_pair.user_id}")
        return session.advance(
            NegotiationState.COMPLETE,
            request_token=None,
            authorization_url=None,
            token_pair=token_pair,
        )

    def negotiate(self, verifier_supplier: VerifierSupplier) -> TokenPair:
        """
        Run the whole handshake.

        Args:
            verifier_supplier: Receives the authorization URL and returns the
                verifier code the user obtained

        Returns:
            Negotiated TokenPair

        Raises:
            NegotiationFailedError: If any step is rejected
            NetworkError: On transport failure
        """
        session = self.request_token()
        verifier = verifier_supplier(session.authorization_url)
        session = self.access_token(session, verifier)
        return session.token_pair

    def _fetch(self, session: NegotiationSession, step: str, url: str) -> Dict[str, str]:
        """Send one signed GET and parse the ``key=value`` body."""
        logger.debug(f"GET {url.split('&oauth_signature=')[0]}")
        try:
            response = self.http.get(url, timeout=self.config.timeout)
        except requests.RequestException as e:
            logger.error(f"Network error during {step}: {e}")
            raise NetworkError(f"Network error during {step}: {e}", cause=e) from e

        if not 200 <= response.status_code < 300:
            self._abort(session, step, _rejection_reason(response))

        try:
            return parse_response(response.text)
        except MalformedResponseError as e:
            self._abort(session, step, str(e))

    def _abort(self, session: NegotiationSession, step: str, reason: str) -> NoReturn:
        logger.warning(f"OAuth {step} failed: {reason}")
        raise NegotiationFailedError(step, reason, session=session.fail(reason))


def _rejection_reason(response: requests.Response) -> str:
    """Extract ``oauth_problem`` from an error body when present."""
    try:
        problem = parse_response(response.text).get("oauth_problem")
    except MalformedResponseError:
        problem = None
    return problem or f"HTTP {response.status_code}: {response.text}"
