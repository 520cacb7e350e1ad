"""
Token types used during and after an OAuth 1.0a handshake.
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

ENV_USER_ID = "FLICKR_USER_ID"
ENV_ACCESS_TOKEN = "FLICKR_ACCESS_TOKEN"
ENV_ACCESS_TOKEN_SECRET = "FLICKR_ACCESS_TOKEN_SECRET"


@dataclass(frozen=True)
class RequestToken:
    """
    Short-lived unauthorized token used only to obtain user consent.

    Attributes:
        key: ``oauth_token`` returned by the request-token endpoint
        secret: ``oauth_token_secret`` used to sign the access-token exchange
    """

    key: str
    secret: str

    def __repr__(self) -> str:
        return f"RequestToken(key={self.key!r}, secret='***')"


@dataclass(frozen=True)
class TokenPair:
    """
    Long-lived access credentials bound to a user.

    All three fields are present or the pair is treated as absent; a partial
    pair never reaches the provider.

    Attributes:
        user_id: Flickr NSID of the authorizing user
        access_token: OAuth access token
        access_token_secret: OAuth access token secret
    """

    user_id: Optional[str] = None
    access_token: Optional[str] = None
    access_token_secret: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        """True when all three fields are present."""
        return bool(self.user_id and self.access_token and self.access_token_secret)

    def to_env(self) -> Dict[str, str]:
        """
        Convert to the environment variable mapping.

        Returns:
            Dict keyed by FLICKR_USER_ID, FLICKR_ACCESS_TOKEN and
            FLICKR_ACCESS_TOKEN_SECRET
        """
        return {
            ENV_USER_ID: self.user_id or "",
            ENV_ACCESS_TOKEN: self.access_token or "",
            ENV_ACCESS_TOKEN_SECRET: self.access_token_secret or "",
        }

    @classmethod
    def from_env(cls) -> Optional["TokenPair"]:
        """
        Load a previously negotiated pair from environment variables.

        Returns:
            TokenPair if any of the variables is set, None otherwise. The
            result may be partial; check :attr:`is_complete`.
        """
        values = {
            "user_id": os.environ.get(ENV_USER_ID),
            "access_token": os.environ.get(ENV_ACCESS_TOKEN),
            "access_token_secret": os.environ.get(ENV_ACCESS_TOKEN_SECRET),
        }
        if not any(values.values()):
            return None
        return cls(**values)

    def __repr__(self) -> str:
        return (
            f"TokenPair(user_id={self.user_id!r}, "
            f"access_token={self.access_token!r}, access_token_secret='***')"
        )
