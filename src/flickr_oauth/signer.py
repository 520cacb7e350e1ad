"""
HMAC-SHA1 request signing for OAuth 1.0a.

Signatures embed a fresh nonce and timestamp, so they are recomputed for
every request and never cached.
"""

from typing import Dict, Mapping, Optional

from oauthlib.common import generate_nonce, generate_timestamp
from oauthlib.oauth1 import Client
from oauthlib.oauth1.rfc5849 import signature as oauth_signature

from .query import base_string, canonicalize, percent_encode

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"


def sign(base: str, api_secret: str, token_secret: Optional[str] = None) -> str:
    """
    Sign a base string with HMAC-SHA1.

    The key is ``enc(api_secret)&enc(token_secret)``; a missing token secret
    leaves the right-hand side empty.

    Args:
        base: Signature base string (see :func:`~flickr_oauth.query.base_string`)
        api_secret: Application secret
        token_secret: Request or access token secret; omitted for the
            request-token step

    Returns:
        Base64 HMAC-SHA1 digest, percent-encoded for use in a query string
    """
    client = Client("", client_secret=api_secret, resource_owner_secret=token_secret)
    return percent_encode(oauth_signature.sign_hmac_sha1_with_client(base, client))


def oauth_parameters(api_key: str, **extra: str) -> Dict[str, str]:
    """
    Build the parameter set for one signed request.

    A new nonce and timestamp are drawn on every call.

    Args:
        api_key: Application key (sent as ``oauth_consumer_key``)
        **extra: Call-specific fields (``method``, ``oauth_token``,
            ``oauth_verifier``, ``oauth_callback``, ...)

    Returns:
        Fresh parameter dictionary
    """
    params = {
        "oauth_consumer_key": api_key,
        "oauth_nonce": generate_nonce(),
        "oauth_timestamp": generate_timestamp(),
        "oauth_signature_method": SIGNATURE_METHOD,
        "oauth_version": OAUTH_VERSION,
    }
    params.update(extra)
    return params


def signed_url(
    method: str,
    url: str,
    params: Mapping[str, str],
    api_secret: str,
    token_secret: Optional[str] = None,
) -> str:
    """
    Sign a request and return the complete URL to send.

    ``oauth_signature`` is appended after canonicalization; it is never part
    of the signed base string.

    Args:
        method: HTTP method
        url: Endpoint URL without query string
        params: Request parameters, including the oauth_* fields
        api_secret: Application secret
        token_secret: Token secret for the current step, if any

    Returns:
        ``url?canonical_query&oauth_signature=...``
    """
    query = canonicalize(params)
    signature = sign(base_string(method, url, query), api_secret, token_secret)
    return f"{url}?{query}&oauth_signature={signature}"
