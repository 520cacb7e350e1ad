"""
Query string codec for OAuth 1.0a.

OAuth1 signatures are computed over a canonical form of the request: every
parameter name and value is percent-encoded per RFC 3986, the pairs are
sorted, and the result is folded into the signature base string. Any
deviation produces a signature the provider rejects without further detail.

Encoding, normalization and base string assembly are delegated to
``oauthlib``'s RFC 5849 implementation.
"""

from typing import Dict, Mapping, Union
from urllib.parse import unquote

from oauthlib.oauth1.rfc5849 import signature, utils

from .exceptions import MalformedResponseError


def percent_encode(value: object) -> str:
    """
    Percent-encode a value per RFC 3986.

    Unreserved characters (``A-Za-z0-9-._~``) are left alone; everything else,
    including ``/``, ``+``, ``=`` and space, is escaped. Text is UTF-8 encoded
    first.

    Args:
        value: Value to encode (converted with ``str`` if not text)

    Returns:
        Encoded string
    """
    return utils.escape(str(value))


def canonicalize(params: Mapping[str, object]) -> str:
    """
    Build the canonical query string for a set of parameters.

    Keys and values are encoded, then sorted by encoded key with ties broken
    by encoded value, and joined as ``key=value`` pairs with ``&``.

    Args:
        params: Request parameters (order is irrelevant)

    Returns:
        Canonical query string
    """
    return signature.normalize_parameters(
        [(str(key), str(value)) for key, value in params.items()]
    )


def base_string(method: str, url: str, canonical_query: str) -> str:
    """
    Build the OAuth1 signature base string.

    The URL is normalized first (lowercase scheme and host, default port
    dropped).

    Args:
        method: HTTP method (case-insensitive)
        url: Absolute request URL without query string
        canonical_query: Output of :func:`canonicalize`

    Returns:
        ``METHOD&encoded_url&encoded_query``
    """
    return signature.signature_base_string(
        method, signature.base_string_uri(url), canonical_query
    )


def parse_response(body: Union[str, bytes]) -> Dict[str, str]:
    """
    Parse a ``key=value&key=value`` provider response.

    Each pair is split on its first ``=``; keys and values are
    percent-decoded. Pairs without a separator are ignored.

    Args:
        body: Response body as returned by the provider

    Returns:
        Mapping of every field the provider returned

    Raises:
        MalformedResponseError: If the body is empty or has no ``=`` separators
    """
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")

    body = body.strip()
    if not body or "=" not in body:
        raise MalformedResponseError(
            f"Expected key=value response from provider, got: {body!r}"
        )

    fields: Dict[str, str] = {}
    for pair in body.split("&"):
        if "=" not in pair:
            continue
        key, value = pair.split("=", 1)
        fields[unquote(key)] = unquote(value)

    return fields


def format_query(fields: Mapping[str, object]) -> str:
    """
    Format a mapping as an encoded ``key=value&...`` string.

    This is the inverse of :func:`parse_response`; pairs keep insertion order.
    """
    return "&".join(
        f"{percent_encode(key)}={percent_encode(value)}"
        for key, value in fields.items()
    )
