"""OAuth 1.0a HMAC-SHA1 signing primitives.

Implements the parts of :rfc:`5849` the strategies need:

- :func:`percent_encode` -- RFC 3986 encoding of names and values.
- :func:`normalize_url` and :func:`signature_base_string` -- the
  ``METHOD&URL&PARAMS`` string that gets signed.
- :func:`sign` -- adds the ``oauth_*`` protocol parameters and the
  HMAC-SHA1 ``oauth_signature`` to a copy of the request parameters.
- :func:`authorization_header` -- renders signed parameters as a
  realm-scoped ``Authorization: OAuth ...`` value.
- :func:`decode_form` -- parses ``application/x-www-form-urlencoded``
  token responses.

:func:`basic_credential` covers the static ``Basic`` scheme (:rfc:`7617`).
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from typing import Mapping, Optional
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

_DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass(frozen=True)
class SigningCredentials:
    """Secrets used to sign a request.

    ``token`` and ``token_secret`` are empty while fetching a request
    token, hold the request token during the access-token exchange, and
    hold the access token afterwards.
    """

    consumer_key: str
    consumer_secret: str
    token: str = ""
    token_secret: str = ""


def basic_credential(username: str, password: str) -> str:
    """Return the ``Basic`` authorization value for *username* and *password*."""
    raw = f"{username}:{password}".encode("utf-8")
    return "Basic " + base64.b64encode(raw).decode("ascii")


def percent_encode(value: object) -> str:
    """Percent-encode a value according to RFC 3986.

    Encodes all characters except unreserved: A-Z, a-z, 0-9, -, ., _, ~
    """
    return quote(str(value), safe="~")


def generate_nonce() -> str:
    """Generate a cryptographically secure random nonce."""
    return secrets.token_urlsafe(32)


def generate_timestamp() -> str:
    """Get current Unix timestamp as string."""
    return str(int(time.time()))


def normalize_url(url: str) -> str:
    """Return the base string URI for *url* (RFC 5849 section 3.4.1.2).

    Scheme and host are lowercased, default ports are dropped, and the
    query and fragment are removed.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    host = (parts.hostname or "").lower()
    port = parts.port
    netloc = host if port is None or _DEFAULT_PORTS.get(scheme) == port else f"{host}:{port}"
    path = parts.path or "/"
    return urlunsplit((scheme, netloc, path, "", ""))


def signature_base_string(method: str, url: str, params: Mapping[str, object]) -> str:
    """Build the signature base string per RFC 5849.

    Format: ``HTTP_METHOD&URL&NORMALIZED_PARAMS``. Query parameters embedded
    in *url* are signed along with *params*; ``oauth_signature`` is never
    part of its own base string.
    """
    pairs = [
        (percent_encode(k), percent_encode(v))
        for k, v in parse_qsl(urlsplit(url).query, keep_blank_values=True)
    ]
    pairs.extend(
        (percent_encode(k), percent_encode(v))
        for k, v in params.items()
        if k != "oauth_signature"
    )
    param_str = "&".join(f"{k}={v}" for k, v in sorted(pairs))

    return "&".join(
        [
            method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(param_str),
        ]
    )


def hmac_sha1_signature(base_string: str, consumer_secret: str, token_secret: str = "") -> str:
    """Sign the base string using HMAC-SHA1.

    Signing key: ``percent_encode(consumer_secret)&percent_encode(token_secret)``
    """
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def sign(
    method: str,
    url: str,
    parameters: Optional[Mapping[str, object]],
    credentials: SigningCredentials,
    *,
    nonce: Optional[str] = None,
    timestamp: Optional[str] = None,
) -> dict[str, str]:
    """Return a signed copy of *parameters*.

    The protocol parameters (consumer key, nonce, timestamp, signature
    method, version, and the token when *credentials* carries one) are
    added unless the caller already supplied them, e.g. ``oauth_verifier``
    or ``oauth_callback`` pass through untouched. *parameters* itself is
    never modified.

    Args:
        method: HTTP method of the request.
        url: Full request URL, query string included.
        parameters: Request parameters (query or form fields) to sign.
        credentials: Consumer and token secrets.
        nonce: Fixed nonce, for reproducible signatures in tests.
        timestamp: Fixed timestamp, for reproducible signatures in tests.

    Returns:
        A new dict holding the request parameters, the ``oauth_*``
        protocol parameters, and ``oauth_signature``.
    """
    params = {k: str(v) for k, v in (parameters or {}).items()}
    params.setdefault("oauth_consumer_key", credentials.consumer_key)
    params.setdefault("oauth_signature_method", SIGNATURE_METHOD)
    params.setdefault("oauth_timestamp", timestamp or generate_timestamp())
    params.setdefault("oauth_nonce", nonce or generate_nonce())
    params.setdefault("oauth_version", OAUTH_VERSION)
    if credentials.token:
        params.setdefault("oauth_token", credentials.token)

    base_string = signature_base_string(method, url, params)
    params["oauth_signature"] = hmac_sha1_signature(
        base_string, credentials.consumer_secret, credentials.token_secret
    )
    return params


def authorization_header(realm: Optional[str], params: Mapping[str, str]) -> str:
    """Build the OAuth ``Authorization`` header value.

    Format: ``OAuth realm="...", oauth_consumer_key="...", ...``. Only
    ``oauth_*`` parameters are included; the realm is omitted when
    *realm* is ``None``.
    """
    parts = [] if realm is None else [f'realm="{percent_encode(realm)}"']
    parts.extend(
        f'{percent_encode(k)}="{percent_encode(v)}"'
        for k, v in sorted(params.items())
        if k.startswith("oauth_")
    )
    return "OAuth " + ", ".join(parts)


def decode_form(body: str) -> dict[str, str]:
    """Decode an ``application/x-www-form-urlencoded`` body into a dict."""
    return dict(parse_qsl(body.strip(), keep_blank_values=True))
