"""Three-legged OAuth 1.0a authentication strategy.

This module provides :class:`OAuthStrategy`, which implements the
``oauth`` auth kind as a small state machine::

    UNAUTHORIZED --get_authorization_url()--> REQUEST_TOKEN_OBTAINED
    REQUEST_TOKEN_OBTAINED --authorize()--> AUTHORIZED
    (any) --set_access_token() / load()--> AUTHORIZED

1. :meth:`~OAuthStrategy.get_authorization_url` fetches a request token
   from ``options.request_url`` and hands the caller the URL where the
   user approves it.
2. :meth:`~OAuthStrategy.authorize` (or
   :meth:`~OAuthStrategy.authorize_with_verifier`) exchanges the approved
   request token for an access token at ``options.access_url``.
3. :meth:`~OAuthStrategy.sign_request` signs each outgoing request with the
   consumer secret and the access token secret.

Both token fetches are asynchronous: they return a
:class:`concurrent.futures.Future` straight away, and exactly one of the
two supplied continuations runs exactly once when the exchange finishes.
Failures leave the strategy in the state it was in.

The pickle format is ``"<username>:<access token key>:<access token secret>"``.
The token exchange never learns a username, so after a live flow the
username is empty unless the caller assigns :attr:`OAuthStrategy.username`.

See Also:
    :class:`multiauth.auth.base.AuthStrategy` for the base interface.
    :mod:`multiauth.auth.signing` for the HMAC-SHA1 primitives.
"""

from __future__ import annotations

import enum
import logging
from concurrent.futures import Future
from typing import Callable, Mapping, Optional

from multiauth.auth import signing
from multiauth.auth.base import AuthStrategy, split_pickle
from multiauth.auth.signing import SigningCredentials
from multiauth.auth.transport import ErrorCallback, FormTransport, HttpxFormTransport
from multiauth.exceptions import NotAuthorizedError
from multiauth.models import AuthKind, OAuthOptions, OAuthToken

logger = logging.getLogger(__name__)

TokenCallback = Callable[[str, str], None]


class OAuthState(str, enum.Enum):
    """Progress of an :class:`OAuthStrategy` through the three-legged flow."""

    UNAUTHORIZED = "unauthorized"
    REQUEST_TOKEN_OBTAINED = "request_token_obtained"
    AUTHORIZED = "authorized"


class OAuthStrategy(AuthStrategy):
    """Authenticate via three-legged OAuth 1.0a with HMAC-SHA1 signatures.

    Args:
        realm: Service identifier; scopes the ``Authorization`` header.
        options: Consumer credentials and token endpoints. Held by
            reference and never modified.
        transport: Form-POST transport for the token exchange. A private
            :class:`~multiauth.auth.transport.HttpxFormTransport` is
            created on first use when omitted and shut down by :meth:`close`.
            An injected transport belongs to the caller and is left open.

    Example::

        strategy = OAuthStrategy("example", options)
        strategy.get_authorization_url(show_url, report_error).result()
        # ... user approves, provider shows a verifier ...
        strategy.authorize_with_verifier("123456", done, report_error).result()
        header = strategy.sign_request("GET", "https://api.example.com/me")
    """

    def __init__(
        self,
        realm: str,
        options: OAuthOptions,
        transport: Optional[FormTransport] = None,
    ) -> None:
        self.realm = realm
        self.options = options
        self._transport = transport
        self._owns_transport = transport is None
        self._username: Optional[str] = None
        self._request_token: Optional[OAuthToken] = None
        self._access_token: Optional[OAuthToken] = None
        self._signing_credentials: Optional[SigningCredentials] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def auth_type(self) -> str:
        return AuthKind.OAUTH.value

    @property
    def state(self) -> OAuthState:
        """Current position in the authorization flow."""
        if self._access_token is not None:
            return OAuthState.AUTHORIZED
        if self._request_token is not None:
            return OAuthState.REQUEST_TOKEN_OBTAINED
        return OAuthState.UNAUTHORIZED

    @property
    def is_authorized(self) -> bool:
        return self._signing_credentials is not None

    @property
    def username(self) -> Optional[str]:
        return self._username

    @username.setter
    def username(self, value: Optional[str]) -> None:
        self._username = value

    @property
    def request_token(self) -> Optional[OAuthToken]:
        """The pending request token, between the two token fetches."""
        return self._request_token

    @property
    def access_token(self) -> Optional[OAuthToken]:
        return self._access_token

    @property
    def signing_credentials(self) -> Optional[SigningCredentials]:
        """Consumer and access-token secrets used by :meth:`sign_request`."""
        return self._signing_credentials

    @property
    def transport(self) -> FormTransport:
        if self._transport is None:
            self._transport = HttpxFormTransport()
        return self._transport

    def close(self) -> None:
        """Shut down the transport if this strategy created it."""
        if self._owns_transport and self._transport is not None:
            self._transport.close()
            self._transport = None

    # ------------------------------------------------------------------
    # Authorization flow
    # ------------------------------------------------------------------

    def get_authorization_url(
        self,
        on_complete: Callable[[str], None],
        on_error: ErrorCallback,
        callback_url: Optional[str] = None,
    ) -> Future[None]:
        """Fetch a request token and build the user authorization URL.

        On success the request token is kept for the access-token exchange
        and *on_complete* receives
        ``options.authorization_url + "?oauth_token=<token>"``. On failure
        *on_error* receives the raw response detail.

        Args:
            on_complete: Called with the authorization URL.
            on_error: Called with the response body or network error text.
            callback_url: Sent as ``oauth_callback`` when given (use
                ``"oob"`` for out-of-band verifiers).

        Returns:
            A future that resolves once the continuation has run.
        """
        credentials = SigningCredentials(
            consumer_key=self.options.consumer_key,
            consumer_secret=self.options.consumer_secret,
        )
        extra = {"oauth_callback": callback_url} if callback_url else {}

        def request_token_received(token: str, secret: str) -> None:
            self._request_token = OAuthToken(key=token, secret=secret)
            logger.debug("Obtained request token for %s", self.realm)
            on_complete(self._build_authorization_url(token))

        return self._fetch_token(
            self.options.request_url, credentials, extra, request_token_received, on_error
        )

    def authorize(
        self,
        on_complete: Callable[[], None],
        on_error: ErrorCallback,
        verifier: Optional[str] = None,
    ) -> Future[None]:
        """Exchange the request token for an access token.

        The exchange is signed with the consumer secret and, when
        :meth:`get_authorization_url` ran first, the pending request
        token. *verifier* is sent as ``oauth_verifier`` for providers that
        require one.

        On success the access token is installed via
        :meth:`set_access_token`, the request token is discarded, and
        *on_complete* is called with no arguments. On failure *on_error*
        receives the raw response detail and no state changes.

        Returns:
            A future that resolves once the continuation has run.
        """
        pending = self._request_token
        credentials = SigningCredentials(
            consumer_key=self.options.consumer_key,
            consumer_secret=self.options.consumer_secret,
            token=pending.key if pending else "",
            token_secret=pending.secret if pending else "",
        )
        extra = {"oauth_verifier": verifier} if verifier else {}

        def access_token_received(token: str, secret: str) -> None:
            self.set_access_token(token, secret)
            self._request_token = None
            logger.debug("Obtained access token for %s", self.realm)
            on_complete()

        return self._fetch_token(
            self.options.access_url, credentials, extra, access_token_received, on_error
        )

    def authorize_with_verifier(
        self,
        verifier: str,
        on_complete: Callable[[], None],
        on_error: ErrorCallback,
    ) -> Future[None]:
        """Like :meth:`authorize`, for providers that issue a verifier."""
        return self.authorize(on_complete, on_error, verifier=verifier)

    def set_access_token(self, key: str, secret: str) -> None:
        """Install an access token and derive the signing credentials."""
        self._access_token = OAuthToken(key=key, secret=secret)
        self._signing_credentials = SigningCredentials(
            consumer_key=self.options.consumer_key,
            consumer_secret=self.options.consumer_secret,
            token=key,
            token_secret=secret,
        )

    # ------------------------------------------------------------------
    # Signing and serialization
    # ------------------------------------------------------------------

    def sign_request(
        self,
        method: str = "GET",
        url: str = "",
        parameters: Optional[Mapping[str, object]] = None,
    ) -> str:
        """Sign a request and return the ``Authorization`` header value.

        *parameters* (query or form fields of the request) are signed
        from a copy; the caller's mapping is never modified.

        Raises:
            NotAuthorizedError: If no access token has been installed.
        """
        if self._signing_credentials is None:
            raise NotAuthorizedError(
                f"No access token for {self.realm}; complete authorize() or load() first"
            )
        params = dict(parameters or {})
        signed = signing.sign(method, url, params, self._signing_credentials)
        return signing.authorization_header(self.realm, signed)

    def save(self) -> str:
        """Return ``"<username>:<key>:<secret>"``; an unset username is empty.

        Raises:
            NotAuthorizedError: If no access token has been installed.
        """
        if self._access_token is None:
            raise NotAuthorizedError(f"No access token for {self.realm} to save")
        return f"{self._username or ''}:{self._access_token.key}:{self._access_token.secret}"

    def load(self, pickle: str) -> bool:
        """Restore username and access token from ``"<username>:<key>:<secret>"``.

        Returns:
            ``True`` if the pickle held exactly three fields, ``False``
            otherwise (logged, state untouched).
        """
        parts = split_pickle(pickle, 3, self.auth_type)
        if parts is None:
            return False
        username, key, secret = parts
        self._username = username
        self.set_access_token(key, secret)
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _build_authorization_url(self, token: str) -> str:
        base = self.options.authorization_url
        separator = "&" if "?" in base else "?"
        return f"{base}{separator}oauth_token={signing.percent_encode(token)}"

    def _fetch_token(
        self,
        url: str,
        credentials: SigningCredentials,
        extra: Mapping[str, str],
        on_complete: TokenCallback,
        on_error: ErrorCallback,
    ) -> Future[None]:
        """POST a signed token request and decode the token from the response.

        A response body without both ``oauth_token`` and
        ``oauth_token_secret`` is delivered to *on_error* like any other
        failed exchange.
        """
        params = signing.sign("POST", url, extra, credentials)

        def received(body: str) -> None:
            decoded = signing.decode_form(body)
            token = decoded.get("oauth_token")
            secret = decoded.get("oauth_token_secret")
            if token is None or secret is None:
                on_error(body)
                return
            on_complete(token, secret)

        return self.transport.post_form(url, params, on_success=received, on_error=on_error)
