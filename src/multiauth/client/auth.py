"""httpx integration -- sign outgoing requests with an auth strategy.

:class:`StrategyAuth` plugs any :class:`~multiauth.auth.base.AuthStrategy`
into :class:`httpx.Client` / :class:`httpx.AsyncClient` through the
:class:`httpx.Auth` hook, so every request leaves with a fresh
``Authorization`` header::

    with httpx.Client(auth=StrategyAuth(strategy)) as client:
        client.get("https://api.example.com/statuses/home_timeline.json")

OAuth signatures cover the request method, the full URL (every query pair,
repeated keys included), and the fields of
``application/x-www-form-urlencoded`` bodies.
"""

from __future__ import annotations

from typing import Generator

import httpx

from multiauth.auth.base import AuthStrategy
from multiauth.auth.signing import decode_form

_FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class StrategyAuth(httpx.Auth):
    """:class:`httpx.Auth` adapter around an auth strategy.

    Args:
        strategy: An authorized strategy. Signing raises
            :class:`~multiauth.exceptions.NotAuthorizedError` otherwise.
    """

    requires_request_body = True

    def __init__(self, strategy: AuthStrategy) -> None:
        self._strategy = strategy

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        # Query pairs travel in the URL; the signer reads them from there.
        form: dict[str, str] = {}
        content_type = request.headers.get("Content-Type", "")
        if content_type.startswith(_FORM_CONTENT_TYPE) and request.content:
            form = decode_form(request.content.decode("utf-8"))

        request.headers["Authorization"] = self._strategy.sign_request(
            request.method, str(request.url), form
        )
        yield request
