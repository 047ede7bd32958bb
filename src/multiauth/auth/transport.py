"""Form-POST transport used by the OAuth token exchange.

:class:`FormTransport` is the contract the OAuth strategy depends on: post
form-encoded data to a URL and, once the exchange completes, call exactly
one of two continuations exactly once. :meth:`FormTransport.post_form`
returns immediately with a :class:`concurrent.futures.Future` that
resolves after the continuation has run, so callers that need to block
(the CLI, tests) can wait on it.

:class:`HttpxFormTransport` is the production implementation. Each POST
runs on a worker thread through :func:`httpx.post`, which opens a fresh
connection with an empty cookie jar so no session cookie leaks between
unrelated token endpoints. There is no retry and no cancellation; the
only bound on an exchange is the per-request timeout.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Mapping, Optional

import httpx

SuccessCallback = Callable[[str], None]
"""Receives the raw response body of a successful exchange."""

ErrorCallback = Callable[[str], None]
"""Receives the raw response body, or the network error text, of a failed exchange."""


class FormTransport(ABC):
    """Asynchronous form-encoded POST with success/error continuations."""

    @abstractmethod
    def post_form(
        self,
        url: str,
        data: Mapping[str, str],
        *,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
    ) -> Future[None]:
        """Start a form-encoded POST of *data* to *url*.

        Exactly one of *on_success* / *on_error* is invoked exactly once
        when the exchange completes. No cookies are sent.

        Returns:
            A future that resolves once the continuation has returned.
        """
        ...

    def close(self) -> None:
        """Release transport resources. The default implementation does nothing."""


class HttpxFormTransport(FormTransport):
    """Run form POSTs with :mod:`httpx` on a small thread pool.

    Args:
        timeout: Per-request timeout in seconds.
        max_workers: Size of the worker pool.

    Example::

        transport = HttpxFormTransport(timeout=10.0)
        future = transport.post_form(
            "https://api.example.com/oauth/request_token",
            signed_params,
            on_success=handle_body,
            on_error=handle_failure,
        )
        future.result()
    """

    def __init__(self, timeout: float = 30.0, max_workers: int = 2) -> None:
        self._timeout = timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="multiauth-transport"
        )

    def post_form(
        self,
        url: str,
        data: Mapping[str, str],
        *,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
    ) -> Future[None]:
        return self._executor.submit(self._run, url, dict(data), on_success, on_error)

    def _run(
        self,
        url: str,
        data: dict[str, str],
        on_success: SuccessCallback,
        on_error: ErrorCallback,
    ) -> None:
        body, failure = self._post(url, data)
        if failure is None:
            on_success(body)
        else:
            on_error(failure)

    def _post(self, url: str, data: dict[str, str]) -> tuple[str, Optional[str]]:
        """Perform the POST, returning ``(body, None)`` or ``("", error_detail)``."""
        try:
            response = httpx.post(
                url,
                data=data,
                headers={"Accept": "application/x-www-form-urlencoded"},
                cookies=httpx.Cookies(),
                timeout=self._timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            return "", exc.response.text
        except httpx.HTTPError as exc:
            return "", str(exc)
        return response.text, None

    def close(self) -> None:
        self._executor.shutdown(wait=True)
