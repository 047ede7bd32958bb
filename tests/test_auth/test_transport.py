"""Tests for HttpxFormTransport -- threaded form POSTs with continuations."""

from __future__ import annotations

import threading
from unittest.mock import patch

import httpx
import pytest

from multiauth.auth.transport import HttpxFormTransport

URL = "https://api.example.com/oauth/request_token"


def _response(status: int, text: str) -> httpx.Response:
    return httpx.Response(status, text=text, request=httpx.Request("POST", URL))


class _Continuations:
    def __init__(self) -> None:
        self.bodies: list[str] = []
        self.errors: list[str] = []
        self.threads: list[str] = []

    def on_success(self, body: str) -> None:
        self.threads.append(threading.current_thread().name)
        self.bodies.append(body)

    def on_error(self, detail: str) -> None:
        self.threads.append(threading.current_thread().name)
        self.errors.append(detail)


@pytest.fixture
def transport():
    t = HttpxFormTransport(timeout=5.0)
    yield t
    t.close()


class TestHttpxFormTransport:
    def test_success_delivers_body(self, transport: HttpxFormTransport) -> None:
        calls = _Continuations()
        with patch(
            "multiauth.auth.transport.httpx.post",
            return_value=_response(200, "oauth_token=T&oauth_token_secret=S"),
        ):
            transport.post_form(
                URL, {"a": "1"}, on_success=calls.on_success, on_error=calls.on_error
            ).result(timeout=5)

        assert calls.bodies == ["oauth_token=T&oauth_token_secret=S"]
        assert calls.errors == []

    def test_request_shape(self, transport: HttpxFormTransport) -> None:
        calls = _Continuations()
        with patch(
            "multiauth.auth.transport.httpx.post", return_value=_response(200, "")
        ) as mock_post:
            transport.post_form(
                URL, {"a": "1"}, on_success=calls.on_success, on_error=calls.on_error
            ).result(timeout=5)

        args, kwargs = mock_post.call_args
        assert args == (URL,)
        assert kwargs["data"] == {"a": "1"}
        assert kwargs["timeout"] == 5.0
        assert len(kwargs["cookies"]) == 0

    def test_http_error_delivers_response_body(self, transport: HttpxFormTransport) -> None:
        calls = _Continuations()
        with patch(
            "multiauth.auth.transport.httpx.post",
            return_value=_response(401, "oauth_problem=signature_invalid"),
        ):
            transport.post_form(
                URL, {}, on_success=calls.on_success, on_error=calls.on_error
            ).result(timeout=5)

        assert calls.errors == ["oauth_problem=signature_invalid"]
        assert calls.bodies == []

    def test_network_error_delivers_message(self, transport: HttpxFormTransport) -> None:
        calls = _Continuations()
        with patch(
            "multiauth.auth.transport.httpx.post",
            side_effect=httpx.ConnectError("connection refused"),
        ):
            transport.post_form(
                URL, {}, on_success=calls.on_success, on_error=calls.on_error
            ).result(timeout=5)

        assert calls.errors == ["connection refused"]
        assert calls.bodies == []

    def test_continuation_runs_off_the_calling_thread(
        self, transport: HttpxFormTransport
    ) -> None:
        calls = _Continuations()
        with patch("multiauth.auth.transport.httpx.post", return_value=_response(200, "ok")):
            transport.post_form(
                URL, {}, on_success=calls.on_success, on_error=calls.on_error
            ).result(timeout=5)

        assert len(calls.threads) == 1
        assert calls.threads[0] != threading.current_thread().name
        assert calls.threads[0].startswith("multiauth-transport")

    def test_data_is_copied_before_submission(self, transport: HttpxFormTransport) -> None:
        calls = _Continuations()
        data = {"a": "1"}
        with patch(
            "multiauth.auth.transport.httpx.post", return_value=_response(200, "")
        ) as mock_post:
            future = transport.post_form(
                URL, data, on_success=calls.on_success, on_error=calls.on_error
            )
            data["a"] = "changed"
            future.result(timeout=5)

        assert mock_post.call_args.kwargs["data"] == {"a": "1"}
