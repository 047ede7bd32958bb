"""Shared test fixtures for multiauth.

Provides isolated config environments, OAuth options, a synchronous stub
transport for the token exchange, output state management, and a CLI
runner. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from concurrent.futures import Future
from pathlib import Path
from typing import Mapping, Optional

import pytest

from multiauth.auth.transport import ErrorCallback, FormTransport, SuccessCallback
from multiauth.models import OAuthOptions
from multiauth.output import reset_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; CliRunner swaps those streams per invocation.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Sets XDG_CONFIG_HOME and XDG_DATA_HOME to subdirectories of tmp_path
    and forces the XDG layout so tests never touch real user config.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    monkeypatch.setattr("multiauth.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("MULTIAUTH_SERVICES_FILE", raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# OAuth fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def oauth_options() -> OAuthOptions:
    return OAuthOptions(
        consumer_key="consumer-key",
        consumer_secret="consumer-secret",
        request_url="https://api.example.com/oauth/request_token",
        authorization_url="https://api.example.com/oauth/authorize",
        access_url="https://api.example.com/oauth/access_token",
    )


class StubTransport(FormTransport):
    """Transport that answers synchronously from a queue of canned outcomes.

    Each queued outcome is ``(True, body)`` for a successful exchange or
    ``(False, detail)`` for a failed one. Every call is recorded in
    :attr:`calls` as ``(url, data)``.
    """

    def __init__(self) -> None:
        self.outcomes: list[tuple[bool, str]] = []
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.closed = False

    def succeed(self, body: str) -> "StubTransport":
        self.outcomes.append((True, body))
        return self

    def fail(self, detail: str) -> "StubTransport":
        self.outcomes.append((False, detail))
        return self

    def post_form(
        self,
        url: str,
        data: Mapping[str, str],
        *,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
    ) -> Future[None]:
        self.calls.append((url, dict(data)))
        ok, body = self.outcomes.pop(0)
        future: Future[None] = Future()
        if ok:
            on_success(body)
        else:
            on_error(body)
        future.set_result(None)
        return future

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def stub_transport() -> StubTransport:
    return StubTransport()


class Recorder:
    """Collects continuation invocations for assertions."""

    def __init__(self) -> None:
        self.completed: list[tuple] = []
        self.errors: list[str] = []

    def on_complete(self, *args: object) -> None:
        self.completed.append(args)

    def on_error(self, detail: str) -> None:
        self.errors.append(detail)

    @property
    def only_value(self) -> Optional[object]:
        assert len(self.completed) == 1
        args = self.completed[0]
        return args[0] if args else None


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
