"""Auth commands -- obtain credentials and sign requests.

Provides the ``multiauth auth`` sub-command group:

- ``login`` runs the service's authorization flow and prints the
  serialized credential (its *pickle*) to stdout, ready to be stored
  wherever the caller keeps secrets.
- ``sign`` loads a pickle from a credential source and prints the
  ``Authorization`` header value for one request.

Typical workflow::

    multiauth auth login example > example.pickle
    multiauth auth sign example --credential file:example.pickle \\
        --method GET --url https://api.example.com/me
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Callable, Optional

import typer

from multiauth.auth import AuthStrategy, StrategyFactory
from multiauth.exceptions import (
    InvalidCredentialFormat,
    InvalidUsageError,
    MultiauthError,
    TransportError,
    UnknownServiceError,
)
from multiauth.output import error, info, print_data, print_record, success, warning


auth_app = typer.Typer(no_args_is_help=True)


def _open_factory() -> StrategyFactory:
    """Build a factory over the default registry.

    The caller closes it, which shuts down the token-exchange transport.
    """
    from multiauth.auth import create_default_registry
    from multiauth.config import load_services_config

    config = load_services_config()
    return StrategyFactory(create_default_registry(config), timeout=config.request.timeout)


def _create_strategy(factory: StrategyFactory, service: str) -> AuthStrategy:
    """Create the strategy for *service*.

    Raises:
        UnknownServiceError: If the factory could not build a strategy.
    """
    strategy = factory.create(service)
    if strategy is None:
        raise UnknownServiceError(
            f'Cannot authenticate with "{service}"; see `multiauth services list`'
        )
    return strategy


def _wait_for(start: Callable[[Callable[..., None], Callable[[str], None]], Future]) -> tuple:
    """Run one token exchange to completion and return its success arguments.

    Raises:
        TransportError: If the exchange reported an error.
    """
    outcome: dict[str, tuple] = {}

    def on_complete(*args: object) -> None:
        outcome["ok"] = args

    def on_error(detail: str) -> None:
        outcome["error"] = (detail,)

    start(on_complete, on_error).result()
    if "error" in outcome:
        detail = outcome["error"][0]
        raise TransportError(f"Token exchange failed: {detail}", detail=detail)
    return outcome["ok"]


def _parse_params(values: list[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise InvalidUsageError(f"Parameter must be in key=value format: {item}")
        params[key] = value
    return params


@auth_app.command("login")
def auth_login(
    service: str = typer.Argument(help="Service to authenticate with."),
    username: Optional[str] = typer.Option(
        None, "--username", "-u", help="Account name (prompted for basic auth if omitted)."
    ),
    password_source: str = typer.Option(
        "prompt",
        "--password-source",
        help="Basic auth password source: env:VAR, file:/path, prompt.",
    ),
    verifier: Optional[str] = typer.Option(
        None, "--verifier", help="OAuth verifier, if already known."
    ),
    callback_url: Optional[str] = typer.Option(
        None, "--callback", help="OAuth callback URL sent with the request token (e.g. oob)."
    ),
) -> None:
    """Authenticate with a service and print the serialized credential.

    Basic services take a username and password. OAuth services fetch a
    request token, show the authorization URL, ask for the verifier the
    provider displays (leave empty if it shows none), then exchange it
    for an access token.

    Raises:
        typer.Exit: With the error's exit code on failure.

    Example::

        multiauth auth login example --callback oob
    """
    from multiauth.config import resolve_credential
    from multiauth.strategies import BasicAuthStrategy, OAuthStrategy

    try:
        with _open_factory() as factory:
            strategy = _create_strategy(factory, service)

            if isinstance(strategy, OAuthStrategy):
                (url,) = _wait_for(
                    lambda ok, err: strategy.get_authorization_url(
                        ok, err, callback_url=callback_url
                    )
                )
                info("Open this URL in a browser and approve access:")
                info(url)
                if verifier is None:
                    verifier = typer.prompt(
                        "Verifier (empty if none)", default="", show_default=False
                    )
                _wait_for(lambda ok, err: strategy.authorize(ok, err, verifier=verifier or None))
                if username:
                    strategy.username = username
                else:
                    warning("No --username given; the saved credential has an empty username.")
            elif isinstance(strategy, BasicAuthStrategy):
                if username is None:
                    username = typer.prompt("Username")
                strategy.authorize(username, resolve_credential(password_source))
            else:
                raise InvalidUsageError(f"Unsupported auth type: {strategy.auth_type}")
        pickle = strategy.save()
    except MultiauthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_data(pickle)
    success(f'Authenticated with "{service}".')


@auth_app.command("sign")
def auth_sign(
    service: str = typer.Argument(help="Service the credential belongs to."),
    credential: str = typer.Option(
        ...,
        "--credential",
        "-c",
        help="Saved credential source: env:VAR, file:/path, prompt.",
    ),
    method: str = typer.Option("GET", "--method", "-X", help="HTTP method."),
    url: str = typer.Option("", "--url", help="Request URL (OAuth only)."),
    param: list[str] = typer.Option(
        [], "--param", "-d", help="Request parameter as key=value (repeatable)."
    ),
) -> None:
    """Print the Authorization header value for a request.

    Raises:
        typer.Exit: With code 3 if the credential cannot be loaded.

    Example::

        multiauth auth sign example -c env:EXAMPLE_PICKLE --url https://api.example.com/me
    """
    from multiauth.config import resolve_credential

    try:
        params = _parse_params(param)
        with _open_factory() as factory:
            strategy = _create_strategy(factory, service)
            if not strategy.load(resolve_credential(credential)):
                raise InvalidCredentialFormat(
                    f"The saved credential is not a valid {strategy.auth_type} credential"
                )
            header = strategy.sign_request(method.upper(), url, params)
    except MultiauthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    print_record({"Authorization": header})
