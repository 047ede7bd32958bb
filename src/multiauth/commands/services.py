"""Services commands -- manage the service registry file.

Provides the ``multiauth services`` sub-command group. Services added here
are persisted to the services file (see
:func:`~multiauth.config.services_config_path`) and show up in every
registry built by :func:`~multiauth.auth.registry.create_default_registry`.

Typical workflow::

    multiauth services add example --type oauth \\
        --consumer-key ck --consumer-secret-source env:EXAMPLE_SECRET \\
        --request-url https://api.example.com/oauth/request_token \\
        --authorization-url https://api.example.com/oauth/authorize \\
        --access-url https://api.example.com/oauth/access_token
    multiauth services list
"""

from __future__ import annotations

from typing import Optional

import typer
from pydantic import ValidationError

from multiauth.exceptions import InvalidUsageError, MultiauthError
from multiauth.models import AuthKind, OAuthOptions, ServiceBinding
from multiauth.output import error, info, print_table, success, suggest


services_app = typer.Typer(no_args_is_help=True)


@services_app.command("list")
def services_list() -> None:
    """List every registered service with its auth type.

    Example::

        multiauth services list
    """
    from multiauth.auth.registry import create_default_registry

    try:
        registry = create_default_registry()
    except MultiauthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows: list[list[str]] = []
    for service_id, binding in registry.items():
        endpoint = ""
        if isinstance(binding.options, OAuthOptions):
            endpoint = binding.options.request_url
        rows.append([service_id, str(binding.auth_type), endpoint])

    print_table(["Service", "Auth Type", "Request Token URL"], rows, title="Services")


@services_app.command("add")
def services_add(
    service_id: str = typer.Argument(help="Service identifier."),
    auth_type: AuthKind = typer.Option(
        AuthKind.BASIC, "--type", "-t", help="Auth type: basic or oauth."
    ),
    consumer_key: Optional[str] = typer.Option(None, "--consumer-key", help="OAuth consumer key."),
    consumer_key_source: Optional[str] = typer.Option(
        None, "--consumer-key-source", help="Consumer key source: env:VAR, file:/path, prompt."
    ),
    consumer_secret: Optional[str] = typer.Option(
        None, "--consumer-secret", help="OAuth consumer secret."
    ),
    consumer_secret_source: Optional[str] = typer.Option(
        None,
        "--consumer-secret-source",
        help="Consumer secret source: env:VAR, file:/path, prompt.",
    ),
    request_url: Optional[str] = typer.Option(
        None, "--request-url", help="OAuth request token endpoint."
    ),
    authorization_url: Optional[str] = typer.Option(
        None, "--authorization-url", help="OAuth user authorization page."
    ),
    access_url: Optional[str] = typer.Option(
        None, "--access-url", help="OAuth access token endpoint."
    ),
) -> None:
    """Register a service, replacing any existing entry with the same id.

    Consumer secrets are best given as a ``--consumer-secret-source`` so
    the services file only holds a reference to them.

    Raises:
        typer.Exit: With code 2 if OAuth endpoints are missing.

    Example::

        multiauth services add identica --type basic
    """
    from multiauth.config import load_services_config, save_services_config

    try:
        options: Optional[OAuthOptions] = None
        if auth_type == AuthKind.OAUTH:
            missing = [
                flag
                for flag, value in (
                    ("--request-url", request_url),
                    ("--authorization-url", authorization_url),
                    ("--access-url", access_url),
                )
                if not value
            ]
            if missing:
                raise InvalidUsageError(
                    f"OAuth services require {', '.join(missing)}"
                )
            try:
                options = OAuthOptions(
                    consumer_key=consumer_key or "",
                    consumer_secret=consumer_secret or "",
                    consumer_key_source=consumer_key_source,
                    consumer_secret_source=consumer_secret_source,
                    request_url=request_url,
                    authorization_url=authorization_url,
                    access_url=access_url,
                )
            except ValidationError as exc:
                raise InvalidUsageError(f"Invalid OAuth options: {exc}") from exc

        config = load_services_config()
        config.services[service_id] = ServiceBinding(
            auth_type=auth_type.value, options=options
        )
        save_services_config(config)
    except MultiauthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f'Service "{service_id}" registered ({auth_type.value}).')
    suggest(f"Log in: multiauth auth login {service_id}")


@services_app.command("remove")
def services_remove(
    service_id: str = typer.Argument(help="Service identifier to remove."),
) -> None:
    """Remove a service from the services file.

    Raises:
        typer.Exit: With code 2 if the service is not in the services file.

    Example::

        multiauth services remove identica
    """
    from multiauth.config import load_services_config, save_services_config

    try:
        config = load_services_config()
        if service_id not in config.services:
            raise InvalidUsageError(f'Service "{service_id}" is not in the services file')
        del config.services[service_id]
        save_services_config(config)
    except MultiauthError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f'Service "{service_id}" removed.')
