"""multiauth -- pluggable Basic and OAuth 1.0a authentication for multi-service clients.

A client talking to several remote services asks the
:class:`~multiauth.auth.factory.StrategyFactory` for the strategy a
service is bound to, obtains credentials with it (a username/password for
Basic, the three-legged token exchange for OAuth), and then calls
``sign_request`` for every outgoing request to get its ``Authorization``
header. Credentials round-trip through compact colon-delimited strings
via ``save`` / ``load``.

Typical workflow::

    multiauth services add example --type oauth ...   # register a service
    multiauth auth login example > example.pickle      # run the flow
    multiauth auth sign example -c file:example.pickle --url https://...

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and credential sources.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
