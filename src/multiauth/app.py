"""The ``multiauth`` command line.

Two command groups hang off the root: ``services`` edits the services
file that :func:`~multiauth.auth.create_default_registry` reads, and
``auth`` logs in to a service or signs a request with a saved credential.
Root flags pick the stdout rendering and the logging level for the whole
invocation.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from types import FrameType
from typing import Optional

import typer

from multiauth import __version__
from multiauth.exit_codes import EXIT_GENERIC_FAILURE

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
_EXIT_INTERRUPTED = 130

app = typer.Typer(
    name="multiauth",
    help="Basic and OAuth 1.0a authentication for multiple services.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

from multiauth.commands.auth import auth_app  # noqa: E402
from multiauth.commands.services import services_app  # noqa: E402

app.add_typer(services_app, name="services", help="Register and list services.")
app.add_typer(auth_app, name="auth", help="Log in to a service and sign requests.")


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"multiauth {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON."),
    plain_output: bool = typer.Option(False, "--plain", help="Print results as plain text."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only print results and problems."),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log token exchanges and registry changes."
    ),
) -> None:
    """Apply the root flags before any sub-command runs."""
    from multiauth.output import OutputFormat, OutputManager, set_output

    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet))
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=_LOG_FORMAT)


def _on_interrupt(signum: int, frame: Optional[FrameType]) -> None:
    sys.stderr.write("\nCancelled.\n")
    sys.exit(_EXIT_INTERRUPTED)


def _write_crash_log() -> str:
    """Save the traceback being handled under the data directory.

    Returns:
        The path of the new log file.
    """
    from multiauth.config import get_data_dir

    log_dir = get_data_dir() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"crash-{datetime.now():%Y%m%d-%H%M%S}.log"
    log_path.write_text(traceback.format_exc(), encoding="utf-8")
    return str(log_path)


def main() -> None:
    """Console-script entry point.

    A :class:`~multiauth.exceptions.MultiauthError` escaping a command exits
    with its ``exit_code``. Anything else is a bug: the traceback goes to a
    crash log and the process exits with the generic failure code.
    """
    from multiauth.exceptions import MultiauthError
    from multiauth.output import error

    signal.signal(signal.SIGINT, _on_interrupt)
    try:
        app()
    except KeyboardInterrupt:
        _on_interrupt(signal.SIGINT, None)
    except MultiauthError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception:
        error(f"Unexpected error. Crash log: {_write_crash_log()}")
        sys.exit(EXIT_GENERIC_FAILURE)
