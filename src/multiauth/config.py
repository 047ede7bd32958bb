"""Where multiauth keeps its files, and how secrets are looked up.

The services file is a JSON dump of :class:`~multiauth.models.ServicesConfig`:
the services registered with ``multiauth services add``. It lives in the
config directory unless ``MULTIAUTH_SERVICES_FILE`` points elsewhere, and
may hold consumer secrets, so it is written owner-only.

Secrets never need to appear on the command line. Options that take one
accept a *source* instead, resolved by :func:`resolve_credential`:

- ``env:NAME`` -- the environment variable ``NAME``
- ``file:PATH`` -- the file's content with surrounding whitespace removed
- ``prompt`` -- typed at the terminal without echo
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import sys
import tempfile
from pathlib import Path
from typing import Callable

from multiauth.exceptions import ConfigError
from multiauth.models import ServicesConfig

_APP_NAME = "multiauth"
_SERVICES_FILENAME = "services.json"
SERVICES_FILE_ENV = "MULTIAUTH_SERVICES_FILE"

# XDG variable and its default below $HOME, per directory kind.
_XDG_DIRS: dict[str, tuple[str, tuple[str, ...]]] = {
    "config": ("XDG_CONFIG_HOME", (".config",)),
    "data": ("XDG_DATA_HOME", (".local", "share")),
}


def _is_xdg_platform() -> bool:
    system = platform.system()
    return system == "Linux" or system.endswith("BSD")


def _app_dir(kind: str) -> Path:
    """Return the ``kind`` directory for multiauth, creating it if missing.

    XDG platforms use ``$XDG_<KIND>_HOME/multiauth``. Elsewhere everything
    lives in ``~/.multiauth``, with data under its ``logs`` subdirectory.
    """
    if _is_xdg_platform():
        env_var, default = _XDG_DIRS[kind]
        base = Path(os.environ.get(env_var) or Path.home().joinpath(*default))
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}"
        if kind == "data":
            path = path / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Directory holding the services file."""
    return _app_dir("config")


def get_data_dir() -> Path:
    """Directory holding crash logs."""
    return _app_dir("data")


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* so readers never see a partial file.

    The content goes to an owner-only temp file next to *path*, which is
    then renamed over it. The temp file is removed if anything fails.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        # mkstemp creates the file 0o600 already.
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def services_config_path() -> Path:
    override = os.environ.get(SERVICES_FILE_ENV)
    if override:
        return Path(override).expanduser()
    return get_config_dir() / _SERVICES_FILENAME


def load_services_config() -> ServicesConfig:
    """Read the services file. A missing file is an empty configuration.

    Raises:
        ConfigError: If the file is not valid JSON or not a valid
            :class:`~multiauth.models.ServicesConfig`.
    """
    path = services_config_path()
    if not path.is_file():
        return ServicesConfig()
    try:
        return ServicesConfig.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except ValueError as exc:
        # JSONDecodeError and pydantic's ValidationError are both ValueErrors.
        raise ConfigError(f"Invalid services file at {path}: {exc}") from exc


def save_services_config(config: ServicesConfig) -> None:
    """Write *config* to the services file, replacing it atomically."""
    data = config.model_dump(mode="json", exclude_none=True)
    _atomic_write(services_config_path(), json.dumps(data, indent=2) + "\n")


def _from_env(name: str, source: str) -> str:
    value = os.environ.get(name)
    if value is None:
        raise ConfigError(f"Environment variable '{name}' is not set (source: {source})")
    return value


def _from_file(location: str, source: str) -> str:
    path = Path(location).expanduser()
    if not path.is_file():
        raise ConfigError(f"Credential file not found: {path} (source: {source})")
    try:
        return path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc


_SOURCE_READERS: dict[str, Callable[[str, str], str]] = {
    "env:": _from_env,
    "file:": _from_file,
}


def resolve_credential(source: str) -> str:
    """Return the secret named by *source* (``env:``, ``file:`` or ``prompt``).

    Raises:
        ConfigError: If the variable is unset, the file is missing or
            unreadable, ``prompt`` is used without a terminal, or the
            source has an unknown form.
    """
    for prefix, reader in _SOURCE_READERS.items():
        if source.startswith(prefix):
            return reader(source[len(prefix):], source)

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for credentials: stdin is not a TTY (source: prompt)")
        return getpass.getpass("Enter credential: ")

    raise ConfigError(f"Unknown credential source format: {source}")
