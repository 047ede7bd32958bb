"""HTTP Basic authentication strategy.

This module provides :class:`BasicAuthStrategy`, which implements the
``basic`` auth kind. :meth:`~BasicAuthStrategy.authorize` stores the
username and password and precomputes the ``Basic`` header value that
:meth:`~BasicAuthStrategy.sign_request` returns for every request.

The pickle format is ``"<username>:<password>"``.

See Also:
    :class:`multiauth.auth.base.AuthStrategy` for the base interface.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional

from multiauth.auth.base import AuthStrategy, split_pickle
from multiauth.auth.signing import basic_credential
from multiauth.exceptions import NotAuthorizedError
from multiauth.models import AuthKind

logger = logging.getLogger(__name__)


class BasicAuthStrategy(AuthStrategy):
    """Authenticate with a static username/password pair.

    Example::

        strategy = BasicAuthStrategy()
        strategy.authorize("alice", "s3cret")
        strategy.sign_request()  # 'Basic YWxpY2U6czNjcmV0'
    """

    def __init__(self) -> None:
        self._username: Optional[str] = None
        self._password: Optional[str] = None
        self._auth_header: Optional[str] = None

    @property
    def auth_type(self) -> str:
        return AuthKind.BASIC.value

    @property
    def is_authorized(self) -> bool:
        return self._auth_header is not None

    @property
    def username(self) -> Optional[str]:
        return self._username

    @property
    def password(self) -> Optional[str]:
        return self._password

    def authorize(
        self,
        username: str,
        password: str,
        on_complete: Optional[Callable[[bool], None]] = None,
    ) -> bool:
        """Install *username* and *password* and compute the header value.

        Always succeeds. *on_complete*, when given, is called synchronously
        with ``True`` so callers can drive Basic and OAuth strategies with
        the same completion-callback code.

        Returns:
            ``True``.
        """
        self._username = username
        self._password = password
        self._auth_header = basic_credential(username, password)

        if on_complete is not None:
            on_complete(True)
        return True

    def sign_request(
        self,
        method: str = "GET",
        url: str = "",
        parameters: Optional[Mapping[str, object]] = None,
    ) -> str:
        """Return the precomputed ``Basic`` header value.

        The request details are ignored.

        Raises:
            NotAuthorizedError: If :meth:`authorize` or :meth:`load` has
                not run yet.
        """
        if self._auth_header is None:
            raise NotAuthorizedError(
                "Basic credentials are not set; call authorize() or load() first"
            )
        return self._auth_header

    def save(self) -> str:
        """Return ``"<username>:<password>"``.

        A username or password containing a colon produces a pickle that
        :meth:`load` rejects.

        Raises:
            NotAuthorizedError: If no credentials have been installed.
        """
        if self._auth_header is None:
            raise NotAuthorizedError("No basic credentials to save; call authorize() first")
        return f"{self._username}:{self._password}"

    def load(self, pickle: str) -> bool:
        """Restore credentials from ``"<username>:<password>"``.

        Returns:
            ``True`` if the pickle held exactly two fields, ``False``
            otherwise (logged, state untouched).
        """
        parts = split_pickle(pickle, 2, self.auth_type)
        if parts is None:
            return False
        username, password = parts
        self.authorize(username, password)
        logger.debug("Loaded basic credentials for %s", username)
        return True
