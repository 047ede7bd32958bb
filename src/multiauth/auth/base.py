"""Abstract base class for authentication strategies.

A *strategy* is the per-account object that turns stored credentials into
an ``Authorization`` header value. Both kinds fulfil the same capability
interface defined by :class:`AuthStrategy`:

- :meth:`~AuthStrategy.sign_request` -- produce the header value for one
  outgoing request.
- :meth:`~AuthStrategy.save` / :meth:`~AuthStrategy.load` -- serialize the
  credential to and from its compact colon-delimited *pickle* string.

How credentials are obtained differs per kind, so ``authorize`` is not
part of the shared contract: Basic authorizes synchronously from a
username and password, OAuth runs an asynchronous token exchange.

See Also:
    :class:`~multiauth.strategies.basic.BasicAuthStrategy`
    :class:`~multiauth.strategies.oauth1.OAuthStrategy`
    :class:`~multiauth.auth.factory.StrategyFactory` -- builds strategies
    for named services.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Mapping, Optional

from multiauth.exceptions import InvalidCredentialFormat

logger = logging.getLogger(__name__)

PICKLE_DELIMITER = ":"


class AuthStrategy(ABC):
    """Capability interface shared by every authentication strategy.

    Strategies are created per (service, account) by the
    :class:`~multiauth.auth.factory.StrategyFactory`, mutated in place as
    credentials are obtained, and are not safe for concurrent use.
    """

    @property
    @abstractmethod
    def auth_type(self) -> str:
        """Return the auth kind this strategy implements (``"basic"`` or ``"oauth"``)."""
        ...

    @property
    @abstractmethod
    def is_authorized(self) -> bool:
        """Whether a credential is installed and :meth:`sign_request` can succeed."""
        ...

    @property
    @abstractmethod
    def username(self) -> Optional[str]:
        """The account name associated with the credential, if known."""
        ...

    @abstractmethod
    def sign_request(
        self,
        method: str = "GET",
        url: str = "",
        parameters: Optional[Mapping[str, object]] = None,
    ) -> str:
        """Return the ``Authorization`` header value for a request.

        Strategies that sign statically ignore the request details.

        Raises:
            NotAuthorizedError: If no credential has been installed yet.
        """
        ...

    @abstractmethod
    def save(self) -> str:
        """Serialize the credential into its pickle string."""
        ...

    @abstractmethod
    def load(self, pickle: str) -> bool:
        """Restore the credential from a pickle produced by :meth:`save`.

        Returns:
            ``True`` on success. ``False`` if the pickle is malformed, in
            which case the failure is logged and the strategy is left
            exactly as it was.
        """
        ...


def split_pickle(pickle: str, fields: int, kind: str) -> Optional[list[str]]:
    """Split a colon-delimited pickle into exactly *fields* parts.

    A value that itself contains a colon cannot be told apart from an
    extra field, so such pickles are rejected rather than guessed at.

    Args:
        pickle: The serialized credential.
        fields: The number of fields the format requires.
        kind: Strategy kind used in the log message (``"basic"``, ``"oauth"``).

    Returns:
        The parts, or ``None`` after logging an
        :class:`~multiauth.exceptions.InvalidCredentialFormat` message.
    """
    parts = pickle.split(PICKLE_DELIMITER)
    if len(parts) != fields:
        exc = InvalidCredentialFormat(
            f"Invalid {kind} auth pickle: expected {fields} colon-delimited fields, "
            f"got {len(parts)}"
        )
        logger.error("%s", exc)
        return None
    return parts
