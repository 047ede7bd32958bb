"""HTTP Basic authentication strategy.

Holds a username/password pair and signs every request with the static
``Authorization: Basic <base64(username:password)>`` value per :rfc:`7617`.

See Also:
    :class:`~multiauth.strategies.basic.strategy.BasicAuthStrategy`
    :mod:`multiauth.auth.base` for the strategy interface contract.
"""

from multiauth.strategies.basic.strategy import BasicAuthStrategy

__all__ = ["BasicAuthStrategy"]
