"""Three-legged OAuth 1.0a authentication strategy.

Drives the request token -> user authorization -> access token exchange
and signs every request with HMAC-SHA1 under the service's realm.

See Also:
    :class:`~multiauth.strategies.oauth1.strategy.OAuthStrategy`
    :mod:`multiauth.auth.signing` for the signing primitives.
"""

from multiauth.strategies.oauth1.strategy import OAuthState, OAuthStrategy

__all__ = ["OAuthState", "OAuthStrategy"]
