"""Built-in authentication strategies.

- :class:`~multiauth.strategies.basic.BasicAuthStrategy` -- static
  username/password (``basic``).
- :class:`~multiauth.strategies.oauth1.OAuthStrategy` -- three-legged
  OAuth 1.0a (``oauth``).
"""

from multiauth.strategies.basic import BasicAuthStrategy
from multiauth.strategies.oauth1 import OAuthState, OAuthStrategy

__all__ = ["BasicAuthStrategy", "OAuthState", "OAuthStrategy"]
