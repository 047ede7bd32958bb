"""Pluggable authentication core for multiauth.

This package selects an authentication strategy per named service and
turns credentials into ``Authorization`` header values:

- :class:`AuthStrategy` -- capability interface every strategy implements
  (``sign_request``, ``save``, ``load``).
- :class:`ServiceRegistry` -- explicit, runtime-extensible mapping of
  service ids to auth bindings; :func:`create_default_registry` builds one
  from the ``"default"`` binding and the user's services file.
- :class:`StrategyFactory` -- creates the strategy a service is bound to.
- :class:`FormTransport` / :class:`HttpxFormTransport` -- the form-POST
  transport behind the OAuth token exchange.

Typical usage::

    from multiauth.auth import StrategyFactory, create_default_registry

    factory = StrategyFactory(create_default_registry())
    strategy = factory.create("example")
    if strategy is not None and strategy.load(saved_pickle):
        header = strategy.sign_request("GET", "https://api.example.com/me")
"""

from multiauth.auth.base import AuthStrategy
from multiauth.auth.factory import StrategyFactory
from multiauth.auth.registry import DEFAULT_SERVICE, ServiceRegistry, create_default_registry
from multiauth.auth.signing import SigningCredentials
from multiauth.auth.transport import FormTransport, HttpxFormTransport

__all__ = [
    "AuthStrategy",
    "DEFAULT_SERVICE",
    "FormTransport",
    "HttpxFormTransport",
    "ServiceRegistry",
    "SigningCredentials",
    "StrategyFactory",
    "create_default_registry",
]
