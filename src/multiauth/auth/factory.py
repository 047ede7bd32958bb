"""Strategy factory -- build the right auth strategy for a named service.

:class:`StrategyFactory` looks a service up in its
:class:`~multiauth.auth.registry.ServiceRegistry` and dispatches on the
bound auth kind:

- ``oauth`` -- :class:`~multiauth.strategies.oauth1.OAuthStrategy` with the
  service id as realm and the bound :class:`~multiauth.models.OAuthOptions`.
- ``basic`` and any unrecognised kind -- a fresh
  :class:`~multiauth.strategies.basic.BasicAuthStrategy`.

Failures are reported, not raised: an unknown service id or an OAuth
binding without usable options is logged and :meth:`StrategyFactory.create`
returns ``None``. Callers must check the result before use.

The factory owns the transport its OAuth strategies share. Close the
factory (or use it as a context manager) once its strategies are done
with the token exchange.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from multiauth.auth.base import AuthStrategy
from multiauth.auth.registry import ServiceRegistry
from multiauth.auth.transport import FormTransport, HttpxFormTransport
from multiauth.exceptions import ConfigError, UnknownServiceError
from multiauth.models import AuthKind, OAuthOptions, ServiceBinding

logger = logging.getLogger(__name__)


class StrategyFactory:
    """Create per-account strategies from service bindings.

    Args:
        registry: The registry to look services up in. Held by reference,
            so later registrations are visible to this factory.
        transport: Transport handed to every OAuth strategy. When omitted
            the factory creates one :class:`HttpxFormTransport` on first
            use and closes it in :meth:`close`. An injected transport is
            left open.
        timeout: Request timeout for the transport the factory creates.

    Example::

        with StrategyFactory(create_default_registry()) as factory:
            strategy = factory.create("default")
            if strategy is not None:
                strategy.authorize("alice", "s3cret")
    """

    def __init__(
        self,
        registry: ServiceRegistry,
        transport: Optional[FormTransport] = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._registry = registry
        self._transport = transport
        self._owns_transport = transport is None
        self._timeout = timeout
        # service id -> (options as registered, options with sources resolved)
        self._resolved: dict[str, tuple[Any, OAuthOptions]] = {}

    def __enter__(self) -> StrategyFactory:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def registry(self) -> ServiceRegistry:
        return self._registry

    @property
    def transport(self) -> FormTransport:
        """The transport shared by every OAuth strategy this factory creates."""
        if self._transport is None:
            self._transport = HttpxFormTransport(timeout=self._timeout)
        return self._transport

    def close(self) -> None:
        """Shut down the transport if this factory created it."""
        if self._owns_transport and self._transport is not None:
            self._transport.close()
            self._transport = None

    def register_service(
        self, service_id: str, binding: Union[ServiceBinding, Mapping[str, Any]]
    ) -> None:
        """Insert or replace a binding in the underlying registry."""
        self._registry.register(service_id, binding)

    def create(self, service_id: str) -> Optional[AuthStrategy]:
        """Return a new strategy for *service_id*, or ``None``.

        ``None`` is returned (and the reason logged) when the service is not
        registered or its OAuth binding has no usable options.
        """
        from multiauth.strategies.basic import BasicAuthStrategy
        from multiauth.strategies.oauth1 import OAuthStrategy

        binding = self._registry.get(service_id)
        if binding is None:
            logger.error("%s", UnknownServiceError(f"Invalid authentication service: {service_id}"))
            return None

        if binding.auth_type == AuthKind.OAUTH.value:
            options = self._oauth_options(service_id, binding)
            if options is None:
                return None
            return OAuthStrategy(service_id, options, transport=self.transport)

        if binding.auth_type != AuthKind.BASIC.value:
            logger.debug(
                "Service %s has unknown auth type %r; using basic auth",
                service_id,
                binding.auth_type,
            )
        return BasicAuthStrategy()

    def _oauth_options(self, service_id: str, binding: ServiceBinding) -> Optional[OAuthOptions]:
        """Validate and resolve the options of an OAuth binding.

        The result is cached per binding, so strategies for one service
        share a single options object and credential sources are read once.
        """
        raw = binding.options
        if raw is None:
            logger.error("OAuth service %s is registered without options", service_id)
            return None

        cached = self._resolved.get(service_id)
        if cached is not None and cached[0] is raw:
            return cached[1]

        try:
            options = raw if isinstance(raw, OAuthOptions) else OAuthOptions.model_validate(raw)
            options = options.resolved()
        except (ValidationError, ConfigError) as exc:
            logger.error("OAuth service %s has invalid options: %s", service_id, exc)
            return None
        self._resolved[service_id] = (raw, options)
        return options
