"""Service registry -- which auth strategy each named service uses.

The :class:`ServiceRegistry` maps service identifiers to
:class:`~multiauth.models.ServiceBinding` entries. It is an explicit
object owned by the application and handed to the
:class:`~multiauth.auth.factory.StrategyFactory`; there is no
process-wide registry. Entries can be added at any time, and a registry
is not synchronized, so concurrent registration must be serialized by
the caller.

:func:`create_default_registry` builds the registry most callers want:
the ``"default"`` Basic binding plus every service saved in the user's
services file.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Union

from multiauth.models import AuthKind, ServiceBinding, ServicesConfig

logger = logging.getLogger(__name__)

DEFAULT_SERVICE = "default"
"""Service id bound to Basic auth in every default registry."""


class ServiceRegistry:
    """Mutable mapping of service identifiers to auth bindings.

    Example::

        registry = ServiceRegistry()
        registry.register("example", {"authType": "oauth", "options": {...}})
        registry.get("example").auth_type  # 'oauth'
    """

    def __init__(self, bindings: Optional[Mapping[str, ServiceBinding]] = None) -> None:
        self._bindings: dict[str, ServiceBinding] = dict(bindings or {})

    def register(
        self, service_id: str, binding: Union[ServiceBinding, Mapping[str, Any]]
    ) -> None:
        """Insert or replace the binding for *service_id*.

        Plain mappings are converted with
        :meth:`ServiceBinding.model_construct`, so no validation happens
        here; a malformed binding surfaces when a strategy is created for
        it.
        """
        if not isinstance(binding, ServiceBinding):
            binding = _construct_binding(binding)
        self._bindings[service_id] = binding
        logger.debug("Registered service %s (%s)", service_id, binding.auth_type)

    def unregister(self, service_id: str) -> bool:
        """Remove *service_id*. Returns ``False`` if it was not registered."""
        return self._bindings.pop(service_id, None) is not None

    def get(self, service_id: str) -> Optional[ServiceBinding]:
        return self._bindings.get(service_id)

    def list_services(self) -> list[str]:
        """Return all registered service ids, sorted."""
        return sorted(self._bindings)

    def items(self) -> list[tuple[str, ServiceBinding]]:
        """Return (service id, binding) pairs sorted by service id."""
        return sorted(self._bindings.items())

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)


def _construct_binding(data: Mapping[str, Any]) -> ServiceBinding:
    """Build a binding from a raw mapping without validating its shape."""
    auth_type = AuthKind.BASIC.value
    for key in ("auth_type", "authType", "authKind", "auth_kind"):
        if key in data:
            auth_type = data[key]
            break
    options = data.get("options", data.get("opts"))
    return ServiceBinding.model_construct(auth_type=auth_type, options=options)


def create_default_registry(config: Optional[ServicesConfig] = None) -> ServiceRegistry:
    """Create a registry with the ``"default"`` binding and the user's services.

    Args:
        config: Service registrations to include. Loaded from the services
            file when omitted.

    Returns:
        A new :class:`ServiceRegistry`.

    Raises:
        ConfigError: If the services file is invalid.
    """
    if config is None:
        from multiauth.config import load_services_config

        config = load_services_config()

    registry = ServiceRegistry()
    registry.register(DEFAULT_SERVICE, ServiceBinding(auth_type=AuthKind.BASIC.value))
    for service_id, binding in config.services.items():
        registry.register(service_id, binding)
    return registry
