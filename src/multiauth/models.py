"""Canonical Pydantic models shared across all multiauth modules.

This is the single source of truth for data shapes in the project:

**Registry models** -- describe which authentication strategy a service
uses and how to reach its token endpoints:
    :class:`AuthKind`, :class:`OAuthOptions`, :class:`ServiceBinding`.

**Credential models** -- values produced by the token exchange:
    :class:`OAuthToken`.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`RequestConfig` and :class:`ServicesConfig`.

Fields accept both their Python names and the camelCase keys used by the
registration surface (``authType``, ``consumerKey``, ``requestURL``...),
so bindings can be registered from plain dictionaries.
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AuthKind(str, enum.Enum):
    """Authentication strategies a service can be bound to."""

    BASIC = "basic"
    OAUTH = "oauth"


class OAuthOptions(BaseModel):
    """Consumer credentials and endpoints for a three-legged OAuth service.

    Instances are frozen: a strategy keeps a reference to the options it
    was built with, and several strategies for the same service may share
    one instance.

    The consumer key and secret may be given directly or as credential
    source descriptors (``env:VAR``, ``file:/path``, ``prompt``) through
    the ``*_source`` fields; :meth:`resolved` turns the latter into the
    former.

    Example::

        OAuthOptions(
            consumer_key="ck",
            consumer_secret="cs",
            request_url="https://api.example.com/oauth/request_token",
            authorization_url="https://api.example.com/oauth/authorize",
            access_url="https://api.example.com/oauth/access_token",
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    consumer_key: str = Field(
        default="", validation_alias=AliasChoices("consumer_key", "consumerKey")
    )
    consumer_secret: str = Field(
        default="",
        validation_alias=AliasChoices("consumer_secret", "consumerSecret"),
    )
    consumer_key_source: Optional[str] = Field(
        default=None,
        description="Credential source for the consumer key: env:VAR, file:/path, prompt",
    )
    consumer_secret_source: Optional[str] = Field(
        default=None,
        description="Credential source for the consumer secret: env:VAR, file:/path, prompt",
    )
    request_url: str = Field(
        validation_alias=AliasChoices("request_url", "requestURL"),
        description="Endpoint issuing request tokens",
    )
    authorization_url: str = Field(
        validation_alias=AliasChoices("authorization_url", "authorizationURL"),
        description="User-facing page where the request token is approved",
    )
    access_url: str = Field(
        validation_alias=AliasChoices("access_url", "accessURL"),
        description="Endpoint exchanging an approved request token for an access token",
    )

    def resolved(self) -> OAuthOptions:
        """Return a copy with ``*_source`` descriptors resolved into values.

        Returns ``self`` unchanged when no source descriptor is set.

        Raises:
            ConfigError: If a source descriptor cannot be resolved.
        """
        if self.consumer_key_source is None and self.consumer_secret_source is None:
            return self

        from multiauth.config import resolve_credential

        update: dict[str, Optional[str]] = {
            "consumer_key_source": None,
            "consumer_secret_source": None,
        }
        if self.consumer_key_source is not None:
            update["consumer_key"] = resolve_credential(self.consumer_key_source)
        if self.consumer_secret_source is not None:
            update["consumer_secret"] = resolve_credential(self.consumer_secret_source)
        return self.model_copy(update=update)


class ServiceBinding(BaseModel):
    """Registry entry mapping a service identifier to its auth strategy.

    ``auth_type`` is kept as a plain string rather than :class:`AuthKind`
    so that bindings with an unrecognised kind can still be registered;
    the factory falls back to Basic for them.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    auth_type: str = Field(
        default=AuthKind.BASIC.value,
        validation_alias=AliasChoices("auth_type", "authType", "authKind", "auth_kind"),
        description="Auth strategy: basic or oauth",
    )
    options: Optional[OAuthOptions] = Field(
        default=None, validation_alias=AliasChoices("options", "opts")
    )


class OAuthToken(BaseModel):
    """A token/secret pair returned by a token endpoint."""

    model_config = ConfigDict(frozen=True)

    key: str
    secret: str


class RequestConfig(BaseModel):
    """HTTP settings applied to token-exchange requests."""

    timeout: float = Field(default=30.0, description="Request timeout in seconds")


class ServicesConfig(BaseModel):
    """User-wide service registrations persisted at ``~/.config/multiauth/services.json``.

    Loaded and saved by :func:`~multiauth.config.load_services_config` and
    :func:`~multiauth.config.save_services_config`. Every entry is added to
    the registry returned by
    :func:`~multiauth.auth.registry.create_default_registry`.
    """

    services: dict[str, ServiceBinding] = Field(default_factory=dict)
    request: RequestConfig = Field(default_factory=RequestConfig)
