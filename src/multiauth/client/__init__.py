"""HTTP client integration.

Exports :class:`StrategyAuth`, an :class:`httpx.Auth` that signs each
outgoing request with an :class:`~multiauth.auth.base.AuthStrategy`.
"""

from multiauth.client.auth import StrategyAuth

__all__ = ["StrategyAuth"]
