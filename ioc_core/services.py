"""Service container that stores named services under explicit lifecycle policies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Set

from .errors import CircularResolutionError, MissingServiceError

__all__ = [
    "RegistrationProvider",
    "ServiceContainer",
    "ServiceExtender",
    "ServicePolicy",
    "ServiceProvider",
]

ServiceProvider = Callable[["ServiceContainer"], Any]
ServiceExtender = Callable[[Any, "ServiceContainer"], Any]
RegistrationProvider = Callable[["ServiceContainer"], None]

logger = logging.getLogger(__name__)


class ServicePolicy(str, Enum):
    """Lifecycle state of a registered service."""

    VALUE = "value"
    PINNED = "pinned"
    PENDING_SINGLETON = "pending_singleton"
    RESOLVED_SINGLETON = "resolved_singleton"
    FACTORY = "factory"


@dataclass(frozen=True)
class _ServiceEntry:
    policy: ServicePolicy
    value: Any

    @property
    def invokes_provider(self) -> bool:
        return self.policy in (ServicePolicy.PENDING_SINGLETON, ServicePolicy.FACTORY)


class ServiceContainer:
    """Registry of named services.

    Services are registered as constants (stored and returned verbatim),
    singletons (provider invoked on first ``get`` and cached) or factories
    (provider invoked on every ``get``). Providers always receive the
    container as their only argument. Every registration method returns the
    container so calls can be chained::

        container = (
            ServiceContainer()
            .set_constant("dsn", "sqlite://")
            .set_singleton("db", lambda c: connect(c.get("dsn")))
            .set_factory("session", lambda c: c.get("db").session())
        )
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _ServiceEntry] = {}
        self._initializing: Set[str] = set()

    def set_constant(self, name: str, value: Any) -> "ServiceContainer":
        """Store ``value`` verbatim; callables are returned, never invoked."""
        return self._set_entry(name, _ServiceEntry(ServicePolicy.PINNED, value))

    def protect(self, name: str, value: Any) -> "ServiceContainer":
        """Alias of :meth:`set_constant` kept for callers of the older API."""
        return self.set_constant(name, value)

    def set_singleton(self, name: str, provider: ServiceProvider | Any) -> "ServiceContainer":
        """Register a provider resolved lazily on first access and cached.

        A non-callable ``provider`` is stored as a plain value.
        """
        policy = ServicePolicy.PENDING_SINGLETON if callable(provider) else ServicePolicy.VALUE
        return self._set_entry(name, _ServiceEntry(policy, provider))

    def set_factory(self, name: str, provider: ServiceProvider | Any) -> "ServiceContainer":
        """Register a provider invoked on every access.

        A non-callable ``provider`` is stored as a plain value.
        """
        policy = ServicePolicy.FACTORY if callable(provider) else ServicePolicy.VALUE
        return self._set_entry(name, _ServiceEntry(policy, provider))

    def get(self, name: str, default: Any | None = None) -> Any:
        """Resolve ``name``, returning ``default`` when it was never registered.

        Raises:
            CircularResolutionError: the provider for ``name`` requested
                ``name`` again while it was still running.
        """
        entry = self._entries.get(name)
        if entry is None:
            return default

        if not entry.invokes_provider:
            return entry.value

        if name in self._initializing:
            raise CircularResolutionError(name)

        self._initializing.add(name)
        try:
            instance = entry.value(self)
        finally:
            self._initializing.remove(name)

        if entry.policy is ServicePolicy.PENDING_SINGLETON:
            self._entries[name] = _ServiceEntry(ServicePolicy.RESOLVED_SINGLETON, instance)
            logger.debug("resolved singleton %s", name)
        return instance

    def extend(self, name: str, extender: ServiceExtender) -> "ServiceContainer":
        """Wrap the service registered under ``name`` with ``extender``.

        ``extender`` receives the previous value and the container and returns
        the replacement. An extended factory stays a factory; anything else
        becomes a singleton resolved on the next ``get``.

        Raises:
            MissingServiceError: ``name`` is not registered. The registry is
                left unchanged.
        """
        extended = self._entries.get(name)
        if extended is None:
            raise MissingServiceError(name)

        logger.debug("extending service %s (%s)", name, extended.policy.value)

        def extended_service(container: ServiceContainer) -> Any:
            previous = extended.value(container) if extended.invokes_provider else extended.value
            return extender(previous, container)

        if extended.policy is ServicePolicy.FACTORY:
            return self.set_factory(name, extended_service)
        return self.set_singleton(name, extended_service)

    def register(self, provider: RegistrationProvider) -> "ServiceContainer":
        """Invoke ``provider`` with the container so it can register services."""
        provider(self)
        return self

    def keys(self) -> List[str]:
        """Return registered service names in registration order."""
        return list(self._entries)

    def has(self, name: str) -> bool:
        return name in self._entries

    def policy(self, name: str) -> ServicePolicy | None:
        """Return the current policy of ``name`` or ``None`` if unregistered."""
        entry = self._entries.get(name)
        return entry.policy if entry is not None else None

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def _set_entry(self, name: str, entry: _ServiceEntry) -> "ServiceContainer":
        # drop the old entry first so the name is re-appended in registration order
        self._entries.pop(name, None)
        self._entries[name] = entry
        logger.debug("registered service %s as %s", name, entry.policy.value)
        return self
