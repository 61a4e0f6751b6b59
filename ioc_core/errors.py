"""Error types raised by the service container."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for service container errors."""


class MissingServiceError(ServiceError, LookupError):
    """Raised when an operation requires a service that was never registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"cannot extend missing service: {name}")
        self.name = name


class ConfigError(ServiceError):
    """Raised when the configuration file cannot be read or parsed."""


class CircularResolutionError(ServiceError, RuntimeError):
    """Raised when a provider requests the service it is currently providing."""

    def __init__(self, name: str) -> None:
        super().__init__(f"re-entrant initialization detected for {name!r}")
        self.name = name
