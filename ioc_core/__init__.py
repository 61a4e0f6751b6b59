"""Inversion-of-control service container with constant, singleton and factory services."""

from .config import ConfigStore, default_config_path
from .errors import CircularResolutionError, ConfigError, MissingServiceError, ServiceError
from .services import (
    RegistrationProvider,
    ServiceContainer,
    ServiceExtender,
    ServicePolicy,
    ServiceProvider,
)

__all__ = [
    "ConfigStore",
    "default_config_path",
    "CircularResolutionError",
    "ConfigError",
    "MissingServiceError",
    "ServiceError",
    "RegistrationProvider",
    "ServiceContainer",
    "ServiceExtender",
    "ServicePolicy",
    "ServiceProvider",
]
