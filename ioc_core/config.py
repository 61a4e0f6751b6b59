"""Helper utilities for loading configuration values into a service container."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping
import tomllib

from platformdirs import user_config_dir

from .errors import ConfigError
from .services import RegistrationProvider, ServiceContainer

DEFAULT_APP_NAME = "ioc-core"
CONFIG_FILE_NAME = "config.toml"

logger = logging.getLogger(__name__)


def default_config_path() -> Path:
    """Return the platform-specific default config path."""

    base_dir = Path(user_config_dir(DEFAULT_APP_NAME, appauthor=False))
    return base_dir / CONFIG_FILE_NAME


def _flatten(document: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten nested tables into dotted keys.

    A quoted key containing dots (``"db.host" = 1``) and a table path
    (``[db] host = 2``) flatten to the same name; that is rejected.
    """

    flat: dict[str, Any] = {}
    for key, value in document.items():
        dotted = f"{prefix}.{key}" if prefix else key
        nested = _flatten(value, dotted) if isinstance(value, dict) else {dotted: value}
        for flat_key, flat_value in nested.items():
            if flat_key in flat:
                raise ConfigError(f"config key {flat_key!r} is defined more than once")
            flat[flat_key] = flat_value
    return flat


@dataclass
class ConfigStore:
    path: Path = field(default_factory=default_config_path)
    _store: dict[str, Any] = field(default_factory=dict, init=False)

    def load(self) -> "ConfigStore":
        """Read ``path`` into the store, flattening tables into dotted keys.

        A missing file leaves the store untouched.
        """

        if not self.path.exists():
            logger.debug("config file %s not found, using defaults", self.path)
            return self
        try:
            with self.path.open("rb") as handle:
                document = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigError(f"unable to read config at {self.path}") from exc

        values = _flatten(document)
        self._store.update(values)
        logger.debug("loaded %d config values from %s", len(values), self.path)
        return self

    def get(self, key: str, default: Any | None = None) -> Any | None:
        return self._store.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._store[key] = value

    def keys(self) -> list[str]:
        return list(self._store)

    def as_provider(self, prefix: str = "config") -> RegistrationProvider:
        """Build a provider for :meth:`ServiceContainer.register`.

        The store is registered as the constant ``prefix`` and every value as
        the constant ``"<prefix>.<key>"``.
        """

        def register_config(container: ServiceContainer) -> None:
            container.set_constant(prefix, self)
            for key, value in self._store.items():
                container.set_constant(f"{prefix}.{key}", value)

        return register_config
