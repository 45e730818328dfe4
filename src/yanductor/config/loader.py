from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from yanductor.config.schema import (
    DEFAULT_CACHE_DIR,
    DEFAULT_CACHE_TTL,
    BackendConfig,
)
from yanductor.errors import ConfigurationError

BACKEND_TYPE = "conductor"


class ConfigLoader:
    """Reads the tool's YAML config file and returns the backend settings.

    Expected layout::

        cache_ttl: 3600
        cache_dir: ~/.xc/cache
        backend:
          type: conductor
          options:
            url: https://conductor.example.com
            work_groups: infra, web
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> BackendConfig:
        raw = self._read()

        backend = raw.get("backend")
        if not isinstance(backend, dict):
            raise self._error("'backend' section is not configured")

        backend_type = backend.get("type", BACKEND_TYPE)
        if backend_type != BACKEND_TYPE:
            raise self._error(f"unsupported backend type {backend_type!r}")

        options = backend.get("options") or {}
        if not isinstance(options, dict):
            raise self._error("'backend.options' must be a mapping")

        try:
            return BackendConfig.from_options(
                options,
                cache_ttl=raw.get("cache_ttl", DEFAULT_CACHE_TTL),
                cache_dir=raw.get("cache_dir", DEFAULT_CACHE_DIR),
            )
        except ConfigurationError as e:
            raise self._error(str(e)) from e

    def _read(self) -> dict[str, Any]:
        if not self.path.is_file():
            raise self._error("Config file does not exist")
        try:
            raw = yaml.safe_load(self.path.read_text())
        except yaml.YAMLError as e:
            raise self._error(f"Invalid YAML: {e}") from e
        if not isinstance(raw, dict):
            raise self._error("Expected a YAML mapping at top level")
        return raw

    def _error(self, message: str) -> ConfigurationError:
        return ConfigurationError(f"{self.path}: {message}")
