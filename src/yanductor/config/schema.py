from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from yanductor.errors import ConfigurationError
from yanductor.inventory.document import EntryPolicy

DEFAULT_CACHE_DIR = "~/.xc/cache"
DEFAULT_CACHE_TTL = timedelta(hours=1)

_SPLIT_EXPR = re.compile(r"\s*,\s*")


class BackendConfig(BaseModel):
    """Settings for the Conductor inventory backend.

    Build it through ``validate_config`` or ``from_options``, which raise
    ConfigurationError. Constructing the model directly raises pydantic's
    ValidationError instead.
    """

    url: str
    work_groups: list[str]
    cache_ttl: timedelta = DEFAULT_CACHE_TTL
    cache_dir: Path = Path(DEFAULT_CACHE_DIR).expanduser()
    timeout: float | None = None
    entry_policy: EntryPolicy = EntryPolicy.SKIP

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("backend API URL is not configured")
        return v

    @field_validator("work_groups", mode="before")
    @classmethod
    def split_work_groups(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = _SPLIT_EXPR.split(v.strip())
        if isinstance(v, list):
            v = [item.strip() if isinstance(item, str) else item for item in v]
            v = [item for item in v if item != ""]
            if not v:
                raise ValueError("backend workgroups are not configured")
        return v

    @field_validator("cache_dir")
    @classmethod
    def expand_cache_dir(cls, v: Path) -> Path:
        return v.expanduser()

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("'timeout' must be positive")
        return v

    @classmethod
    def from_options(
        cls,
        options: Mapping[str, Any],
        cache_ttl: timedelta | float = DEFAULT_CACHE_TTL,
        cache_dir: Path | str = DEFAULT_CACHE_DIR,
    ) -> BackendConfig:
        """Build a config from a flat backend options mapping.

        ``url`` and ``work_groups`` are required; ``work_groups`` is a
        comma-separated list. Raises ConfigurationError before any I/O.
        """
        if not options.get("work_groups"):
            raise ConfigurationError("backend workgroups are not configured")
        if not options.get("url"):
            raise ConfigurationError("backend API URL is not configured")

        raw: dict[str, Any] = {
            "url": options["url"],
            "work_groups": options["work_groups"],
            "cache_ttl": cache_ttl,
            "cache_dir": cache_dir,
        }
        for key in ("timeout", "entry_policy"):
            if options.get(key) is not None:
                raw[key] = options[key]
        return validate_config(raw)


def validate_config(raw: Mapping[str, Any]) -> BackendConfig:
    """Validate a raw settings mapping. The public way to build a BackendConfig."""
    try:
        return BackendConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Validation error: {e}") from e
