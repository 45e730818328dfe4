"""Error taxonomy for inventory loading."""

from __future__ import annotations

from pathlib import Path


class YanductorError(Exception):
    """Base class for all inventory backend errors."""


class ConfigurationError(YanductorError):
    """Raised when required backend options are missing or invalid."""


class NetworkError(YanductorError):
    """Raised when the inventory service can't be reached or answers non-200."""

    def __init__(self, url: str, message: str, status_code: int | None = None) -> None:
        self.url = url
        self.status_code = status_code
        super().__init__(f"{message} while fetching {url}")


class FormatError(YanductorError):
    """Raised when an inventory document is malformed."""


class LocalCacheError(YanductorError):
    """Raised when the local cache file is missing, unreadable or unwritable."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")
