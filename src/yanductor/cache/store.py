"""Local cache of the raw inventory document, one file per workgroup selection."""

from __future__ import annotations

import os
import tempfile
import time
from collections.abc import Iterable
from datetime import datetime, timedelta
from pathlib import Path

from yanductor.errors import LocalCacheError
from yanductor.logging_config import get_logger

log = get_logger("cache")

CACHE_PREFIX = "yanductor_cache"


def cache_filename(cache_dir: Path, workgroup_names: Iterable[str]) -> Path:
    """Return the cache path for a set of workgroups, independent of their order."""
    names = "_".join(sorted(set(workgroup_names)))
    return Path(cache_dir) / f"{CACHE_PREFIX}_{names}.json"


class CacheStore:
    """Reads and writes the raw document verbatim; reports freshness by mtime."""

    def __init__(self, cache_dir: Path, workgroup_names: Iterable[str]) -> None:
        self.cache_dir = Path(cache_dir)
        self.filename = cache_filename(self.cache_dir, workgroup_names)

    def modified_at(self) -> datetime | None:
        try:
            return datetime.fromtimestamp(self.filename.stat().st_mtime)
        except OSError:
            return None

    def fresh(self, ttl: timedelta) -> bool:
        """True if the cache exists and is no older than ``ttl``.

        Compares epoch seconds, so local clock shifts (DST) don't move the window.
        """
        try:
            mtime = self.filename.stat().st_mtime
        except OSError:
            return False
        return not (mtime + ttl.total_seconds() < time.time())

    def read(self) -> bytes:
        try:
            return self.filename.read_bytes()
        except FileNotFoundError as e:
            raise LocalCacheError(self.filename, "cache file not found") from e
        except OSError as e:
            raise LocalCacheError(self.filename, f"cannot read cache: {e}") from e

    def write(self, data: bytes) -> None:
        """Replace the cache file atomically via a temp file in the same directory."""
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LocalCacheError(self.cache_dir, f"error creating cache dir: {e}") from e

        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.filename.stem}_", suffix=".tmp", dir=self.cache_dir
            )
        except OSError as e:
            raise LocalCacheError(self.filename, f"cannot write cache: {e}") from e

        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp_path, 0o644)
            os.replace(tmp_path, self.filename)
        except OSError as e:
            raise LocalCacheError(self.filename, f"cannot write cache: {e}") from e
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

        log.debug("inventory cache written", path=str(self.filename), size=len(data))

    def remove(self) -> bool:
        """Delete the cache file. Returns False if there was nothing to delete."""
        try:
            self.filename.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise LocalCacheError(self.filename, f"cannot remove cache: {e}") from e
        return True
