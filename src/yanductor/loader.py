"""Inventory loader: trusts a fresh cache, otherwise fetches with local fallback."""

from __future__ import annotations

import threading
from datetime import timedelta


from yanductor.api.fetcher import RemoteFetcher
from yanductor.cache.store import CacheStore
from yanductor.config.schema import BackendConfig
from yanductor.errors import LocalCacheError, NetworkError
from yanductor.inventory.parser import InventoryParser
from yanductor.logging_config import get_logger
from yanductor.models.inventory import (
    Datacenter,
    Group,
    Host,
    InventorySnapshot,
    InventorySource,
    WorkGroup,
)

log = get_logger("loader")


class InventoryLoader:
    """Owns the current inventory snapshot and decides where to load it from.

    Construction does no I/O. ``load()`` reads a fresh cache or falls through
    to ``reload()``, which fetches from Conductor and falls back to the cache
    (whatever its age) only when the fetch itself fails. A parse error on a
    fetched document is fatal. Failed loads leave the published snapshot as is.
    """

    def __init__(
        self,
        config: BackendConfig,
        store: CacheStore | None = None,
        fetcher: RemoteFetcher | None = None,
        parser: InventoryParser | None = None,
    ) -> None:
        self.config = config
        self.store = store or CacheStore(config.cache_dir, config.work_groups)
        self.fetcher = fetcher or RemoteFetcher(
            config.url, config.work_groups, timeout=config.timeout
        )
        self.parser = parser or InventoryParser(config.entry_policy)
        self._snapshot = InventorySnapshot()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: BackendConfig, **kwargs) -> InventoryLoader:
        """Construct a loader and load it immediately."""
        loader = cls(config, **kwargs)
        loader.load()
        return loader

    @property
    def cache_ttl(self) -> timedelta:
        return self.config.cache_ttl

    @property
    def snapshot(self) -> InventorySnapshot:
        return self._snapshot

    @property
    def loaded(self) -> bool:
        return self._snapshot.source != InventorySource.EMPTY

    def hosts(self) -> tuple[Host, ...]:
        return self._snapshot.hosts

    def groups(self) -> tuple[Group, ...]:
        return self._snapshot.groups

    def datacenters(self) -> tuple[Datacenter, ...]:
        return self._snapshot.datacenters

    def workgroups(self) -> tuple[WorkGroup, ...]:
        # Conductor's generator doesn't describe workgroups; always empty.
        return self._snapshot.workgroups

    def load(self) -> InventorySnapshot:
        with self._lock:
            if self.store.fresh(self.cache_ttl):
                log.debug("inventory cache is fresh", path=str(self.store.filename))
                return self._publish(self._load_local())
            return self._reload()

    def reload(self) -> InventorySnapshot:
        with self._lock:
            return self._reload()

    def _reload(self) -> InventorySnapshot:
        try:
            data = self.fetcher.fetch()
        except NetworkError as e:
            log.warning(
                "inventory fetch failed, using local cache",
                url=e.url,
                status=e.status_code,
                error=str(e),
            )
            return self._publish(self._load_local())

        snapshot = self.parser.parse(data, source=InventorySource.REMOTE)
        self._publish(snapshot)

        try:
            self.store.write(data)
        except LocalCacheError as e:
            log.warning("inventory cache not saved", path=str(e.path), error=str(e))
        return snapshot

    def _load_local(self) -> InventorySnapshot:
        data = self.store.read()
        return self.parser.parse(data, source=InventorySource.CACHE)

    def _publish(self, snapshot: InventorySnapshot) -> InventorySnapshot:
        self._snapshot = snapshot
        log.info(
            "inventory loaded",
            source=snapshot.source.value,
            hosts=len(snapshot.hosts),
            groups=len(snapshot.groups),
            datacenters=len(snapshot.datacenters),
        )
        return snapshot
