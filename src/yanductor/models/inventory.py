from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType


class InventorySource(StrEnum):
    EMPTY = "empty"
    CACHE = "cache"
    REMOTE = "remote"


@dataclass(frozen=True)
class Host:
    """A single host as listed under its owning group."""

    fqdn: str
    group_id: str
    datacenter_id: str = ""


@dataclass(frozen=True)
class Group:
    """An inventory group. ``hosts`` refers to records owned by the snapshot."""

    name: str
    parent_id: str = ""
    hosts: tuple[Host, ...] = ()


@dataclass(frozen=True)
class Datacenter:
    name: str


@dataclass(frozen=True)
class WorkGroup:
    name: str


@dataclass(frozen=True)
class InventorySnapshot:
    """Immutable result of one successful parse."""

    hosts: tuple[Host, ...] = ()
    groups: tuple[Group, ...] = ()
    datacenters: tuple[Datacenter, ...] = ()
    workgroups: tuple[WorkGroup, ...] = ()
    parent_map: Mapping[str, str] = field(default_factory=dict, hash=False)
    source: InventorySource = InventorySource.EMPTY

    def __post_init__(self) -> None:
        object.__setattr__(self, "parent_map", MappingProxyType(dict(self.parent_map)))

    def get_host(self, fqdn: str) -> Host | None:
        return next((h for h in self.hosts if h.fqdn == fqdn), None)

    def get_group(self, name: str) -> Group | None:
        return next((g for g in self.groups if g.name == name), None)
