"""Converts a dynamic inventory document into an immutable snapshot."""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from yanductor.errors import FormatError
from yanductor.inventory.document import (
    HOSTVARS_KEY,
    META_KEY,
    EntryPolicy,
    GroupDescriptor,
    HostVars,
    MetaSection,
)
from yanductor.logging_config import get_logger
from yanductor.models.inventory import (
    Datacenter,
    Group,
    Host,
    InventorySnapshot,
    InventorySource,
)

log = get_logger("parser")


class InventoryParser:
    """Builds hosts, groups and datacenters from a raw inventory document.

    Parent relationships are resolved in two passes: every ``children`` edge
    is collected first, then group records are built from the completed map,
    so the result does not depend on the order groups appear in.
    """

    def __init__(self, policy: EntryPolicy = EntryPolicy.SKIP) -> None:
        self.policy = policy

    def parse(
        self, data: bytes | str, source: InventorySource = InventorySource.REMOTE
    ) -> InventorySnapshot:
        raw = self._decode(data)
        hostvars = self._hostvars(raw)
        descriptors = self._descriptors(raw)

        parent_map = self._parent_map(descriptors)

        hosts: list[Host] = []
        groups: list[Group] = []
        datacenters: list[Datacenter] = []
        seen_hosts: set[str] = set()
        seen_dcs: set[str] = set()

        for name, descriptor in descriptors.items():
            group_hosts: list[Host] = []
            for fqdn in descriptor.hosts:
                attrs = self._host_vars(fqdn, hostvars.get(fqdn))
                if attrs is None:
                    continue
                if fqdn in seen_hosts:
                    log.debug("duplicate host listing ignored", host=fqdn, group=name)
                    continue
                seen_hosts.add(fqdn)

                host = Host(fqdn=fqdn, group_id=name, datacenter_id=attrs.dc)
                hosts.append(host)
                group_hosts.append(host)

                if attrs.dc not in seen_dcs:
                    seen_dcs.add(attrs.dc)
                    datacenters.append(Datacenter(name=attrs.dc))

            groups.append(
                Group(
                    name=name,
                    parent_id=parent_map.get(name, ""),
                    hosts=tuple(group_hosts),
                )
            )

        return InventorySnapshot(
            hosts=tuple(hosts),
            groups=tuple(groups),
            datacenters=tuple(datacenters),
            parent_map=parent_map,
            source=source,
        )

    @staticmethod
    def _decode(data: bytes | str) -> dict[str, Any]:
        try:
            raw = json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise FormatError(f"invalid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise FormatError("invalid data format: expected a JSON object at top level")
        return raw

    @staticmethod
    def _hostvars(raw: dict[str, Any]) -> dict[str, Any]:
        meta = raw.get(META_KEY)
        if not isinstance(meta, dict):
            raise FormatError(f"invalid data format: missing {META_KEY} section")
        try:
            return MetaSection.model_validate(meta).hostvars
        except ValidationError as e:
            raise FormatError(f"invalid data format: missing {HOSTVARS_KEY} section") from e

    def _descriptors(self, raw: dict[str, Any]) -> dict[str, GroupDescriptor]:
        descriptors: dict[str, GroupDescriptor] = {}
        for name, value in raw.items():
            if name == META_KEY:
                continue
            if self.policy == EntryPolicy.REJECT:
                try:
                    descriptors[name] = GroupDescriptor.model_validate(value)
                except ValidationError as e:
                    raise FormatError(f"group {name!r}: {e}") from e
                continue

            descriptor = GroupDescriptor.lenient(value)
            if descriptor is None:
                log.debug("skipping malformed group", group=name)
                continue
            descriptors[name] = descriptor
        return descriptors

    @staticmethod
    def _parent_map(descriptors: dict[str, GroupDescriptor]) -> dict[str, str]:
        parent_map: dict[str, str] = {}
        for name, descriptor in descriptors.items():
            for child in descriptor.children:
                # first declared parent wins
                parent_map.setdefault(child, name)
        return parent_map

    def _host_vars(self, fqdn: str, value: Any) -> HostVars | None:
        if self.policy == EntryPolicy.REJECT:
            if value is None:
                raise FormatError(f"host {fqdn!r} has no {HOSTVARS_KEY} entry")
            try:
                return HostVars.model_validate(value)
            except ValidationError as e:
                raise FormatError(f"host {fqdn!r}: {e}") from e

        attrs = HostVars.lenient(value)
        if attrs is None:
            log.debug("skipping host without hostvars", host=fqdn)
        return attrs
