"""Schema for the dynamic inventory document served by Conductor.

The document is a JSON object keyed by group name, plus one reserved
``_meta`` key holding the per-host attribute table::

    {
        "_meta": {"hostvars": {"a.example.com": {"dc": "dc1"}}},
        "web": {"hosts": ["a.example.com"], "children": ["web-canary"]},
        "web-canary": {"hosts": []}
    }
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

META_KEY = "_meta"
HOSTVARS_KEY = "hostvars"


class EntryPolicy(StrEnum):
    """What to do with a group, host or child entry of the wrong shape."""

    SKIP = "skip"
    REJECT = "reject"


class HostVars(BaseModel):
    """Attributes of one host. Only ``dc`` is used, the rest is kept as extra."""

    model_config = ConfigDict(extra="allow")

    dc: str = ""

    @classmethod
    def lenient(cls, value: Any) -> HostVars | None:
        if not isinstance(value, dict):
            return None
        dc = value.get("dc")
        return cls(dc=dc if isinstance(dc, str) else "")


class GroupDescriptor(BaseModel):
    """A group entry: the hosts it owns and the groups it is parent of."""

    hosts: list[str] = []
    children: list[str] = []

    @classmethod
    def lenient(cls, value: Any) -> GroupDescriptor | None:
        """Keep whatever is well-formed, dropping bad entries instead of failing."""
        if not isinstance(value, dict):
            return None
        return cls(
            hosts=_strings(value.get("hosts")),
            children=_strings(value.get("children")),
        )


class MetaSection(BaseModel):
    hostvars: dict[str, Any]


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]
