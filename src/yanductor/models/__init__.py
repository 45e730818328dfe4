from yanductor.models.inventory import (
    Datacenter,
    Group,
    Host,
    InventorySnapshot,
    InventorySource,
    WorkGroup,
)

__all__ = [
    "Datacenter",
    "Group",
    "Host",
    "InventorySnapshot",
    "InventorySource",
    "WorkGroup",
]
