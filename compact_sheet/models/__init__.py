from compact_sheet.models.actor import SPELL_SLOT_KEYS, ActorData, SpellSlot
from compact_sheet.models.sheet import (
    Currency,
    FilterRow,
    LockEntry,
    Pip,
    PipState,
    ResourcePool,
    SheetData,
)

__all__ = [
    "SPELL_SLOT_KEYS",
    "ActorData",
    "SpellSlot",
    "Currency",
    "FilterRow",
    "LockEntry",
    "Pip",
    "PipState",
    "ResourcePool",
    "SheetData",
]
