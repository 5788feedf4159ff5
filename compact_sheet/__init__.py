"""
Compact Sheet
=============
Derived data and small interactive widgets for a compact 5e character sheet:
spell attack modifiers, spell slot pip tracks, debounced list filters and
per-actor sheet locks.
"""

from compact_sheet.config import SheetSettings, load_settings
from compact_sheet.dice import FormulaValue, simplify_formula
from compact_sheet.errors import CommitRejected, FormulaParseError, SheetError, UnknownEntityError
from compact_sheet.scheduling import AsyncioScheduler, DelayedTasks, Scheduler
from compact_sheet.services import (
    AttackModifierResolver,
    CharacterSheet,
    LockRegistry,
    ResourcePipControl,
    SearchFilterEngine,
)

__all__ = [
    "SheetSettings",
    "load_settings",
    "FormulaValue",
    "simplify_formula",
    "CommitRejected",
    "FormulaParseError",
    "SheetError",
    "UnknownEntityError",
    "AsyncioScheduler",
    "DelayedTasks",
    "Scheduler",
    "AttackModifierResolver",
    "CharacterSheet",
    "LockRegistry",
    "ResourcePipControl",
    "SearchFilterEngine",
]
