from compact_sheet.services.attack_modifier import AttackModifierResolver, resolve_spell_save_dc
from compact_sheet.services.character_sheet import FILTER_SECTIONS, CharacterSheet
from compact_sheet.services.currency import currency_labels
from compact_sheet.services.lock_registry import LockRegistry
from compact_sheet.services.resource_pips import ResourcePipControl
from compact_sheet.services.search_filter import FilterState, SearchFilterEngine, normalize_text
from compact_sheet.services.sheet_data import build_sheet_data, select_template, spell_slot_pools

__all__ = [
    "AttackModifierResolver",
    "resolve_spell_save_dc",
    "FILTER_SECTIONS",
    "CharacterSheet",
    "currency_labels",
    "LockRegistry",
    "ResourcePipControl",
    "FilterState",
    "SearchFilterEngine",
    "normalize_text",
    "build_sheet_data",
    "select_template",
    "spell_slot_pools",
]
