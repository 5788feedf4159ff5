"""
Sheet Data Assembly
===================
Builds the derived values one render of the compact sheet needs.

Steps:
1.  **Template:** full sheet, or the limited one for players without access.
2.  **Lock:** registry state when sheet locking is enabled (binding the actor).
3.  **Derived stats:** next level, spell attack modifier, spell save DC.
4.  **Spell slots:** pip tracks for every slot level the actor has.
"""

import logging
from typing import Dict, Optional

from compact_sheet.config import SheetSettings
from compact_sheet.models.actor import SPELL_SLOT_KEYS, ActorData
from compact_sheet.models.sheet import ResourcePool, SheetData
from compact_sheet.services.attack_modifier import AttackModifierResolver, resolve_spell_save_dc
from compact_sheet.services.lock_registry import LockRegistry

logger = logging.getLogger(__name__)

MODULE_ID = "compact-beyond-5e-sheet"
DARK_MODE_CLASS = "cb5es-dark-mode"

FULL_TEMPLATE = f"modules/{MODULE_ID}/templates/character-sheet.hbs"
LIMITED_TEMPLATE = f"modules/{MODULE_ID}/templates/character-sheet-ltd.hbs"


def select_template(is_gm: bool, limited: bool, expanded_limited: bool) -> str:
    if not is_gm and limited and not expanded_limited:
        return LIMITED_TEMPLATE
    return FULL_TEMPLATE


def spell_slot_path(slot_key: str) -> str:
    return f"data.spells.{slot_key}.value"


def spell_slot_pools(actor: ActorData) -> Dict[str, ResourcePool]:
    """Pools for every slot level with a non-zero maximum, in display order."""
    pools = {}
    for key in SPELL_SLOT_KEYS:
        slot = actor.spell_slot(key)
        if slot.max == 0:
            continue
        pools[key] = ResourcePool(current=slot.value, maximum=slot.max)
    return pools


def lock_state(actor_id: str, settings: SheetSettings, registry: LockRegistry) -> bool:
    if not settings.lock_sheets:
        return False
    registry.bind(actor_id)
    return registry.is_locked(actor_id)


def build_sheet_data(
    actor: ActorData,
    settings: SheetSettings,
    registry: LockRegistry,
    is_gm: bool = False,
    resolver: Optional[AttackModifierResolver] = None,
) -> SheetData:
    resolver = resolver or AttackModifierResolver()
    roll_data = actor.roll_data()

    data = SheetData(
        actor_id=actor.id,
        template=select_template(is_gm, actor.limited, settings.expanded_limited),
        locked=lock_state(actor.id, settings, registry),
        next_level=actor.details.level + 1,
        spell_attack_mod=resolver.resolve_spell_attack(actor),
        spell_save_dc=resolve_spell_save_dc(
            actor.attributes.spelldc, actor.bonuses.spell.dc, roll_data
        ),
        dark_mode_class=DARK_MODE_CLASS if settings.dark_mode == "dark" else None,
    )

    logger.debug(
        f"Sheet data for {actor.id}: ability={actor.spellcasting_ability} "
        f"mod={actor.spellcasting_mod} prof={actor.attributes.prof} "
        f"spellAttackMod={data.spell_attack_mod} locked={data.locked}"
    )
    return data
