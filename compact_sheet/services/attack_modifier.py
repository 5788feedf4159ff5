"""
Spell Attack Modifier
=====================
Derives the displayed spell attack modifier from the base modifier
(ability mod + proficiency) and the optional melee/ranged spell attack
bonuses.

Rules:
1.  No bonuses: the signed base ("+3").
2.  Equivalent bonuses: base plus that bonus, simplified.
3.  Different deterministic bonuses: base plus the lesser of the two.
4.  Different bonuses where either rolls dice: base alone.
5.  One bonus: base plus that bonus.

Malformed bonuses raise FormulaParseError; callers decide on a fallback.
"""

import logging
from typing import Optional, Union

from compact_sheet.dice.formula import FormulaValue, format_signed, fold_formula, simplify_formula
from compact_sheet.models.actor import ActorData

logger = logging.getLogger(__name__)


class AttackModifierResolver:
    def resolve(
        self,
        ability_modifier: int,
        proficiency: int,
        bonus_a: Optional[FormulaValue] = None,
        bonus_b: Optional[FormulaValue] = None,
    ) -> str:
        base = format_signed(ability_modifier + proficiency)

        if bonus_a is None and bonus_b is None:
            return base

        if bonus_a is not None and bonus_b is not None:
            if bonus_a.equivalent_to(bonus_b):
                bonus = bonus_a.term
            elif bonus_a.is_deterministic and bonus_b.is_deterministic:
                bonus = min(bonus_a.resolved_value, bonus_b.resolved_value)
            else:
                logger.debug(
                    f"Skipping ambiguous attack bonuses '{bonus_a}' and '{bonus_b}'"
                )
                return base
        else:
            bonus = (bonus_a if bonus_a is not None else bonus_b).term

        return simplify_formula([base, bonus])

    def resolve_spell_attack(self, actor: ActorData) -> str:
        """Spell attack modifier for an actor, using its msak/rsak bonuses."""
        roll_data = actor.roll_data()
        return self.resolve(
            actor.spellcasting_mod,
            actor.attributes.prof,
            FormulaValue.from_host(actor.bonuses.msak.attack, roll_data),
            FormulaValue.from_host(actor.bonuses.rsak.attack, roll_data),
        )


def resolve_spell_save_dc(spelldc: int, dc_bonus=None, roll_data=None) -> Union[int, str]:
    """
    Spell save DC including the spell DC bonus.

    Returns an int when the total is deterministic, else a formula string.
    """
    bonus = FormulaValue.from_host(dc_bonus, roll_data)
    if bonus is None:
        return spelldc

    constant, symbolic = fold_formula([spelldc, bonus.term])
    if not symbolic:
        return int(constant) if float(constant).is_integer() else constant
    return simplify_formula([spelldc, bonus.term]).lstrip("+")
