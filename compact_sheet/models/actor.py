"""
Narrow views of the host's actor record.
Only the fields the sheet extension reads are modelled; anything else the
host sends is ignored.
"""

from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Fixed order in which spell slot tracks are shown
SPELL_SLOT_KEYS = [
    "pact",
    "spell1",
    "spell2",
    "spell3",
    "spell4",
    "spell5",
    "spell6",
    "spell7",
    "spell8",
    "spell9",
]

BonusField = Optional[Union[int, float, str]]


class HostModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class AbilityData(HostModel):
    mod: int = 0


class ActorAttributes(HostModel):
    prof: int = 0
    spellcasting: Optional[str] = None
    spelldc: int = 10


class AttackBonus(HostModel):
    attack: BonusField = None


class SpellBonus(HostModel):
    dc: BonusField = None


class ActorBonuses(HostModel):
    msak: AttackBonus = Field(default_factory=AttackBonus)
    rsak: AttackBonus = Field(default_factory=AttackBonus)
    spell: SpellBonus = Field(default_factory=SpellBonus)


class ActorDetails(HostModel):
    level: int = 0


class SpellSlot(HostModel):
    max: int = 0
    value: int = 0


class ActorData(HostModel):
    """
    Read-only actor record as consumed by the sheet.

    Usage:
        actor = ActorData.model_validate(host_record)
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str = Field(..., alias="_id")
    name: str = ""
    limited: bool = False
    abilities: Dict[str, AbilityData] = Field(default_factory=dict)
    attributes: ActorAttributes = Field(default_factory=ActorAttributes)
    bonuses: ActorBonuses = Field(default_factory=ActorBonuses)
    details: ActorDetails = Field(default_factory=ActorDetails)
    spells: Dict[str, SpellSlot] = Field(default_factory=dict)

    @property
    def spellcasting_ability(self) -> str:
        return self.attributes.spellcasting or "int"

    @property
    def spellcasting_mod(self) -> int:
        ability = self.abilities.get(self.spellcasting_ability)
        return ability.mod if ability else 0

    def spell_slot(self, key: str) -> SpellSlot:
        return self.spells.get(key) or SpellSlot()

    def roll_data(self) -> dict:
        """Data used to resolve @references in bonus formulas."""
        return self.model_dump(include={"abilities", "attributes", "details"})
