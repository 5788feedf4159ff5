"""
Models for sheet state derived from host data.
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

logger = logging.getLogger(__name__)


# --- Resource pools ---


class PipState(str, Enum):
    FILLED = "filled"
    EMPTY = "empty"


class ResourcePool(BaseModel):
    """
    A bounded current/maximum counter (e.g. spell slots of one level).
    Out of range host values are clamped into 0 <= current <= maximum.
    """

    model_config = ConfigDict(frozen=True)

    current: int = Field(0, ge=0)
    maximum: int = Field(0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _clamp(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        maximum = max(0, int(data.get("maximum", 0) or 0))
        current = int(data.get("current", 0) or 0)
        clamped = max(0, min(maximum, current))
        if clamped != current:
            logger.debug(f"Clamped pool current {current} into [0, {maximum}]")
        data["maximum"] = maximum
        data["current"] = clamped
        return data


class Pip(BaseModel):
    """One marker of a pip track, addressed by its index."""

    model_config = ConfigDict(frozen=True)

    index: int
    state: PipState
    preview: bool = False

    @property
    def filled(self) -> bool:
        return self.state is PipState.FILLED


# --- Filtering ---


class FilterRow(BaseModel):
    """A rendered list row; rows without text are never matched."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: Optional[str] = None


# --- Locking ---


class LockEntry(BaseModel):
    entity_id: str
    locked: bool = True


# --- Currency ---


class Currency(BaseModel):
    label: str
    abbreviation: str


# --- Assembled sheet ---


class SheetData(BaseModel):
    """Derived values the host template needs for one render."""

    actor_id: str
    template: str
    locked: bool = False
    next_level: int = 1
    spell_attack_mod: str = "+0"
    spell_save_dc: Union[int, str] = 10
    dark_mode_class: Optional[str] = None
    spell_slots: Dict[str, List[Pip]] = Field(default_factory=dict)
