"""
Module settings.

Values come from COMPACT_SHEET_<FIELD> environment variables (a .env file is
loaded first), e.g. COMPACT_SHEET_LOCK_SHEETS=true.
"""

import logging
import os
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

ENV_PREFIX = "COMPACT_SHEET_"


class SheetSettings(BaseModel):
    # World settings
    expanded_limited: bool = Field(False, description="Show the full sheet for limited actors.")
    lock_sheets: bool = Field(False, description="Enable the sheet lock toggle.")

    # Client settings
    dark_mode: Literal["default", "dark"] = "default"
    show_spell_slot_bubbles: bool = True
    show_full_currency_names: bool = False

    # Runtime
    debug: bool = False
    search_debounce_ms: int = Field(200, ge=0)
    rerender_delay_ms: int = Field(250, ge=0)


def load_settings(env_file: Optional[str] = None) -> SheetSettings:
    """Read settings from the environment. Invalid values raise ValidationError."""
    load_dotenv(env_file)
    values = {}
    for name in SheetSettings.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            values[name] = raw.strip()
    settings = SheetSettings(**values)
    logger.debug(f"Loaded settings: {settings.model_dump()}")
    return settings
