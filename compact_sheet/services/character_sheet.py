"""
Compact character sheet controller.

Owns the per-sheet interactive state (section filters, spell slot tracks,
the lock toggle's delayed re-render) and talks to the host only through the
commit channel and the render/close triggers it was given.
"""

import logging
from functools import partial
from typing import Callable, Dict, Iterable, Optional

from compact_sheet.config import SheetSettings
from compact_sheet.host import CommitChannel, RenderTrigger
from compact_sheet.models.actor import ActorData
from compact_sheet.models.sheet import FilterRow, SheetData
from compact_sheet.scheduling import DelayedTasks, Scheduler
from compact_sheet.services.currency import currency_labels
from compact_sheet.services.lock_registry import LockRegistry
from compact_sheet.services.resource_pips import ResourcePipControl
from compact_sheet.services.search_filter import SearchFilterEngine
from compact_sheet.services.sheet_data import build_sheet_data, spell_slot_path, spell_slot_pools

logger = logging.getLogger(__name__)

FILTER_SECTIONS = ("spellbook", "inventory", "features")


class CharacterSheet:
    def __init__(
        self,
        actor: ActorData,
        settings: SheetSettings,
        registry: LockRegistry,
        scheduler: Scheduler,
        commit: CommitChannel,
        render: RenderTrigger,
        close: Optional[Callable[[], None]] = None,
        row_sources: Optional[Dict[str, Callable[[], Iterable[FilterRow]]]] = None,
        on_filtered: Optional[Callable[[str, Dict[str, bool]], None]] = None,
        is_gm: bool = False,
    ):
        self.actor = actor
        self.settings = settings
        self.registry = registry
        self.is_gm = is_gm
        self.tasks = DelayedTasks(scheduler)
        self.slot_controls: Dict[str, ResourcePipControl] = {}
        self._commit = commit
        self._render = render
        self._close = close

        row_sources = row_sources or {}
        self.filters: Dict[str, SearchFilterEngine] = {
            section: SearchFilterEngine(
                f"{actor.id}:{section}",
                self.tasks,
                row_sources.get(section, list),
                partial(on_filtered, section) if on_filtered else None,
                settings.search_debounce_ms,
            )
            for section in FILTER_SECTIONS
        }

    @property
    def render_task_key(self) -> str:
        return f"render:{self.actor.id}"

    # --- Render ---

    def get_data(self) -> SheetData:
        data = build_sheet_data(self.actor, self.settings, self.registry, self.is_gm)

        self.slot_controls = {}
        if self.settings.show_spell_slot_bubbles:
            for key, pool in spell_slot_pools(self.actor).items():
                self.slot_controls[key] = ResourcePipControl(pool, spell_slot_path(key), self._commit)

        return data.model_copy(
            update={"spell_slots": {key: c.pips for key, c in self.slot_controls.items()}}
        )

    def update_actor(self, actor: ActorData) -> None:
        """Host acknowledged a change; redraw from its data."""
        self.actor = actor
        self._render()

    def currency_labels(self, currencies: dict) -> Dict[str, str]:
        return currency_labels(currencies, self.settings.show_full_currency_names)

    # --- Filtering ---

    def on_search(self, section: str, query: str) -> None:
        engine = self.filters.get(section)
        if engine is None:
            raise KeyError(f"Unknown filter section '{section}'")
        engine.on_input(query)

    # --- Spell slots ---

    def slot_control(self, slot_key: str) -> Optional[ResourcePipControl]:
        return self.slot_controls.get(slot_key)

    # --- Locking ---

    def lock_label(self) -> Optional[str]:
        """Header button text, or None when sheet locking is disabled."""
        if not self.settings.lock_sheets:
            return None
        self.registry.bind(self.actor.id)
        return "Locked" if self.registry.is_locked(self.actor.id) else "Unlocked"

    def toggle_lock(self) -> bool:
        """Flip the lock, close the view and reopen it after a short delay."""
        locked = self.registry.toggle(self.actor.id)
        self.tasks.schedule(
            self.render_task_key,
            self.settings.rerender_delay_ms / 1000,
            self._render,
        )
        if self._close:
            self._close()
        return locked

    def destroy(self) -> None:
        """Cancel anything still pending for this sheet."""
        self.tasks.cancel_all()
        logger.debug(f"Destroyed sheet for {self.actor.id}")
