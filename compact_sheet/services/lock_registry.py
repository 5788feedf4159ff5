"""
Per-entity sheet locks.

Entries are created on first bind and kept for the lifetime of the
registry. Whether locking applies at all is decided by the caller.
"""

import logging
from typing import Dict, Optional

from compact_sheet.errors import UnknownEntityError
from compact_sheet.models.sheet import LockEntry

logger = logging.getLogger(__name__)


class LockRegistry:
    def __init__(self, default_locked: bool = True):
        self.default_locked = default_locked
        self._entries: Dict[str, LockEntry] = {}

    def bind(self, entity_id: str, locked: Optional[bool] = None) -> None:
        """Register an entity. Existing entries keep their state."""
        if entity_id in self._entries:
            return
        if locked is None:
            locked = self.default_locked
        self._entries[entity_id] = LockEntry(entity_id=entity_id, locked=locked)
        logger.debug(f"Bound lock for {entity_id} (locked={locked})")

    def is_locked(self, entity_id: str) -> Optional[bool]:
        """None when the entity was never bound."""
        entry = self._entries.get(entity_id)
        return entry.locked if entry else None

    def toggle(self, entity_id: str) -> bool:
        entry = self._entries.get(entity_id)
        if entry is None:
            logger.error(f"Cannot toggle lock for unregistered entity {entity_id}")
            raise UnknownEntityError(entity_id)
        entry.locked = not entry.locked
        logger.info(f"Sheet {entity_id} is now {'locked' if entry.locked else 'unlocked'}")
        return entry.locked

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
