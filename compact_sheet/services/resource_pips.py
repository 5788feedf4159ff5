"""
Resource Pip Tracks
===================
Interactive pip tracks for bounded resources such as spell slots.

Pip i is filled when i < current. Hovering previews what a click would do,
clicking asks the host to store the new current value:

- empty pip k:  hover previews the empty pips in [0..k], click stores k + 1
- filled pip k: hover previews the filled pips in [k..end], click stores k

Nothing is changed locally on click. The next render shows whatever value
the host accepted.
"""

import logging
from typing import FrozenSet, List, Optional

from compact_sheet.errors import CommitRejected
from compact_sheet.host import CommitChannel
from compact_sheet.models.sheet import Pip, PipState, ResourcePool

logger = logging.getLogger(__name__)


class ResourcePipControl:
    def __init__(self, pool: ResourcePool, path: str, commit: CommitChannel):
        self.pool = pool
        self.path = path
        self._commit = commit
        self._preview: FrozenSet[int] = frozenset()

    @property
    def pips(self) -> List[Pip]:
        return [
            Pip(
                index=i,
                state=PipState.FILLED if i < self.pool.current else PipState.EMPTY,
                preview=i in self._preview,
            )
            for i in range(self.pool.maximum)
        ]

    @property
    def interactive(self) -> bool:
        return self.pool.maximum > 0

    def _check_index(self, index: int) -> None:
        if not 0 <= index < self.pool.maximum:
            raise IndexError(f"Pip {index} out of range for {self.path} (max {self.pool.maximum})")

    def is_filled(self, index: int) -> bool:
        self._check_index(index)
        return index < self.pool.current

    def hover(self, index: int) -> List[int]:
        """Preview the effect of clicking pip `index`. Returns previewed indices."""
        if not self.interactive:
            return []
        if self.is_filled(index):
            preview = range(index, self.pool.current)
        else:
            preview = range(self.pool.current, index + 1)
        self._preview = frozenset(preview)
        return sorted(self._preview)

    def leave(self) -> None:
        self._preview = frozenset()

    def target_for(self, index: int) -> Optional[int]:
        """The current value a click on pip `index` would request."""
        if not self.interactive:
            return None
        return index if self.is_filled(index) else index + 1

    async def click(self, index: int) -> bool:
        """
        Ask the host to store the clicked value.
        Returns False when there is nothing to do or the host rejected it.
        """
        target = self.target_for(index)
        if target is None:
            return False
        logger.debug(f"Committing {self.path} = {target} (pip {index})")
        try:
            await self._commit(self.path, target)
        except CommitRejected as e:
            logger.warning(f"Host rejected pip update: {e}")
            return False
        return True
