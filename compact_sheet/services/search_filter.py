"""
Debounced list filtering.

Typing into a section's filter box schedules one filter pass per quiet
period; only the last query of a burst is applied. Rows are never removed,
each row id just gets a visible flag.
"""

import logging
import re
import unicodedata
from typing import Callable, Dict, Iterable, Optional, Union

from compact_sheet.host import VisibilityCallback
from compact_sheet.models.sheet import FilterRow
from compact_sheet.scheduling import DelayedTasks

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_MS = 200


def normalize_text(text: str) -> str:
    """
    Fold case, accents and punctuation away.
    Dashes separate words ("Cure-Wounds" -> "cure wounds"), other punctuation
    is dropped ("Hunter's Mark" -> "hunters mark").
    """
    decomposed = unicodedata.normalize("NFD", text)
    chars = []
    for ch in decomposed:
        category = unicodedata.category(ch)
        if category == "Mn":
            continue
        if category == "Pd":
            chars.append(" ")
        elif not category.startswith("P"):
            chars.append(ch)
    return " ".join("".join(chars).casefold().split())


class FilterState:
    """A normalized query and the predicate compiled from it."""

    def __init__(self, query: str = ""):
        self.raw_query = query
        self.query = normalize_text(query)
        self._pattern = re.compile(re.escape(self.query)) if self.query else None

    def matches(self, text: str) -> bool:
        if self._pattern is None:
            return True
        return bool(self._pattern.search(normalize_text(text)))

    def __repr__(self):
        return f"FilterState(query={self.query!r})"


class SearchFilterEngine:
    def __init__(
        self,
        name: str,
        tasks: DelayedTasks,
        row_source: Callable[[], Iterable[Union[FilterRow, dict]]],
        on_filtered: Optional[VisibilityCallback] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ):
        self.name = name
        self.state = FilterState()
        self.passes = 0
        self._tasks = tasks
        self._row_source = row_source
        self._on_filtered = on_filtered
        self._delay = debounce_ms / 1000
        self._pending_query: Optional[str] = None
        self._visibility: Dict[str, bool] = {}

    @property
    def task_key(self) -> str:
        return f"search:{self.name}"

    @property
    def visibility(self) -> Dict[str, bool]:
        return dict(self._visibility)

    def on_input(self, raw_query: str) -> None:
        """Restart the quiet period; the pass runs with the latest query."""
        self._pending_query = raw_query or ""
        self._tasks.schedule(self.task_key, self._delay, self._run_pass)

    def cancel(self) -> None:
        self._tasks.cancel(self.task_key)
        self._pending_query = None

    def _run_pass(self) -> None:
        query = self._pending_query if self._pending_query is not None else self.state.raw_query
        self._pending_query = None
        self.state = FilterState(query)
        result = self.apply(self._row_source())
        self.passes += 1
        logger.debug(
            f"Filter '{self.name}' pass #{self.passes} for {self.state!r}: "
            f"{sum(result.values())}/{len(result)} visible"
        )
        if self._on_filtered:
            self._on_filtered(result)

    def apply(self, rows: Iterable[Union[FilterRow, dict]]) -> Dict[str, bool]:
        """Flag each row visible or hidden under the current query, in row order."""
        result: Dict[str, bool] = {}
        for row in rows:
            if not isinstance(row, FilterRow):
                row = FilterRow.model_validate(row)
            text = (row.text or "").strip()
            if not self.state.query:
                visible = True
            elif not text:
                # No display text: keep whatever the row had before
                visible = self._visibility.get(row.id, True)
            else:
                visible = self.state.matches(text)
            self._visibility[row.id] = visible
            result[row.id] = visible
        return result
