"""
Call signatures the host application provides to the sheet.
"""

from typing import Any, Awaitable, Callable, Dict

# async commit(path, value); may raise CommitRejected
CommitChannel = Callable[[str, Any], Awaitable[None]]

# Redraws the affected view
RenderTrigger = Callable[[], None]

# Receives {row_id: visible} after a filter pass
VisibilityCallback = Callable[[Dict[str, bool]], None]
