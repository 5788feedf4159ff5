"""
Error types raised by the sheet extension.
"""


class SheetError(Exception):
    """Base class for all sheet extension errors."""


class FormulaParseError(SheetError, ValueError):
    """A bonus or modifier could not be parsed as a dice/number formula."""

    def __init__(self, formula, reason: str):
        self.formula = formula
        self.reason = reason
        super().__init__(f"Invalid formula '{formula}': {reason}")


class UnknownEntityError(SheetError, KeyError):
    """A lock was toggled for an entity that was never bound."""

    def __init__(self, entity_id: str):
        self.entity_id = entity_id
        super().__init__(entity_id)

    def __str__(self):
        return f"Entity '{self.entity_id}' is not registered"


class CommitRejected(SheetError):
    """The host store declined an update request."""

    def __init__(self, path: str, value, reason: str = ""):
        self.path = path
        self.value = value
        self.reason = reason
        message = f"Update {path} = {value!r} was rejected"
        if reason:
            message += f": {reason}"
        super().__init__(message)
