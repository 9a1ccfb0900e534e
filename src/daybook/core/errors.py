"""Domain errors raised by the core."""


class DaybookError(Exception):
    """Base class for daybook errors."""


class InvalidReference(DaybookError, LookupError):
    """An id that does not name an existing entity (or may not be touched)."""


class DerivedCompletionError(DaybookError, ValueError):
    """Direct toggle of a task whose completion is derived from its subtasks."""


class StoreError(DaybookError):
    """State could not be read from or written to storage."""
