"""Planner state storage interface."""

from typing import Protocol

from daybook.core.state import PlannerState


class StateStore(Protocol):
    """Interface for loading and saving the planner's collections."""

    def load(self) -> PlannerState:
        """Load the saved state, or the defaults on a first run."""
        ...

    def save(self, state: PlannerState) -> None:
        """Persist the whole state."""
        ...

    def exists(self) -> bool:
        """Check if any state has been saved yet."""
        ...
