"""File-based JSON state storage adapter."""

import json
import logging
import os
import tempfile
from pathlib import Path

from daybook.core.errors import StoreError
from daybook.core.state import REQUIRED_KEYS, PlannerState, default_state

logger = logging.getLogger(__name__)


class JsonStateStore:
    """
    JSON file state storage.

    Implements StateStore protocol. All collections live in one document
    under stable keys.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> PlannerState:
        """Load state; a missing, incomplete or unreadable file gives the defaults."""
        if not self.path.exists():
            logger.info(f"No state at {self.path}, starting from defaults")
            return default_state()

        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load state from {self.path}: {e}")
            return default_state()

        if not isinstance(data, dict) or any(key not in data for key in REQUIRED_KEYS):
            logger.warning(f"State at {self.path} is incomplete, starting from defaults")
            return default_state()

        try:
            return PlannerState.from_dict(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse state from {self.path}: {e}")
            return default_state()

    def save(self, state: PlannerState) -> None:
        """Write the whole state, replacing the file atomically."""
        content = json.dumps(state.to_dict(), indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".state-", suffix=".json")
        except OSError as e:
            raise StoreError(f"Failed to save state to {self.path}: {e}") from e

        try:
            with os.fdopen(fd, "w") as f:
                f.write(content)
            os.replace(tmp, self.path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise StoreError(f"Failed to save state to {self.path}: {e}") from e
