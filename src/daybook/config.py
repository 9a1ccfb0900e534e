"""Configuration management for daybook."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .core.buckets import Granularity

logger = logging.getLogger(__name__)

DAYBOOK_HOME = Path(os.environ.get("DAYBOOK_HOME", Path.home() / "daybook"))
CONFIG_FILE = DAYBOOK_HOME / "config" / "daybook.conf"
DATA_DIR = DAYBOOK_HOME / "data"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Config:
    """daybook configuration."""

    data_file: str = ""
    table_view: Granularity = Granularity.WEEKLY
    graph_view: Granularity = Granularity.DAILY
    log_level: str = "WARNING"

    @property
    def state_path(self) -> Path:
        """Where the planner state is stored."""
        if self.data_file:
            return Path(self.data_file).expanduser()
        return DATA_DIR / "state.json"


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _granularity(key: str, value: str, fallback: Granularity) -> Granularity:
    try:
        return Granularity(value.lower())
    except ValueError:
        logger.warning(f"Ignoring unknown {key.upper()} value: {value}")
        return fallback


def load_config(path: Path | None = None) -> Config:
    """Load configuration from daybook.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "data_file":
                config.data_file = value
            case "table_view":
                config.table_view = _granularity(key, value, config.table_view)
            case "graph_view":
                config.graph_view = _granularity(key, value, config.graph_view)
            case "log_level":
                if value.upper() in LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Ignoring unknown LOG_LEVEL value: {value}")

    return config
