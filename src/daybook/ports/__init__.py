"""Ports - interfaces/protocols for external dependencies."""

from .state_store import StateStore

__all__ = [
    "StateStore",
]
