"""Adapters - I/O implementations of ports."""

from .json_store import JsonStateStore

__all__ = [
    "JsonStateStore",
]
