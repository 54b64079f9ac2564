"""
DreamLog Storage Layer
======================

Get-all / replace-all persistence for the dream collection and the
hidden-tag list.

Modules:
    dream_store: JSON-file and in-memory stores
"""

from .dream_store import (
    DreamStore,
    TagStore,
    JsonDreamStore,
    JsonTagStore,
    InMemoryDreamStore,
    InMemoryTagStore,
)

__all__ = [
    "DreamStore",
    "TagStore",
    "JsonDreamStore",
    "JsonTagStore",
    "InMemoryDreamStore",
    "InMemoryTagStore",
]
