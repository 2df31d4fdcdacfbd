"""
Storage Core - document store interface and the in-memory driver.
"""

from paperdesk.kernel.storage.collection import (
    ASCENDING,
    DESCENDING,
    Document,
    DocumentCollection,
    ReturnDocument,
)
from paperdesk.kernel.storage.memory import MemoryCollection, MemoryDatabase

__all__ = [
    "ASCENDING",
    "DESCENDING",
    "Document",
    "DocumentCollection",
    "ReturnDocument",
    "MemoryCollection",
    "MemoryDatabase",
]
