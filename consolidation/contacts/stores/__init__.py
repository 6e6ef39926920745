"""Contact and group store implementations."""

from consolidation.contacts.stores.inmemory import InMemoryContactStore, InMemoryGroupStore

__all__ = [
    "InMemoryContactStore",
    "InMemoryGroupStore",
]
