"""In-memory implementations of ContactStore and GroupStore."""

from uuid import UUID

from consolidation.contacts.models import Contact, ContactFilter, Group, GroupFilter
from consolidation.contacts.store import ContactStore, GroupStore


class InMemoryContactStore(ContactStore):
    """In-memory implementation of ContactStore for testing and development.

    Records are copied on the way in and out so callers never share
    state with the store.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._contacts: dict[UUID, Contact] = {}

    async def get(self, contact_id: UUID) -> Contact | None:
        """Get contact by ID."""
        contact = self._contacts.get(contact_id)
        if contact is None:
            return None
        return contact.model_copy(deep=True)

    async def list(self, contact_filter: ContactFilter | None = None) -> list[Contact]:
        """List contacts matching the filter, in insertion order."""
        contact_filter = contact_filter or ContactFilter()
        return [
            contact.model_copy(deep=True)
            for contact in self._contacts.values()
            if contact_filter.matches(contact)
        ]

    async def save(self, contact: Contact) -> UUID:
        """Insert or replace a contact."""
        self._contacts[contact.id] = contact.model_copy(deep=True)
        return contact.id


class InMemoryGroupStore(GroupStore):
    """In-memory implementation of GroupStore for testing and development."""

    def __init__(self, groups: list[Group] | None = None) -> None:
        """Initialize storage, optionally seeded with groups."""
        self._groups: dict[UUID, Group] = {}
        for group in groups or []:
            self.add(group)

    def add(self, group: Group) -> None:
        """Register a group (seeding helper, not part of GroupStore)."""
        self._groups[group.id] = group.model_copy(deep=True)

    async def list(self, group_filter: GroupFilter | None = None) -> list[Group]:
        """List groups matching the filter, in insertion order."""
        group_filter = group_filter or GroupFilter()
        return [
            group.model_copy(deep=True)
            for group in self._groups.values()
            if group_filter.matches(group)
        ]
