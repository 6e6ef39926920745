"""Abstract interfaces for contact and group storage."""

from abc import ABC, abstractmethod
from uuid import UUID

from consolidation.contacts.models import Contact, ContactFilter, Group, GroupFilter


class ContactStore(ABC):
    """Abstract interface for contact storage.

    Implementations must preserve every contact field verbatim and
    raise PersistenceFailedError when a write is rejected.
    """

    @abstractmethod
    async def get(self, contact_id: UUID) -> Contact | None:
        """Get contact by ID."""
        pass

    @abstractmethod
    async def list(self, contact_filter: ContactFilter | None = None) -> list[Contact]:
        """List contacts matching the filter."""
        pass

    @abstractmethod
    async def save(self, contact: Contact) -> UUID:
        """Insert or replace a contact."""
        pass


class GroupStore(ABC):
    """Abstract interface for small-group lookup.

    Groups are owned by the surrounding application and are
    read-only from the pipeline's perspective.
    """

    @abstractmethod
    async def list(self, group_filter: GroupFilter | None = None) -> list[Group]:
        """List groups matching the filter."""
        pass

    async def get(self, group_id: UUID) -> Group | None:
        """Get group by ID."""
        groups = await self.list(GroupFilter(group_ids=[group_id]))
        return groups[0] if groups else None
