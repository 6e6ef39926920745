"""Contacts: funnel records, small groups and their stores.

Contacts are owned by an organization and move through the
consolidation funnel. Groups are read-only references to the
small groups a contact may join.
"""

from consolidation.contacts.enums import (
    AudienceCategory,
    OriginKind,
    ReminderStatus,
    Stage,
    UrgencyClass,
)
from consolidation.contacts.models import (
    Contact,
    ContactFilter,
    Group,
    GroupFilter,
)
from consolidation.contacts.store import ContactStore, GroupStore

__all__ = [
    # Enums
    "AudienceCategory",
    "OriginKind",
    "ReminderStatus",
    "Stage",
    "UrgencyClass",
    # Models
    "Contact",
    "ContactFilter",
    "Group",
    "GroupFilter",
    # Stores
    "ContactStore",
    "GroupStore",
]
