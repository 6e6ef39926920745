"""Tag add/remove with set semantics.

Tags compare by exact string: "Youth" and "youth " are different tags.
"""

from datetime import datetime

from consolidation.contacts.models import Contact
from consolidation.exceptions import ValidationFailedError


def add_tag(contact: Contact, tag: str, now: datetime) -> Contact:
    """Add a tag unless it is already present."""
    if not tag or not tag.strip():
        raise ValidationFailedError("Tag must not be empty", field="tags")
    if tag in contact.tags:
        return contact
    return contact.model_copy(update={"tags": [*contact.tags, tag], "updated_at": now})


def remove_tag(contact: Contact, tag: str, now: datetime) -> Contact:
    """Remove a tag if present."""
    if tag not in contact.tags:
        return contact
    return contact.model_copy(
        update={"tags": [t for t in contact.tags if t != tag], "updated_at": now}
    )
