"""Next-action reminder lifecycle.

A contact holds at most one pending reminder; setting a new one
replaces the old one and no history is kept here.
"""

from datetime import date, datetime

from consolidation.contacts.models import Contact
from consolidation.exceptions import ValidationFailedError


def set_action(contact: Contact, text: str, due_date: date | None, now: datetime) -> Contact:
    """Set (or replace) the pending reminder.

    Past due dates are accepted; warning about them is up to the caller.

    Raises:
        ValidationFailedError: If text is blank
    """
    if not text or not text.strip():
        raise ValidationFailedError("Reminder text must not be empty", field="next_action_text")
    if contact.next_action_text == text and contact.next_action_due_date == due_date:
        return contact
    return contact.model_copy(
        update={
            "next_action_text": text,
            "next_action_due_date": due_date,
            "updated_at": now,
        }
    )


def complete_action(contact: Contact, now: datetime) -> Contact:
    """Mark the reminder done and record a human contact.

    last_contact_at is refreshed even when no reminder was pending.
    """
    return contact.model_copy(
        update={
            "next_action_text": None,
            "next_action_due_date": None,
            "last_contact_at": now,
            "updated_at": now,
        }
    )


def clear_action(contact: Contact, now: datetime) -> Contact:
    """Dismiss the reminder without recording a contact."""
    if not contact.has_reminder:
        return contact
    return contact.model_copy(
        update={
            "next_action_text": None,
            "next_action_due_date": None,
            "updated_at": now,
        }
    )
