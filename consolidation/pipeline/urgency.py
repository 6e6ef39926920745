"""Urgency classification for funnel contacts.

Derives a triage class from a contact and the evaluation instant. Day
counts are calendar-day differences in the timezone of ``now``, so a
contact does not flip class depending on the time of day it was
created.
"""

from datetime import date, datetime

from consolidation.contacts.enums import ReminderStatus, Stage, UrgencyClass
from consolidation.contacts.models import Contact

DEFAULT_STALE_WARNING_DAYS = 7
DEFAULT_STALE_CRITICAL_DAYS = 14


def calendar_days_between(earlier: datetime, now: datetime) -> int:
    """Number of midnights between two instants, measured in now's timezone."""
    if earlier.tzinfo is not None and now.tzinfo is not None:
        earlier = earlier.astimezone(now.tzinfo)
    return (now.date() - earlier.date()).days


def days_in_system(contact: Contact, now: datetime) -> int:
    """Calendar days since the contact was created."""
    return calendar_days_between(contact.created_at, now)


def reminder_status(contact: Contact, now: datetime) -> ReminderStatus:
    """Position of the next-action due date relative to today."""
    due: date | None = contact.next_action_due_date
    if due is None:
        return ReminderStatus.NONE
    today = now.date()
    if due < today:
        return ReminderStatus.OVERDUE
    if due == today:
        return ReminderStatus.TODAY
    return ReminderStatus.UPCOMING


def classify_urgency(
    contact: Contact,
    now: datetime,
    *,
    stale_warning_days: int = DEFAULT_STALE_WARNING_DAYS,
    stale_critical_days: int = DEFAULT_STALE_CRITICAL_DAYS,
) -> UrgencyClass:
    """Classify how urgently a contact needs attention.

    Signals are checked in priority order and the first match wins:
    integration, overdue reminder, reminder due today, then age of a
    contact still in the NEW stage.

    Args:
        contact: Contact to classify
        now: Evaluation instant
        stale_warning_days: Days in NEW after which the contact is stale
        stale_critical_days: Days in NEW after which staleness is critical

    Returns:
        The urgency class
    """
    if contact.stage == Stage.INTEGRATED:
        return UrgencyClass.DONE

    status = reminder_status(contact, now)
    if status == ReminderStatus.OVERDUE:
        return UrgencyClass.OVERDUE
    if status == ReminderStatus.TODAY:
        return UrgencyClass.DUE_TODAY

    if contact.stage == Stage.NEW:
        days = days_in_system(contact, now)
        if days > stale_critical_days:
            return UrgencyClass.STALE_CRITICAL
        if days > stale_warning_days:
            return UrgencyClass.STALE_WARNING

    return UrgencyClass.NORMAL
