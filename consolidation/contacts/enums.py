"""Enums for the contacts domain."""

from enum import Enum


class Stage(str, Enum):
    """Funnel position of a contact.

    Contacts start in NEW and normally advance to INTEGRATED, but may be
    moved back for manual correction.
    """

    NEW = "new"
    IN_CONTACT = "in_contact"
    INTEGRATED = "integrated"


class OriginKind(str, Enum):
    """How the contact first arrived. Set at intake, never changed."""

    VISITOR = "visitor"
    CONVERT = "convert"
    RECONCILIATION = "reconciliation"


class AudienceCategory(str, Enum):
    """Target audience of a small group."""

    KIDS = "kids"
    YOUTH = "youth"
    ADULTS = "adults"
    MEN = "men"
    WOMEN = "women"
    COUPLES = "couples"
    MIXED = "mixed"
    FAMILY = "family"


class UrgencyClass(str, Enum):
    """Derived triage class used to prioritize follow-up.

    Listed from the signal that wins first to the default.
    """

    DONE = "done"
    OVERDUE = "overdue"
    DUE_TODAY = "due_today"
    STALE_CRITICAL = "stale_critical"
    STALE_WARNING = "stale_warning"
    NORMAL = "normal"


class ReminderStatus(str, Enum):
    """State of the next-action reminder relative to today."""

    NONE = "none"
    OVERDUE = "overdue"
    TODAY = "today"
    UPCOMING = "upcoming"
