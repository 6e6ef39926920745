"""Board read model: contacts grouped by stage with triage data."""

import re
from collections.abc import Iterable
from datetime import datetime

from consolidation.contacts.models import Contact
from consolidation.pipeline.models import Board, BoardCard, BoardColumn
from consolidation.pipeline.stages import STAGE_ORDER
from consolidation.pipeline.urgency import (
    DEFAULT_STALE_CRITICAL_DAYS,
    DEFAULT_STALE_WARNING_DAYS,
    classify_urgency,
    days_in_system,
    reminder_status,
)


def whatsapp_number(phone: str) -> str | None:
    """Digits of a phone number as used in wa.me links."""
    digits = re.sub(r"\D", "", phone)
    return digits or None


def build_card(
    contact: Contact,
    now: datetime,
    *,
    stale_warning_days: int = DEFAULT_STALE_WARNING_DAYS,
    stale_critical_days: int = DEFAULT_STALE_CRITICAL_DAYS,
) -> BoardCard:
    return BoardCard(
        contact=contact,
        urgency=classify_urgency(
            contact,
            now,
            stale_warning_days=stale_warning_days,
            stale_critical_days=stale_critical_days,
        ),
        reminder_status=reminder_status(contact, now),
        days_in_system=days_in_system(contact, now),
        whatsapp_number=whatsapp_number(contact.phone),
    )


def build_board(
    contacts: Iterable[Contact],
    now: datetime,
    *,
    stale_warning_days: int = DEFAULT_STALE_WARNING_DAYS,
    stale_critical_days: int = DEFAULT_STALE_CRITICAL_DAYS,
) -> Board:
    """Group contacts into stage columns, keeping input order within a column."""
    columns = {stage: BoardColumn(stage=stage) for stage in STAGE_ORDER}
    for contact in contacts:
        columns[contact.stage].cards.append(
            build_card(
                contact,
                now,
                stale_warning_days=stale_warning_days,
                stale_critical_days=stale_critical_days,
            )
        )
    return Board(columns=list(columns.values()))
