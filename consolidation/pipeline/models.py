"""Pipeline models.

Contains request and result models exchanged with the pipeline:
intake requests, group recommendations and the board read model.
"""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from consolidation.contacts.enums import OriginKind, ReminderStatus, Stage, UrgencyClass
from consolidation.contacts.models import Contact, Group


class ContactRegistration(BaseModel):
    """Intake request for a new contact."""

    organization_id: UUID
    owner_id: UUID = Field(..., description="Person who registered the contact")
    name: str
    phone: str
    address: str | None = None
    email: str | None = None
    birth_date: date | None = None
    origin_kind: OriginKind = OriginKind.VISITOR
    attends_group: bool = Field(
        default=False, description="Contact already attends a small group"
    )
    group_id: UUID | None = Field(
        default=None, description="Group attended, required when attends_group"
    )
    notes: str | None = None


class GroupRecommendation(BaseModel):
    """A candidate destination group with its heuristic score."""

    group: Group
    score: int = Field(ge=0, description="Heuristic fit score")
    reasons: list[str] = Field(default_factory=list, description="Human-readable reasons")


class BoardCard(BaseModel):
    """A contact as shown on the board, with derived triage data."""

    contact: Contact
    urgency: UrgencyClass
    reminder_status: ReminderStatus
    days_in_system: int
    whatsapp_number: str | None = Field(
        default=None, description="Phone digits for a WhatsApp link, None without digits"
    )


class BoardColumn(BaseModel):
    """All cards currently in one stage."""

    stage: Stage
    cards: list[BoardCard] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.cards)


class Board(BaseModel):
    """Funnel board: one column per stage, in funnel order."""

    columns: list[BoardColumn] = Field(default_factory=list)

    def column(self, stage: Stage) -> BoardColumn:
        """Get the column for a stage."""
        for column in self.columns:
            if column.stage == stage:
                return column
        raise KeyError(stage)
