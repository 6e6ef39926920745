"""Contacts domain models.

Contains the Pydantic models for funnel contacts, small groups and
the filters used to query them.
"""

from datetime import UTC, date, datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from consolidation.contacts.enums import AudienceCategory, OriginKind, Stage


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class Contact(BaseModel):
    """A person moving through the consolidation funnel.

    Created by intake and mutated only through the pipeline
    orchestrator. Deletion belongs to the external repository.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    organization_id: UUID = Field(..., description="Owning organization")
    name: str = Field(..., description="Display name")
    phone: str = Field(..., description="Phone number")
    address: str | None = Field(default=None, description="Free-text address")
    email: str | None = Field(default=None, description="E-mail address")
    birth_date: date | None = Field(default=None, description="Date of birth")
    origin_kind: OriginKind = Field(
        default=OriginKind.VISITOR, description="How the contact arrived"
    )
    stage: Stage = Field(default=Stage.NEW, description="Funnel position")
    source_group_id: UUID | None = Field(
        default=None, description="Group the contact came through"
    )
    destination_group_id: UUID | None = Field(
        default=None, description="Group the contact was assigned to"
    )
    already_in_group: bool = Field(
        default=False, description="Has a destination group"
    )
    owner_id: UUID = Field(..., description="Person responsible for follow-up")
    tags: list[str] = Field(default_factory=list, description="Free-form labels")
    next_action_text: str | None = Field(
        default=None, description="Pending follow-up task"
    )
    next_action_due_date: date | None = Field(
        default=None, description="Follow-up due date"
    )
    last_contact_at: datetime | None = Field(
        default=None, description="Most recent human contact"
    )
    integrated_at: datetime | None = Field(
        default=None, description="First time the contact reached integrated"
    )
    first_visit_date: date | None = Field(
        default=None, description="Date of first visit"
    )
    notes: str | None = Field(default=None, description="Free-text notes")
    created_at: datetime = Field(
        default_factory=utc_now, description="Creation time"
    )
    updated_at: datetime = Field(
        default_factory=utc_now, description="Last update"
    )

    @field_validator("tags")
    @classmethod
    def tags_are_unique(cls, tags: list[str]) -> list[str]:
        """Reject duplicate tags (exact, case-sensitive comparison)."""
        if len(set(tags)) != len(tags):
            raise ValueError("tags must be unique")
        return tags

    @property
    def has_reminder(self) -> bool:
        """Whether a next action is pending."""
        return self.next_action_text is not None or self.next_action_due_date is not None


class Group(BaseModel):
    """A small group (cell) a contact may join.

    Owned by the surrounding application; read-only here.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    id: UUID = Field(default_factory=uuid4, description="Unique identifier")
    organization_id: UUID = Field(..., description="Owning organization")
    name: str = Field(..., description="Group name")
    leader_name: str = Field(default="", description="Leader display name")
    audience_category: AudienceCategory = Field(
        default=AudienceCategory.MIXED, description="Target audience"
    )
    address: str = Field(default="", description="Meeting address")
    weekday: str = Field(default="", description="Meeting day of week")
    time: str = Field(default="", description="Meeting time")
    active: bool = Field(default=True, description="Currently meeting")


class ContactFilter(BaseModel):
    """Criteria for listing contacts. Unset criteria match everything."""

    organization_id: UUID | None = None
    owner_id: UUID | None = None
    stage: Stage | None = None
    search: str | None = Field(
        default=None, description="Matches name (case-insensitive) or phone"
    )

    def matches(self, contact: Contact) -> bool:
        """Check whether a contact satisfies every set criterion."""
        if self.organization_id is not None and contact.organization_id != self.organization_id:
            return False
        if self.owner_id is not None and contact.owner_id != self.owner_id:
            return False
        if self.stage is not None and contact.stage != self.stage:
            return False
        if self.search:
            term = self.search
            if term.lower() not in contact.name.lower() and term not in contact.phone:
                return False
        return True


class GroupFilter(BaseModel):
    """Criteria for listing groups. Unset criteria match everything."""

    organization_id: UUID | None = None
    active: bool | None = None
    group_ids: list[UUID] | None = None

    def matches(self, group: Group) -> bool:
        """Check whether a group satisfies every set criterion."""
        if self.organization_id is not None and group.organization_id != self.organization_id:
            return False
        if self.active is not None and group.active != self.active:
            return False
        if self.group_ids is not None and group.id not in self.group_ids:
            return False
        return True
