"""Pipeline orchestrator.

Single entry point for board and modal commands. Every mutating
operation follows the same cycle: load the contact, apply a pure
pipeline component to a private copy, persist the result, and return
what was saved. Validation and lookup failures happen before any
write; a failed write leaves the stored contact authoritative.
"""

from collections.abc import Callable
from datetime import date, datetime
from uuid import UUID

from consolidation.clock import Clock, SystemClock
from consolidation.config.models.pipeline import PipelineConfig
from consolidation.contacts.enums import Stage
from consolidation.contacts.models import Contact, ContactFilter, GroupFilter
from consolidation.contacts.store import ContactStore, GroupStore
from consolidation.exceptions import NotFoundError, PersistenceFailedError, ValidationFailedError
from consolidation.observability.logging import get_logger
from consolidation.pipeline import reminders, stages, tags
from consolidation.pipeline.board import build_board
from consolidation.pipeline.intake import build_contact
from consolidation.pipeline.models import Board, ContactRegistration, GroupRecommendation
from consolidation.pipeline.recommendation import recommend_groups

logger = get_logger(__name__)

Mutation = Callable[[Contact, datetime], Contact]


class PipelineOrchestrator:
    """Apply funnel commands to stored contacts.

    The orchestrator holds no state of its own between calls. It does
    not serialize concurrent commands for the same contact; the caller
    must avoid issuing them.
    """

    def __init__(
        self,
        contact_store: ContactStore,
        group_store: GroupStore,
        clock: Clock | None = None,
        config: PipelineConfig | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            contact_store: Persistence for contacts
            group_store: Read access to small groups
            clock: Time source (defaults to the wall clock in the configured timezone)
            config: Pipeline configuration
        """
        self._contacts = contact_store
        self._groups = group_store
        self._config = config or PipelineConfig()
        self._clock = clock or SystemClock(self._config.timezone)

    # Stage operations

    async def move_stage(self, contact_id: UUID, target_stage: Stage | str) -> Contact:
        """Move a contact to another funnel stage (board drag and drop)."""
        target = stages.parse_stage(target_stage)
        current = await self._load(contact_id)
        saved = await self._apply(
            current, lambda c, now: stages.transition(c, target, now)
        )
        if saved is current:
            return saved

        if stages.is_backward(current.stage, saved.stage):
            logger.warning(
                "contact_stage_moved_backward",
                contact_id=str(contact_id),
                from_stage=current.stage.value,
                to_stage=saved.stage.value,
            )
        logger.info(
            "contact_stage_moved",
            contact_id=str(contact_id),
            from_stage=current.stage.value,
            to_stage=saved.stage.value,
            integrated_at=saved.integrated_at.isoformat() if saved.integrated_at else None,
        )
        return saved

    # Reminder operations

    async def set_reminder(self, contact_id: UUID, text: str, due_date: date | None) -> Contact:
        """Set or replace the contact's next action."""
        current = await self._load(contact_id)
        saved = await self._apply(
            current, lambda c, now: reminders.set_action(c, text, due_date, now)
        )
        if saved is not current:
            logger.info(
                "contact_reminder_set",
                contact_id=str(contact_id),
                due_date=due_date.isoformat() if due_date else None,
            )
        return saved

    async def complete_reminder(self, contact_id: UUID) -> Contact:
        """Mark the next action done and record the contact as touched."""
        current = await self._load(contact_id)
        saved = await self._apply(current, reminders.complete_action)
        if saved is not current:
            logger.info(
                "contact_reminder_completed",
                contact_id=str(contact_id),
                had_reminder=current.has_reminder,
            )
        return saved

    async def clear_reminder(self, contact_id: UUID) -> Contact:
        """Dismiss the next action without recording a contact."""
        current = await self._load(contact_id)
        saved = await self._apply(current, reminders.clear_action)
        if saved is not current:
            logger.info("contact_reminder_cleared", contact_id=str(contact_id))
        return saved

    # Tag operations

    async def add_tag(self, contact_id: UUID, tag: str) -> Contact:
        """Add a tag to a contact.

        Raises:
            ValidationFailedError: If the contact does not exist or the tag is blank
        """
        current = await self._load_for_tagging(contact_id)
        saved = await self._apply(current, lambda c, now: tags.add_tag(c, tag, now))
        if saved is not current:
            logger.info("contact_tag_added", contact_id=str(contact_id), tag=tag)
        return saved

    async def remove_tag(self, contact_id: UUID, tag: str) -> Contact:
        """Remove a tag from a contact.

        Raises:
            ValidationFailedError: If the contact does not exist
        """
        current = await self._load_for_tagging(contact_id)
        saved = await self._apply(current, lambda c, now: tags.remove_tag(c, tag, now))
        if saved is not current:
            logger.info("contact_tag_removed", contact_id=str(contact_id), tag=tag)
        return saved

    # Group assignment operations

    async def assign_group(self, contact_id: UUID, group_id: UUID) -> Contact:
        """Assign a destination group and mark the contact as in a group."""
        current = await self._load(contact_id)
        group = await self._groups.get(group_id)
        if group is None or group.organization_id != current.organization_id:
            raise NotFoundError("Group", group_id)

        saved = await self._apply(current, lambda c, now: _assign(c, group_id, now))
        if saved is not current:
            logger.info(
                "contact_group_assigned",
                contact_id=str(contact_id),
                group_id=str(group.id),
                group_name=group.name,
            )
        return saved

    async def unassign_group(self, contact_id: UUID) -> Contact:
        """Clear the destination group and the in-group flag together."""
        current = await self._load(contact_id)
        saved = await self._apply(current, _unassign)
        if saved is not current:
            logger.info(
                "contact_group_unassigned",
                contact_id=str(contact_id),
                previous_group_id=(
                    str(current.destination_group_id) if current.destination_group_id else None
                ),
            )
        return saved

    # Intake and read models

    async def register_contact(self, request: ContactRegistration) -> Contact:
        """Create a new contact in the NEW stage."""
        contact = build_contact(request, self._clock.now())
        if contact.destination_group_id is not None:
            group = await self._groups.get(contact.destination_group_id)
            if group is None or group.organization_id != contact.organization_id:
                raise NotFoundError("Group", contact.destination_group_id)

        await self._persist(contact)
        logger.info(
            "contact_registered",
            contact_id=str(contact.id),
            origin_kind=contact.origin_kind.value,
            already_in_group=contact.already_in_group,
        )
        return contact

    async def recommend_groups(self, contact_id: UUID) -> list[GroupRecommendation]:
        """Suggest destination groups among the organization's active groups."""
        contact = await self._load(contact_id)
        groups = await self._groups.list(
            GroupFilter(organization_id=contact.organization_id, active=True)
        )
        settings = self._config.recommendation
        recommendations = recommend_groups(
            contact,
            groups,
            self._clock.now().date(),
            limit=settings.max_results,
            min_token_length=settings.min_token_length,
        )
        logger.debug(
            "groups_recommended",
            contact_id=str(contact_id),
            candidates=len(groups),
            top_scores=[rec.score for rec in recommendations],
        )
        return recommendations

    async def load_board(self, contact_filter: ContactFilter | None = None) -> Board:
        """Build the funnel board for the contacts matching the filter."""
        contacts = await self._contacts.list(contact_filter)
        urgency = self._config.urgency
        return build_board(
            contacts,
            self._clock.now(),
            stale_warning_days=urgency.stale_warning_days,
            stale_critical_days=urgency.stale_critical_days,
        )

    # Internals

    async def _load(self, contact_id: UUID) -> Contact:
        contact = await self._contacts.get(contact_id)
        if contact is None:
            raise NotFoundError("Contact", contact_id)
        return contact

    async def _load_for_tagging(self, contact_id: UUID) -> Contact:
        # A missing contact is a rejected tag command, not a lookup failure
        try:
            return await self._load(contact_id)
        except NotFoundError as e:
            raise ValidationFailedError(
                f"Cannot tag unknown contact {contact_id}", field="contact_id"
            ) from e

    async def _apply(self, current: Contact, mutation: Mutation) -> Contact:
        """Run a pure mutation on a private copy and persist the result.

        Returns the loaded contact itself when the mutation changed nothing.
        """
        updated = mutation(current.model_copy(deep=True), self._clock.now())
        if updated == current:
            logger.debug("contact_unchanged", contact_id=str(current.id))
            return current

        await self._persist(updated)
        return updated

    async def _persist(self, contact: Contact) -> None:
        try:
            await self._contacts.save(contact)
        except PersistenceFailedError:
            logger.error("contact_persist_failed", contact_id=str(contact.id))
            raise
        except Exception as e:
            logger.error(
                "contact_persist_failed",
                contact_id=str(contact.id),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise PersistenceFailedError(
                f"Failed to save contact {contact.id}: {e}", contact_id=contact.id
            ) from e


def _assign(contact: Contact, group_id: UUID, now: datetime) -> Contact:
    if contact.destination_group_id == group_id and contact.already_in_group:
        return contact
    return contact.model_copy(
        update={
            "destination_group_id": group_id,
            "already_in_group": True,
            "updated_at": now,
        }
    )


def _unassign(contact: Contact, now: datetime) -> Contact:
    if contact.destination_group_id is None and not contact.already_in_group:
        return contact
    return contact.model_copy(
        update={
            "destination_group_id": None,
            "already_in_group": False,
            "updated_at": now,
        }
    )
