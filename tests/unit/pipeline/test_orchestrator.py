"""Unit tests for PipelineOrchestrator."""

from datetime import date, timedelta
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from structlog.testing import capture_logs

from consolidation.config.models.pipeline import PipelineConfig, RecommendationConfig
from consolidation.contacts.enums import AudienceCategory, Stage, UrgencyClass
from consolidation.contacts.models import Contact, ContactFilter
from consolidation.contacts.stores import InMemoryContactStore, InMemoryGroupStore
from consolidation.exceptions import (
    ErrorCode,
    NotFoundError,
    PersistenceFailedError,
    ValidationFailedError,
)
from consolidation.pipeline.models import ContactRegistration
from consolidation.pipeline.orchestrator import PipelineOrchestrator
from tests.factories import ContactFactory, GroupFactory


class FailingContactStore(InMemoryContactStore):
    """Contact store whose writes can be made to fail."""

    def __init__(self, error: Exception | None = None) -> None:
        super().__init__()
        self.error = error
        self.save_calls = 0

    async def save(self, contact: Contact) -> UUID:
        self.save_calls += 1
        if self.error is not None:
            raise self.error
        return await super().save(contact)


@pytest.fixture
def contact_store() -> FailingContactStore:
    """Create in-memory contact store."""
    return FailingContactStore()


@pytest.fixture
def group_store() -> InMemoryGroupStore:
    """Create in-memory group store."""
    return InMemoryGroupStore()


@pytest.fixture
def orchestrator(contact_store, group_store, clock) -> PipelineOrchestrator:
    """Create pipeline orchestrator."""
    return PipelineOrchestrator(
        contact_store=contact_store,
        group_store=group_store,
        clock=clock,
    )


@pytest_asyncio.fixture
async def stored_contact(contact_store, organization_id) -> Contact:
    """A NEW contact already saved in the store."""
    contact = ContactFactory.create(organization_id=organization_id)
    await contact_store.save(contact)
    contact_store.save_calls = 0
    return contact


@pytest.fixture
def group(group_store, organization_id):
    """An active group in the contact's organization."""
    group = GroupFactory.create(organization_id=organization_id, name="Cell Esperança")
    group_store.add(group)
    return group


class TestMoveStage:
    """Tests for move_stage."""

    @pytest.mark.asyncio
    async def test_moves_and_persists(self, orchestrator, contact_store, stored_contact, now):
        """Should persist the new stage and return the saved contact."""
        result = await orchestrator.move_stage(stored_contact.id, Stage.IN_CONTACT)

        assert result.stage == Stage.IN_CONTACT
        assert result.updated_at == now
        persisted = await contact_store.get(stored_contact.id)
        assert persisted == result

    @pytest.mark.asyncio
    async def test_integration_stamped_once(self, orchestrator, clock, stored_contact, now):
        """integrated_at keeps its first value across re-entry."""
        await orchestrator.move_stage(stored_contact.id, Stage.INTEGRATED)
        clock.advance(timedelta(days=2))
        await orchestrator.move_stage(stored_contact.id, Stage.IN_CONTACT)
        clock.advance(timedelta(days=2))
        result = await orchestrator.move_stage(stored_contact.id, Stage.INTEGRATED)

        assert result.integrated_at == now
        assert result.updated_at == now + timedelta(days=4)

    @pytest.mark.asyncio
    async def test_same_stage_skips_write(self, orchestrator, contact_store, stored_contact):
        """A pure no-op does not write or refresh updated_at."""
        result = await orchestrator.move_stage(stored_contact.id, Stage.NEW)

        assert result == stored_contact
        assert contact_store.save_calls == 0

    @pytest.mark.asyncio
    async def test_unknown_stage(self, orchestrator, contact_store, stored_contact):
        with pytest.raises(ValidationFailedError):
            await orchestrator.move_stage(stored_contact.id, "archived")
        assert contact_store.save_calls == 0

    @pytest.mark.asyncio
    async def test_unknown_contact(self, orchestrator):
        with pytest.raises(NotFoundError) as exc_info:
            await orchestrator.move_stage(uuid4(), Stage.IN_CONTACT)
        assert exc_info.value.error_code == ErrorCode.NOT_FOUND
        assert exc_info.value.entity == "Contact"


class TestReminders:
    """Tests for reminder operations."""

    @pytest.mark.asyncio
    async def test_set_complete_cycle(self, orchestrator, contact_store, stored_contact, now):
        """Set then complete leaves no reminder and a fresh last_contact_at."""
        await orchestrator.set_reminder(stored_contact.id, "Call", date(2024, 3, 16))
        stored = await contact_store.get(stored_contact.id)
        assert stored.next_action_text == "Call"

        result = await orchestrator.complete_reminder(stored_contact.id)

        assert result.next_action_text is None
        assert result.next_action_due_date is None
        assert result.last_contact_at == now

    @pytest.mark.asyncio
    async def test_complete_without_reminder_touches(self, orchestrator, stored_contact, now):
        result = await orchestrator.complete_reminder(stored_contact.id)

        assert result.last_contact_at == now
        assert result.next_action_text is None

    @pytest.mark.asyncio
    async def test_clear_keeps_last_contact(self, orchestrator, stored_contact):
        await orchestrator.set_reminder(stored_contact.id, "Call", date(2024, 3, 16))

        result = await orchestrator.clear_reminder(stored_contact.id)

        assert result.next_action_text is None
        assert result.last_contact_at is None

    @pytest.mark.asyncio
    async def test_blank_text_rejected(self, orchestrator, contact_store, stored_contact):
        with pytest.raises(ValidationFailedError):
            await orchestrator.set_reminder(stored_contact.id, " ", date(2024, 3, 16))
        assert contact_store.save_calls == 0


class TestTags:
    """Tests for tag operations."""

    @pytest.mark.asyncio
    async def test_add_twice_equals_once(self, orchestrator, contact_store, stored_contact):
        await orchestrator.add_tag(stored_contact.id, "youth")
        result = await orchestrator.add_tag(stored_contact.id, "youth")

        assert result.tags == ["youth"]
        assert contact_store.save_calls == 1

    @pytest.mark.asyncio
    async def test_remove(self, orchestrator, stored_contact):
        await orchestrator.add_tag(stored_contact.id, "youth")
        result = await orchestrator.remove_tag(stored_contact.id, "youth")
        assert result.tags == []

    @pytest.mark.asyncio
    async def test_tag_on_missing_contact(self, orchestrator):
        """Tagging an unknown contact is a rejected command."""
        with pytest.raises(ValidationFailedError) as exc_info:
            await orchestrator.add_tag(uuid4(), "youth")

        assert exc_info.value.error_code == ErrorCode.VALIDATION_FAILED
        assert exc_info.value.field == "contact_id"
        assert isinstance(exc_info.value.__cause__, NotFoundError)

    @pytest.mark.asyncio
    async def test_untag_on_missing_contact(self, orchestrator, contact_store):
        with pytest.raises(ValidationFailedError):
            await orchestrator.remove_tag(uuid4(), "youth")
        assert contact_store.save_calls == 0


class TestGroupAssignment:
    """Tests for assign_group / unassign_group."""

    @pytest.mark.asyncio
    async def test_assign_sets_both_fields(self, orchestrator, stored_contact, group):
        result = await orchestrator.assign_group(stored_contact.id, group.id)

        assert result.destination_group_id == group.id
        assert result.already_in_group is True

    @pytest.mark.asyncio
    async def test_assign_then_unassign_round_trip(self, orchestrator, stored_contact, group):
        await orchestrator.assign_group(stored_contact.id, group.id)
        result = await orchestrator.unassign_group(stored_contact.id)

        assert result.destination_group_id is None
        assert result.already_in_group is False

    @pytest.mark.asyncio
    async def test_assign_does_not_change_stage(self, orchestrator, stored_contact, group):
        result = await orchestrator.assign_group(stored_contact.id, group.id)
        assert result.stage == Stage.NEW

    @pytest.mark.asyncio
    async def test_unknown_group(self, orchestrator, contact_store, stored_contact):
        """An unresolvable group is rejected before any write."""
        with pytest.raises(NotFoundError) as exc_info:
            await orchestrator.assign_group(stored_contact.id, uuid4())

        assert exc_info.value.entity == "Group"
        assert contact_store.save_calls == 0

    @pytest.mark.asyncio
    async def test_group_from_other_organization(self, orchestrator, group_store, stored_contact):
        foreign = GroupFactory.create()
        group_store.add(foreign)

        with pytest.raises(NotFoundError):
            await orchestrator.assign_group(stored_contact.id, foreign.id)


class TestPersistenceFailure:
    """Tests for write failures."""

    @pytest.mark.asyncio
    async def test_store_error_propagates_unchanged(self, orchestrator, contact_store, stored_contact):
        """A PersistenceFailedError from the store reaches the caller as is."""
        error = PersistenceFailedError("database unavailable", contact_id=stored_contact.id)
        contact_store.error = error

        with pytest.raises(PersistenceFailedError) as exc_info:
            await orchestrator.move_stage(stored_contact.id, Stage.INTEGRATED)

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_other_errors_are_wrapped(self, orchestrator, contact_store, stored_contact):
        contact_store.error = ConnectionError("connection reset")

        with pytest.raises(PersistenceFailedError) as exc_info:
            await orchestrator.add_tag(stored_contact.id, "youth")

        assert exc_info.value.contact_id == stored_contact.id
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_failed_write_keeps_stored_state(self, orchestrator, contact_store, stored_contact):
        """The stored contact stays as it was before the command."""
        contact_store.error = ConnectionError("connection reset")

        with pytest.raises(PersistenceFailedError):
            await orchestrator.move_stage(stored_contact.id, Stage.INTEGRATED)

        contact_store.error = None
        persisted = await contact_store.get(stored_contact.id)
        assert persisted == stored_contact
        assert persisted.integrated_at is None

    @pytest.mark.asyncio
    async def test_retry_after_failure(self, orchestrator, contact_store, stored_contact):
        """Re-issuing the same command after a failure succeeds."""
        contact_store.error = ConnectionError("connection reset")
        with pytest.raises(PersistenceFailedError):
            await orchestrator.add_tag(stored_contact.id, "youth")

        contact_store.error = None
        result = await orchestrator.add_tag(stored_contact.id, "youth")
        assert result.tags == ["youth"]


class TestRegisterContact:
    """Tests for register_contact."""

    @pytest.mark.asyncio
    async def test_registers_and_persists(self, orchestrator, contact_store, organization_id, owner_id, now):
        request = ContactRegistration(
            organization_id=organization_id,
            owner_id=owner_id,
            name="Pedro Alves",
            phone="11955554444",
        )

        contact = await orchestrator.register_contact(request)

        assert contact.stage == Stage.NEW
        assert contact.created_at == now
        assert await contact_store.get(contact.id) == contact

    @pytest.mark.asyncio
    async def test_registers_group_member(self, orchestrator, group, organization_id, owner_id):
        request = ContactRegistration(
            organization_id=organization_id,
            owner_id=owner_id,
            name="Pedro Alves",
            phone="11955554444",
            attends_group=True,
            group_id=group.id,
        )

        contact = await orchestrator.register_contact(request)

        assert contact.destination_group_id == group.id
        assert contact.already_in_group is True

    @pytest.mark.asyncio
    async def test_unknown_group_rejected(self, orchestrator, contact_store, organization_id, owner_id):
        request = ContactRegistration(
            organization_id=organization_id,
            owner_id=owner_id,
            name="Pedro Alves",
            phone="11955554444",
            attends_group=True,
            group_id=uuid4(),
        )

        with pytest.raises(NotFoundError):
            await orchestrator.register_contact(request)
        assert contact_store.save_calls == 0


class TestRecommendGroups:
    """Tests for recommend_groups."""

    @pytest.mark.asyncio
    async def test_uses_active_groups_of_organization(
        self, orchestrator, contact_store, group_store, organization_id
    ):
        contact = ContactFactory.create(
            organization_id=organization_id, birth_date=date(2014, 1, 1)
        )
        await contact_store.save(contact)
        group_store.add(
            GroupFactory.create(
                organization_id=organization_id,
                name="Closed kids",
                audience_category=AudienceCategory.KIDS,
                active=False,
            )
        )
        group_store.add(
            GroupFactory.create(
                organization_id=organization_id,
                name="Kids",
                audience_category=AudienceCategory.KIDS,
            )
        )
        group_store.add(GroupFactory.create(name="Elsewhere", audience_category=AudienceCategory.KIDS))
        group_store.add(
            GroupFactory.create(
                organization_id=organization_id,
                name="Family",
                audience_category=AudienceCategory.FAMILY,
            )
        )

        recs = await orchestrator.recommend_groups(contact.id)

        assert [rec.group.name for rec in recs] == ["Kids", "Family"]
        assert recs[0].score == 10

    @pytest.mark.asyncio
    async def test_limit_from_config(self, contact_store, group_store, clock, stored_contact, organization_id):
        for i in range(5):
            group_store.add(GroupFactory.create(organization_id=organization_id, name=f"G{i}"))
        orchestrator = PipelineOrchestrator(
            contact_store,
            group_store,
            clock=clock,
            config=PipelineConfig(recommendation=RecommendationConfig(max_results=2)),
        )

        recs = await orchestrator.recommend_groups(stored_contact.id)

        assert len(recs) == 2


class TestLoadBoard:
    """Tests for load_board."""

    @pytest.mark.asyncio
    async def test_filters_and_classifies(self, orchestrator, contact_store, organization_id, owner_id, now):
        mine = ContactFactory.create(
            organization_id=organization_id,
            owner_id=owner_id,
            name="Carla Mendes",
            created_at=now - timedelta(days=15),
        )
        other = ContactFactory.create(organization_id=organization_id, name="Carlos Dias")
        await contact_store.save(mine)
        await contact_store.save(other)

        board = await orchestrator.load_board(
            ContactFilter(organization_id=organization_id, owner_id=owner_id, search="carla")
        )

        cards = board.column(Stage.NEW).cards
        assert [card.contact.id for card in cards] == [mine.id]
        assert cards[0].urgency == UrgencyClass.STALE_CRITICAL


class TestLogEvents:
    """Tests for the events emitted by orchestrator commands."""

    @pytest.mark.asyncio
    async def test_backward_move_warns(self, orchestrator, stored_contact):
        await orchestrator.move_stage(stored_contact.id, Stage.INTEGRATED)

        with capture_logs() as logs:
            await orchestrator.move_stage(stored_contact.id, Stage.IN_CONTACT)

        warnings = [log for log in logs if log["event"] == "contact_stage_moved_backward"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["from_stage"] == "integrated"
        assert warnings[0]["to_stage"] == "in_contact"

    @pytest.mark.asyncio
    async def test_forward_move_does_not_warn(self, orchestrator, stored_contact):
        with capture_logs() as logs:
            await orchestrator.move_stage(stored_contact.id, Stage.IN_CONTACT)

        events = [log["event"] for log in logs]
        assert "contact_stage_moved" in events
        assert "contact_stage_moved_backward" not in events

    @pytest.mark.asyncio
    async def test_failed_backward_move_does_not_warn(
        self, orchestrator, contact_store, stored_contact
    ):
        """Nothing is reported as moved when the write fails."""
        await orchestrator.move_stage(stored_contact.id, Stage.INTEGRATED)
        contact_store.error = ConnectionError("connection reset")

        with capture_logs() as logs:
            with pytest.raises(PersistenceFailedError):
                await orchestrator.move_stage(stored_contact.id, Stage.NEW)

        events = [log["event"] for log in logs]
        assert events == ["contact_persist_failed"]

    @pytest.mark.asyncio
    async def test_no_op_commands_log_no_mutation(self, orchestrator, stored_contact):
        """Commands that change nothing only report the contact as unchanged."""
        await orchestrator.add_tag(stored_contact.id, "youth")

        with capture_logs() as logs:
            await orchestrator.add_tag(stored_contact.id, "youth")
            await orchestrator.remove_tag(stored_contact.id, "absent")
            await orchestrator.clear_reminder(stored_contact.id)
            await orchestrator.unassign_group(stored_contact.id)
            await orchestrator.move_stage(stored_contact.id, Stage.NEW)

        assert [log["event"] for log in logs] == ["contact_unchanged"] * 5

    @pytest.mark.asyncio
    async def test_repeated_assign_and_reminder_log_once(self, orchestrator, stored_contact, group):
        with capture_logs() as logs:
            await orchestrator.assign_group(stored_contact.id, group.id)
            await orchestrator.assign_group(stored_contact.id, group.id)
            await orchestrator.set_reminder(stored_contact.id, "Call", date(2024, 3, 16))
            await orchestrator.set_reminder(stored_contact.id, "Call", date(2024, 3, 16))

        assert [log["event"] for log in logs] == [
            "contact_group_assigned",
            "contact_unchanged",
            "contact_reminder_set",
            "contact_unchanged",
        ]
