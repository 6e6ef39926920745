"""Stage transition engine.

Moves contacts between funnel stages and derives the side effects of
a move. Backward moves are accepted so that mistakes on the board can
be corrected; callers that want to surface them use is_backward().
"""

from datetime import datetime

from consolidation.contacts.enums import Stage
from consolidation.contacts.models import Contact
from consolidation.exceptions import ValidationFailedError

# Board column order
STAGE_ORDER: tuple[Stage, ...] = (Stage.NEW, Stage.IN_CONTACT, Stage.INTEGRATED)


def parse_stage(value: Stage | str) -> Stage:
    """Coerce a raw value to a Stage.

    Raises:
        ValidationFailedError: If the value is not a defined stage
    """
    try:
        return Stage(value)
    except ValueError:
        raise ValidationFailedError(f"Unknown stage: {value!r}", field="stage") from None


def is_backward(current: Stage, target: Stage) -> bool:
    """Whether moving from current to target goes back in the funnel."""
    return STAGE_ORDER.index(target) < STAGE_ORDER.index(current)


def transition(contact: Contact, target_stage: Stage | str, now: datetime) -> Contact:
    """Move a contact to a target stage.

    Reaching INTEGRATED stamps integrated_at the first time only; later
    moves never clear or overwrite it. Destination group assignment is
    not implied by any stage.

    Args:
        contact: Contact to move (left untouched)
        target_stage: Stage to move to
        now: Current instant, used for timestamps

    Returns:
        The moved contact, or the input itself when already in target_stage

    Raises:
        ValidationFailedError: If target_stage is not a defined stage
    """
    target = parse_stage(target_stage)
    if contact.stage == target:
        return contact

    updates: dict[str, object] = {"stage": target, "updated_at": now}
    if target == Stage.INTEGRATED and contact.integrated_at is None:
        updates["integrated_at"] = now
    return contact.model_copy(update=updates)
