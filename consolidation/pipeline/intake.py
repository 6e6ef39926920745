"""Contact intake.

Validates a registration request and builds the initial contact
record. Whether the referenced group exists is checked by the
orchestrator, which has access to the group store.
"""

from datetime import datetime

from consolidation.contacts.enums import Stage
from consolidation.contacts.models import Contact
from consolidation.exceptions import ValidationFailedError
from consolidation.pipeline.models import ContactRegistration

MIN_NAME_LENGTH = 3


def validate_registration(request: ContactRegistration) -> None:
    """Check the registration form rules.

    Raises:
        ValidationFailedError: On the first rule that fails
    """
    if len(request.name.strip()) < MIN_NAME_LENGTH:
        raise ValidationFailedError(
            f"Name must have at least {MIN_NAME_LENGTH} characters", field="name"
        )
    if not request.phone.strip():
        raise ValidationFailedError("Phone is required", field="phone")
    if request.attends_group and request.group_id is None:
        raise ValidationFailedError(
            "A group must be selected when the contact attends one", field="group_id"
        )


def build_contact(request: ContactRegistration, now: datetime) -> Contact:
    """Build a new contact in the NEW stage from a valid registration.

    A contact who already attends a group has that group recorded as
    both source and destination.
    """
    validate_registration(request)
    group_id = request.group_id if request.attends_group else None
    return Contact(
        organization_id=request.organization_id,
        owner_id=request.owner_id,
        name=request.name.strip(),
        phone=request.phone.strip(),
        address=request.address or None,
        email=request.email or None,
        birth_date=request.birth_date,
        origin_kind=request.origin_kind,
        stage=Stage.NEW,
        source_group_id=group_id,
        destination_group_id=group_id,
        already_in_group=group_id is not None,
        first_visit_date=now.date(),
        notes=request.notes,
        created_at=now,
        updated_at=now,
    )
