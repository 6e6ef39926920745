"""Group recommendation engine.

Scores candidate small groups for a contact with a few cheap
heuristics (age vs. audience, address token overlap, a small bonus
for general-purpose groups) and returns a short ranked list. The
result is a suggestion for a human; nothing is assigned here.
"""

from datetime import date

from consolidation.contacts.enums import AudienceCategory
from consolidation.contacts.models import Contact, Group
from consolidation.pipeline.models import GroupRecommendation

DEFAULT_MAX_RESULTS = 3
DEFAULT_MIN_TOKEN_LENGTH = 4

AGE_MATCH_SCORE = 10
ADULT_AUDIENCE_SCORE = 5
PROXIMITY_SCORE = 8
GENERAL_AUDIENCE_SCORE = 2

KIDS_MAX_AGE = 12
YOUTH_MIN_AGE = 13
YOUTH_MAX_AGE = 25

REASON_AGE_KIDS = "age match (kids)"
REASON_AGE_YOUTH = "age match (youth)"
REASON_PROXIMITY = "proximity"

_GENERAL_AUDIENCES = frozenset({AudienceCategory.MIXED, AudienceCategory.FAMILY})
_AGE_SPECIFIC_AUDIENCES = frozenset({AudienceCategory.KIDS, AudienceCategory.YOUTH})


def completed_years(birth_date: date, today: date) -> int:
    """Age in completed years on a given day."""
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def address_tokens(address: str, min_length: int = DEFAULT_MIN_TOKEN_LENGTH) -> list[str]:
    """Lowercased whitespace-separated words of at least min_length characters."""
    return [part for part in address.lower().split() if len(part) >= min_length]


def score_group(
    contact: Contact,
    group: Group,
    age: int | None,
    *,
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
) -> GroupRecommendation:
    """Score a single group for a contact.

    Args:
        contact: Contact looking for a group
        group: Candidate group
        age: Contact age in completed years, or None to skip age scoring
        min_token_length: Shortest address word considered for proximity

    Returns:
        The group with its score and reasons
    """
    score = 0
    reasons: list[str] = []
    audience = group.audience_category

    if age is not None:
        if age <= KIDS_MAX_AGE and audience == AudienceCategory.KIDS:
            score += AGE_MATCH_SCORE
            reasons.append(REASON_AGE_KIDS)
        elif YOUTH_MIN_AGE <= age <= YOUTH_MAX_AGE and audience == AudienceCategory.YOUTH:
            score += AGE_MATCH_SCORE
            reasons.append(REASON_AGE_YOUTH)
        elif age > YOUTH_MAX_AGE and audience not in _AGE_SPECIFIC_AUDIENCES:
            # Weak signal, not worth a reason
            score += ADULT_AUDIENCE_SCORE

    if contact.address and group.address:
        group_address = group.address.lower()
        tokens = address_tokens(contact.address, min_token_length)
        if any(token in group_address for token in tokens):
            score += PROXIMITY_SCORE
            reasons.append(REASON_PROXIMITY)

    if audience in _GENERAL_AUDIENCES:
        score += GENERAL_AUDIENCE_SCORE

    return GroupRecommendation(group=group, score=score, reasons=reasons)


def recommend_groups(
    contact: Contact,
    groups: list[Group],
    today: date,
    *,
    limit: int = DEFAULT_MAX_RESULTS,
    min_token_length: int = DEFAULT_MIN_TOKEN_LENGTH,
) -> list[GroupRecommendation]:
    """Rank candidate groups for a contact.

    Ties keep the order of ``groups``, so results are deterministic.
    Groups scoring zero are still returned when there are fewer than
    ``limit`` better candidates.

    Args:
        contact: Contact looking for a group
        groups: Candidate groups, normally the organization's active groups
        today: Day used to compute the contact's age
        limit: Maximum number of recommendations
        min_token_length: Shortest address word considered for proximity

    Returns:
        Up to ``limit`` recommendations, highest score first
    """
    age = completed_years(contact.birth_date, today) if contact.birth_date else None
    scored = [
        score_group(contact, group, age, min_token_length=min_token_length)
        for group in groups
    ]
    # sorted() is stable
    scored = sorted(scored, key=lambda rec: rec.score, reverse=True)
    return scored[:limit]
