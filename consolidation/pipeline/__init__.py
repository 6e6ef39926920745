"""Consolidation pipeline: pure funnel logic and its orchestrator.

The stage, urgency, reminder, tag, recommendation, intake and board
modules are side-effect free. PipelineOrchestrator composes them with
the contact and group stores.
"""

from consolidation.pipeline.board import build_board
from consolidation.pipeline.intake import build_contact
from consolidation.pipeline.models import (
    Board,
    BoardCard,
    BoardColumn,
    ContactRegistration,
    GroupRecommendation,
)
from consolidation.pipeline.orchestrator import PipelineOrchestrator
from consolidation.pipeline.recommendation import recommend_groups
from consolidation.pipeline.reminders import clear_action, complete_action, set_action
from consolidation.pipeline.stages import STAGE_ORDER, transition
from consolidation.pipeline.tags import add_tag, remove_tag
from consolidation.pipeline.urgency import classify_urgency, reminder_status

__all__ = [
    # Orchestrator
    "PipelineOrchestrator",
    # Pure components
    "STAGE_ORDER",
    "add_tag",
    "build_board",
    "build_contact",
    "classify_urgency",
    "clear_action",
    "complete_action",
    "recommend_groups",
    "reminder_status",
    "remove_tag",
    "set_action",
    "transition",
    # Models
    "Board",
    "BoardCard",
    "BoardColumn",
    "ContactRegistration",
    "GroupRecommendation",
]
