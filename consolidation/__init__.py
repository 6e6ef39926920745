"""Consolidation: visitor follow-up pipeline for church small-group integration.

Tracks first-time contacts from first encounter through integration into a
small group: funnel stages, urgency triage, next-action reminders, tags and
group recommendations.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
