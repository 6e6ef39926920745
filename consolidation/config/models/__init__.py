"""Configuration model exports.

This module exports all configuration models for easy access:

    from consolidation.config.models import PipelineConfig, LoggingConfig
"""

from consolidation.config.models.observability import LoggingConfig, ObservabilityConfig
from consolidation.config.models.pipeline import (
    PipelineConfig,
    RecommendationConfig,
    UrgencyConfig,
)

__all__ = [
    "LoggingConfig",
    "ObservabilityConfig",
    "PipelineConfig",
    "RecommendationConfig",
    "UrgencyConfig",
]
