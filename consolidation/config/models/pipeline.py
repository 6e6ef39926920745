"""Consolidation pipeline configuration models."""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator, model_validator


class UrgencyConfig(BaseModel):
    """Thresholds for flagging contacts that sit in the NEW stage."""

    stale_warning_days: int = Field(
        default=7,
        ge=0,
        description="Days in NEW after which a contact is flagged stale",
    )
    stale_critical_days: int = Field(
        default=14,
        ge=0,
        description="Days in NEW after which staleness becomes critical",
    )

    @model_validator(mode="after")
    def validate_thresholds(self) -> "UrgencyConfig":
        """Ensure the critical threshold is past the warning threshold."""
        if self.stale_critical_days <= self.stale_warning_days:
            raise ValueError("stale_critical_days must be greater than stale_warning_days")
        return self


class RecommendationConfig(BaseModel):
    """Group recommendation settings."""

    max_results: int = Field(
        default=3,
        gt=0,
        description="Number of groups suggested per contact",
    )
    min_token_length: int = Field(
        default=4,
        gt=0,
        description="Shortest address word used for proximity matching",
    )


class PipelineConfig(BaseModel):
    """Consolidation pipeline configuration."""

    timezone: str = Field(
        default="UTC",
        description="IANA timezone where calendar days are counted",
    )
    urgency: UrgencyConfig = Field(default_factory=UrgencyConfig)
    recommendation: RecommendationConfig = Field(default_factory=RecommendationConfig)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value
