"""Logging configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]


class LoggingConfig(BaseModel):
    """How pipeline events are rendered."""

    level: LogLevel = Field(default="INFO", description="Minimum level emitted")
    format: LogFormat = Field(default="json", description="json in deployments, console locally")
    redact_pii: bool = Field(
        default=True,
        description="Mask contact names, phones, e-mails and addresses",
    )
    bind_app_name: bool = Field(
        default=True,
        description="Add the configured app_name to every event as 'app'",
    )


class ObservabilityConfig(BaseModel):
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
