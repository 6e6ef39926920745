"""Structured logging with structlog.

JSON lines in deployed environments, colored console output during
development. Contact records hold personal data, so a redaction
processor runs before rendering unless explicitly disabled.
"""

import logging
import re
import sys
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, cast

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from consolidation.config.settings import Settings

REDACTED = "[REDACTED]"

# Event keys whose values are always masked, compared lowercased
SENSITIVE_KEYS: frozenset[str] = frozenset({
    # contact personal data
    "name",
    "phone",
    "email",
    "address",
    "birth_date",
    "notes",
    "next_action_text",
    # credentials
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
    "access_token",
    "refresh_token",
    "credentials",
})

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
# Area code, then two digit blocks; leaves ISO dates and UUIDs alone
PHONE_PATTERN = re.compile(r"(?<![\w-])\+?\(?\d{2,3}\)?[\s-]?\d{4,5}[\s-]?\d{4}(?![\w-])")


class PIIRedactor:
    """Mask personal data in an event dict.

    Values under a sensitive key are replaced wholesale. Everywhere else,
    strings are scanned for e-mail addresses and phone numbers, walking
    into nested dicts and lists.
    """

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._redact(event_dict))

    def _redact(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return {
                key: REDACTED if str(key).lower() in SENSITIVE_KEYS else self._redact(item)
                for key, item in value.items()
            }
        if isinstance(value, list | tuple):
            return [self._redact(item) for item in value]
        if isinstance(value, str):
            return PHONE_PATTERN.sub("[PHONE]", EMAIL_PATTERN.sub("[EMAIL]", value))
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "json" or "console"
        redact_pii: Mask contact personal data before rendering
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if redact_pii:
        processors.append(PIIRedactor())
    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    level_number = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: "Settings") -> None:
    config = settings.observability.logging
    setup_logging(level=config.level, format=config.format, redact_pii=config.redact_pii)
    if config.bind_app_name:
        structlog.contextvars.bind_contextvars(app=settings.app_name)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger; pass the module's __name__."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
