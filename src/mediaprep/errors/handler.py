import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from . import MediaPrepError, UnsupportedFormatError, ValidationError
from ..events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    message: str = ""
    context: dict = field(default_factory=dict)


def severity_for(error: Exception) -> ErrorSeverity:
    """Pick a severity from the exception type when the caller gives none."""
    if isinstance(error, (ValidationError, UnsupportedFormatError)):
        return ErrorSeverity.WARNING
    if isinstance(error, (MediaPrepError, OSError)):
        return ErrorSeverity.ERROR
    return ErrorSeverity.CRITICAL


class ErrorHandler:
    """Logs pipeline failures and publishes them as events."""

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._user_callback: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_user_callback(self, callback: Callable[[str, ErrorSeverity], None]):
        self._user_callback = callback

    def handle(
        self,
        error: Exception,
        severity: Optional[ErrorSeverity] = None,
        context: Optional[dict] = None,
    ) -> str:
        """Report *error* and return the message to show the user."""
        severity = severity or severity_for(error)
        context = context or {}
        message = str(error) or error.__class__.__name__

        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", error.__class__.__name__, message, extra={"context": context})

        self._events.publish(ErrorOccurredEvent(
            error=error,
            severity=severity,
            message=message,
            context=context,
        ))

        if self._user_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._user_callback(message, severity)
        return message
