import logging
from unittest.mock import Mock

import pytest

from mediaprep.errors import CropError, DecodeError, UnsupportedFormatError, ValidationError
from mediaprep.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity, severity_for
from mediaprep.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = ValueError("test error")
    message = handler.handle(error, ErrorSeverity.ERROR, {"file": "a.png"})

    assert message == "test error"
    logger.error.assert_called()
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity is ErrorSeverity.ERROR
    assert event.message == "test error"
    assert event.context == {"file": "a.png"}


@pytest.mark.parametrize(
    "error,expected",
    [
        (ValidationError("too big"), ErrorSeverity.WARNING),
        (UnsupportedFormatError("svg"), ErrorSeverity.WARNING),
        (DecodeError("broken"), ErrorSeverity.ERROR),
        (CropError("not ready"), ErrorSeverity.ERROR),
        (OSError("disk full"), ErrorSeverity.ERROR),
        (RuntimeError("bug"), ErrorSeverity.CRITICAL),
    ],
)
def test_severity_for(error, expected):
    assert severity_for(error) is expected


def test_severity_defaults_from_error_type():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    ErrorHandler(logger, event_bus).handle(ValidationError("too big"))

    logger.warning.assert_called()
    logger.error.assert_not_called()
    assert event_bus.publish.call_args[0][0].severity is ErrorSeverity.WARNING


def test_message_falls_back_to_class_name():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    assert handler.handle(DecodeError()) == "DecodeError"


def test_user_callback():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_user_callback(callback)

    handler.handle(RuntimeError("upload failed"), ErrorSeverity.CRITICAL)

    callback.assert_called_with("upload failed", ErrorSeverity.CRITICAL)


def test_user_callback_ignores_minor_severities():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_user_callback(callback)

    handler.handle(Exception("info"), ErrorSeverity.INFO)
    handler.handle(ValidationError("warn"))

    callback.assert_not_called()
