"""Tests for the error taxonomy and structured logging."""

import json
import logging

import pytest

from learnrank.framework.errors import (
    ErrorCode,
    ErrorDetails,
    ErrorSeverity,
    IncorrectConfigTypeError,
    InternalError,
    InvalidConfigError,
    ModelNotFoundError,
    StorageError,
    TemplateRenderError,
    to_learnrank_error,
)
from learnrank.observability import JSONFormatter, StructuredLogger, configure_logging


class TestErrors:
    """Codes, severities and serialization."""

    def test_incorrect_config_type_message(self) -> None:
        error = IncorrectConfigTypeError(actual="regression", expected="learning_to_rank")

        assert "[regression]" in error.message
        assert "[learning_to_rank]" in error.message
        assert error.severity is ErrorSeverity.USER_ERROR

    def test_to_dict(self) -> None:
        error = ModelNotFoundError("m")

        assert error.to_dict() == {
            "error": "NOT_FOUND",
            "message": "Could not find trained model [m]",
            "details": {"model_id": "m"},
            "severity": "user_error",
        }
        assert isinstance(error, StorageError)

    def test_to_details(self) -> None:
        details = TemplateRenderError("boom", template="{{ x", feature_name="f").to_details()

        assert isinstance(details, ErrorDetails)
        assert details.code is ErrorCode.TEMPLATE_RENDER_ERROR
        assert details.context == {"feature_name": "f", "template": "{{ x"}
        assert details.to_dict()["severity"] == "fatal"

    def test_long_templates_truncated(self) -> None:
        error = TemplateRenderError("boom", template="x" * 500)

        assert len(error.details["template"]) == 203

    def test_storage_errors_transient(self) -> None:
        assert StorageError("down").severity is ErrorSeverity.TRANSIENT

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (ValueError("bad"), InvalidConfigError),
            (OSError("disk"), StorageError),
            (RuntimeError("?"), InternalError),
        ],
    )
    def test_boundary_translation(self, exc: Exception, expected: type) -> None:
        assert isinstance(to_learnrank_error(exc), expected)

    def test_boundary_translation_keeps_known_errors(self) -> None:
        error = ModelNotFoundError("m")

        assert to_learnrank_error(error) is error


class TestLogging:
    """JSON formatting and the structured logger."""

    def test_json_formatter_includes_extras(self) -> None:
        record = logging.LogRecord("learnrank.test", logging.INFO, __file__, 1, "hello %s", ("x",), None)
        record.model_id = "m"
        record.degraded_features = ["f1"]

        data = json.loads(JSONFormatter().format(record))

        assert data["message"] == "hello x"
        assert data["level"] == "INFO"
        assert data["model_id"] == "m"
        assert data["degraded_features"] == ["f1"]
        assert "feature_name" not in data

    def test_configure_logging_replaces_handler(self) -> None:
        configure_logging("DEBUG", json_format=True)
        configure_logging("WARNING")

        root = logging.getLogger("learnrank")
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_structured_logger_levels(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.DEBUG, logger="learnrank.ltr.service")
        events = StructuredLogger("ltr.service")

        events.log_resolution("m", feature_count=2, degraded_features=[])
        events.log_resolution("m", feature_count=2, degraded_features=["f1"])
        events.log_error(ModelNotFoundError("m"), {"model_id": "m"})
        events.log_error(StorageError("down"), {"model_id": "m"})

        levels = [r.levelno for r in caplog.records]
        assert levels == [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR]
        assert caplog.records[2].error_code == "NOT_FOUND"
        assert caplog.records[3].error_code == "STORAGE_ERROR"
