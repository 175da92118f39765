"""Structured logging for ranking config resolution."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Record attributes lifted into JSON output when present
_EXTRA_FIELDS = (
    "model_id",
    "feature_name",
    "feature_count",
    "degraded_features",
    "missing_parameter",
    "error_code",
)


class JSONFormatter(logging.Formatter):
    """ELK/Datadog style JSON formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_data[name] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Attach a single stream handler to the ``learnrank`` logger tree.

    Safe to call repeatedly; the previous handler is replaced.
    """
    root = logging.getLogger("learnrank")
    for handler in list(root.handlers):
        if getattr(handler, "_learnrank_handler", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._learnrank_handler = True  # type: ignore[attr-defined]
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    root.addHandler(handler)
    root.setLevel(level.upper())


class StructuredLogger:
    """Structured logging for resolution requests."""

    def __init__(self, component: str) -> None:
        self.logger = logging.getLogger(f"learnrank.{component}")
        self.component = component

    def log_resolution(
        self,
        model_id: str,
        feature_count: int,
        degraded_features: list[str],
        **extra: Any,
    ) -> None:
        """Log a completed resolution."""
        if degraded_features:
            self.logger.info(
                "Resolved ranking config for [%s] with %d feature(s), %d degraded to match_none",
                model_id,
                feature_count,
                len(degraded_features),
                extra={
                    "model_id": model_id,
                    "feature_count": feature_count,
                    "degraded_features": degraded_features,
                    **extra,
                },
            )
        else:
            self.logger.debug(
                "Resolved ranking config for [%s] with %d feature(s)",
                model_id,
                feature_count,
                extra={"model_id": model_id, "feature_count": feature_count, **extra},
            )

    def log_error(self, error: Exception, context: dict[str, Any]) -> None:
        """Log error with context; client mistakes are logged as warnings."""
        severity = getattr(getattr(error, "severity", None), "value", None)
        level = logging.WARNING if severity == "user_error" else logging.ERROR
        self.logger.log(
            level,
            f"Error in {self.component}: {error!s}",
            extra={
                "error_code": getattr(getattr(error, "code", None), "value", None),
                **context,
            },
        )
