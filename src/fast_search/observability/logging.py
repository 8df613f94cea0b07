"""Structured JSON log output correlated with the active span."""

from __future__ import annotations

from datetime import datetime, timezone
import logging
import sys
from typing import IO, TYPE_CHECKING, Any

import orjson

from fast_search.observability.context import get_log_context


if TYPE_CHECKING:
    from fast_search.config import SearchSettings

_STANDARD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def _clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _to_json(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return list(value)
    return str(value)


class JsonFormatter(logging.Formatter):
    """Render each record as a single-line JSON object.

    Records carry the fields bound by ``create_span`` (trace id, span id and
    the engine name) plus anything passed through ``extra=``. Extras named
    like credentials are masked and long string values are clipped.
    """

    MAX_MESSAGE_LEN = 2000
    MAX_VALUE_LEN = 500
    REDACT_KEYS = frozenset({"password", "token", "api_key", "secret", "authorization"})

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _clip(record.getMessage(), self.MAX_MESSAGE_LEN),
        }
        entry.update(get_log_context())

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key in _STANDARD_ATTRS or key.startswith("_"):
                continue
            if key.lower() in self.REDACT_KEYS:
                entry[key] = "[REDACTED]"
            elif isinstance(value, str):
                entry[key] = _clip(value, self.MAX_VALUE_LEN)
            else:
                entry[key] = value

        return orjson.dumps(entry, default=_to_json).decode("utf-8")


def configure_logging(
    level: str = "info",
    json_output: bool = True,
    *,
    logger_levels: dict[str, str] | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Replace the root handlers with one stream handler.

    Args:
        level: Root log level name, case-insensitive.
        json_output: Use ``JsonFormatter`` when True, a plain text line otherwise.
        logger_levels: Per-logger overrides, e.g. ``{"fast_search.search": "debug"}``.
        stream: Output stream, stdout by default.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    root.addHandler(handler)

    for logger_name, logger_level in (logger_levels or {}).items():
        logging.getLogger(logger_name).setLevel(getattr(logging, logger_level.upper(), logging.INFO))


def configure_logging_from_settings(settings: SearchSettings) -> None:
    """Apply ``SearchSettings.log_level`` and ``log_json`` to the root logger."""
    configure_logging(settings.log_level, settings.log_json)
