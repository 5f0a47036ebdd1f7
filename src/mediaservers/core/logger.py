"""
Structured logging with key=value and JSON output support.

[Logger][mediaservers.core.logger.Logger] wraps a standard-library logger
and attaches keyword arguments as structured fields. In the default mode
the fields travel in the ``structured_kv`` record extra and are rendered by
[StructuredFormatter][mediaservers.core.logger.StructuredFormatter]; in
JSON mode each record is a single JSON object for log aggregators.

Plain ``logging.getLogger(__name__)`` calls in the utils layer go through
the same formatter once the CLI installs it on the root handler.

Examples:
    ```python
    from mediaservers.core.logger import Logger

    logger = Logger("resolver")
    logger.info("resolve_completed", blossom=2, nip96=0)
    # info resolver resolve_completed blossom=2 nip96=0

    json_logger = Logger("resolver", json_output=True)
    json_logger.info("resolve_started", relays=3)
    # {"timestamp": "...", "level": "info", "service": "resolver", ...}
    ```
"""

import datetime
import json
import logging
from typing import Any, ClassVar


_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


def _truncate(value: Any, max_value_length: int | None) -> str:
    s = str(value)
    if max_value_length and len(s) > max_value_length:
        return s[:max_value_length] + f"...<truncated {len(s) - max_value_length} chars>"
    return s


def format_kv_pairs(
    kwargs: dict[str, Any],
    max_value_length: int | None = 1000,
    prefix: str = " ",
) -> str:
    """Format a dictionary as space-separated key=value pairs.

    Values longer than ``max_value_length`` are truncated. Values that are
    empty or contain whitespace, ``=``, or quotes are escaped and wrapped
    in double quotes.

    Returns:
        Formatted string such as ``' relay=wss://nos.lol error="timed out"'``,
        or an empty string when *kwargs* is empty.
    """
    if not kwargs:
        return ""

    parts = []
    for k, v in kwargs.items():
        s = _truncate(v, max_value_length)
        if not s or " " in s or "=" in s or '"' in s or "'" in s:
            escaped = s.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'{k}="{escaped}"')
        else:
            parts.append(f"{k}={s}")

    return prefix + " ".join(parts)


class StructuredFormatter(logging.Formatter):
    """Render records as ``level name message key=value ...``.

    Records without ``structured_kv`` (plain stdlib logging calls) are
    emitted with the same prefix and no fields.
    """

    def format(self, record: logging.LogRecord) -> str:
        base = f"{record.levelname.lower()} {record.name} {record.getMessage()}"
        extra: dict[str, Any] = getattr(record, "structured_kv", {})
        if extra:
            base += format_kv_pairs(extra)
        if record.exc_info:
            base += "\n" + self.formatException(record.exc_info)
        return base


class Logger:
    """Structured logger that appends keyword arguments as extra fields.

    All public methods mirror the standard logging API with an added
    ``**kwargs`` parameter.
    """

    _DEFAULT_MAX_VALUE_LENGTH: ClassVar[int] = 1000

    def __init__(
        self,
        name: str,
        *,
        json_output: bool = False,
        max_value_length: int | None = None,
    ) -> None:
        """Initialize a structured logger.

        Args:
            name: Logger name passed to ``logging.getLogger``.
            json_output: Emit JSON objects instead of key=value pairs.
            max_value_length: Per-value truncation limit. Defaults to 1000.
        """
        if max_value_length is None:
            max_value_length = self._DEFAULT_MAX_VALUE_LENGTH
        self._logger = logging.getLogger(name)
        self._json_output = json_output
        self._max_value_length = max_value_length

    @property
    def name(self) -> str:
        return self._logger.name

    def _format_json(self, msg: str, level: str, kwargs: dict[str, Any]) -> str:
        record = {
            "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
            "level": level,
            "service": self._logger.name,
            "message": msg,
            **kwargs,
        }
        return json.dumps(record, default=str)

    def _make_extra(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs:
            return {}
        # Pre-truncate so the formatter receives clean data; short values keep their type
        truncated: dict[str, Any] = {}
        for k, v in kwargs.items():
            if self._max_value_length and len(str(v)) > self._max_value_length:
                truncated[k] = _truncate(v, self._max_value_length)
            else:
                truncated[k] = v
        return {"structured_kv": truncated}

    def _log(
        self, level: str, msg: str, kwargs: dict[str, Any], *, exc_info: bool = False
    ) -> None:
        levelno = _LEVELS[level]
        if not self._logger.isEnabledFor(levelno):
            return
        if self._json_output:
            self._logger.log(levelno, self._format_json(msg, level, kwargs), exc_info=exc_info)
        else:
            self._logger.log(levelno, msg, extra=self._make_extra(kwargs), exc_info=exc_info)

    def debug(self, msg: str, **kwargs: Any) -> None:
        """Log a DEBUG level message with optional key=value pairs."""
        self._log("debug", msg, kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        """Log an INFO level message with optional key=value pairs."""
        self._log("info", msg, kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        """Log a WARNING level message with optional key=value pairs."""
        self._log("warning", msg, kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with optional key=value pairs."""
        self._log("error", msg, kwargs)

    def critical(self, msg: str, **kwargs: Any) -> None:
        """Log a CRITICAL level message with optional key=value pairs."""
        self._log("critical", msg, kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        """Log an ERROR level message with the active exception's traceback."""
        self._log("error", msg, kwargs, exc_info=True)
