"""
Audit Logger module for the Namespace SDK.

Every SDK component takes an optional AuditLogger and reports its steps
(listing lookups, simulations, parameter requests, contract calls) through
it. Entries are written as JSON lines, as human-readable text, or both.
Auth tokens, signatures and keys are masked before an entry is stored or
written.
"""

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, TextIO

from .config import LoggingConfig
from .enums import LogLevel

_LEVEL_ORDER = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARN: 30,
    LogLevel.ERROR: 40,
}

OUTPUT_FORMATS = ("json", "text", "both")

# A key is secret when its lowercased name contains one of these
SECRET_KEY_FRAGMENTS = (
    "token", "secret", "password", "auth", "authorization",
    "signature", "private_key", "access_token", "refresh_token",
    "credential",
)

MASK = "***MASKED***"


def is_secret_key(key: Any) -> bool:
    lowered = str(key).lower()
    return any(fragment in lowered for fragment in SECRET_KEY_FRAGMENTS)


def mask_secrets(value: Any) -> Any:
    """Return a copy of value with every secret-named mapping entry masked, at any depth."""
    if isinstance(value, dict):
        return {
            key: MASK if is_secret_key(key) else mask_secrets(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [mask_secrets(item) for item in value]
    return value


@dataclass
class LogEntry:
    """A single log line: when, how severe, which component, what happened."""

    timestamp: str
    level: LogLevel
    component: str
    message: str
    data: dict = field(default_factory=dict)

    def to_json(self) -> str:
        return json.dumps({
            "timestamp": self.timestamp,
            "level": self.level.value,
            "component": self.component,
            "message": self.message,
            "data": self.data,
        }, ensure_ascii=False, default=str)

    def to_text(self) -> str:
        # [timestamp] LEVEL [Component] message {data}
        line = f"[{self.timestamp}] {self.level.value.upper()} [{self.component}] {self.message}"
        if self.data:
            line += " " + json.dumps(self.data, ensure_ascii=False, default=str)
        return line


class AuditLogger:
    """
    Structured logger shared by NamespaceClient, NamespaceApiClient and
    ChainGateway.

    Entries below the minimum level are dropped. Written entries are also
    kept in memory, so callers can inspect what a mint attempt did.
    """

    MASK_VALUE = MASK

    def __init__(
        self,
        output_format: str = "text",
        output_stream: Optional[TextIO] = None,
        level: LogLevel = LogLevel.INFO,
    ):
        """
        Args:
            output_format: 'json', 'text', or 'both' (JSON line first)
            output_stream: Where entries are written (defaults to sys.stderr)
            level: Minimum level to record
        """
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {', '.join(OUTPUT_FORMATS)}, got {output_format!r}"
            )

        self._output_format = output_format
        self._stream = output_stream or sys.stderr
        self._level = level
        self._entries: list[LogEntry] = []

    @classmethod
    def from_config(
        cls,
        config: LoggingConfig,
        output_stream: Optional[TextIO] = None,
    ) -> Optional["AuditLogger"]:
        """Build a logger from configuration; None when logging is disabled."""
        if not config.enabled:
            return None
        return cls(
            output_format=config.output_format,
            output_stream=output_stream,
            level=LogLevel(config.level),
        )

    @property
    def output_format(self) -> str:
        return self._output_format

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return _LEVEL_ORDER[level] >= _LEVEL_ORDER[self._level]

    def log(
        self,
        level: LogLevel,
        component: str,
        message: str,
        data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """Record and write one entry; returns None when the level is filtered out."""
        if not self.is_enabled_for(level):
            return None

        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            level=level,
            component=component,
            message=message,
            data=mask_secrets(data or {}),
        )
        self._entries.append(entry)
        self._write(entry)
        return entry

    def debug(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, component, message, data)

    def info(self, component: str, message: str, data: Optional[dict] = None) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, component, message, data)

    def log_error(
        self,
        component: str,
        message: str,
        error: Optional[Exception] = None,
        additional_data: Optional[dict] = None,
    ) -> Optional[LogEntry]:
        """
        Log a failure at ERROR level.

        The error's type and message are added to the data; SDK errors
        (NamespaceError) also add their code.
        """
        data = dict(additional_data or {})
        if error is not None:
            data["error_type"] = type(error).__name__
            data["error_message"] = str(error)
            code = getattr(error, "code", None)
            if isinstance(code, str):
                data["error_code"] = code
        return self.log(LogLevel.ERROR, component, message, data)

    def _write(self, entry: LogEntry) -> None:
        lines = []
        if self._output_format != "text":
            lines.append(entry.to_json())
        if self._output_format != "json":
            lines.append(entry.to_text())
        self._stream.write("".join(line + "\n" for line in lines))
        self._stream.flush()

    def clear_entries(self) -> None:
        self._entries.clear()
