"""
Server-Timing entries and their header serialization.

An entry is a name plus optional parameters. The `dur` parameter carries the
duration in milliseconds; any other parameter (typically `desc`) is free-form.

Header grammar (one header instance per entry):
    name *(";" key "=" value)

See: https://www.w3.org/TR/server-timing/
"""

import math
import re
from typing import Dict, Optional

HEADER_NAME = "Server-Timing"
DURATION_PARAMETER = "dur"

# RFC 7230 token: 1*tchar
_TOKEN_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

# Header field value characters: HTAB, SP, VCHAR, obs-text
_FIELD_VALUE_RE = re.compile(r"[\t\x20-\x7e\x80-\xff]*")


def is_token(value: str) -> bool:
    return bool(_TOKEN_RE.fullmatch(value))


def _require_text(value: Optional[str], what: str) -> str:
    if value is None:
        raise ValueError(f"{what} must not be None")
    if not isinstance(value, str):
        raise TypeError(f"{what} must be a str, got {type(value).__name__}")
    return value


def require_name(name: Optional[str]) -> str:
    """Validate an entry name, which must be a non-empty header token."""
    name = _require_text(name, "Timing name")
    if not is_token(name):
        raise ValueError(f"Timing name must be a non-empty header token: {name!r}")
    return name


def format_duration(duration: float) -> str:
    """Format milliseconds as a plain decimal, e.g. 250.42 or 0.0001."""
    text = repr(float(duration))
    if "e" in text or "E" in text:
        text = f"{duration:.9f}".rstrip("0")
        if text.endswith("."):
            text += "0"
    return text


def _quote(value: str) -> str:
    if value and is_token(value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class TimingEntry:
    """
    A single Server-Timing entry.

    Usage:
        entry = TimingEntry("db").set_duration(12.5).set_parameter("desc", "Query")
        entry.header_value()  # 'db;dur=12.5;desc=Query'
    """

    def __init__(self, name: str):
        self.name = require_name(name)
        self.parameters: Dict[str, str] = {}

    def set_duration(self, duration: float) -> "TimingEntry":
        """Set the duration in milliseconds. Returns self for chaining."""
        if duration is None:
            raise ValueError("Duration must not be None")
        duration = float(duration)
        if not math.isfinite(duration) or duration < 0:
            raise ValueError(f"Duration must be a finite, non-negative number: {duration}")
        return self.set_parameter(DURATION_PARAMETER, format_duration(duration))

    def set_parameter(self, key: str, value: str) -> "TimingEntry":
        """Set an arbitrary parameter. Returns self for chaining."""
        key = _require_text(key, "Parameter name")
        if not is_token(key):
            raise ValueError(f"Parameter name must be a header token: {key!r}")
        value = _require_text(value, "Parameter value")
        if not _FIELD_VALUE_RE.fullmatch(value):
            raise ValueError(f"Parameter value contains characters not allowed in a header: {value!r}")
        self.parameters[key] = value
        return self

    @property
    def duration(self) -> Optional[float]:
        value = self.parameters.get(DURATION_PARAMETER)
        return float(value) if value is not None else None

    def header_value(self) -> str:
        """Serialize as `name[;key=value]*`."""
        parts = [self.name]
        for key, value in self.parameters.items():
            parts.append(f"{key}={_quote(value)}")
        return ";".join(parts)

    def __repr__(self) -> str:
        return f"TimingEntry({self.header_value()!r})"
