# ProxySpec
# Copyright (C) 2025 Amirreza "Farnam" Taheri
# This program comes with ABSOLUTELY NO WARRANTY; for details type `show w`.
# This is free software, and you are welcome to redistribute it
# under certain conditions; type `show c` for details.

"""Typed access to the free-form option map of a spec string.

Query parameters of a spec land in a flat ``str -> Any`` map. The
compiler reads typed values out of it and deletes every key it turns
into a typed field, so only options nobody understood are passed on to
the runtime components as generic metadata.
"""
from __future__ import annotations

import re
from datetime import timedelta
from typing import Any, Dict, Iterator, Optional

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")

_TRUE_STRINGS = {"1", "t", "T", "true", "TRUE", "True"}


def parse_duration(value: str) -> timedelta:
    """
    Parse a Go-style duration string such as ``"30s"`` or ``"1m30s"``.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration: {value!r}")

    seconds = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            raise ValueError(f"invalid duration: {value!r}")
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    return timedelta(seconds=sign * seconds)


def format_duration(value: timedelta) -> str:
    """Render a timedelta the way Go prints a ``time.Duration``."""
    total = value.total_seconds()
    if total == 0:
        return "0s"
    sign = "-" if total < 0 else ""
    total = abs(total)
    if total < 1:
        return f"{sign}{total * 1000:g}ms"

    hours, rem = divmod(total, 3600)
    minutes, seconds = divmod(rem, 60)
    secs = f"{round(seconds, 9):g}s"
    if hours:
        return f"{sign}{int(hours)}h{int(minutes)}m{secs}"
    if minutes:
        return f"{sign}{int(minutes)}m{secs}"
    return f"{sign}{secs}"


class Metadata:
    """
    A thin wrapper over a metadata dict with typed getters.

    Getters accept several aliases and return the first one that yields a
    non-zero value. Conversions never raise: a value that cannot be read
    as the requested type counts as absent.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = data if data is not None else {}

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)

    def as_dict(self) -> Dict[str, Any]:
        """Return an independent copy of the remaining entries."""
        return {
            k: list(v) if isinstance(v, list) else v for k, v in self._data.items()
        }

    def get_string(self, *keys: str) -> str:
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, bool):
                value = "true" if value else "false"
            elif value is not None and not isinstance(value, str):
                value = str(value)
            if value:
                return value
        return ""

    def get_int(self, *keys: str) -> int:
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, bool):
                number = int(value)
            elif isinstance(value, int):
                number = value
            elif isinstance(value, str):
                try:
                    number = int(value.strip())
                except ValueError:
                    number = 0
            else:
                number = 0
            if number:
                return number
        return 0

    def get_bool(self, *keys: str) -> bool:
        for key in keys:
            value = self._data.get(key)
            if isinstance(value, bool):
                if value:
                    return True
            elif isinstance(value, int):
                if value == 1:
                    return True
            elif isinstance(value, str) and value in _TRUE_STRINGS:
                return True
        return False

    def get_duration(self, *keys: str) -> timedelta:
        for key in keys:
            value = self._data.get(key)
            duration = timedelta(0)
            if isinstance(value, timedelta):
                duration = value
            elif isinstance(value, bool):
                pass
            elif isinstance(value, (int, float)):
                duration = timedelta(seconds=value)
            elif isinstance(value, str):
                try:
                    duration = parse_duration(value)
                except ValueError:
                    duration = timedelta(0)
                if not duration:
                    # bare integers are seconds
                    try:
                        duration = timedelta(seconds=int(value.strip()))
                    except ValueError:
                        duration = timedelta(0)
            if duration:
                return duration
        return timedelta(0)

    def pop_string(self, *keys: str) -> str:
        """Read the first non-empty alias, then delete every alias."""
        value = self.get_string(*keys)
        self.delete(*keys)
        return value
