# configloader/config/durations.py

"""
Parsing and formatting of human-readable durations such as "15s" or "1h30m".

The accepted grammar is a sequence of decimal numbers, each with an optional
fraction and a mandatory unit suffix, optionally preceded by a sign:
"300ms", "-1.5h", "2h45m". Valid units are "ns", "us" (or "µs"), "ms", "s",
"m" and "h". The lone string "0" is also accepted.
"""

import re
from datetime import timedelta
from typing import Any

# --- Constants ---
_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek small letter mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 60 * 60 * 1_000_000_000,
}

_COMPONENT_RE = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def parse_duration(text: str) -> timedelta:
    """
    Parses a duration string into a timedelta.

    Arithmetic is done in integer nanoseconds, so "1.1s" is exact. The result
    is truncated toward zero at timedelta's microsecond resolution.

    Args:
        text: The duration string, e.g. "15m" or "1h30m".

    Returns:
        The elapsed time as a timedelta.

    Raises:
        ValueError: If the string does not follow the duration grammar.
    """
    if not isinstance(text, str):
        raise TypeError(f"duration must be a string, got {type(text).__name__}")

    s = text
    negative = False
    if s and s[0] in "+-":
        negative = s[0] == "-"
        s = s[1:]
    if s == "0":
        return timedelta(0)
    if not s:
        raise ValueError(f"invalid duration {text!r}")

    total_ns = 0
    pos = 0
    while pos < len(s):
        match = _COMPONENT_RE.match(s, pos)
        whole, frac, unit = match.groups()
        if not whole and not frac:
            raise ValueError(f"invalid duration {text!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {text!r}")
        if unit not in _UNIT_NANOSECONDS:
            raise ValueError(f"unknown unit {unit!r} in duration {text!r}")

        scale = _UNIT_NANOSECONDS[unit]
        total_ns += int(whole or 0) * scale
        if frac:
            total_ns += int(frac) * scale // 10 ** len(frac)
        pos = match.end()

    micros = total_ns // 1_000
    return timedelta(microseconds=-micros if negative else micros)


def to_timedelta(value: Any) -> timedelta:
    """
    Coerces a raw configuration value into a timedelta.

    Strings go through parse_duration, plain numbers are taken as seconds,
    None means "not set" and yields a zero duration.

    Note that a bare number means seconds, not nanoseconds: a file written for
    a loader that reads `duration: 900000000000` as 15 minutes must be changed
    to `duration: 900` or, better, `duration: "15m"`.
    """
    if value is None:
        return timedelta(0)
    if isinstance(value, timedelta):
        return value
    if isinstance(value, bool):
        raise ValueError(f"invalid duration {value!r}")
    if isinstance(value, (int, float)):
        return timedelta(seconds=value)
    if isinstance(value, str):
        return parse_duration(value)
    raise ValueError(f"invalid duration {value!r}")


def _with_fraction(value: int, scale: int) -> str:
    """Renders value/scale as a decimal without trailing zeros."""
    whole, frac = divmod(value, scale)
    if not frac:
        return str(whole)
    digits = str(frac).rjust(len(str(scale)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def format_duration(value: timedelta) -> str:
    """Formats a timedelta in the canonical form accepted by parse_duration, e.g. "1h30m0s"."""
    total_us = (value.days * 86400 + value.seconds) * _US_PER_SECOND + value.microseconds
    if total_us == 0:
        return "0s"

    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)

    # Sub-second values use the smaller units
    if total_us < 1_000:
        return f"{sign}{total_us}µs"
    if total_us < _US_PER_SECOND:
        return f"{sign}{_with_fraction(total_us, 1_000)}ms"

    hours, rem = divmod(total_us, _US_PER_HOUR)
    minutes, rem = divmod(rem, _US_PER_MINUTE)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return out + f"{_with_fraction(rem, _US_PER_SECOND)}s"
