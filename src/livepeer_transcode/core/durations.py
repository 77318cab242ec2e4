"""Duration parsing and formatting.

Durations on the command line use the compact unit-suffixed form common to
media tooling: "2s", "1.5s", "500ms", "1m30s", "1h".
"""

from __future__ import annotations

import re

# Unit suffixes and their length in seconds
_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_COMPONENT_RE = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> float:
    """Parse a duration string into seconds.

    Accepts a sequence of decimal numbers each followed by a unit, e.g.
    "18s", "2.5s", "300ms", "1m30s". A bare "0" is accepted as zero.

    Args:
        value: Duration string.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the string is empty or not a valid duration.

    Examples:
        >>> parse_duration("2s")
        2.0
        >>> parse_duration("1m30s")
        90.0
    """
    text = value.strip()
    if text == "0":
        return 0.0
    if not text:
        raise ValueError("Invalid duration ''")

    total = 0.0
    pos = 0
    for match in _COMPONENT_RE.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()

    if pos != len(text):
        raise ValueError(
            f"Invalid duration '{value}'. "
            "Expected a number followed by a unit (ns, us, ms, s, m, h), "
            "e.g. '2s', '500ms', '1m30s'"
        )
    return total


def format_duration(seconds: float) -> str:
    """Format seconds as a short human-readable duration.

    Args:
        seconds: Duration in seconds.

    Returns:
        Formatted string (e.g., "850ms", "18.0s", "2m05s").
    """
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    if minutes < 60:
        return f"{minutes}m{secs:02d}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes:02d}m{secs:02d}s"
