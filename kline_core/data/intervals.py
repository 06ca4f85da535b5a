"""Bybit kline interval codes and their durations."""

from __future__ import annotations

from kline_core.errors import UnsupportedInterval

MINUTE_MS = 60_000

# "M" is a fixed 30-day month, not calendar-accurate.
INTERVAL_MS: dict[str, int] = {
    "1": MINUTE_MS,
    "3": 3 * MINUTE_MS,
    "5": 5 * MINUTE_MS,
    "15": 15 * MINUTE_MS,
    "30": 30 * MINUTE_MS,
    "60": 60 * MINUTE_MS,
    "120": 120 * MINUTE_MS,
    "240": 240 * MINUTE_MS,
    "360": 360 * MINUTE_MS,
    "720": 720 * MINUTE_MS,
    "D": 86_400_000,
    "W": 604_800_000,
    "M": 2_592_000_000,
}

SUPPORTED_INTERVALS = tuple(INTERVAL_MS)

_ALIASES = {
    "day": "D",
    "week": "W",
    "month": "M",
}


def normalize_interval(code: str) -> str:
    """Return the canonical Bybit code for ``code``.

    Matching is case-insensitive: ``"d"``, ``"D"`` and ``"Day"`` all give ``"D"``.
    """

    text = str(code).strip()
    if text.upper() in INTERVAL_MS:
        return text.upper()
    alias = _ALIASES.get(text.lower())
    if alias is None:
        raise UnsupportedInterval(code)
    return alias


def resolve_interval(code: str) -> int:
    """Map an interval code to its duration in milliseconds."""

    return INTERVAL_MS[normalize_interval(code)]
