"""Human-readable rendering of kline series."""

from __future__ import annotations

from typing import Iterable

from kline_core.data.feed import Bar
from kline_core.utils.timefmt import format_millis

HEADER = ("Time", "Open", "High", "Low", "Close", "Volume", "Turnover")
RULE_WIDTH = 110


def render_header() -> str:
    return (
        f"{HEADER[0]:<20} {HEADER[1]:<12} {HEADER[2]:<12} {HEADER[3]:<12} "
        f"{HEADER[4]:<12} {HEADER[5]:<15} {HEADER[6]:<15}"
    )


def render_row(bar: Bar) -> str:
    return (
        f"{format_millis(bar.start_time):<20} {bar.open:<12.4f} {bar.high:<12.4f} "
        f"{bar.low:<12.4f} {bar.close:<12.4f} {bar.volume:<15.4f} {bar.turnover:<15.4f}"
    )


def render_table(bars: Iterable[Bar]) -> str:
    lines = [render_header(), "-" * RULE_WIDTH]
    lines.extend(render_row(bar) for bar in bars)
    return "\n".join(lines)
