"""Error taxonomy for kline retrieval."""

from __future__ import annotations

from typing import Any, Optional


class KlineError(Exception):
    """Base class for every failure that aborts a pagination run."""


class InvalidWindow(KlineError, ValueError):
    """Raised when a requested window does not satisfy ``start < end``."""

    def __init__(self, start: int, end: int) -> None:
        self.start = start
        self.end = end
        super().__init__(f"Start time must be before end time (start={start}, end={end})")


class UnsupportedInterval(KlineError, ValueError):
    """Raised for interval codes the provider does not recognize."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Unsupported interval: {code}")


class TransportFailure(KlineError):
    """The underlying page request could not complete."""


class DomainRejection(KlineError):
    """The provider answered with an explicit failure code and message."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        self.message = message
        self.code = code
        super().__init__(f"API error: {message}")


class MalformedRecord(KlineError, ValueError):
    """A raw row failed arity or numeric validation."""

    def __init__(self, field: str, value: Any = None) -> None:
        self.field = field
        self.value = value
        if value is None:
            detail = f"Invalid kline data: missing {field}"
        else:
            detail = f"Invalid kline data: bad {field} {value!r}"
        super().__init__(detail)
