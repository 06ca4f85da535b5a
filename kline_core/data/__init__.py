from .feed import Bar, Category, FetchRequest, PageFetcher, TimeWindow
from .intervals import SUPPORTED_INTERVALS, normalize_interval, resolve_interval
from .normalize import normalize_page, normalize_row
from .pagination import PaginationEngine, PaginationResult, Termination
from .bybit import BybitClient

__all__ = [
    "Bar",
    "Category",
    "FetchRequest",
    "PageFetcher",
    "TimeWindow",
    "SUPPORTED_INTERVALS",
    "normalize_interval",
    "resolve_interval",
    "normalize_page",
    "normalize_row",
    "PaginationEngine",
    "PaginationResult",
    "Termination",
    "BybitClient",
]
