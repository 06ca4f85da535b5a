from .barter import BarterStreamEvent, Venue, project_bar, project_series, venue_for_category

__all__ = [
    "BarterStreamEvent",
    "Venue",
    "project_bar",
    "project_series",
    "venue_for_category",
]
