from .listing import (
    Inversion,
    ListingEntry,
    ParsedTime,
    RunResult,
    TimeLabel,
    ValidationVerdict,
)

__all__ = [
    "Inversion",
    "ListingEntry",
    "ParsedTime",
    "RunResult",
    "TimeLabel",
    "ValidationVerdict",
]
