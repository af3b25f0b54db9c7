"""Data models for collected listing entries and validation results."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field

# Raw relative-time text as shown on the page, e.g. "12 minutes ago".
TimeLabel = str


class ParsedTime(BaseModel):
    """Outcome of converting a ``TimeLabel`` into an absolute instant.

    ``anomaly`` is ``None`` when the label was understood; otherwise it holds a
    short reason and ``instant`` is the reference "now".
    """

    label: TimeLabel
    instant: datetime
    anomaly: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.anomaly is None


class ListingEntry(BaseModel):
    """A single item from the listing, in presentation order."""

    position: int
    title: str
    label: TimeLabel
    instant: datetime
    anomaly: Optional[str] = None


class Inversion(BaseModel):
    """An adjacent pair where ``current`` is more recent than ``previous``."""

    index: int
    previous: ListingEntry
    current: ListingEntry
    delta_minutes: int


class ValidationVerdict(BaseModel):
    sorted: bool
    inversions: List[Inversion] = Field(default_factory=list)
    checked: int = 0

    @property
    def first_inversion(self) -> Optional[Inversion]:
        return self.inversions[0] if self.inversions else None


class RunResult(BaseModel):
    """Everything one check run produced, handed to the reporter."""

    url: str
    now: datetime
    entries: List[ListingEntry] = Field(default_factory=list)
    verdict: ValidationVerdict
    elapsed_seconds: float = 0.0
    artifact: Optional[Path] = None

    @property
    def anomalies(self) -> List[ListingEntry]:
        return [e for e in self.entries if e.anomaly is not None]
