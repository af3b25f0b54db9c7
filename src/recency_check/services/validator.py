from __future__ import annotations

from datetime import timedelta
from typing import List, Sequence

from recency_check.models import Inversion, ListingEntry, ValidationVerdict


class OrderValidator:
    """Check that entries run from newest to oldest.

    Equal instants are tolerated: labels only resolve to the minute, so two
    entries with the same label cannot be told apart. By default scanning
    stops at the first inversion; ``exhaustive=True`` records every one.
    """

    def __init__(self, exhaustive: bool = False) -> None:
        self.exhaustive = exhaustive

    def validate(self, entries: Sequence[ListingEntry]) -> ValidationVerdict:
        inversions: List[Inversion] = []
        checked = min(len(entries), 1)
        for i in range(1, len(entries)):
            checked = i + 1
            prev, cur = entries[i - 1], entries[i]
            if cur.instant == prev.instant:
                continue
            if cur.instant > prev.instant:
                inversions.append(
                    Inversion(
                        index=i,
                        previous=prev,
                        current=cur,
                        delta_minutes=round((cur.instant - prev.instant) / timedelta(minutes=1)),
                    )
                )
                if not self.exhaustive:
                    break
        return ValidationVerdict(sorted=not inversions, inversions=inversions, checked=checked)


def validate_order(entries: Sequence[ListingEntry], exhaustive: bool = False) -> ValidationVerdict:
    return OrderValidator(exhaustive=exhaustive).validate(entries)
