from __future__ import annotations


class RecencyCheckError(Exception):
    """Base class for failures that abort a check run."""


class FetchError(RecencyCheckError):
    """Raised when the listing page could not be loaded after all retries."""


class ExtractionError(RecencyCheckError):
    """Raised when a listing row lacks its title or time element."""

    def __init__(self, position: int, field: str, detail: str | None = None) -> None:
        self.position = position
        self.field = field
        msg = f"row {position}: missing {field}"
        if detail:
            msg = f"{msg} ({detail})"
        super().__init__(msg)
