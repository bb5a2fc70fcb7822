from __future__ import annotations


class SearchValidationError(ValueError):
    """Rejected search input, raised before any network call."""

    def __init__(self, message: str, *, field: str) -> None:
        super().__init__(message)
        self.field = field
