"""Validation errors."""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import TreeregError


@dataclass
class DateParseError(TreeregError):
    """Raised when a plant date is not a real M/D/YYYY calendar date."""

    value: str

    def __post_init__(self) -> None:
        super().__init__(f"invalid plant date '{self.value}'")
