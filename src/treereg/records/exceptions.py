"""Record loading and editing errors."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..exceptions import TreeregError


class RecordError(TreeregError):
    """Base class for record-related issues."""


@dataclass
class IngestionError(RecordError):
    """Raised when the source table cannot be loaded at all."""

    path: Path
    message: str

    def __post_init__(self) -> None:
        super().__init__(f"{self.message} ({self.path})")


class RecordNotFoundError(RecordError, KeyError):
    def __init__(self, record_id: int):
        self.record_id = record_id
        super().__init__(f"no record with id {record_id}")

    def __str__(self) -> str:
        return self.args[0]


class RecordPatchError(RecordError):
    """Raised when an edit cannot be applied to a record."""


class NothingToDeleteError(RecordError):
    """Raised when a bulk deletion matches no records."""

    def __init__(self, predicate_name: str):
        self.predicate_name = predicate_name
        super().__init__(f"no records match '{predicate_name}'")
