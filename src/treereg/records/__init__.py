"""Intervention record models and source-table reading."""

from .exceptions import (
    IngestionError,
    NothingToDeleteError,
    RecordError,
    RecordNotFoundError,
    RecordPatchError,
)
from .loader import parse_rows, read_rows
from .models import InterventionRecord, RecordPatch, SpeciesEntry, ValidationStatus
from .species import MAX_SPECIES, extract_species, normalize_species, parse_quantity

__all__ = [
    "RecordError",
    "IngestionError",
    "RecordNotFoundError",
    "RecordPatchError",
    "NothingToDeleteError",
    "InterventionRecord",
    "RecordPatch",
    "SpeciesEntry",
    "ValidationStatus",
    "MAX_SPECIES",
    "extract_species",
    "normalize_species",
    "parse_quantity",
    "parse_rows",
    "read_rows",
]
