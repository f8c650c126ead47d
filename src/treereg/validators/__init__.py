"""Validation utilities for intervention records."""

from .exceptions import DateParseError
from .records import (
    INVALID_DATE_MESSAGE,
    NO_SPECIES_MESSAGE,
    is_valid_plant_date,
    parse_plant_date,
    validate_fields,
    validate_row,
)

__all__ = [
    "DateParseError",
    "INVALID_DATE_MESSAGE",
    "NO_SPECIES_MESSAGE",
    "is_valid_plant_date",
    "parse_plant_date",
    "validate_fields",
    "validate_row",
]
