"""Field-level validation for intervention records."""

from __future__ import annotations

import re
from datetime import date
from typing import List, Mapping, Optional, Sequence

from ..records.loader import PLANT_DATE_COLUMN
from ..records.models import SpeciesEntry, ValidationStatus
from ..records.species import extract_species
from .exceptions import DateParseError


INVALID_DATE_MESSAGE = "Invalid or missing plant date"
NO_SPECIES_MESSAGE = "No species data found"

_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")


def parse_plant_date(value: Optional[str]) -> date:
    """Parse an ``M/D/YYYY`` string, rejecting dates that do not exist."""

    text = (value or "").strip()
    match = _DATE_PATTERN.match(text)
    if match is None:
        raise DateParseError(value or "")
    month, day, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise DateParseError(value or "") from exc


def is_valid_plant_date(value: Optional[str]) -> bool:
    try:
        parse_plant_date(value)
    except DateParseError:
        return False
    return True


def validate_fields(
    plant_date: Optional[str], species: Sequence[SpeciesEntry]
) -> ValidationStatus:
    """Compute the validation status for a plant date and species list.

    ``needs_geojson`` is always true here; attaching geometry clears it.
    """

    errors: List[str] = []
    if not is_valid_plant_date(plant_date):
        errors.append(INVALID_DATE_MESSAGE)

    if not species:
        errors.append(NO_SPECIES_MESSAGE)
    else:
        invalid = sum(1 for entry in species if not entry.valid)
        if invalid:
            errors.append(f"{invalid} invalid species entries")

    return ValidationStatus(is_valid=not errors, errors=tuple(errors), needs_geojson=True)


def validate_row(row: Mapping[str, Optional[str]]) -> ValidationStatus:
    return validate_fields(row.get(PLANT_DATE_COLUMN), extract_species(row))
