"""Positional species columns and their extraction rule."""

from __future__ import annotations

import re
from typing import Iterable, List, Mapping, Optional, Tuple

from .models import SpeciesEntry


MAX_SPECIES = 6

_LEADING_INT = re.compile(r"^[+-]?\d+")


def species_columns(slot: int) -> Tuple[str, str]:
    """Return the (name, quantity) column pair for 1-based *slot*."""

    if not 1 <= slot <= MAX_SPECIES:
        raise ValueError(f"species slot must be within 1..{MAX_SPECIES}")
    if slot == 1:
        return "ESPECIE 1", "CANTIDAD"
    return f"ESPECIE {slot}", f"CANTIDAD_{slot - 1}"


SPECIES_COLUMNS = [species_columns(slot) for slot in range(1, MAX_SPECIES + 1)]


def parse_quantity(value: object) -> int:
    """Parse a quantity such as ``"1,000"``; anything unparseable is 0."""

    if value is None:
        return 0
    text = str(value).replace(",", "").strip()
    match = _LEADING_INT.match(text)
    if match is None:
        return 0
    return int(match.group())


def extract_species(row: Mapping[str, Optional[str]]) -> List[SpeciesEntry]:
    """Read up to six species entries from a source row, in slot order.

    Every slot is probed; slots with a blank name are skipped without ending
    the scan.
    """

    species: List[SpeciesEntry] = []
    for name_column, quantity_column in SPECIES_COLUMNS:
        name = (row.get(name_column) or "").strip()
        if not name:
            continue
        species.append(SpeciesEntry(name=name, quantity=parse_quantity(row.get(quantity_column))))
    return species


def normalize_species(entries: Iterable[SpeciesEntry]) -> List[SpeciesEntry]:
    """Apply the extraction rule to edited entries."""

    normalized: List[SpeciesEntry] = []
    for entry in list(entries)[:MAX_SPECIES]:
        name = entry.name.strip()
        if not name:
            continue
        normalized.append(SpeciesEntry(name=name, quantity=parse_quantity(entry.quantity)))
    return normalized
