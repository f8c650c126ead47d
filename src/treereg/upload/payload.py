"""Build registration payloads from intervention records."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from ..records.models import InterventionRecord, SpeciesEntry
from ..validators import parse_plant_date
from .exceptions import NoValidSpeciesError, PayloadError


REGISTRATION_TYPE = "multi-tree-registration"
CAPTURE_MODE = "external"

RESPONSE_FIELDS = (
    "id",
    "hid",
    "treesPlanted",
    "plantProject",
    "plantDate",
    "registrationDate",
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision and a ``Z`` suffix."""

    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def plant_date_timestamp(value: Optional[str]) -> str:
    planted = parse_plant_date(value)
    return format_timestamp(datetime(planted.year, planted.month, planted.day, tzinfo=timezone.utc))


def planted_species(species: List[SpeciesEntry]) -> List[Dict[str, str]]:
    return [
        {"otherSpecies": entry.name, "treeCount": str(entry.quantity)}
        for entry in species
        if entry.valid and entry.quantity > 0
    ]


def build_payload(
    record: InterventionRecord,
    plant_project: str,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Return the registration body for *record*.

    Raises ``DateParseError``, ``NoValidSpeciesError``, ``PayloadError`` or a
    ``GeometryError``; no partial payload is ever returned.
    """

    plant_date = plant_date_timestamp(record.plant_date)

    species = planted_species(record.species)
    if not species:
        raise NoValidSpeciesError(record.folio_no)

    if record.geometry is None:
        raise PayloadError("No geometry document attached")
    geometry = record.geometry.normalized()

    return {
        "type": REGISTRATION_TYPE,
        "captureMode": CAPTURE_MODE,
        "geometry": geometry,
        "plantedSpecies": species,
        "plantDate": plant_date,
        "registrationDate": format_timestamp(now or utc_now()),
        "plantProject": plant_project,
    }


def normalize_response(data: Dict[str, Any]) -> Dict[str, Any]:
    return {name: data.get(name) for name in RESPONSE_FIELDS}
