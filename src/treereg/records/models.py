"""Data models for intervention records."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple

from ..geometry import GeometryDocument


@dataclass
class SpeciesEntry:
    name: str
    quantity: int

    @property
    def valid(self) -> bool:
        return self.name.strip() != "" and self.quantity > 0

    def as_dict(self) -> dict:
        return {"name": self.name, "quantity": self.quantity, "valid": self.valid}


@dataclass(frozen=True)
class ValidationStatus:
    is_valid: bool
    errors: Tuple[str, ...] = ()
    needs_geojson: bool = True

    def with_geometry(self) -> "ValidationStatus":
        return replace(self, needs_geojson=False)

    @property
    def is_ready(self) -> bool:
        return self.is_valid and not self.needs_geojson


@dataclass
class InterventionRecord:
    id: int
    folio_no: str
    region: str
    municipality: str
    property_name: str
    beneficiary: str
    plant_date: str
    species: List[SpeciesEntry]
    validation: ValidationStatus
    surface: str = ""
    plants_delivered: str = ""
    geometry: Optional[GeometryDocument] = None
    edited: bool = False
    original_row: Dict[str, str] = field(default_factory=dict)

    @property
    def is_ready(self) -> bool:
        return self.validation.is_ready

    @property
    def total_trees(self) -> int:
        return sum(entry.quantity for entry in self.species)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "folio_no": self.folio_no,
            "region": self.region,
            "municipality": self.municipality,
            "property_name": self.property_name,
            "beneficiary": self.beneficiary,
            "plant_date": self.plant_date,
            "species": [entry.as_dict() for entry in self.species],
            "geometry_type": self.geometry.geometry_type if self.geometry else None,
            "edited": self.edited,
            "validation": {
                "is_valid": self.validation.is_valid,
                "errors": list(self.validation.errors),
                "needs_geojson": self.validation.needs_geojson,
            },
        }


@dataclass
class RecordPatch:
    """Operator edits to a record; ``None`` leaves a field unchanged."""

    plant_date: Optional[str] = None
    species: Optional[List[SpeciesEntry]] = None
