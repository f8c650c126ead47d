"""Operator edit files applied to a record store."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config.loader import format_validation_errors
from ..records.exceptions import RecordPatchError
from ..records.models import RecordPatch, SpeciesEntry
from ..records.species import parse_quantity
from .store import RecordStore


class SpeciesEdit(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    quantity: int | str = 0


class PatchEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    folio: str
    plant_date: Optional[str] = None
    species: Optional[List[SpeciesEdit]] = None

    @field_validator("folio")
    @classmethod
    def ensure_folio(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("folio must not be empty")
        return value

    def to_patch(self) -> RecordPatch:
        species = None
        if self.species is not None:
            species = [
                SpeciesEntry(name=item.name, quantity=parse_quantity(item.quantity))
                for item in self.species
            ]
        return RecordPatch(plant_date=self.plant_date, species=species)


class PatchFile(BaseModel):
    patch: List[PatchEntry] = Field(default_factory=list)


def load_patches(path: Path) -> List[PatchEntry]:
    """Read ``[[patch]]`` tables from the TOML file at *path*."""

    path = Path(path)
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except FileNotFoundError as exc:
        raise RecordPatchError(f"{path.name}: file not found") from exc
    except (tomllib.TOMLDecodeError, OSError) as exc:
        raise RecordPatchError(f"{path.name}: failed to read TOML: {exc}") from exc

    try:
        return PatchFile.model_validate(data).patch
    except ValidationError as exc:
        raise RecordPatchError(f"{path.name}: {format_validation_errors(exc)}") from exc


def apply_patches(store: RecordStore, patches: List[PatchEntry]) -> List[Tuple[str, int]]:
    """Apply *patches* by folio number; return ``(folio, record id)`` pairs updated."""

    applied: List[Tuple[str, int]] = []
    for entry in patches:
        record = store.by_folio(entry.folio)
        if record is None:
            raise RecordPatchError(f"no record with folio number {entry.folio}")
        store.update(record.id, entry.to_patch())
        applied.append((entry.folio, record.id))
    return applied
