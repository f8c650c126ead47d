"""In-memory store for intervention records."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from ..geometry import GeometryDocument, extract_geometry
from ..records.exceptions import NothingToDeleteError, RecordNotFoundError, RecordPatchError
from ..records.models import InterventionRecord, RecordPatch
from ..records.species import MAX_SPECIES, normalize_species
from ..validators import validate_fields


logger = logging.getLogger(__name__)

RecordPredicate = Callable[[InterventionRecord], bool]


def missing_geometry(record: InterventionRecord) -> bool:
    return record.validation.needs_geojson


def any_invalid(record: InterventionRecord) -> bool:
    return not record.validation.is_valid or record.validation.needs_geojson


@dataclass(frozen=True)
class StoreStats:
    total: int
    ready: int
    invalid: int
    missing_geometry: int
    total_trees: int
    edited: int
    deleted: int

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "ready": self.ready,
            "invalid": self.invalid,
            "missing_geometry": self.missing_geometry,
            "total_trees": self.total_trees,
            "edited": self.edited,
            "deleted": self.deleted,
        }


class RecordStore:
    """Ordered collection of records keyed by id.

    The store is the only owner of its records; callers receive the stored
    objects for reading and go through the methods below to change them.
    """

    missing_geometry = staticmethod(missing_geometry)
    any_invalid = staticmethod(any_invalid)

    def __init__(self, records: Iterable[InterventionRecord] = ()) -> None:
        self._records: Dict[int, InterventionRecord] = {}
        self._deleted = 0
        for record in records:
            if record.id in self._records:
                raise ValueError(f"duplicate record id {record.id}")
            self._records[record.id] = record

    def __iter__(self) -> Iterator[InterventionRecord]:
        return iter(list(self._records.values()))

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    # ------------------------------------------------------------------
    def get(self, record_id: int) -> InterventionRecord:
        try:
            return self._records[record_id]
        except KeyError:
            raise RecordNotFoundError(record_id) from None

    def by_folio(self, folio_no: str) -> Optional[InterventionRecord]:
        for record in self._records.values():
            if record.folio_no == folio_no:
                return record
        return None

    def records(self) -> List[InterventionRecord]:
        return list(self._records.values())

    def ready_records(self) -> List[InterventionRecord]:
        return [record for record in self._records.values() if record.is_ready]

    # ------------------------------------------------------------------
    def update(self, record_id: int, patch: RecordPatch) -> InterventionRecord:
        """Apply *patch* and re-validate; geometry status is left alone."""

        record = self.get(record_id)
        plant_date = record.plant_date if patch.plant_date is None else patch.plant_date
        if patch.species is None:
            species = record.species
        else:
            if len(patch.species) > MAX_SPECIES:
                raise RecordPatchError(
                    f"record {record_id}: at most {MAX_SPECIES} species entries allowed"
                )
            species = normalize_species(patch.species)

        validation = replace(
            validate_fields(plant_date, species),
            needs_geojson=record.validation.needs_geojson,
        )
        record.plant_date = plant_date
        record.species = species
        record.validation = validation
        record.edited = True
        logger.debug(
            "Updated intervention %s",
            record.folio_no,
            extra={"record_id": record_id, "is_valid": validation.is_valid},
        )
        return record

    def attach_geometry(self, record_id: int, document: GeometryDocument) -> InterventionRecord:
        """Attach *document*; the record is untouched if it carries no geometry."""

        record = self.get(record_id)
        extract_geometry(document.data)
        record.geometry = document
        record.validation = record.validation.with_geometry()
        return record

    def attach_geometries(self, documents: Mapping[str, GeometryDocument]) -> List[int]:
        """Attach documents keyed by folio number; return the ids that matched."""

        attached: List[int] = []
        for record in self._records.values():
            document = documents.get(record.folio_no)
            if document is None:
                continue
            self.attach_geometry(record.id, document)
            attached.append(record.id)
        return attached

    # ------------------------------------------------------------------
    def delete(self, record_id: int) -> InterventionRecord:
        record = self.get(record_id)
        del self._records[record_id]
        self._deleted += 1
        return record

    def count_where(self, predicate: RecordPredicate) -> int:
        return sum(1 for record in self._records.values() if predicate(record))

    def delete_where(self, predicate: RecordPredicate) -> List[InterventionRecord]:
        matches = [record for record in self._records.values() if predicate(record)]
        if not matches:
            raise NothingToDeleteError(getattr(predicate, "__name__", "predicate"))
        for record in matches:
            del self._records[record.id]
        self._deleted += len(matches)
        logger.info("Deleted %d interventions", len(matches))
        return matches

    # ------------------------------------------------------------------
    def stats(self) -> StoreStats:
        records = list(self._records.values())
        return StoreStats(
            total=len(records),
            ready=sum(1 for record in records if record.is_ready),
            invalid=sum(1 for record in records if any_invalid(record)),
            missing_geometry=sum(1 for record in records if missing_geometry(record)),
            total_trees=sum(record.total_trees for record in records),
            edited=sum(1 for record in records if record.edited),
            deleted=self._deleted,
        )
