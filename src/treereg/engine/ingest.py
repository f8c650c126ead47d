"""Turn source rows into validated intervention records."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from ..geometry import load_geometry_dir
from ..records.loader import (
    BENEFICIARY_COLUMN,
    FOLIO_COLUMN,
    MUNICIPALITY_COLUMN,
    PLANT_DATE_COLUMN,
    PLANTS_DELIVERED_COLUMN,
    PROPERTY_COLUMN,
    REGION_COLUMN,
    SURFACE_COLUMN,
    read_rows,
)
from ..records.models import InterventionRecord
from ..records.species import extract_species
from ..validators import validate_fields
from .store import RecordStore


logger = logging.getLogger(__name__)


def ingest(rows: Iterable[Mapping[str, Optional[str]]]) -> List[InterventionRecord]:
    """Build records from *rows*, skipping rows without a folio number.

    Ids are assigned densely in row order. No geometry is attached here.
    """

    records: List[InterventionRecord] = []
    for row in rows:
        folio_no = row.get(FOLIO_COLUMN)
        if folio_no is None or folio_no.strip() == "":
            continue
        records.append(_build_record(len(records), folio_no, row))
    return records


def _build_record(
    record_id: int, folio_no: str, row: Mapping[str, Optional[str]]
) -> InterventionRecord:
    def text(column: str) -> str:
        return row.get(column) or ""

    species = extract_species(row)
    plant_date = text(PLANT_DATE_COLUMN)
    return InterventionRecord(
        id=record_id,
        folio_no=folio_no,
        region=text(REGION_COLUMN),
        municipality=text(MUNICIPALITY_COLUMN),
        property_name=text(PROPERTY_COLUMN),
        beneficiary=text(BENEFICIARY_COLUMN),
        plant_date=plant_date,
        species=species,
        validation=validate_fields(plant_date, species),
        surface=text(SURFACE_COLUMN),
        plants_delivered=text(PLANTS_DELIVERED_COLUMN),
        original_row={key: (value or "") for key, value in row.items()},
    )


def load_interventions(
    csv_path: Path, geometry_dir: Optional[Path] = None
) -> RecordStore:
    """Read *csv_path*, build records and attach any matching geometry files."""

    store = RecordStore(ingest(read_rows(csv_path)))
    logger.info("Loaded %d interventions from %s", len(store), Path(csv_path).name)

    if geometry_dir is not None:
        attached = store.attach_geometries(load_geometry_dir(geometry_dir))
        logger.info("Attached geometry to %d interventions", len(attached))

    pending = store.count_where(store.missing_geometry)
    if pending:
        logger.info("%d interventions still need a geometry document", pending)
    return store
