"""Shared fixtures for treereg tests."""

from __future__ import annotations

import csv
import io
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest
import requests

from treereg.geometry import GeometryDocument
from treereg.records import InterventionRecord, SpeciesEntry
from treereg.records.species import SPECIES_COLUMNS
from treereg.validators import validate_fields


HEADER = [
    "FOLIO No",
    "NOMBRE DE LA REGION",
    "MUNICIPIO PREDIO",
    "NOMBRE DEL PREDIO",
    "BENEFICIARIO",
    "FEHA DE ENTREGA",
    "SUPERFICIE FINAL",
    " PLANTA ENTREGADA ",
] + [column for pair in SPECIES_COLUMNS for column in pair]

POLYGON = {
    "type": "Polygon",
    "coordinates": [[[-99.1, 19.4], [-99.0, 19.4], [-99.0, 19.5], [-99.1, 19.4]]],
}

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def build_csv(rows: List[Dict[str, str]], preamble: str = "REPORTE DE ENTREGA DE PLANTA") -> str:
    buffer = io.StringIO()
    buffer.write(preamble + "\n")
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(HEADER)
    for row in rows:
        writer.writerow([row.get(column, "") for column in HEADER])
    return buffer.getvalue()


@pytest.fixture
def write_csv(tmp_path: Path):
    def _write(rows: List[Dict[str, str]], name: str = "interventions.csv") -> Path:
        path = tmp_path / name
        path.write_text(build_csv(rows), encoding="utf-8")
        return path

    return _write


def make_record(
    record_id: int = 0,
    folio_no: str = "PB2401001",
    plant_date: str = "03/15/2024",
    species: Optional[List[SpeciesEntry]] = None,
    geometry: Optional[dict] = POLYGON,
) -> InterventionRecord:
    if species is None:
        species = [SpeciesEntry(name="Pinus greggii", quantity=250)]
    validation = validate_fields(plant_date, species)
    document = None
    if geometry is not None:
        document = GeometryDocument(data=geometry, source=f"folio_{folio_no}.geojson")
        validation = validation.with_geometry()
    return InterventionRecord(
        id=record_id,
        folio_no=folio_no,
        region="Mixteca",
        municipality="Tlaxiaco",
        property_name="El Encinal",
        beneficiary="Comunidad San Juan",
        plant_date=plant_date,
        species=species,
        validation=validation,
        geometry=document,
        original_row={"FOLIO No": folio_no, " PLANTA ENTREGADA ": "250"},
    )


class FakeResponse:
    def __init__(self, *, status_code=200, json_data=None, text: str = ""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text
        self.ok = status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("no JSON body")
        return self._json_data


class FakeSession:
    """Records POSTs and replays queued responses or exceptions."""

    def __init__(self, responses=None):
        self.post_calls = []
        self.responses = list(responses or [])
        self.closed = False

    def close(self):
        self.closed = True

    def post(self, url, json=None, headers=None, timeout=None):
        self.post_calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.responses:
            outcome = self.responses.pop(0)
        else:
            outcome = FakeResponse(json_data={"id": f"int_{len(self.post_calls)}"})
        if isinstance(outcome, requests.RequestException):
            raise outcome
        return outcome
