"""Tests for registration payload construction."""

from __future__ import annotations

from datetime import datetime

import pytest

from conftest import FIXED_NOW, POLYGON, make_record
from treereg.geometry import UnsupportedGeometryType
from treereg.records import SpeciesEntry
from treereg.upload import NoValidSpeciesError, PayloadError, build_payload, format_timestamp, normalize_response
from treereg.validators import DateParseError


def test_payload_shape():
    record = make_record(
        species=[SpeciesEntry("Pinus greggii", 1000), SpeciesEntry("Quercus", 0), SpeciesEntry("Cedrela", 40)]
    )
    payload = build_payload(record, "proj_123", now=FIXED_NOW)
    assert payload == {
        "type": "multi-tree-registration",
        "captureMode": "external",
        "geometry": POLYGON,
        "plantedSpecies": [
            {"otherSpecies": "Pinus greggii", "treeCount": "1000"},
            {"otherSpecies": "Cedrela", "treeCount": "40"},
        ],
        "plantDate": "2024-03-15T00:00:00.000Z",
        "registrationDate": "2024-05-01T12:00:00.000Z",
        "plantProject": "proj_123",
    }


def test_multipolygon_is_sent_as_first_polygon():
    ring = POLYGON["coordinates"]
    other = [[[0, 0], [1, 0], [1, 1], [0, 0]]]
    record = make_record(geometry={"type": "MultiPolygon", "coordinates": [ring, other]})
    payload = build_payload(record, "proj_123", now=FIXED_NOW)
    assert payload["geometry"] == {"type": "Polygon", "coordinates": ring}


def test_invalid_date_fails_before_anything_else():
    record = make_record(plant_date="02/30/2024", species=[], geometry=None)
    with pytest.raises(DateParseError):
        build_payload(record, "proj_123", now=FIXED_NOW)


def test_no_positive_species_fails():
    record = make_record(species=[SpeciesEntry("Pine", 0)])
    with pytest.raises(NoValidSpeciesError) as exc:
        build_payload(record, "proj_123", now=FIXED_NOW)
    assert str(exc.value) == "No valid planted species found"


def test_missing_geometry_fails():
    with pytest.raises(PayloadError):
        build_payload(make_record(geometry=None), "proj_123", now=FIXED_NOW)


def test_unsupported_geometry_fails():
    record = make_record(geometry={"type": "LineString", "coordinates": [[0, 0], [1, 1]]})
    with pytest.raises(UnsupportedGeometryType) as exc:
        build_payload(record, "proj_123", now=FIXED_NOW)
    assert str(exc.value) == "Unsupported geometry type: LineString"


def test_format_timestamp_treats_naive_values_as_utc():
    assert format_timestamp(datetime(2024, 1, 2, 3, 4, 5, 678900)) == "2024-01-02T03:04:05.678Z"


def test_normalize_response_keeps_known_fields():
    data = {"id": "int_1", "hid": "ABC123", "treesPlanted": 40, "extra": True}
    assert normalize_response(data) == {
        "id": "int_1",
        "hid": "ABC123",
        "treesPlanted": 40,
        "plantProject": None,
        "plantDate": None,
        "registrationDate": None,
    }
