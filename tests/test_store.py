"""Tests for the record store and its loading entrypoint."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import POLYGON, make_record
from treereg.engine import RecordStore, any_invalid, load_interventions, missing_geometry
from treereg.geometry import GeometryDecodeError, GeometryDocument
from treereg.records import (
    NothingToDeleteError,
    RecordNotFoundError,
    RecordPatch,
    RecordPatchError,
    SpeciesEntry,
)


def _store():
    return RecordStore(
        [
            make_record(0, "A1"),
            make_record(1, "A2", geometry=None),
            make_record(2, "A3", plant_date="02/30/2024"),
            make_record(3, "A4", plant_date="bad", geometry=None),
        ]
    )


def test_get_and_lookup():
    store = _store()
    assert store.get(1).folio_no == "A2"
    assert store.by_folio("A3").id == 2
    assert store.by_folio("missing") is None
    assert 3 in store
    with pytest.raises(RecordNotFoundError):
        store.get(42)


def test_duplicate_ids_rejected():
    with pytest.raises(ValueError):
        RecordStore([make_record(0, "A1"), make_record(0, "A2")])


def test_update_revalidates_and_keeps_geometry_status():
    store = _store()
    record = store.update(2, RecordPatch(plant_date="02/28/2024"))
    assert record.validation.is_valid is True
    assert record.validation.needs_geojson is False
    assert record.is_ready is True
    assert record.edited is True

    record = store.update(1, RecordPatch(plant_date="02/28/2024"))
    assert record.validation.is_valid is True
    assert record.validation.needs_geojson is True
    assert record.is_ready is False


def test_update_normalizes_species():
    store = _store()
    record = store.update(
        0,
        RecordPatch(species=[SpeciesEntry(" Oak ", 12), SpeciesEntry("   ", 4), SpeciesEntry("Ash", 0)]),
    )
    assert [(entry.name, entry.quantity) for entry in record.species] == [("Oak", 12), ("Ash", 0)]
    assert record.validation.errors == ("1 invalid species entries",)


def test_update_rejects_more_than_six_species():
    store = _store()
    before = list(store.get(0).species)
    with pytest.raises(RecordPatchError):
        store.update(0, RecordPatch(species=[SpeciesEntry(f"S{n}", 1) for n in range(7)]))
    assert store.get(0).species == before
    assert store.get(0).edited is False


def test_update_unknown_record():
    with pytest.raises(RecordNotFoundError):
        _store().update(99, RecordPatch(plant_date="1/1/2024"))


def test_attach_geometry_marks_record_ready():
    store = _store()
    record = store.attach_geometry(1, GeometryDocument(data=POLYGON))
    assert record.validation.needs_geojson is False
    assert record.is_ready is True


def test_attach_unsupported_type_is_accepted_until_upload():
    store = _store()
    line = GeometryDocument(data={"type": "LineString", "coordinates": [[0, 0], [1, 1]]})
    record = store.attach_geometry(1, line)
    assert record.is_ready is True
    assert record.geometry.geometry_type == "LineString"


def test_attach_without_geometry_leaves_record_unchanged():
    store = _store()
    with pytest.raises(GeometryDecodeError):
        store.attach_geometry(1, GeometryDocument(data={"type": "FeatureCollection", "features": []}))
    record = store.get(1)
    assert record.geometry is None
    assert record.validation.needs_geojson is True


def test_delete_where_missing_geometry_keeps_records_with_geometry():
    store = _store()
    removed = store.delete_where(missing_geometry)
    assert [record.folio_no for record in removed] == ["A2", "A4"]
    assert [record.folio_no for record in store] == ["A1", "A3"]
    assert all(record.geometry is not None for record in store)


def test_delete_where_any_invalid_leaves_only_ready_records():
    store = _store()
    store.delete_where(any_invalid)
    assert [record.folio_no for record in store] == ["A1"]
    assert store.ready_records() == store.records()


def test_delete_where_without_matches_raises():
    store = RecordStore([make_record(0, "A1")])
    with pytest.raises(NothingToDeleteError) as exc:
        store.delete_where(any_invalid)
    assert "any_invalid" in str(exc.value)
    assert len(store) == 1


def test_stats_track_deletions_and_edits():
    store = _store()
    store.update(2, RecordPatch(plant_date="3/1/2024"))
    store.delete(3)
    stats = store.stats()
    assert stats.total == 3
    assert stats.ready == 2
    assert stats.invalid == 1
    assert stats.missing_geometry == 1
    assert stats.total_trees == 750
    assert stats.edited == 1
    assert stats.deleted == 1


def test_load_interventions_attaches_matching_geometry(write_csv, tmp_path: Path):
    csv_path = write_csv(
        [
            {"FOLIO No": "A1", "FEHA DE ENTREGA": "1/5/2024", "ESPECIE 1": "Pine", "CANTIDAD": "5"},
            {"FOLIO No": "A2", "FEHA DE ENTREGA": "1/6/2024", "ESPECIE 1": "Oak", "CANTIDAD": "3"},
        ]
    )
    geometry_dir = tmp_path / "geo"
    geometry_dir.mkdir()
    (geometry_dir / "folio_A2.geojson").write_text(
        json.dumps({"type": "Feature", "geometry": POLYGON}), encoding="utf-8"
    )

    store = load_interventions(csv_path, geometry_dir)

    assert store.by_folio("A1").is_ready is False
    assert store.by_folio("A2").is_ready is True
    assert store.stats().missing_geometry == 1
