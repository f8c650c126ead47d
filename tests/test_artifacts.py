"""Tests for upload result files."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from conftest import FIXED_NOW, FakeResponse, FakeSession, make_record
from treereg.config import UploadConfig
from treereg.upload import InterventionUploader, build_summary, write_results


CONFIG = UploadConfig(
    api_url="https://example.test/interventions",
    bearer_token="secret",
    tenant_key="ten_1",
    plant_project="proj_1",
)


def _run(responses):
    uploader = InterventionUploader(
        session=FakeSession(responses),
        sleep_fn=lambda _: None,
        clock=lambda: FIXED_NOW,
    )
    records = [make_record(0, "A1"), make_record(1, "A2"), make_record(2, "A3")]
    return uploader.run(records, CONFIG)


def test_write_results_with_failures(tmp_path: Path) -> None:
    result = _run([FakeResponse(status_code=200, json_data={"id": "int_1"}), FakeResponse(status_code=403)])

    written = write_results(result, CONFIG, tmp_path / "out", clock=lambda: FIXED_NOW)

    names = [path.name for path in written]
    assert names == ["success_log.json", "error_log.json", "failed_records.csv", "upload_summary.json"]

    summary = json.loads((tmp_path / "out" / "upload_summary.json").read_text(encoding="utf-8"))
    assert summary["uploadDate"] == "2024-05-01T12:00:00.000Z"
    assert summary["totalProcessed"] == 3
    assert summary["successful"] == 2
    assert summary["failed"] == 1
    assert summary["successRate"] == "66.7%"
    assert summary["configuration"]["bearer_token"] == "***"
    assert "secret" not in json.dumps(summary)

    failed = pd.read_csv(tmp_path / "out" / "failed_records.csv", dtype=str)
    assert list(failed.columns) == ["FOLIO No", " PLANTA ENTREGADA "]
    assert failed["FOLIO No"].tolist() == ["A2"]


def test_only_summary_written_for_empty_run(tmp_path: Path) -> None:
    uploader = InterventionUploader(session=FakeSession(), clock=lambda: FIXED_NOW)
    result = uploader.run([], CONFIG)

    written = write_results(result, CONFIG, tmp_path, clock=lambda: FIXED_NOW)

    assert [path.name for path in written] == ["upload_summary.json"]
    summary = build_summary(result, CONFIG, FIXED_NOW)
    assert summary["successRate"] == "n/a"
    assert summary["totalProcessed"] == 0


def test_all_successful_skips_error_files(tmp_path: Path) -> None:
    result = _run([])
    written = write_results(result, CONFIG, tmp_path, clock=lambda: FIXED_NOW)
    assert [path.name for path in written] == ["success_log.json", "upload_summary.json"]
    assert build_summary(result, CONFIG, FIXED_NOW)["successRate"] == "100.0%"
