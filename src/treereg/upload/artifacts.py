"""Write the result files of an upload run."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Callable, List

import pandas as pd

from ..config import UploadConfig
from .orchestrator import UploadResult
from .payload import format_timestamp, utc_now


SUCCESS_LOG_FILENAME = "success_log.json"
ERROR_LOG_FILENAME = "error_log.json"
FAILED_RECORDS_FILENAME = "failed_records.csv"
SUMMARY_FILENAME = "upload_summary.json"


def build_summary(result: UploadResult, config: UploadConfig, generated_at: datetime) -> dict:
    rate = result.success_rate
    return {
        "uploadDate": format_timestamp(generated_at),
        "totalProcessed": result.total_processed,
        "successful": result.success_count,
        "failed": result.error_count,
        "successRate": "n/a" if rate is None else f"{rate * 100:.1f}%",
        "cancelled": result.cancelled,
        "configuration": config.redacted(),
    }


def write_results(
    result: UploadResult,
    config: UploadConfig,
    out_dir: Path,
    *,
    clock: Callable[[], datetime] = utc_now,
) -> List[Path]:
    """Write logs, failed rows and the summary into *out_dir*.

    Logs and the failed-records CSV are only written when they have entries;
    the summary is always written. Returns the paths written.
    """

    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    if result.success_log.records:
        written.append(_write_json(out_dir / SUCCESS_LOG_FILENAME, result.success_log.as_dict()))
    if result.error_log.records:
        written.append(_write_json(out_dir / ERROR_LOG_FILENAME, result.error_log.as_dict()))
    if result.failed_records:
        path = out_dir / FAILED_RECORDS_FILENAME
        frame = pd.DataFrame([record.original_row for record in result.failed_records])
        frame.to_csv(path, index=False)
        written.append(path)

    summary = build_summary(result, config, clock())
    written.append(_write_json(out_dir / SUMMARY_FILENAME, summary))
    return written


def _write_json(path: Path, payload: dict) -> Path:
    path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return path
