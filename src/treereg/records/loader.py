"""Read the intervention spreadsheet export into header-keyed rows."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Dict, List, Optional

from .exceptions import IngestionError


FOLIO_COLUMN = "FOLIO No"
REGION_COLUMN = "NOMBRE DE LA REGION"
MUNICIPALITY_COLUMN = "MUNICIPIO PREDIO"
PROPERTY_COLUMN = "NOMBRE DEL PREDIO"
BENEFICIARY_COLUMN = "BENEFICIARIO"
PLANT_DATE_COLUMN = "FEHA DE ENTREGA"
SURFACE_COLUMN = "SUPERFICIE FINAL"
# The export pads this header with spaces; lookups must match it exactly.
PLANTS_DELIVERED_COLUMN = " PLANTA ENTREGADA "

REQUIRED_COLUMNS = [FOLIO_COLUMN]


def read_rows(path: Path) -> List[Dict[str, str]]:
    """Load rows from the CSV at *path*."""

    path = Path(path)
    if not path.is_file():
        raise IngestionError(path=path, message="CSV file not found")
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise IngestionError(path=path, message=f"unreadable CSV ({exc})") from exc
    return parse_rows(text, source=path)


def parse_rows(text: str, source: Optional[Path] = None) -> List[Dict[str, str]]:
    """Parse CSV *text* whose first physical line is a preamble, not the header."""

    source = Path(source) if source is not None else Path("<memory>")
    _, _, body = text.partition("\n")
    reader = csv.DictReader(io.StringIO(body))
    if reader.fieldnames is None:
        raise IngestionError(path=source, message="missing header row")
    missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
    if missing:
        raise IngestionError(
            path=source,
            message=f"missing required columns: {', '.join(missing)}",
        )

    rows: List[Dict[str, str]] = []
    try:
        for raw in reader:
            rows.append({key: (value or "") for key, value in raw.items() if key is not None})
    except csv.Error as exc:
        raise IngestionError(path=source, message=f"malformed CSV ({exc})") from exc
    return rows
