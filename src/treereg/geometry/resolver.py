"""Resolve GeoJSON documents into geometries the registration API accepts."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import GeometryDecodeError, UnsupportedGeometryType


logger = logging.getLogger(__name__)

GEOMETRY_FILE_PATTERN = re.compile(r"^folio_([^.]+)\.(geojson|json)$", re.IGNORECASE)


@dataclass(frozen=True)
class GeometryDocument:
    """A decoded GeoJSON document attached to a record."""

    data: Dict[str, Any]
    source: Optional[str] = None

    @property
    def geometry_type(self) -> Optional[str]:
        try:
            return extract_geometry(self.data).get("type")
        except GeometryDecodeError:
            return None

    def normalized(self) -> Dict[str, Any]:
        return normalize_geometry(self.data)


def geometry_filename(folio_no: str) -> str:
    return f"folio_{folio_no}.geojson"


def extract_geometry(document: Any) -> Dict[str, Any]:
    """Unwrap a bare geometry, a Feature or the first feature of a FeatureCollection."""

    if not isinstance(document, dict):
        raise GeometryDecodeError("document is not a JSON object")

    kind = document.get("type")
    geometry: Any = document
    if kind == "FeatureCollection":
        features = document.get("features") or []
        if not features:
            raise GeometryDecodeError("FeatureCollection contains no features")
        first = features[0]
        geometry = first.get("geometry") if isinstance(first, dict) else None
    elif kind == "Feature":
        geometry = document.get("geometry")
    elif "geometry" in document and kind is None:
        geometry = document["geometry"]

    if not isinstance(geometry, dict) or not geometry.get("type"):
        raise GeometryDecodeError("document contains no geometry")
    return geometry


def normalize_geometry(document: Any) -> Dict[str, Any]:
    """Return a Point or Polygon for *document*.

    MultiPolygons are reduced to their first polygon; every other polygon in
    the collection is discarded.
    """

    geometry = extract_geometry(document)
    kind = geometry["type"]
    if kind in ("Point", "Polygon"):
        return geometry
    if kind == "MultiPolygon":
        polygons = geometry.get("coordinates")
        if not isinstance(polygons, list) or not polygons:
            raise GeometryDecodeError("MultiPolygon has no coordinates")
        if not isinstance(polygons[0], list) or not polygons[0]:
            raise GeometryDecodeError("MultiPolygon has a malformed first polygon")
        # TODO: offer largest-area selection as an alternative policy.
        logger.info(
            "Converting MultiPolygon to Polygon using the first of %d polygons",
            len(polygons),
            extra={"polygon_count": len(polygons)},
        )
        return {"type": "Polygon", "coordinates": polygons[0]}
    raise UnsupportedGeometryType(kind)


def decode_geometry(text: str, source: Optional[str] = None) -> GeometryDocument:
    """Decode GeoJSON *text* into a document that carries a geometry."""

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GeometryDecodeError(f"invalid JSON ({exc})", source=source) from exc
    try:
        extract_geometry(data)
    except GeometryDecodeError as exc:
        raise GeometryDecodeError(exc.message, source=source) from exc
    return GeometryDocument(data=data, source=source)


def read_geometry_file(path: Path) -> GeometryDocument:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise GeometryDecodeError(f"unreadable file ({exc})", source=path.name) from exc
    return decode_geometry(text, source=path.name)


def load_geometry_dir(path: Path) -> Dict[str, GeometryDocument]:
    """Collect geometry documents in *path* keyed by folio number.

    Files that do not follow the ``folio_<key>.geojson`` naming are ignored;
    files that fail to decode are logged and skipped.
    """

    path = Path(path)
    if not path.is_dir():
        raise GeometryDecodeError("geometry directory not found", source=str(path))

    documents: Dict[str, GeometryDocument] = {}
    for file_path in sorted(path.iterdir()):
        if not file_path.is_file():
            continue
        match = GEOMETRY_FILE_PATTERN.match(file_path.name)
        if match is None:
            continue
        try:
            documents[match.group(1)] = read_geometry_file(file_path)
        except GeometryDecodeError as exc:
            logger.warning("Skipping geometry file: %s", exc, extra={"file": file_path.name})
    logger.debug("Loaded %d geometry documents from %s", len(documents), path)
    return documents
