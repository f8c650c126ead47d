"""GeoJSON resolution utilities."""

from .exceptions import GeometryDecodeError, GeometryError, UnsupportedGeometryType
from .resolver import (
    GeometryDocument,
    decode_geometry,
    extract_geometry,
    geometry_filename,
    load_geometry_dir,
    normalize_geometry,
    read_geometry_file,
)

__all__ = [
    "GeometryError",
    "GeometryDecodeError",
    "UnsupportedGeometryType",
    "GeometryDocument",
    "decode_geometry",
    "extract_geometry",
    "geometry_filename",
    "load_geometry_dir",
    "normalize_geometry",
    "read_geometry_file",
]
