"""Geometry decoding and normalization errors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..exceptions import TreeregError


class GeometryError(TreeregError):
    """Base class for geometry-related issues."""


@dataclass
class GeometryDecodeError(GeometryError):
    """Raised when a geometry document cannot be decoded."""

    message: str
    source: Optional[str] = None

    def __post_init__(self) -> None:
        if self.source:
            super().__init__(f"{self.source}: {self.message}")
        else:
            super().__init__(self.message)


class UnsupportedGeometryType(GeometryError):
    """Raised when a geometry cannot be expressed as a Point or Polygon."""

    def __init__(self, geometry_type: object):
        self.geometry_type = geometry_type
        super().__init__(f"Unsupported geometry type: {geometry_type}")
