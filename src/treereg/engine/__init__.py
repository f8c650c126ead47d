"""Record ingestion and editing."""

from .ingest import ingest, load_interventions
from .patches import PatchEntry, apply_patches, load_patches
from .store import RecordPredicate, RecordStore, StoreStats, any_invalid, missing_geometry

__all__ = [
    "ingest",
    "load_interventions",
    "PatchEntry",
    "apply_patches",
    "load_patches",
    "RecordPredicate",
    "RecordStore",
    "StoreStats",
    "any_invalid",
    "missing_geometry",
]
