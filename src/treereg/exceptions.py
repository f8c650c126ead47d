"""Custom exception hierarchy for treereg."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence


class TreeregError(Exception):
    """Base error for the treereg package."""


class ConfigError(TreeregError):
    """Raised when a configuration file fails validation."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        self.message = message
        super().__init__(f"{self.path.name}: {self.message}")


class ConfigIncompleteError(TreeregError):
    """Raised when an upload is started without a fully populated config."""

    def __init__(self, missing: Sequence[str]):
        self.missing = list(missing)
        super().__init__(f"upload configuration incomplete: missing {', '.join(self.missing)}")
