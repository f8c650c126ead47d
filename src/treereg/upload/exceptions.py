"""Errors raised while building or submitting registrations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..exceptions import TreeregError


class UploadError(TreeregError):
    """Base class for upload issues."""


class PayloadError(UploadError):
    """Raised when a record cannot be turned into a submission payload."""


class NoValidSpeciesError(PayloadError):
    def __init__(self, folio_no: str):
        self.folio_no = folio_no
        super().__init__("No valid planted species found")


class SubmissionError(UploadError):
    """Raised when the registration service does not accept a payload."""

    kind = "submission"


class NetworkError(SubmissionError):
    """The request never produced an HTTP response."""

    kind = "network"


@dataclass
class ApiRejectionError(SubmissionError):
    """The service answered with a non-success status."""

    status_code: int
    body: Any = None

    kind = "api"

    def __post_init__(self) -> None:
        super().__init__(f"Request failed with status code {self.status_code}")
