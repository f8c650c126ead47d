"""Registration upload pipeline."""

from .artifacts import build_summary, write_results
from .client import RegistrationClient
from .exceptions import (
    ApiRejectionError,
    NetworkError,
    NoValidSpeciesError,
    PayloadError,
    SubmissionError,
    UploadError,
)
from .orchestrator import (
    ErrorEntry,
    InterventionUploader,
    RunState,
    SubmissionLog,
    SuccessEntry,
    UploadProgress,
    UploadResult,
)
from .payload import build_payload, format_timestamp, normalize_response

__all__ = [
    "ApiRejectionError",
    "NetworkError",
    "NoValidSpeciesError",
    "PayloadError",
    "SubmissionError",
    "UploadError",
    "ErrorEntry",
    "InterventionUploader",
    "RegistrationClient",
    "RunState",
    "SubmissionLog",
    "SuccessEntry",
    "UploadProgress",
    "UploadResult",
    "build_payload",
    "build_summary",
    "format_timestamp",
    "normalize_response",
    "write_results",
]
