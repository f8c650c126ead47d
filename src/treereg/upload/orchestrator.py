"""Sequential, rate-limited submission of ready interventions."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

import requests

from ..config import UploadConfig
from ..exceptions import ConfigIncompleteError, TreeregError
from ..geometry import GeometryError
from ..records.models import InterventionRecord
from ..validators import DateParseError
from .client import RegistrationClient
from .exceptions import PayloadError, SubmissionError, UploadError
from .payload import build_payload, format_timestamp, normalize_response, utc_now


@dataclass(frozen=True)
class UploadProgress:
    current: int
    total: int


ProgressCallback = Callable[[UploadProgress], None]


class RunState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass
class SuccessEntry:
    folio_no: str
    timestamp: str
    payload: Dict[str, Any]
    response: Dict[str, Any]

    def as_dict(self) -> dict:
        return {
            "folioNo": self.folio_no,
            "timestamp": self.timestamp,
            "payload": self.payload,
            "response": self.response,
        }


@dataclass
class ErrorEntry:
    folio_no: str
    timestamp: str
    payload: Optional[Dict[str, Any]]
    message: str
    kind: str
    status_code: Optional[int] = None
    details: Any = None

    def as_dict(self) -> dict:
        return {
            "folioNo": self.folio_no,
            "timestamp": self.timestamp,
            "payload": self.payload,
            "error": {
                "message": self.message,
                "kind": self.kind,
                "code": self.status_code,
                "details": self.details,
            },
        }


@dataclass
class SubmissionLog:
    counter_key: str
    start_time: str
    records: List[Any] = field(default_factory=list)
    end_time: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.records)

    def as_dict(self) -> dict:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            self.counter_key: self.total,
            "records": [entry.as_dict() for entry in self.records],
        }


@dataclass
class UploadResult:
    total_processed: int
    success_count: int
    error_count: int
    success_log: SubmissionLog
    error_log: SubmissionLog
    failed_records: List[InterventionRecord] = field(default_factory=list)
    cancelled: bool = False

    @property
    def success_rate(self) -> Optional[float]:
        if self.total_processed == 0:
            return None
        return self.success_count / self.total_processed


@dataclass(frozen=True)
class StepOutcome:
    """Result of handling one record: a response or the error that stopped it."""

    record: InterventionRecord
    payload: Optional[Dict[str, Any]] = None
    response: Optional[Dict[str, Any]] = None
    error: Optional[TreeregError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class InterventionUploader:
    """Submit ready records one at a time with a fixed pause between requests."""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        delay: Optional[float] = None,
        sleep_fn: Callable[[float], None] = time.sleep,
        clock: Callable[[], datetime] = utc_now,
        logger: logging.Logger | None = None,
    ) -> None:
        self.session = session
        self.delay = delay
        self.sleep = sleep_fn
        self.clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self.state = RunState.IDLE

    def run(
        self,
        records: Iterable[InterventionRecord],
        config: UploadConfig,
        on_progress: Optional[ProgressCallback] = None,
        cancel: Optional[threading.Event] = None,
    ) -> UploadResult:
        """Submit every ready record in *records*, in order.

        Raises ``ConfigIncompleteError`` before touching any record when the
        configuration is missing a required value. Failures of individual
        records are logged in the result and never stop the run.
        """

        missing = config.missing_fields()
        if missing:
            raise ConfigIncompleteError(missing)
        if self.state is RunState.RUNNING:
            raise UploadError("an upload run is already in progress")

        delay = config.request_delay if self.delay is None else self.delay
        notify = on_progress or _ignore_progress
        ready = [record for record in records if record.is_ready]
        total = len(ready)

        started = format_timestamp(self.clock())
        success_log = SubmissionLog(counter_key="totalSuccessful", start_time=started)
        error_log = SubmissionLog(counter_key="totalErrors", start_time=started)
        failed_records: List[InterventionRecord] = []
        processed = 0
        cancelled = False

        # A session created here is closed when the run ends; injected ones are not.
        session = self.session if self.session is not None else requests.Session()
        client = RegistrationClient(config, session=session)

        self.state = RunState.RUNNING
        self.logger.info("Starting upload of %d interventions", total, extra={"total": total})
        try:
            for index, record in enumerate(ready):
                if cancel is not None and cancel.is_set():
                    cancelled = True
                    self.logger.warning(
                        "Upload cancelled after %d of %d interventions", processed, total
                    )
                    break

                notify(UploadProgress(current=index, total=total))
                outcome = self._step(client, config, record)
                processed += 1
                timestamp = format_timestamp(self.clock())

                if outcome.ok:
                    success_log.records.append(
                        SuccessEntry(
                            folio_no=record.folio_no,
                            timestamp=timestamp,
                            payload=outcome.payload or {},
                            response=normalize_response(outcome.response or {}),
                        )
                    )
                    self.logger.info("Registered intervention %s", record.folio_no)
                else:
                    error_log.records.append(_error_entry(record, timestamp, outcome))
                    failed_records.append(record)
                    self.logger.warning(
                        "Failed to register intervention %s: %s",
                        record.folio_no,
                        outcome.error,
                        extra={"folio_no": record.folio_no},
                    )

                if index < total - 1:
                    self.sleep(delay)

            notify(UploadProgress(current=processed, total=total))
        finally:
            if self.session is None:
                session.close()
            self.state = RunState.COMPLETED

        finished = format_timestamp(self.clock())
        success_log.end_time = finished
        error_log.end_time = finished

        return UploadResult(
            total_processed=processed,
            success_count=success_log.total,
            error_count=error_log.total,
            success_log=success_log,
            error_log=error_log,
            failed_records=failed_records,
            cancelled=cancelled,
        )

    def _step(
        self,
        client: RegistrationClient,
        config: UploadConfig,
        record: InterventionRecord,
    ) -> StepOutcome:
        try:
            payload = build_payload(record, config.plant_project, now=self.clock())
        except (DateParseError, PayloadError, GeometryError) as exc:
            return StepOutcome(record=record, error=exc)

        try:
            response = client.submit(payload)
        except SubmissionError as exc:
            return StepOutcome(record=record, payload=payload, error=exc)
        return StepOutcome(record=record, payload=payload, response=response)


def _ignore_progress(progress: UploadProgress) -> None:
    return None


def _error_entry(record: InterventionRecord, timestamp: str, outcome: StepOutcome) -> ErrorEntry:
    error = outcome.error
    return ErrorEntry(
        folio_no=record.folio_no,
        timestamp=timestamp,
        payload=outcome.payload,
        message=str(error),
        kind=getattr(error, "kind", "payload"),
        status_code=getattr(error, "status_code", None),
        details=getattr(error, "body", None),
    )
