"""Concurrent resolution of a batch of split records."""

from __future__ import annotations

import logging
import time
from collections import Counter
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from street_geocoder.common.constants import LAT_FIELD, LON_FIELD, STREET_NAME_FIELD, STREET_NUMBER_FIELD
from street_geocoder.common.errors import (
    BatchFailedError,
    LookupCancelled,
    MalformedRecordError,
    RemoteLookupFailed,
)
from street_geocoder.common.logging import get_logger, log_event
from street_geocoder.common.models import Failed, Miss, Outcome, RunCounters, Success
from street_geocoder.common.time_utils import elapsed_ms
from street_geocoder.lookup.client import GeocodeClient
from street_geocoder.pipeline.resolver import resolve_address

HARD_FAILURES = (RemoteLookupFailed, LookupCancelled)


@dataclass
class BatchResult:
    records: list[dict]
    outcomes: list[Outcome]
    counters: RunCounters = field(init=False)

    def __post_init__(self) -> None:
        self.counters = RunCounters.from_outcomes(self.outcomes)

    @property
    def failures(self) -> list[tuple[int, Failed]]:
        return [(i, o) for i, o in enumerate(self.outcomes) if isinstance(o, Failed)]

    @property
    def hard_failures(self) -> list[tuple[int, Failed]]:
        return [(i, o) for i, o in self.failures if isinstance(o.cause, HARD_FAILURES)]

    @property
    def malformed(self) -> list[tuple[int, Failed]]:
        return [(i, o) for i, o in self.failures if isinstance(o.cause, MalformedRecordError)]

    @property
    def written_records(self) -> list[dict]:
        return [r for r, o in zip(self.records, self.outcomes) if not isinstance(o, Failed)]

    @property
    def miss_reasons(self) -> dict[str, int]:
        return dict(Counter(o.reason for o in self.outcomes if isinstance(o, Miss)))

    def summary(self) -> str:
        c = self.counters
        text = f"Processed {c.total} records: {c.success} resolved, {c.missed} missed"
        if c.failed:
            codes = Counter(o.error_code for _, o in self.failures)
            detail = ", ".join(f"{code}={count}" for code, count in sorted(codes.items()))
            text += f", {c.failed} failed ({detail})"
        return text

    def raise_for_failures(self) -> None:
        if self.hard_failures:
            raise BatchFailedError(self.summary(), result=self)


def _missing_fields(record: dict, postcode_column: str) -> list[str]:
    required = (STREET_NAME_FIELD, STREET_NUMBER_FIELD, postcode_column)
    return [name for name in required if record.get(name) is None]


def _merge_outcome(record: dict, outcome: Outcome) -> None:
    if isinstance(outcome, Success):
        record[LAT_FIELD] = outcome.coordinates.lat
        record[LON_FIELD] = outcome.coordinates.lon
    elif isinstance(outcome, Miss):
        record[LAT_FIELD] = ""
        record[LON_FIELD] = ""


def run_batch(
    records: list[dict],
    client: GeocodeClient,
    *,
    postcode_column: str,
    max_workers: int = 8,
    fail_fast: bool = False,
    logger: logging.Logger | None = None,
) -> BatchResult:
    """Resolve every record on a bounded thread pool and merge results by position.

    Records missing a required field fail as malformed without any request.
    A ``RemoteLookupFailed`` is recorded against its own record; with
    ``fail_fast`` it also cancels lookups that have not started yet. Running
    lookups always finish. Outcome ``i`` always belongs to ``records[i]``.
    """
    logger = logger or get_logger("batch")
    started_at = time.monotonic()
    outcomes: list[Outcome | None] = [None] * len(records)
    pending: dict[Future, int] = {}

    log_event(logger, "batch start", event="STAGE_START", stage="geocode", status="ok", rows_in=len(records))

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="geocode") as executor:
        for index, record in enumerate(records):
            missing = _missing_fields(record, postcode_column)
            if missing:
                error = MalformedRecordError(f"Record {index} is missing: {', '.join(missing)}")
                outcomes[index] = Failed(error)
                log_event(
                    logger,
                    str(error),
                    level=logging.WARNING,
                    event="RECORD_MALFORMED",
                    status="error",
                    record_index=index,
                    error_code=error.error_code,
                )
                continue
            future = executor.submit(
                resolve_address,
                client,
                record[STREET_NAME_FIELD],
                record[STREET_NUMBER_FIELD],
                record[postcode_column],
            )
            pending[future] = index

        for future in as_completed(pending):
            index = pending[future]
            if future.cancelled():
                continue
            try:
                outcomes[index] = future.result()
            except RemoteLookupFailed as exc:
                outcomes[index] = Failed(exc)
                log_event(
                    logger,
                    f"lookup failed for record {index}: {exc}",
                    level=logging.ERROR,
                    event="RECORD_FAILED",
                    status="error",
                    record_index=index,
                    error_code=exc.error_code,
                )
                if fail_fast:
                    for other in pending:
                        other.cancel()

    for index, outcome in enumerate(outcomes):
        if outcome is None:
            outcomes[index] = Failed(LookupCancelled(f"Record {index} cancelled after an earlier lookup failure"))
            continue
        _merge_outcome(records[index], outcome)
        if isinstance(outcome, Miss):
            log_event(
                logger,
                f"no coordinates for record {index}",
                level=logging.DEBUG,
                event="RECORD_MISS",
                status="miss",
                record_index=index,
                reason=outcome.reason,
            )

    result = BatchResult(records=records, outcomes=outcomes)
    log_event(
        logger,
        result.summary(),
        event="BATCH_SUMMARY",
        stage="geocode",
        status="error" if result.hard_failures else "ok",
        rows_in=len(records),
        rows_out=len(result.written_records),
        duration_ms=elapsed_ms(started_at),
    )
    return result
