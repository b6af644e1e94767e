"""Run report for one geocoding batch."""

from __future__ import annotations

from pathlib import Path

from street_geocoder.common.fs import write_json
from street_geocoder.pipeline.batch import BatchResult


def run_status(result: BatchResult) -> str:
    if result.hard_failures:
        return "error"
    if result.malformed:
        return "partial"
    return "success"


def write_run_report(
    data_dir: Path,
    *,
    run_id: str,
    result: BatchResult,
    outputs: dict[str, str | None] | None = None,
) -> Path:
    failures = [
        {"record_index": index, "error_code": outcome.error_code, "message": str(outcome.cause)}
        for index, outcome in result.failures
    ]
    payload = {
        "run_id": run_id,
        "status": run_status(result),
        "counts": result.counters.to_dict(),
        "miss_reasons": result.miss_reasons,
        "failures": failures,
        "hard_failure_count": len(result.hard_failures),
        "malformed_count": len(result.malformed),
        "outputs": outputs or {},
    }
    report_path = data_dir / "out" / "reports" / f"{run_id}_report.json"
    write_json(report_path, payload)
    return report_path
