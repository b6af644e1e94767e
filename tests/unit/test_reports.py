import json
from pathlib import Path

from street_geocoder.common.errors import MalformedRecordError, RemoteLookupFailed
from street_geocoder.common.models import Coordinates, Failed, Miss, Success
from street_geocoder.pipeline.batch import BatchResult
from street_geocoder.pipeline.reports import run_status, write_run_report


def _result(*outcomes) -> BatchResult:
    return BatchResult(records=[{} for _ in outcomes], outcomes=list(outcomes))


def test_run_status_levels():
    ok = Success(Coordinates(lat=1.0, lon=2.0))
    assert run_status(_result(ok, Miss("NO_NUMBER"))) == "success"
    assert run_status(_result(ok, Failed(MalformedRecordError("missing PLZ")))) == "partial"
    assert run_status(_result(ok, Failed(RemoteLookupFailed("down")))) == "error"


def test_write_run_report_lists_failures(tmp_path: Path):
    result = _result(Miss("NO_STREET"), Failed(RemoteLookupFailed("geo lookup failed: HTTP status: 500")))

    path = write_run_report(tmp_path, run_id="run-1", result=result, outputs={"csv": "out.csv"})

    report = json.loads(path.read_text(encoding="utf-8"))
    assert path == tmp_path / "out" / "reports" / "run-1_report.json"
    assert report["counts"] == {"total": 2, "success": 0, "missed": 1, "failed": 1}
    assert report["miss_reasons"] == {"NO_STREET": 1}
    assert report["failures"] == [
        {"record_index": 1, "error_code": "REMOTE_LOOKUP_FAILED", "message": "geo lookup failed: HTTP status: 500"}
    ]
    assert report["hard_failure_count"] == 1
    assert report["outputs"] == {"csv": "out.csv"}
