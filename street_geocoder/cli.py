"""CLI entrypoint for the street address geocoding pipeline."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from street_geocoder.common.config_loader import GeocodeSettings, load_config, settings_from_config
from street_geocoder.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from street_geocoder.common.errors import BatchFailedError, PipelineError
from street_geocoder.common.fs import read_csv_records
from street_geocoder.common.http import HttpClient
from street_geocoder.common.logging import build_logger, close_logger, log_event
from street_geocoder.common.time_utils import generate_run_id
from street_geocoder.lookup.address import split_records
from street_geocoder.lookup.client import GeocodeClient
from street_geocoder.pipeline.batch import BatchResult, run_batch
from street_geocoder.pipeline.export import write_augmented_csv, write_geojson
from street_geocoder.pipeline.reports import write_run_report


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", nargs="?", default="geocode", choices=STAGES)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--strict", action="store_true", help="write nothing if any remote lookup failed")
    parser.add_argument("--fail-fast", action="store_true", help="cancel pending lookups after the first failure")
    parser.add_argument("--input", default=None)
    parser.add_argument("--output", default=None)
    parser.add_argument("--geojson", default=None)
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--max-workers", type=int, default=None)
    return parser.parse_args(argv)


def _overrides(args: argparse.Namespace) -> dict:
    return {
        "input.path": args.input,
        "output.path": args.output,
        "output.geojson_path": args.geojson,
        "geocoder.base_url": args.base_url,
        "geocoder.max_workers": args.max_workers,
    }


def geocode_table(settings: GeocodeSettings, logger: logging.Logger, *, fail_fast: bool = False) -> BatchResult:
    records = read_csv_records(settings.input_path, delimiter=settings.delimiter, encoding=settings.encoding)
    split_records(records, settings.street_column, same_column=settings.same_column)

    with HttpClient(timeout=settings.timeout, retry=settings.retry, rate_per_sec=settings.rate_per_sec) as http:
        client = GeocodeClient(settings.base_url, http_client=http, logger=logger)
        return run_batch(
            records,
            client,
            postcode_column=settings.postcode_column,
            max_workers=settings.max_workers,
            fail_fast=fail_fast,
            logger=logger,
        )


def write_outputs(settings: GeocodeSettings, result: BatchResult) -> dict[str, str | None]:
    records = result.written_records
    csv_path = write_augmented_csv(settings.output_path, records)
    geojson_path = None
    if settings.geojson_path is not None:
        geojson_path = write_geojson(
            settings.geojson_path,
            records,
            lat_field=settings.lat_field,
            lon_field=settings.lon_field,
        )
    return {"csv": str(csv_path), "geojson": str(geojson_path) if geojson_path else None}


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    data_dir = Path(args.data_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    try:
        log_event(logger, "run start", run_id=run_id, event="RUN_START", status="ok")
        try:
            cfg = load_config(Path(args.config_dir), overlay_config_dir=overlay_config_dir)
            settings = settings_from_config(cfg, _overrides(args))
            result = geocode_table(settings, logger, fail_fast=args.fail_fast)
        except PipelineError as exc:
            log_event(
                logger,
                f"run failed: {exc}",
                level=logging.ERROR,
                run_id=run_id,
                event="STAGE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            return EXIT_HARD_FAIL

        outputs: dict[str, str | None] = {}
        try:
            result.raise_for_failures()
        except BatchFailedError as exc:
            log_event(
                logger,
                str(exc),
                level=logging.ERROR,
                run_id=run_id,
                event="STAGE_FAIL",
                status="error",
                error_code=exc.error_code,
            )
            if args.strict:
                write_run_report(data_dir, run_id=run_id, result=result, outputs=outputs)
                return EXIT_HARD_FAIL

        outputs = write_outputs(settings, result)
        report_path = write_run_report(data_dir, run_id=run_id, result=result, outputs=outputs)
        log_event(
            logger,
            f"run end, report at {report_path}",
            run_id=run_id,
            event="RUN_END",
            status="error" if result.failures else "ok",
            rows_out=len(result.written_records),
        )
        if result.failures:
            return EXIT_PARTIAL
        return EXIT_SUCCESS
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return run_command(args)


if __name__ == "__main__":
    raise SystemExit(main())
