"""Filesystem helpers for YAML config, CSV tables and JSON artefacts."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Iterable, Mapping

from street_geocoder.common.errors import InputError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def read_csv_records(path: Path, *, delimiter: str = ";", encoding: str = "utf-8-sig") -> list[dict[str, str]]:
    if not path.exists():
        raise InputError(f"Input table not found: {path}")
    try:
        with path.open("r", encoding=encoding, newline="") as f:
            reader = csv.DictReader(f, delimiter=delimiter)
            # DictReader puts overflow cells under a None key; drop them.
            return [{k: v for k, v in row.items() if k is not None} for row in reader]
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise InputError(f"Could not read input table {path}: {exc}") from exc


def write_csv(path: Path, headers: list[str], rows: Iterable[Mapping[str, object]]) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=headers, extrasaction="ignore")
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
