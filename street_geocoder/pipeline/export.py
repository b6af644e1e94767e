"""Augmented CSV and GeoJSON export."""

from __future__ import annotations

from pathlib import Path

from street_geocoder.common.fs import write_csv, write_json


def _serialize_row(row: dict, headers: list[str]) -> dict:
    out = {}
    for key in headers:
        value = row.get(key)
        out[key] = "" if value is None else value
    return out


def write_augmented_csv(path: Path, records: list[dict]) -> Path:
    """Write ``records`` with the first record's keys as the header."""
    headers = list(records[0]) if records else []
    write_csv(path, headers, (_serialize_row(row, headers) for row in records))
    return path


def _coordinate(value: object) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def build_feature_collection(records: list[dict], *, lat_field: str = "lat", lon_field: str = "lon") -> dict:
    features = []
    for record in records:
        lat = _coordinate(record.get(lat_field))
        lon = _coordinate(record.get(lon_field))
        if lat is None or lon is None:
            continue
        properties = {k: v for k, v in record.items() if k not in (lat_field, lon_field)}
        features.append(
            {
                "type": "Feature",
                "geometry": {"type": "Point", "coordinates": [lon, lat]},
                "properties": properties,
            }
        )
    return {"type": "FeatureCollection", "features": features}


def write_geojson(path: Path, records: list[dict], *, lat_field: str = "lat", lon_field: str = "lon") -> Path:
    write_json(path, build_feature_collection(records, lat_field=lat_field, lon_field=lon_field))
    return path
