"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from street_geocoder.common.errors import ConfigError
from street_geocoder.common.fs import read_yaml
from street_geocoder.common.http import RetryConfig, TimeoutConfig
from street_geocoder.common.schema import validate_geocode_config

CONFIG_FILENAME = "geocode.yml"
DEFAULT_MAX_WORKERS = 8


@dataclass(frozen=True)
class GeocodeSettings:
    input_path: Path
    delimiter: str
    encoding: str
    output_path: Path
    geojson_path: Path | None
    lat_field: str
    lon_field: str
    street_column: str
    postcode_column: str
    same_column: bool
    base_url: str
    max_workers: int
    rate_per_sec: float | None
    timeout: TimeoutConfig
    retry: RetryConfig


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> dict:
    overlay_path = overlay_config_dir / CONFIG_FILENAME if overlay_config_dir is not None else None
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    return validate_geocode_config(cfg, allow_unknown=allow_unknown)


def _known_fields(config_cls: type, values: dict | None) -> dict:
    names = {f.name for f in fields(config_cls)}
    return {k: v for k, v in (values or {}).items() if k in names}


def settings_from_config(cfg: dict, overrides: dict[str, Any] | None = None) -> GeocodeSettings:
    """Flatten a validated config into settings, applying non-empty overrides."""
    merged = dict(cfg)
    for dotted, value in (overrides or {}).items():
        if value is None:
            continue
        section, key = dotted.split(".", 1)
        merged[section] = {**merged[section], key: value}
    # Overrides bypass the file-level checks, so validate the merged result.
    validate_geocode_config(merged, allow_unknown=True)

    input_cfg = merged["input"]
    output_cfg = merged["output"]
    columns = merged["columns"]
    geocoder = merged["geocoder"]
    timeout_cfg = _known_fields(TimeoutConfig, geocoder.get("timeout"))
    retry_cfg = _known_fields(RetryConfig, geocoder.get("retry"))
    geojson_path = output_cfg.get("geojson_path")

    return GeocodeSettings(
        input_path=Path(input_cfg["path"]),
        delimiter=input_cfg.get("delimiter", ";"),
        encoding=input_cfg.get("encoding", "utf-8-sig"),
        output_path=Path(output_cfg["path"]),
        geojson_path=Path(geojson_path) if geojson_path else None,
        lat_field=output_cfg.get("lat_field", "lat"),
        lon_field=output_cfg.get("lon_field", "lon"),
        street_column=columns["street_and_number"],
        postcode_column=columns["postcode"],
        same_column=bool(columns.get("same_column_for_street_and_number", True)),
        base_url=str(geocoder["base_url"]),
        max_workers=int(geocoder.get("max_workers", DEFAULT_MAX_WORKERS)),
        rate_per_sec=geocoder.get("rate_per_sec"),
        timeout=TimeoutConfig(**timeout_cfg),
        retry=RetryConfig(**retry_cfg),
    )
