"""Strict schema checks for the YAML geocoding config."""

from __future__ import annotations

from street_geocoder.common.errors import ConfigError

TOP_LEVEL_KEYS = {"input", "output", "columns", "geocoder"}
INPUT_KEYS = {"path", "delimiter", "encoding"}
OUTPUT_KEYS = {"path", "geojson_path", "lat_field", "lon_field"}
COLUMN_KEYS = {"street_and_number", "postcode", "same_column_for_street_and_number"}
GEOCODER_KEYS = {"base_url", "max_workers", "rate_per_sec", "timeout", "retry"}


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_positive_number(value: object, ctx: str, *, integer: bool = False) -> None:
    expected = int if integer else (int, float)
    if isinstance(value, bool) or not isinstance(value, expected) or value <= 0:
        kind = "a positive integer" if integer else "a positive number"
        raise ConfigError(f"{ctx} must be {kind}")


def validate_geocode_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "geocode config")
    _assert_required_keys(cfg, TOP_LEVEL_KEYS, "geocode config")
    _assert_no_unknown_keys(cfg, TOP_LEVEL_KEYS, "geocode config", allow_unknown)

    sections = (
        ("input", INPUT_KEYS, {"path"}),
        ("output", OUTPUT_KEYS, {"path"}),
        ("columns", COLUMN_KEYS, {"street_and_number", "postcode"}),
        ("geocoder", GEOCODER_KEYS, {"base_url"}),
    )
    for name, known, required in sections:
        section = _assert_mapping(cfg[name], name)
        _assert_required_keys(section, required, name)
        _assert_no_unknown_keys(section, known, name, allow_unknown)

    geocoder = cfg["geocoder"]
    if not str(geocoder["base_url"]).startswith(("http://", "https://")):
        raise ConfigError("geocoder.base_url must be an http(s) URL")
    if "max_workers" in geocoder:
        _assert_positive_number(geocoder["max_workers"], "geocoder.max_workers", integer=True)
    if geocoder.get("rate_per_sec") is not None:
        _assert_positive_number(geocoder["rate_per_sec"], "geocoder.rate_per_sec")
    if "timeout" in geocoder:
        timeout = _assert_mapping(geocoder["timeout"], "geocoder.timeout")
        _assert_no_unknown_keys(timeout, {"connect", "read"}, "geocoder.timeout", allow_unknown)
        for key, value in timeout.items():
            _assert_positive_number(value, f"geocoder.timeout.{key}")
    if "retry" in geocoder:
        retry = _assert_mapping(geocoder["retry"], "geocoder.retry")
        _assert_no_unknown_keys(retry, {"max_attempts", "multiplier", "max_wait"}, "geocoder.retry", allow_unknown)
        if "max_attempts" in retry:
            _assert_positive_number(retry["max_attempts"], "geocoder.retry.max_attempts", integer=True)

    return cfg
