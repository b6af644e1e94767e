"""Three-stage client for the street / house-number / geometry service."""

from __future__ import annotations

import logging
import re
from typing import Any

from street_geocoder.common.errors import RemoteLookupFailed
from street_geocoder.common.http import HttpClient, HttpRequestError
from street_geocoder.common.logging import get_logger, log_event
from street_geocoder.common.models import (
    STREET_AMBIGUOUS,
    STREET_MATCHED,
    STREET_NOT_FOUND,
    Coordinates,
    StreetMatch,
)
from street_geocoder.lookup.numbers import normalise_house_number

_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_postcode(value: object) -> int | None:
    """Leading integer of ``value`` (``" 10115 Berlin"`` -> ``10115``), else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if value is None:
        return None
    match = _LEADING_INT_RE.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


def _as_float(value: object, ctx: str) -> float:
    if isinstance(value, bool) or value is None:
        raise RemoteLookupFailed(f"Missing or invalid {ctx} in geometry payload")
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise RemoteLookupFailed(f"Invalid {ctx} in geometry payload: {value!r}") from exc


class GeocodeClient:
    def __init__(
        self,
        base_url: str,
        *,
        http_client: HttpClient | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.http = http_client or HttpClient()
        self.logger = logger or get_logger("lookup")

    def _get(self, endpoint: str, params: dict[str, Any], *, allow_empty: bool = False) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            return self.http.get_json(url, params=params, allow_empty=allow_empty)
        except HttpRequestError as exc:
            raise RemoteLookupFailed(f"{endpoint} lookup failed: {exc}") from exc

    def _get_candidates(self, endpoint: str, params: dict[str, Any]) -> list[dict]:
        payload = self._get(endpoint, params, allow_empty=True)
        if payload in (None, ""):
            return []
        if not isinstance(payload, list):
            raise RemoteLookupFailed(f"{endpoint} lookup returned {type(payload).__name__}, expected a list")
        if not all(isinstance(item, dict) for item in payload):
            raise RemoteLookupFailed(f"{endpoint} lookup returned a list with non-object items")
        return payload

    def match_street(self, name: str, postal_code: object) -> StreetMatch:
        candidates = self._get_candidates("street", {"street": name})
        if not candidates:
            return StreetMatch(None, STREET_NOT_FOUND)
        if len(candidates) == 1:
            return _street_match(candidates[0])

        wanted = parse_postcode(postal_code)
        in_postcode = [c for c in candidates if wanted is not None and parse_postcode(c.get("plz")) == wanted]
        if len(in_postcode) == 1:
            return _street_match(in_postcode[0])

        log_event(
            self.logger,
            f"no unambiguous street for {name!r} in postcode {postal_code!r}",
            level=logging.WARNING,
            event="STREET_AMBIGUOUS",
            status="miss",
            reason=f"{len(candidates)} candidates, {len(in_postcode)} in postcode",
        )
        return StreetMatch(None, STREET_AMBIGUOUS)

    def lookup_street(self, name: str, postal_code: object) -> Any:
        return self.match_street(name, postal_code).street_id

    def lookup_number(self, street_id: Any, number: str) -> Any:
        candidates = self._get_candidates("num", {"street": street_id})
        found = _find_number(candidates, number)
        if found is None:
            found = _find_number(candidates, normalise_house_number(number))
        if found is None:
            return None
        return found.get("id")

    def lookup_coordinates(self, numbered_id: Any) -> Coordinates | None:
        payload = self._get("geo", {"num": numbered_id}, allow_empty=True)
        if payload in (None, "", {}, []):
            return None
        if not isinstance(payload, dict):
            raise RemoteLookupFailed(f"geo lookup returned {type(payload).__name__}, expected an object")
        return Coordinates(lat=_as_float(payload.get("lat"), "lat"), lon=_as_float(payload.get("lon"), "lon"))


def _street_match(candidate: dict) -> StreetMatch:
    street_id = candidate.get("id")
    if street_id is None:
        return StreetMatch(None, STREET_NOT_FOUND)
    return StreetMatch(street_id, STREET_MATCHED)


def _find_number(candidates: list[dict], number: str) -> dict | None:
    for candidate in candidates:
        value = candidate.get("num")
        if value is not None and str(value) == number:
            return candidate
    return None
