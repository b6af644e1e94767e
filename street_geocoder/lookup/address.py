"""Split a combined "street name + house number" field."""

from __future__ import annotations

import re

from street_geocoder.common.constants import STREET_NAME_FIELD, STREET_NUMBER_FIELD

_FIRST_DIGIT_RE = re.compile(r"[0-9]")
_WHITESPACE_RE = re.compile(r"\s+")


def split_street_and_number(value: str) -> tuple[str, str]:
    """Split at the first digit: ``"Hauptstraße 12 b"`` -> ``("Hauptstraße", "12b")``."""
    match = _FIRST_DIGIT_RE.search(value)
    if match is None:
        return value.rstrip(), ""
    name = value[: match.start()].rstrip()
    number = _WHITESPACE_RE.sub("", value[match.start() :])
    return name, number


def split_records(records: list[dict], column: str, *, same_column: bool = True) -> list[dict]:
    if not same_column:
        # Separate name/number columns are not split here.
        return records

    for record in records:
        value = record.get(column)
        if value is None:
            continue
        record[STREET_NAME_FIELD], record[STREET_NUMBER_FIELD] = split_street_and_number(value)
    return records
