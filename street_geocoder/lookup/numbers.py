"""House-number relaxation for numbers that fail an exact match."""

from __future__ import annotations

import re

_SUFFIX_LETTERS_RE = re.compile(r"[abAB]")


def normalise_house_number(number: str) -> str:
    """Relax ``number`` once.

    Keeps the part before a range (``12-14`` -> ``12``) or shared-entry marker
    (``3/1`` -> ``3``), drops ``a``/``b`` suffix letters and trims whitespace.
    The result is stable under repeated application.
    """
    cleaned = number.split("-", 1)[0]
    cleaned = cleaned.split("/", 1)[0]
    cleaned = _SUFFIX_LETTERS_RE.sub("", cleaned)
    return cleaned.strip()
