"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Union

STREET_MATCHED = "matched"
STREET_NOT_FOUND = "not_found"
STREET_AMBIGUOUS = "ambiguous"

MISS_NO_STREET = "NO_STREET"
MISS_AMBIGUOUS_STREET = "AMBIGUOUS_STREET"
MISS_NO_NUMBER = "NO_NUMBER"
MISS_NO_COORDINATES = "NO_COORDINATES"


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float


@dataclass(frozen=True)
class StreetMatch:
    street_id: Any
    status: str

    @property
    def matched(self) -> bool:
        return self.status == STREET_MATCHED


@dataclass(frozen=True)
class Success:
    coordinates: Coordinates


@dataclass(frozen=True)
class Miss:
    reason: str


@dataclass(frozen=True)
class Failed:
    cause: Exception

    @property
    def error_code(self) -> str:
        return getattr(self.cause, "error_code", "UNEXPECTED_ERROR")


Outcome = Union[Success, Miss, Failed]


@dataclass(frozen=True)
class RunCounters:
    total: int = 0
    success: int = 0
    missed: int = 0
    failed: int = 0

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[Outcome]) -> "RunCounters":
        total = success = missed = failed = 0
        for outcome in outcomes:
            total += 1
            if isinstance(outcome, Success):
                success += 1
            elif isinstance(outcome, Miss):
                missed += 1
            else:
                failed += 1
        return cls(total=total, success=success, missed=missed, failed=failed)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)
