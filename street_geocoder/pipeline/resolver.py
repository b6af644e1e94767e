"""Per-record street -> number -> geometry resolution."""

from __future__ import annotations

from street_geocoder.common.models import (
    MISS_AMBIGUOUS_STREET,
    MISS_NO_COORDINATES,
    MISS_NO_NUMBER,
    MISS_NO_STREET,
    STREET_AMBIGUOUS,
    Miss,
    Outcome,
    Success,
)
from street_geocoder.lookup.client import GeocodeClient


def resolve_address(client: GeocodeClient, street_name: str, street_number: str, postal_code: object) -> Outcome:
    """Run the three dependent lookups for one address.

    Each stage feeds the next, so the calls are strictly sequential. A stage
    with no answer ends the record as a ``Miss``; ``RemoteLookupFailed`` is
    not caught here.
    """
    street = client.match_street(street_name, postal_code)
    if not street.matched:
        return Miss(MISS_AMBIGUOUS_STREET if street.status == STREET_AMBIGUOUS else MISS_NO_STREET)

    numbered_id = client.lookup_number(street.street_id, street_number)
    if numbered_id is None:
        return Miss(MISS_NO_NUMBER)

    coordinates = client.lookup_coordinates(numbered_id)
    if coordinates is None:
        return Miss(MISS_NO_COORDINATES)

    return Success(coordinates)
