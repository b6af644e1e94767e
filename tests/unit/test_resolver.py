from __future__ import annotations

import pytest

from street_geocoder.common.errors import RemoteLookupFailed
from street_geocoder.common.http import RetryableHttpError
from street_geocoder.common.models import (
    MISS_AMBIGUOUS_STREET,
    MISS_NO_COORDINATES,
    MISS_NO_NUMBER,
    MISS_NO_STREET,
    Coordinates,
    Miss,
    Success,
)
from street_geocoder.lookup.client import GeocodeClient
from street_geocoder.pipeline.resolver import resolve_address


class FakeHttpClient:
    def __init__(self, routes: dict, fail_endpoint: str | None = None):
        self.routes = routes
        self.fail_endpoint = fail_endpoint
        self.endpoints: list[str] = []

    def get_json(self, url: str, *, params=None, **_kwargs):
        endpoint = url.rsplit("/", 1)[-1]
        self.endpoints.append(endpoint)
        if endpoint == self.fail_endpoint:
            raise RetryableHttpError("Retryable HTTP status: 503")
        key = next(iter(params.values()))
        return self.routes[endpoint].get(key)

    def close(self):
        return None


ROUTES = {
    "street": {
        "Hauptstraße": [{"id": 1, "plz": 10115}, {"id": 2, "plz": 10117}],
        "Ringweg": [{"id": 3, "plz": 10115}],
    },
    "num": {
        1: [{"id": "1-12", "num": "12"}, {"id": "1-14", "num": "14"}],
        3: [{"id": "3-1", "num": "1"}],
    },
    "geo": {
        "1-12": {"lat": 52.53, "lon": 13.38},
        "1-14": "",
        "3-1": {"lat": 52.50, "lon": 13.40},
    },
}


def _client(fail_endpoint: str | None = None) -> GeocodeClient:
    return GeocodeClient("https://geo.example/", http_client=FakeHttpClient(ROUTES, fail_endpoint))


def test_resolves_through_all_three_stages():
    client = _client()
    outcome = resolve_address(client, "Ringweg", "1", "10115")
    assert outcome == Success(Coordinates(lat=52.50, lon=13.40))
    assert client.http.endpoints == ["street", "num", "geo"]


def test_postcode_disambiguation_then_normalised_number():
    outcome = resolve_address(_client(), "Hauptstraße", "12b", "10115")
    assert outcome == Success(Coordinates(lat=52.53, lon=13.38))


def test_unknown_street_is_a_miss_without_further_calls():
    client = _client()
    assert resolve_address(client, "Nirgendwo", "1", "10115") == Miss(MISS_NO_STREET)
    assert client.http.endpoints == ["street"]


def test_ambiguous_street_is_a_distinct_miss():
    assert resolve_address(_client(), "Hauptstraße", "12", "10999") == Miss(MISS_AMBIGUOUS_STREET)


def test_missing_number_is_a_miss():
    client = _client()
    assert resolve_address(client, "Hauptstraße", "99", "10115") == Miss(MISS_NO_NUMBER)
    assert client.http.endpoints == ["street", "num"]


def test_missing_geometry_is_a_miss():
    assert resolve_address(_client(), "Hauptstraße", "14", "10115") == Miss(MISS_NO_COORDINATES)


@pytest.mark.parametrize("endpoint", ["street", "num", "geo"])
def test_remote_failures_propagate_instead_of_missing(endpoint):
    with pytest.raises(RemoteLookupFailed):
        resolve_address(_client(fail_endpoint=endpoint), "Ringweg", "1", "10115")
