# backend/tests/test_geocoding.py
from __future__ import annotations

from datetime import datetime, timedelta

import httpx
import pytest

from rentiful.clients.nominatim import NominatimClient
from rentiful.config import settings
from rentiful.geo import Coordinates, from_point, to_point
from rentiful.models import Location
from rentiful.services.locations import backfill_sentinel_coordinates, resolve_coordinates


@pytest.fixture
def geocoding_on(monkeypatch):
    monkeypatch.setattr(settings, "geocoding_enabled", True)


def _client(handler) -> NominatimClient:
    return NominatimClient(
        base_url="https://nominatim.test",
        user_agent="RentifulTests",
        timeout=2,
        transport=httpx.MockTransport(handler),
    )


def test_geocode_sends_address_and_parses_first_hit(geocoding_on):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        seen["ua"] = request.headers.get("user-agent")
        return httpx.Response(200, json=[{"lon": "-118.2437", "lat": "34.0522"}, {"lon": "0", "lat": "0"}])

    out = _client(handler).geocode(street="100 Spring St", city="Los Angeles", country="USA", postal_code="90012")

    assert out == Coordinates(-118.2437, 34.0522)
    assert seen["params"] == {
        "street": "100 Spring St",
        "city": "Los Angeles",
        "country": "USA",
        "postalcode": "90012",
        "format": "json",
        "limit": "1",
    }
    assert seen["ua"] == "RentifulTests"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json=[]),
        httpx.Response(500, text="boom"),
        httpx.Response(200, text="<html>not json</html>"),
        httpx.Response(200, json=[{"lon": "east", "lat": "north"}]),
    ],
)
def test_geocode_degrades_to_none(geocoding_on, response):
    assert _client(lambda _req: response).geocode(street="x", city="y", country="z") is None


def test_geocode_transport_error_degrades_to_none(geocoding_on):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    assert _client(handler).geocode(street="x", city="y", country="z") is None


def test_disabled_geocoder_makes_no_request(monkeypatch):
    monkeypatch.setattr(settings, "geocoding_enabled", False)

    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    assert _client(handler).geocode(street="x", city="y", country="z") is None


def test_resolve_prefers_explicit_then_geocoder_then_sentinel(geocoder):
    addr = dict(address="1 Main St", city="LA", country="US", postal_code="90001")

    assert resolve_coordinates("[10.5, 20.25]", geocoder=geocoder, **addr) == Coordinates(10.5, 20.25)
    assert geocoder.calls == []

    geocoder.result = Coordinates(1.0, 2.0)
    assert resolve_coordinates("not json", geocoder=geocoder, **addr) == Coordinates(1.0, 2.0)

    geocoder.result = None
    assert resolve_coordinates(None, geocoder=geocoder, **addr).is_sentinel
    assert resolve_coordinates("[500, 0]", geocoder=None, **addr).is_sentinel


def test_backfill_regeocodes_sentinel_locations(db, factory, geocoder):
    m = factory.manager()
    lost = factory.property(m, lonlat=(0.0, 0.0))
    placed = factory.property(m, lonlat=(-73.98, 40.75))

    geocoder.result = Coordinates(-118.25, 34.05)
    out = backfill_sentinel_coordinates(db, geocoder, limit=10)

    assert out == {"scanned": 1, "updated": 1}
    assert len(geocoder.calls) == 1
    db.expire_all()
    assert from_point(db.get(Location, lost.location_id).coordinates) == Coordinates(-118.25, 34.05)
    assert from_point(db.get(Location, placed.location_id).coordinates) == Coordinates(-73.98, 40.75)


def test_backfill_leaves_unresolvable_locations_alone(db, factory, geocoder):
    m = factory.manager()
    lost = factory.property(m, lonlat=(0.0, 0.0))
    geocoder.result = None

    assert backfill_sentinel_coordinates(db, geocoder) == {"scanned": 1, "updated": 0}
    db.expire_all()
    assert db.get(Location, lost.location_id).coordinates == to_point(0.0, 0.0)


class _ByStreetGeocoder:
    def __init__(self, known: dict[str, Coordinates]) -> None:
        self.known = known
        self.streets: list[str] = []

    def geocode(self, *, street, city, country, postal_code=""):
        self.streets.append(street)
        return self.known.get(street)


def test_backfill_moves_past_unresolvable_locations(db, factory):
    m = factory.manager()
    stuck = factory.property(m, lonlat=(0.0, 0.0))
    fixable = factory.property(m, lonlat=(0.0, 0.0))
    db.get(Location, stuck.location_id).address = "nowhere"
    db.get(Location, fixable.location_id).address = "200 N Spring St"
    db.commit()

    g = _ByStreetGeocoder({"200 N Spring St": Coordinates(-118.24, 34.05)})
    now = datetime(2026, 1, 1, 12, 0)

    for _ in range(3):
        backfill_sentinel_coordinates(db, g, limit=1, now=now)

    assert g.streets == ["nowhere", "200 N Spring St"]
    db.expire_all()
    assert from_point(db.get(Location, fixable.location_id).coordinates) == Coordinates(-118.24, 34.05)
    assert db.get(Location, stuck.location_id).geocode_attempted_at == now


def test_backfill_retries_unresolvable_locations_after_the_window(db, factory):
    m = factory.manager()
    factory.property(m, lonlat=(0.0, 0.0))
    g = _ByStreetGeocoder({})
    first = datetime(2026, 1, 1, 12, 0)

    assert backfill_sentinel_coordinates(db, g, now=first, retry_after=timedelta(hours=6))["scanned"] == 1
    assert backfill_sentinel_coordinates(db, g, now=first + timedelta(hours=1), retry_after=timedelta(hours=6))["scanned"] == 0
    assert backfill_sentinel_coordinates(db, g, now=first + timedelta(hours=7), retry_after=timedelta(hours=6))["scanned"] == 1
    assert len(g.streets) == 2
