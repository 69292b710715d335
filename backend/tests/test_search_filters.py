# backend/tests/test_search_filters.py
from __future__ import annotations

import copy
from datetime import date

from rentiful.domain.search_filters import clean_params, normalize_filters, parse_search_params


def test_normalize_drops_absent_empty_and_any():
    out = normalize_filters(
        {
            "location": "",
            "priceRange": [None, 3000],
            "beds": "any",
            "baths": None,
            "propertyType": "any",
            "squareFeet": [None, None],
            "amenities": [],
            "availableFrom": "any",
            "favoriteIds": [],
            "coordinates": [None, 34.05],
        }
    )
    assert out == {"priceMax": "3000"}


def test_normalize_collapses_arrays_and_emits_coordinates():
    state = {
        "location": "Los Angeles",
        "priceRange": [1000, 2500],
        "beds": "2",
        "amenities": ["Pool", "Gym"],
        "favoriteIds": [3, 7],
        "coordinates": [-118.25, 34.05],
    }
    snapshot = copy.deepcopy(state)

    out = normalize_filters(state)

    assert out == {
        "location": "Los Angeles",
        "favoriteIds": "3,7",
        "priceMin": "1000",
        "priceMax": "2500",
        "beds": "2",
        "amenities": "Pool,Gym",
        "latitude": "34.05",
        "longitude": "-118.25",
    }
    assert state == snapshot


def test_normalize_is_idempotent():
    once = normalize_filters(
        {
            "priceRange": [500, None],
            "squareFeet": [None, 1200],
            "propertyType": "Villa",
            "availableFrom": "2026-03-01",
            "amenities": ["WiFi"],
            "coordinates": [2.35, 48.85],
        }
    )
    assert normalize_filters(once) == once
    assert clean_params(once) == once


def test_parse_ignores_malformed_values():
    f = parse_search_params(
        {
            "favoriteIds": "a,b",
            "priceMin": "cheap",
            "priceMax": "2000",
            "beds": "",
            "propertyType": "Castle",
            "amenities": "Pool,Moat",
            "availableFrom": "someday",
            "latitude": "91",
            "longitude": "10",
        }
    )
    assert f.favorite_ids is None
    assert f.price_min is None
    assert f.price_max == 2000.0
    assert f.beds is None
    assert f.property_type is None
    assert f.amenities == ("Pool",)
    assert f.available_from is None
    assert not f.has_point


def test_parse_reads_normalized_output():
    params = normalize_filters(
        {
            "favoriteIds": [1, 2, 2],
            "availableFrom": "2026-03-01T00:00:00.000Z",
            "coordinates": [-118.25, 34.05],
        }
    )
    f = parse_search_params(params)
    assert f.favorite_ids == (1, 2)
    assert f.available_from == date(2026, 3, 1)
    assert (f.longitude, f.latitude) == (-118.25, 34.05)


def test_favorite_ids_outside_the_key_range_are_dropped():
    f = parse_search_params({"favoriteIds": "0,-4,2147483648,99999999999999999999,12"})
    assert f.favorite_ids == (12,)
    assert parse_search_params({"favoriteIds": "99999999999999999999"}).favorite_ids is None
