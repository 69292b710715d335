# backend/tests/test_geo.py
from __future__ import annotations

import pytest
from shapely import wkb
from shapely.geometry import Point

from rentiful.geo import (
    Coordinates,
    coordinates_or_none,
    from_point,
    materialize,
    register_sqlite_spatial_functions,
    to_point,
)


def test_point_round_trips_through_ewkt():
    stored = to_point(77.5946, 12.9716)
    assert stored.startswith("SRID=4326;POINT")
    assert from_point(stored) == Coordinates(longitude=77.5946, latitude=12.9716)


def test_from_point_reads_plain_wkt_and_hex_wkb():
    assert from_point("POINT (-118.25 34.05)") == Coordinates(-118.25, 34.05)

    hex_wkb = wkb.dumps(Point(-73.98, 40.75), hex=True, srid=4326)
    assert from_point(hex_wkb) == Coordinates(-73.98, 40.75)
    assert from_point(bytes.fromhex(hex_wkb)) == Coordinates(-73.98, 40.75)


def test_from_point_rejects_non_points():
    with pytest.raises(ValueError):
        from_point("LINESTRING (0 0, 1 1)")
    with pytest.raises(ValueError):
        from_point(None)


def test_materialize_degrades_to_nulls():
    assert materialize("not a point") == {"longitude": None, "latitude": None}
    assert materialize("") == {"longitude": None, "latitude": None}
    assert materialize(to_point(2.35, 48.85)) == {"longitude": 2.35, "latitude": 48.85}


def test_to_point_rejects_out_of_range():
    with pytest.raises(ValueError):
        to_point(200, 10)
    with pytest.raises(ValueError):
        to_point(10, float("nan"))


def test_coordinates_or_none():
    assert coordinates_or_none("12.5", "-7") == Coordinates(12.5, -7.0)
    assert coordinates_or_none(None, 1) is None
    assert coordinates_or_none(True, 1) is None
    assert coordinates_or_none(10, 95) is None
    assert Coordinates(0, 0).is_sentinel


def test_sqlite_spatial_functions():
    import sqlite3

    con = sqlite3.connect(":memory:")
    register_sqlite_spatial_functions(con)
    try:
        (d,) = con.execute(
            "SELECT ST_Distance(?, ST_SetSRID(ST_MakePoint(3, 4), 4326))", ("POINT (0 0)",)
        ).fetchone()
        assert d == pytest.approx(5.0)

        (inside,) = con.execute(
            "SELECT ST_DWithin(?, ST_SetSRID(ST_MakePoint(0.3, 0.4), 4326), 0.5)", (to_point(0, 0),)
        ).fetchone()
        assert inside == 1

        (garbage,) = con.execute("SELECT ST_Distance('garbage', ST_MakePoint(0, 0))").fetchone()
        assert garbage is None
    finally:
        con.close()
