# backend/rentiful/geo.py
"""
Geographic points at the database boundary.

Everything spatial-extension specific lives here:
  - to_point / from_point: the only two conversions between a stored point
    and a (longitude, latitude) pair. WKT/EWKT is the interchange format.
  - PointType: PostGIS geometry(POINT, 4326) on PostgreSQL, WKT text elsewhere.
  - within_radius / distance_from: SQL expressions used by the search builder.
  - register_sqlite_spatial_functions: gives SQLite the handful of ST_* functions
    those expressions need, so the rest of the code stays dialect-agnostic.

Distances are planar degrees in SRID 4326 (what ST_Distance returns for
geometry), so "50 km" is approximated as 50 / 111 degrees.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from geoalchemy2 import Geometry
from geoalchemy2.elements import WKBElement, WKTElement
from geoalchemy2.shape import to_shape
from shapely import wkb, wkt
from shapely.errors import ShapelyError
from shapely.geometry import Point
from sqlalchemy import Text, func
from sqlalchemy.types import TypeDecorator

log = logging.getLogger("rentiful.geo")

SRID = 4326
SENTINEL = (0.0, 0.0)

_HEX_CHARS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class Coordinates:
    longitude: float
    latitude: float

    def as_dict(self) -> dict[str, float]:
        return {"longitude": self.longitude, "latitude": self.latitude}

    @property
    def is_sentinel(self) -> bool:
        return (self.longitude, self.latitude) == SENTINEL


def _valid_pair(longitude: float, latitude: float) -> bool:
    if not (math.isfinite(longitude) and math.isfinite(latitude)):
        return False
    return -180.0 <= longitude <= 180.0 and -90.0 <= latitude <= 90.0


def coordinates_or_none(longitude: Any, latitude: Any) -> Optional[Coordinates]:
    """Coordinates from loosely typed input; None if either side is unusable."""
    if isinstance(longitude, bool) or isinstance(latitude, bool):
        return None
    try:
        lon = float(longitude)
        lat = float(latitude)
    except (TypeError, ValueError):
        return None
    if not _valid_pair(lon, lat):
        return None
    return Coordinates(longitude=lon, latitude=lat)


# -------------------------
# Conversions
# -------------------------
def to_point(longitude: float, latitude: float) -> str:
    """(longitude, latitude) -> EWKT, e.g. 'SRID=4326;POINT (77.5946 12.9716)'."""
    lon = float(longitude)
    lat = float(latitude)
    if not _valid_pair(lon, lat):
        raise ValueError(f"invalid coordinates: ({longitude}, {latitude})")
    return f"SRID={SRID};{Point(lon, lat).wkt}"


def _strip_srid(text: str) -> str:
    text = text.strip()
    if text.upper().startswith("SRID="):
        return text.split(";", 1)[1] if ";" in text else ""
    return text


def _parse_geometry(value: Any):
    if isinstance(value, (WKBElement, WKTElement)):
        return to_shape(value)
    if isinstance(value, memoryview):
        value = value.tobytes()
    if isinstance(value, (bytes, bytearray)):
        return wkb.loads(bytes(value))
    if isinstance(value, str):
        text = _strip_srid(value)
        if not text:
            raise ValueError("empty point")
        if set(text) <= _HEX_CHARS:
            return wkb.loads(text, hex=True)
        return wkt.loads(text)
    raise ValueError(f"unsupported point value: {type(value).__name__}")


def from_point(value: Any) -> Coordinates:
    """Stored point (WKT/EWKT text, hex or raw WKB, GeoAlchemy2 element) -> Coordinates."""
    if value is None:
        raise ValueError("point is null")
    try:
        geom = _parse_geometry(value)
    except ShapelyError as e:
        raise ValueError(f"unparsable point: {e}") from e

    if geom.geom_type != "Point" or geom.is_empty:
        raise ValueError(f"expected a point, got {geom.geom_type}")
    return Coordinates(longitude=float(geom.x), latitude=float(geom.y))


def materialize(value: Any) -> dict[str, Optional[float]]:
    """
    Read path: never fails. A point that cannot be parsed becomes
    {longitude: None, latitude: None} so the owning property can still be returned.
    """
    try:
        return from_point(value).as_dict()
    except ValueError as e:
        log.warning("could not materialize coordinates: %s", e)
        return {"longitude": None, "latitude": None}


# -------------------------
# Column type
# -------------------------
class PointType(TypeDecorator):
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(Geometry(geometry_type="POINT", srid=SRID, spatial_index=False))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, Coordinates):
            return to_point(value.longitude, value.latitude)
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return to_point(value[0], value[1])
        return value


# -------------------------
# SQL expressions
# -------------------------
def query_point(longitude: float, latitude: float):
    return func.ST_SetSRID(func.ST_MakePoint(float(longitude), float(latitude)), SRID)


def within_radius(column, longitude: float, latitude: float, degrees: float):
    return func.ST_DWithin(column, query_point(longitude, latitude), float(degrees))


def distance_from(column, longitude: float, latitude: float):
    return func.ST_Distance(column, query_point(longitude, latitude))


# -------------------------
# SQLite
# -------------------------
def _shape_or_none(value: Any):
    try:
        return _parse_geometry(value)
    except (ValueError, ShapelyError):
        return None


def _sqlite_make_point(x, y):
    if x is None or y is None:
        return None
    return Point(float(x), float(y)).wkt


def _sqlite_set_srid(geom, srid):
    if geom is None:
        return None
    return f"SRID={int(srid)};{_strip_srid(str(geom))}"


def _sqlite_distance(a, b):
    ga, gb = _shape_or_none(a), _shape_or_none(b)
    if ga is None or gb is None:
        return None
    return float(ga.distance(gb))


def _sqlite_dwithin(a, b, d):
    dist = _sqlite_distance(a, b)
    if dist is None or d is None:
        return None
    return 1 if dist <= float(d) else 0


def register_sqlite_spatial_functions(dbapi_connection) -> None:
    dbapi_connection.create_function("ST_MakePoint", 2, _sqlite_make_point, deterministic=True)
    dbapi_connection.create_function("ST_SetSRID", 2, _sqlite_set_srid, deterministic=True)
    dbapi_connection.create_function("ST_Distance", 2, _sqlite_distance, deterministic=True)
    dbapi_connection.create_function("ST_DWithin", 3, _sqlite_dwithin, deterministic=True)
