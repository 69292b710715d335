# backend/rentiful/domain/property_search.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Any, Optional

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, contains_eager, selectinload

from ..config import settings
from ..geo import distance_from, within_radius
from ..models import Lease, Location, Property, PropertyAmenity
from ..services.locations import serialize_property
from .search_filters import SearchFilters

log = logging.getLogger("rentiful.search")


@dataclass(frozen=True)
class Predicate:
    """One search constraint. `field` is a query parameter name, `op` one of OPS."""

    field: str
    op: str
    value: Any


OPS = ("in", "gte", "lte", "eq", "has", "lease_starts_by", "within")


class PropertyQueryBuilder:
    """
    Accumulates predicates and renders a single SELECT over Property joined 1:1
    with Location. Every value reaches the database as a bound parameter.

    Without a point the rows come back in primary-key order; with one they are
    restricted to the search radius and ordered by distance (planar degrees,
    see geo.py), and the distance is returned alongside each row.
    """

    def __init__(self, *, radius_degrees: Optional[float] = None) -> None:
        self.predicates: list[Predicate] = []
        self.radius_degrees = float(
            radius_degrees if radius_degrees is not None else settings.search_radius_degrees
        )
        self.point: Optional[tuple[float, float]] = None

    # ---- accumulation ----
    def add(self, field: str, op: str, value: Any) -> "PropertyQueryBuilder":
        if op not in OPS:
            raise ValueError(f"unknown predicate op: {op}")
        if op == "within":
            self.point = (float(value[0]), float(value[1]))
        self.predicates.append(Predicate(field, op, value))
        return self

    @classmethod
    def from_filters(cls, f: SearchFilters, **kwargs) -> "PropertyQueryBuilder":
        b = cls(**kwargs)
        if f.favorite_ids:
            b.add("favoriteIds", "in", list(f.favorite_ids))
        if f.price_min is not None:
            b.add("priceMin", "gte", f.price_min)
        if f.price_max is not None:
            b.add("priceMax", "lte", f.price_max)
        if f.beds is not None:
            b.add("beds", "gte", f.beds)
        if f.baths is not None:
            b.add("baths", "gte", f.baths)
        if f.property_type:
            b.add("propertyType", "eq", f.property_type)
        if f.square_feet_min is not None:
            b.add("squareFeetMin", "gte", f.square_feet_min)
        if f.square_feet_max is not None:
            b.add("squareFeetMax", "lte", f.square_feet_max)
        for a in f.amenities:
            b.add("amenities", "has", a)
        if f.available_from is not None:
            b.add("availableFrom", "lease_starts_by", f.available_from)
        if f.has_point:
            b.add("coordinates", "within", (f.longitude, f.latitude))
        return b

    # ---- rendering ----
    _COLUMNS = {
        "favoriteIds": Property.id,
        "priceMin": Property.price_per_month,
        "priceMax": Property.price_per_month,
        "beds": Property.beds,
        "baths": Property.baths,
        "propertyType": Property.property_type,
        "squareFeetMin": Property.square_feet,
        "squareFeetMax": Property.square_feet,
    }

    def _clause(self, p: Predicate):
        if p.op == "has":
            return Property.amenity_links.any(PropertyAmenity.amenity == p.value)
        if p.op == "lease_starts_by":
            # on or before that day: anything starting before the next midnight
            cutoff = datetime.combine(p.value + timedelta(days=1), time.min)
            return Property.leases.any(Lease.start_date < cutoff)
        if p.op == "within":
            lon, lat = p.value
            return within_radius(Location.coordinates, lon, lat, self.radius_degrees)

        col = self._COLUMNS[p.field]
        if p.op == "in":
            return col.in_(p.value)
        if p.op == "gte":
            return col >= p.value
        if p.op == "lte":
            return col <= p.value
        return col == p.value

    def statement(self) -> Select:
        distance = None
        if self.point is not None:
            distance = distance_from(Location.coordinates, *self.point).label("distance")

        stmt = (
            select(Property, distance) if distance is not None else select(Property)
        )
        stmt = stmt.join(Property.location).options(
            contains_eager(Property.location),
            selectinload(Property.amenity_links),
        )

        for p in self.predicates:
            stmt = stmt.where(self._clause(p))

        if distance is not None:
            stmt = stmt.order_by(distance.asc(), Property.id)
        else:
            stmt = stmt.order_by(Property.id)
        return stmt

    def execute(self, db: Session) -> list[dict[str, Any]]:
        stmt = self.statement()
        if self.point is None:
            return [serialize_property(p) for p in db.scalars(stmt).all()]
        return [serialize_property(p, distance=d) for p, d in db.execute(stmt).all()]


def search_properties(db: Session, filters: SearchFilters) -> list[dict[str, Any]]:
    b = PropertyQueryBuilder.from_filters(filters)
    log.debug("property search: %s", ", ".join(f"{p.field} {p.op}" for p in b.predicates) or "unfiltered")
    return b.execute(db)
