# backend/rentiful/services/locations.py
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from typing import Any, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from ..clients.nominatim import NominatimClient
from ..config import settings
from ..geo import SENTINEL, Coordinates, coordinates_or_none, distance_from, materialize, to_point
from ..models import Location, Property, utcnow
from ..schemas import PropertyBriefOut, UserOut

log = logging.getLogger("rentiful.locations")


# -------------------------
# Read path
# -------------------------
def serialize_location(loc: Location) -> dict[str, Any]:
    return {
        "id": loc.id,
        "address": loc.address,
        "city": loc.city,
        "state": loc.state,
        "country": loc.country,
        "postalCode": loc.postal_code,
        "coordinates": materialize(loc.coordinates),
    }


def serialize_property(
    prop: Property,
    *,
    distance: Optional[float] = None,
    include_manager: bool = False,
) -> dict[str, Any]:
    """
    Property as returned by the API: camelCase fields, nested location with
    {longitude, latitude} coordinates. `distance` is only present when the
    caller ran a radius search.
    """
    out = PropertyBriefOut.model_validate(prop).model_dump(by_alias=True, mode="json")
    out["location"] = serialize_location(prop.location)
    if include_manager and prop.manager is not None:
        out["manager"] = UserOut.model_validate(prop.manager).model_dump(by_alias=True, mode="json")
    if distance is not None:
        out["distance"] = float(distance)
    return out


# -------------------------
# Write path
# -------------------------
def parse_explicit_coordinates(raw: Any) -> Optional[Coordinates]:
    """
    Client-supplied `[longitude, latitude]`, either a list or its JSON text.
    (0, 0) is what the client sends when it has nothing, so it counts as absent.
    """
    if raw is None:
        return None
    if isinstance(raw, (str, bytes)):
        text = raw.decode() if isinstance(raw, bytes) else raw
        if not text.strip():
            return None
        try:
            raw = json.loads(text)
        except ValueError:
            log.info("ignoring malformed coordinates payload: %r", text[:80])
            return None

    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        return None

    coords = coordinates_or_none(raw[0], raw[1])
    if coords is None or coords.is_sentinel:
        return None
    return coords


def resolve_coordinates(
    raw_coordinates: Any,
    *,
    address: str,
    city: str,
    country: str,
    postal_code: str,
    geocoder: Optional[NominatimClient],
) -> Coordinates:
    """explicit -> geocoded -> sentinel (0, 0). Never raises."""
    explicit = parse_explicit_coordinates(raw_coordinates)
    if explicit is not None:
        return explicit

    if geocoder is not None:
        found = geocoder.geocode(street=address, city=city, country=country, postal_code=postal_code)
        if found is not None and not found.is_sentinel:
            return found

    log.warning("no coordinates for %s, %s; storing sentinel point", address, city)
    return Coordinates(*SENTINEL)


def backfill_sentinel_coordinates(
    db: Session,
    geocoder: NominatimClient,
    *,
    limit: int = 50,
    retry_after: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> dict[str, int]:
    """
    Re-geocode locations that were stored with the sentinel point.

    Every scanned row is stamped with geocode_attempted_at; rows that still
    cannot be geocoded are skipped until retry_after has passed, so a batch
    full of unresolvable addresses does not starve the rest. Never-tried rows
    come first, then the oldest attempts.
    """
    now = now or utcnow()
    if retry_after is None:
        retry_after = timedelta(hours=settings.geocode_retry_after_hours)

    rows = db.scalars(
        select(Location)
        .where(distance_from(Location.coordinates, *SENTINEL) == 0)
        .where(
            or_(
                Location.geocode_attempted_at.is_(None),
                Location.geocode_attempted_at <= now - retry_after,
            )
        )
        .order_by(Location.geocode_attempted_at.nulls_first(), Location.id)
        .limit(int(limit))
    ).all()

    updated = 0
    for loc in rows:
        loc.geocode_attempted_at = now
        found = geocoder.geocode(
            street=loc.address, city=loc.city, country=loc.country, postal_code=loc.postal_code
        )
        if found is None or found.is_sentinel:
            continue
        loc.coordinates = to_point(found.longitude, found.latitude)
        updated += 1
        log.info("backfilled coordinates", extra={"location_id": loc.id})

    if rows:
        db.commit()
    return {"scanned": len(rows), "updated": updated}
