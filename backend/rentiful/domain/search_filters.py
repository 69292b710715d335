# backend/rentiful/domain/search_filters.py
"""
Search filter state <-> query-string parameters.

normalize_filters() is what a client does before calling GET /properties:
UI filter state in, flat {queryName: string} mapping out, with every absent,
empty or "any" value dropped. It also accepts an already-flat mapping, so
normalize_filters(normalize_filters(x)) == normalize_filters(x).

parse_search_params() is the server side: the flat mapping in, typed
SearchFilters out. Search is lenient; a malformed value constrains nothing.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from ..enums import Amenity, PropertyType
from ..geo import coordinates_or_none
from ..models import MAX_ROW_ID

ANY = "any"

QUERY_KEYS = (
    "location",
    "favoriteIds",
    "priceMin",
    "priceMax",
    "beds",
    "baths",
    "propertyType",
    "squareFeetMin",
    "squareFeetMax",
    "amenities",
    "availableFrom",
    "latitude",
    "longitude",
)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def _blank(v: Any) -> bool:
    if v is None:
        return True
    if isinstance(v, str):
        s = v.strip()
        return not s or s.lower() == ANY
    if isinstance(v, (list, tuple, set)):
        return len(v) == 0
    if isinstance(v, float) and not math.isfinite(v):
        return True
    return False


def _to_param(v: Any) -> str:
    if isinstance(v, str):
        return v.strip()
    if isinstance(v, datetime):
        return v.date().isoformat()
    if isinstance(v, date):
        return v.isoformat()
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def _join(items: Optional[Iterable[Any]]) -> Optional[str]:
    if items is None:
        return None
    if isinstance(items, str):
        return items
    parts = [_to_param(x) for x in items if not _blank(x)]
    return ",".join(parts) if parts else None


def _pair(v: Any) -> tuple[Any, Any]:
    if isinstance(v, (list, tuple)) and len(v) == 2:
        return v[0], v[1]
    return None, None


def clean_params(params: Mapping[str, Any]) -> dict[str, str]:
    """Drop null, empty and "any" entries; stringify the rest."""
    out: dict[str, str] = {}
    for k, v in params.items():
        if _blank(v):
            continue
        if isinstance(v, (list, tuple, set)):
            joined = _join(v)
            if joined is None:
                continue
            out[k] = joined
            continue
        out[k] = _to_param(v)
    return out


def normalize_filters(state: Mapping[str, Any]) -> dict[str, str]:
    """
    UI filter state -> canonical query parameters. Never mutates `state`.

    Recognized state keys: location, priceRange, beds, baths, propertyType,
    squareFeet, amenities, availableFrom, favoriteIds, coordinates
    ([longitude, latitude]). Flat query keys (priceMin, latitude, ...) pass through.
    """
    flat: dict[str, Any] = {}

    price_min, price_max = _pair(state.get("priceRange"))
    sqft_min, sqft_max = _pair(state.get("squareFeet"))

    flat["location"] = state.get("location")
    flat["priceMin"] = price_min
    flat["priceMax"] = price_max
    flat["beds"] = state.get("beds")
    flat["baths"] = state.get("baths")
    flat["propertyType"] = state.get("propertyType")
    flat["squareFeetMin"] = sqft_min
    flat["squareFeetMax"] = sqft_max
    flat["amenities"] = _join(state.get("amenities"))
    flat["availableFrom"] = state.get("availableFrom")
    flat["favoriteIds"] = _join(state.get("favoriteIds"))

    lon, lat = _pair(state.get("coordinates"))
    if _is_number(lon) and _is_number(lat):
        flat["latitude"] = lat
        flat["longitude"] = lon

    # already-normalized keys win only where the state form did not supply a value
    for k in QUERY_KEYS:
        if _blank(flat.get(k)) and k in state:
            flat[k] = state[k]

    if _blank(flat.get("latitude")) or _blank(flat.get("longitude")):
        flat.pop("latitude", None)
        flat.pop("longitude", None)

    return clean_params({k: flat[k] for k in QUERY_KEYS if k in flat})


# -------------------------
# Server side
# -------------------------
@dataclass(frozen=True)
class SearchFilters:
    favorite_ids: Optional[tuple[int, ...]] = None
    price_min: Optional[float] = None
    price_max: Optional[float] = None
    beds: Optional[float] = None
    baths: Optional[float] = None
    property_type: Optional[str] = None
    square_feet_min: Optional[float] = None
    square_feet_max: Optional[float] = None
    amenities: tuple[str, ...] = field(default_factory=tuple)
    available_from: Optional[date] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def has_point(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def _number(v: Any) -> Optional[float]:
    if _blank(v):
        return None
    try:
        f = float(v)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def _csv(v: Any) -> list[str]:
    if _blank(v):
        return []
    if isinstance(v, (list, tuple)):
        items = [str(x) for x in v]
    else:
        items = str(v).split(",")
    return [x.strip() for x in items if x.strip()]


def _favorite_ids(v: Any) -> Optional[tuple[int, ...]]:
    ids: list[int] = []
    for raw in _csv(v):
        try:
            value = int(raw)
        except ValueError:
            continue
        if 1 <= value <= MAX_ROW_ID:
            ids.append(value)
    return tuple(dict.fromkeys(ids)) if ids else None


def _property_type(v: Any) -> Optional[str]:
    if _blank(v):
        return None
    try:
        return PropertyType(str(v).strip()).value
    except ValueError:
        return None


def _amenities(v: Any) -> tuple[str, ...]:
    """
    Unknown names are dropped one by one and the rest still apply as a
    superset, so "Pool,Moat" searches for listings with a Pool.
    """
    valid = {a.value for a in Amenity}
    return tuple(dict.fromkeys(a for a in _csv(v) if a in valid))


def _date(v: Any) -> Optional[date]:
    if _blank(v):
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    s = str(v).strip()
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def parse_search_params(params: Mapping[str, Any]) -> SearchFilters:
    coords = coordinates_or_none(_number(params.get("longitude")), _number(params.get("latitude")))

    return SearchFilters(
        favorite_ids=_favorite_ids(params.get("favoriteIds")),
        price_min=_number(params.get("priceMin")),
        price_max=_number(params.get("priceMax")),
        beds=_number(params.get("beds")),
        baths=_number(params.get("baths")),
        property_type=_property_type(params.get("propertyType")),
        square_feet_min=_number(params.get("squareFeetMin")),
        square_feet_max=_number(params.get("squareFeetMax")),
        amenities=_amenities(params.get("amenities")),
        available_from=_date(params.get("availableFrom")),
        latitude=coords.latitude if coords else None,
        longitude=coords.longitude if coords else None,
    )
