# backend/rentiful/services/properties.py
from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from sqlalchemy.orm import Session

from ..clients.nominatim import NominatimClient
from ..geo import to_point
from ..models import Location, Property, PropertyAmenity
from ..schemas import PropertyCreate
from .locations import resolve_coordinates
from .ownership import must_get_manager
from .photo_storage import GCSPhotoStorage

log = logging.getLogger("rentiful.properties")


def upload_photos(storage: GCSPhotoStorage, photos: Sequence[tuple[str, bytes, Optional[str]]]) -> list[str]:
    """(filename, content, content_type) triples -> public URLs, in upload order."""
    return [storage.upload(filename=name, content=content, content_type=ctype) for name, content, ctype in photos]


def create_property(
    db: Session,
    payload: PropertyCreate,
    *,
    raw_coordinates: Any,
    photos: Sequence[tuple[str, bytes, Optional[str]]],
    geocoder: Optional[NominatimClient],
    storage: GCSPhotoStorage,
) -> Property:
    """
    Photos go to object storage first; the Location and Property rows are then
    written in one transaction, so a failed insert leaves no orphan location.
    """
    must_get_manager(db, cognito_id=payload.manager_cognito_id)

    photo_urls = upload_photos(storage, photos) if photos else []

    coords = resolve_coordinates(
        raw_coordinates,
        address=payload.address,
        city=payload.city,
        country=payload.country,
        postal_code=payload.postal_code,
        geocoder=geocoder,
    )

    location = Location(
        address=payload.address,
        city=payload.city,
        state=payload.state,
        country=payload.country,
        postal_code=payload.postal_code,
        coordinates=to_point(coords.longitude, coords.latitude),
    )

    prop = Property(
        name=payload.name,
        description=payload.description,
        price_per_month=payload.price_per_month,
        security_deposit=payload.security_deposit,
        application_fee=payload.application_fee,
        photo_urls=photo_urls,
        highlights=[h.value for h in payload.highlights],
        is_pets_allowed=payload.is_pets_allowed,
        is_parking_included=payload.is_parking_included,
        beds=payload.beds,
        baths=payload.baths,
        square_feet=payload.square_feet,
        property_type=payload.property_type.value,
        manager_cognito_id=payload.manager_cognito_id,
        location=location,
    )
    prop.amenity_links = [PropertyAmenity(a) for a in dict.fromkeys(x.value for x in payload.amenities)]

    db.add(prop)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(prop)

    log.info(
        "property created%s",
        " with sentinel coordinates" if coords.is_sentinel else "",
        extra={"property_id": prop.id, "location_id": location.id, "cognito_id": prop.manager_cognito_id},
    )
    return prop
