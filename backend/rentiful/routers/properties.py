# backend/rentiful/routers/properties.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import Principal, require_manager
from ..clients.nominatim import NominatimClient, get_geocoder
from ..db import get_db
from ..domain.property_search import search_properties
from ..domain.search_filters import parse_search_params
from ..models import Lease
from ..schemas import LeaseWithTenantOut, PropertyCreate
from ..services.locations import serialize_property
from ..services.ownership import must_get_property, parse_id
from ..services.photo_storage import GCSPhotoStorage, get_photo_storage
from ..services.properties import create_property

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("")
def list_properties(request: Request, db: Session = Depends(get_db)):
    """
    Query: favoriteIds, priceMin, priceMax, beds, baths, propertyType,
    squareFeetMin, squareFeetMax, amenities, availableFrom, latitude, longitude.
    Unparsable values are ignored rather than rejected.
    """
    filters = parse_search_params(request.query_params)
    return search_properties(db, filters)


@router.get("/{property_id}")
def get_property(property_id: str, db: Session = Depends(get_db)):
    prop = must_get_property(db, property_id=parse_id(property_id, label="property id"))
    return serialize_property(prop)


@router.get("/{property_id}/leases", response_model=list[LeaseWithTenantOut])
def get_property_leases(property_id: str, db: Session = Depends(get_db)):
    prop = must_get_property(db, property_id=parse_id(property_id, label="property id"))
    q = (
        select(Lease)
        .where(Lease.property_id == prop.id)
        .options(selectinload(Lease.tenant))
        .order_by(Lease.start_date, Lease.id)
    )
    return list(db.scalars(q).all())


@router.post("", status_code=201)
def post_property(
    name: Optional[str] = Form(default=None),
    description: Optional[str] = Form(default=None),
    price_per_month: Optional[str] = Form(default=None, alias="pricePerMonth"),
    security_deposit: Optional[str] = Form(default=None, alias="securityDeposit"),
    application_fee: Optional[str] = Form(default=None, alias="applicationFee"),
    amenities: Optional[str] = Form(default=None),
    highlights: Optional[str] = Form(default=None),
    is_pets_allowed: Optional[str] = Form(default=None, alias="isPetsAllowed"),
    is_parking_included: Optional[str] = Form(default=None, alias="isParkingIncluded"),
    beds: Optional[str] = Form(default=None),
    baths: Optional[str] = Form(default=None),
    square_feet: Optional[str] = Form(default=None, alias="squareFeet"),
    property_type: Optional[str] = Form(default=None, alias="propertyType"),
    address: Optional[str] = Form(default=None),
    city: Optional[str] = Form(default=None),
    state: Optional[str] = Form(default=None),
    country: Optional[str] = Form(default=None),
    postal_code: Optional[str] = Form(default=None, alias="postalCode"),
    manager_cognito_id: Optional[str] = Form(default=None, alias="managerCognitoId"),
    coordinates: Optional[str] = Form(default=None),
    photos: List[UploadFile] = File(default=[]),
    db: Session = Depends(get_db),
    p: Principal = Depends(require_manager),
    geocoder: NominatimClient = Depends(get_geocoder),
    storage: GCSPhotoStorage = Depends(get_photo_storage),
):
    if manager_cognito_id and manager_cognito_id != p.sub:
        raise HTTPException(status_code=403, detail="Managers may only list properties under their own id")

    raw = {
        "name": name,
        "description": description,
        "pricePerMonth": price_per_month,
        "securityDeposit": security_deposit,
        "applicationFee": application_fee,
        "amenities": amenities,
        "highlights": highlights,
        "isPetsAllowed": is_pets_allowed,
        "isParkingIncluded": is_parking_included,
        "beds": beds,
        "baths": baths,
        "squareFeet": square_feet,
        "propertyType": property_type,
        "address": address,
        "city": city,
        "state": state,
        "country": country,
        "postalCode": postal_code,
        "managerCognitoId": manager_cognito_id or p.sub,
    }
    try:
        payload = PropertyCreate.model_validate({k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    files = [(f.filename or "photo", f.file.read(), f.content_type) for f in photos]

    prop = create_property(
        db,
        payload,
        raw_coordinates=coordinates,
        photos=files,
        geocoder=geocoder,
        storage=storage,
    )
    return serialize_property(prop, include_manager=True)
