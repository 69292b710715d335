# backend/rentiful/cli/seed_demo.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from rentiful.db import SessionLocal
from rentiful.enums import Amenity, ApplicationStatus, Highlight, PaymentStatus, PropertyType
from rentiful.geo import to_point
from rentiful.models import Application, Lease, Location, Manager, Payment, Property, PropertyAmenity, Tenant, utcnow


@dataclass(frozen=True)
class SeedResult:
    manager_cognito_id: str
    tenant_cognito_id: str
    property_ids: list[int]
    lease_id: Optional[int]


DEMO_PROPERTIES = [
    {
        "name": "Sunny Hollywood Studio",
        "price": 1850.0,
        "beds": 1,
        "baths": 1.0,
        "sqft": 520,
        "type": PropertyType.Apartment,
        "amenities": [Amenity.AirConditioning, Amenity.WiFi],
        "highlights": [Highlight.CloseToTransit],
        "address": "6801 Hollywood Blvd",
        "city": "Los Angeles",
        "state": "CA",
        "postal_code": "90028",
        "lonlat": (-118.3406, 34.1017),
    },
    {
        "name": "Santa Monica Cottage",
        "price": 3400.0,
        "beds": 2,
        "baths": 1.5,
        "sqft": 980,
        "type": PropertyType.Cottage,
        "amenities": [Amenity.WasherDryer, Amenity.Parking, Amenity.PetsAllowed],
        "highlights": [Highlight.QuietNeighborhood, Highlight.GreatView],
        "address": "1200 Ocean Ave",
        "city": "Santa Monica",
        "state": "CA",
        "postal_code": "90401",
        "lonlat": (-118.4973, 34.0195),
    },
    {
        "name": "Mission District Townhouse",
        "price": 5200.0,
        "beds": 3,
        "baths": 2.5,
        "sqft": 1650,
        "type": PropertyType.Townhouse,
        "amenities": [Amenity.Dishwasher, Amenity.HardwoodFloors, Amenity.Gym],
        "highlights": [Highlight.RecentlyRenovated],
        "address": "3100 24th St",
        "city": "San Francisco",
        "state": "CA",
        "postal_code": "94110",
        "lonlat": (-122.4148, 37.7525),
    },
]


def _get_or_create(db: Session, model, cognito_id: str, name: str, email: str):
    row = db.scalar(select(model).where(model.cognito_id == cognito_id))
    if row:
        return row
    row = model(cognito_id=cognito_id, name=name, email=email, phone_number="")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get_or_create_property(db: Session, manager: Manager, listing: dict) -> Property:
    row = db.scalar(
        select(Property).where(Property.manager_cognito_id == manager.cognito_id, Property.name == listing["name"])
    )
    if row:
        return row

    lon, lat = listing["lonlat"]
    row = Property(
        name=listing["name"],
        description=f"{listing['name']} in {listing['city']}.",
        price_per_month=listing["price"],
        security_deposit=listing["price"],
        application_fee=50.0,
        photo_urls=[],
        highlights=[h.value for h in listing["highlights"]],
        is_pets_allowed=Amenity.PetsAllowed in listing["amenities"],
        is_parking_included=Amenity.Parking in listing["amenities"],
        beds=listing["beds"],
        baths=listing["baths"],
        square_feet=listing["sqft"],
        property_type=listing["type"].value,
        manager_cognito_id=manager.cognito_id,
        location=Location(
            address=listing["address"],
            city=listing["city"],
            state=listing["state"],
            country="United States",
            postal_code=listing["postal_code"],
            coordinates=to_point(lon, lat),
        ),
    )
    row.amenity_links = [PropertyAmenity(a.value) for a in listing["amenities"]]
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _ensure_lease(db: Session, tenant: Tenant, prop: Property) -> Lease:
    row = db.scalar(
        select(Lease).where(Lease.tenant_cognito_id == tenant.cognito_id, Lease.property_id == prop.id)
    )
    if row:
        return row

    start = utcnow().replace(hour=0, minute=0, second=0, microsecond=0) - timedelta(days=30)
    row = Lease(
        start_date=start,
        end_date=start + timedelta(days=365),
        rent=prop.price_per_month,
        deposit=prop.security_deposit,
        property_id=prop.id,
        tenant_cognito_id=tenant.cognito_id,
    )
    db.add(row)
    db.flush()

    db.add(
        Application(
            status=ApplicationStatus.Approved.value,
            property_id=prop.id,
            tenant_cognito_id=tenant.cognito_id,
            name=tenant.name,
            email=tenant.email,
            lease_id=row.id,
        )
    )
    db.add(
        Payment(
            amount_due=prop.price_per_month,
            amount_paid=prop.price_per_month,
            due_date=start,
            payment_date=start,
            payment_status=PaymentStatus.Paid.value,
            lease_id=row.id,
        )
    )
    db.commit()
    db.refresh(row)
    return row


def seed_demo(
    *,
    manager_cognito_id: str = "demo-manager",
    tenant_cognito_id: str = "demo-tenant",
    create_lease: bool = True,
) -> SeedResult:
    db = SessionLocal()
    try:
        manager = _get_or_create(db, Manager, manager_cognito_id, "Demo Manager", "manager@demo.local")
        tenant = _get_or_create(db, Tenant, tenant_cognito_id, "Demo Tenant", "tenant@demo.local")

        props = [_get_or_create_property(db, manager, listing) for listing in DEMO_PROPERTIES]

        lease_id: Optional[int] = None
        if create_lease:
            lease_id = int(_ensure_lease(db, tenant, props[0]).id)

        return SeedResult(
            manager_cognito_id=manager.cognito_id,
            tenant_cognito_id=tenant.cognito_id,
            property_ids=[int(p.id) for p in props],
            lease_id=lease_id,
        )
    finally:
        db.close()
