# backend/rentiful/routers/tenants.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import get_principal
from ..db import get_db
from ..enums import ApplicationStatus
from ..models import Application, Lease, Property, Tenant, utcnow
from ..schemas import TenantOut, UserCreate, UserUpdate
from ..services.favorites import add_favorite, remove_favorite
from ..services.locations import serialize_property
from ..services.ownership import must_get_tenant, parse_id
from ..services.users import create_user, update_user

router = APIRouter(prefix="/tenants", tags=["tenants"], dependencies=[Depends(get_principal)])


@router.get("/{cognito_id}", response_model=TenantOut)
def get_tenant(cognito_id: str, db: Session = Depends(get_db)):
    return must_get_tenant(db, cognito_id=cognito_id)


@router.post("", response_model=TenantOut, status_code=201)
def create_tenant(payload: UserCreate, db: Session = Depends(get_db)):
    return create_user(db, Tenant, payload)


@router.put("/{cognito_id}", response_model=TenantOut)
def update_tenant(cognito_id: str, payload: UserUpdate, db: Session = Depends(get_db)):
    row = must_get_tenant(db, cognito_id=cognito_id)
    return update_user(db, row, payload)


def current_residences(db: Session, *, cognito_id: str, now: Optional[datetime] = None) -> list[dict]:
    """Properties behind the tenant's approved applications whose lease covers `now`."""
    now = now or utcnow()
    q = (
        select(Application)
        .join(Application.lease)
        .where(
            Application.tenant_cognito_id == cognito_id,
            Application.status == ApplicationStatus.Approved.value,
            Lease.start_date <= now,
            Lease.end_date >= now,
        )
        .options(
            selectinload(Application.lease),
            selectinload(Application.property).selectinload(Property.location),
            selectinload(Application.property).selectinload(Property.amenity_links),
        )
        .order_by(Application.id)
    )

    out: list[dict] = []
    for app in db.scalars(q).all():
        row = serialize_property(app.property)
        row["lease"] = {
            "id": app.lease.id,
            "startDate": app.lease.start_date.isoformat(),
            "endDate": app.lease.end_date.isoformat(),
            "rent": app.lease.rent,
            "deposit": app.lease.deposit,
        }
        row["application"] = {
            "id": app.id,
            "applicationDate": app.application_date.isoformat(),
            "status": app.status,
        }
        out.append(row)
    return out


@router.get("/{cognito_id}/current-residences")
def get_current_residences(cognito_id: str, db: Session = Depends(get_db)):
    must_get_tenant(db, cognito_id=cognito_id)
    return current_residences(db, cognito_id=cognito_id)


@router.post("/{cognito_id}/favorites/{property_id}", response_model=TenantOut)
def add_favorite_property(cognito_id: str, property_id: str, db: Session = Depends(get_db)):
    return add_favorite(db, cognito_id=cognito_id, property_id=parse_id(property_id, label="property id"))


@router.delete("/{cognito_id}/favorites/{property_id}", response_model=TenantOut)
def remove_favorite_property(cognito_id: str, property_id: str, db: Session = Depends(get_db)):
    return remove_favorite(db, cognito_id=cognito_id, property_id=parse_id(property_id, label="property id"))
