# backend/rentiful/services/ownership.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..models import MAX_ROW_ID, Application, Lease, Manager, Property, Tenant


def must_get_property(db: Session, *, property_id: int) -> Property:
    row = db.get(Property, property_id)
    if not row:
        raise HTTPException(status_code=404, detail="property not found")
    return row


def must_get_tenant(db: Session, *, cognito_id: str) -> Tenant:
    row = db.scalar(select(Tenant).where(Tenant.cognito_id == cognito_id))
    if not row:
        raise HTTPException(status_code=404, detail="tenant not found")
    return row


def must_get_manager(db: Session, *, cognito_id: str) -> Manager:
    row = db.scalar(select(Manager).where(Manager.cognito_id == cognito_id))
    if not row:
        raise HTTPException(status_code=404, detail="manager not found")
    return row


def must_get_lease(db: Session, *, lease_id: int) -> Lease:
    row = db.get(Lease, lease_id)
    if not row:
        raise HTTPException(status_code=404, detail="lease not found")
    return row


def must_get_application(db: Session, *, application_id: int) -> Application:
    row = db.get(Application, application_id)
    if not row:
        raise HTTPException(status_code=404, detail="application not found")
    return row


def parse_id(raw: str, *, label: str = "id") -> int:
    """Path ids arrive as text so a malformed one is a 400, not a validation error."""
    try:
        value = int(str(raw).strip())
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label}: {raw}")
    if not 1 <= value <= MAX_ROW_ID:
        raise HTTPException(status_code=400, detail=f"Invalid {label}: {raw}")
    return value
