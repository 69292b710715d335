# backend/rentiful/services/applications.py
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from ..enums import ApplicationStatus, Role
from ..models import Application, Lease, Property, utcnow
from ..schemas import ApplicationCreate
from .ownership import must_get_application, must_get_property, must_get_tenant

log = logging.getLogger("rentiful.applications")

LEASE_TERM = timedelta(days=365)


def list_applications(db: Session, *, user_id: Optional[str] = None, user_type: Optional[str] = None) -> list[Application]:
    stmt = select(Application).options(selectinload(Application.lease)).order_by(Application.id)
    if user_id and user_type == Role.tenant.value:
        stmt = stmt.where(Application.tenant_cognito_id == user_id)
    elif user_id and user_type == Role.manager.value:
        stmt = stmt.join(Application.property).where(Property.manager_cognito_id == user_id)
    return list(db.scalars(stmt).all())


def create_application(db: Session, payload: ApplicationCreate) -> Application:
    must_get_tenant(db, cognito_id=payload.tenant_cognito_id)
    must_get_property(db, property_id=payload.property_id)

    row = Application(
        property_id=payload.property_id,
        tenant_cognito_id=payload.tenant_cognito_id,
        name=payload.name,
        email=payload.email,
        phone_number=payload.phone_number,
        message=payload.message,
        application_date=payload.application_date or utcnow(),
        status=ApplicationStatus.Pending.value,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    log.info("application created", extra={"property_id": row.property_id, "cognito_id": row.tenant_cognito_id})
    return row


def _lease_for(app: Application, prop: Property, *, now: datetime) -> Lease:
    start = datetime(now.year, now.month, now.day)
    return Lease(
        start_date=start,
        end_date=start + LEASE_TERM,
        rent=prop.price_per_month,
        deposit=prop.security_deposit,
        property_id=prop.id,
        tenant_cognito_id=app.tenant_cognito_id,
    )


def update_application_status(
    db: Session,
    *,
    application_id: int,
    status: ApplicationStatus,
    now: Optional[datetime] = None,
) -> Application:
    """
    Pending -> Approved | Denied. Approving creates the application's lease
    (today .. +1 year at the listed rent and deposit). Setting the current
    status again is a no-op; any other transition is a 409.

    The transition is claimed with a conditional UPDATE on status = Pending,
    so of two concurrent approvals only one writes a lease.
    """
    app = must_get_application(db, application_id=application_id)
    target = ApplicationStatus(status).value

    claimed = db.execute(
        update(Application)
        .where(Application.id == app.id, Application.status == ApplicationStatus.Pending.value)
        .values(status=target)
        .execution_options(synchronize_session=False)
    ).rowcount

    if not claimed:
        db.rollback()
        db.refresh(app)
        if app.status == target:
            return app
        raise HTTPException(status_code=409, detail=f"Application is already {app.status}")

    if target == ApplicationStatus.Approved.value:
        prop = must_get_property(db, property_id=app.property_id)
        lease = _lease_for(app, prop, now=now or utcnow())
        db.add(lease)
        db.flush()
        app.lease_id = lease.id

    db.commit()
    db.refresh(app)
    log.info("application %s", target.lower(), extra={"property_id": app.property_id, "cognito_id": app.tenant_cognito_id})
    return app
