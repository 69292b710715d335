# backend/rentiful/services/favorites.py
from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import delete, exists, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import Tenant, tenant_favorites
from .ownership import must_get_property, must_get_tenant

log = logging.getLogger("rentiful.favorites")


def is_favorite(db: Session, *, tenant_id: int, property_id: int) -> bool:
    return bool(
        db.scalar(
            select(
                exists().where(
                    tenant_favorites.c.tenant_id == tenant_id,
                    tenant_favorites.c.property_id == property_id,
                )
            )
        )
    )


def add_favorite(db: Session, *, cognito_id: str, property_id: int) -> Tenant:
    """404 if tenant or property is missing, 409 if already a favorite."""
    tenant = must_get_tenant(db, cognito_id=cognito_id)
    must_get_property(db, property_id=property_id)

    if is_favorite(db, tenant_id=tenant.id, property_id=property_id):
        raise HTTPException(status_code=409, detail="Property already added as favorite")

    try:
        db.execute(insert(tenant_favorites).values(tenant_id=tenant.id, property_id=property_id))
        db.commit()
    except IntegrityError:
        # composite primary key: a concurrent add got there first
        db.rollback()
        raise HTTPException(status_code=409, detail="Property already added as favorite")

    db.refresh(tenant)
    log.info("favorite added", extra={"tenant_id": tenant.id, "property_id": property_id})
    return tenant


def remove_favorite(db: Session, *, cognito_id: str, property_id: int) -> Tenant:
    """Removing a property that is not a favorite is a no-op; unknown tenant is 404."""
    tenant = must_get_tenant(db, cognito_id=cognito_id)

    res = db.execute(
        delete(tenant_favorites).where(
            tenant_favorites.c.tenant_id == tenant.id,
            tenant_favorites.c.property_id == property_id,
        )
    )
    db.commit()

    if res.rowcount:
        log.info("favorite removed", extra={"tenant_id": tenant.id, "property_id": property_id})
    db.refresh(tenant)
    return tenant
