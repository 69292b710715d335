# backend/rentiful/services/provisioning.py
from __future__ import annotations

import logging
from typing import Union

from sqlalchemy import insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..auth import Principal
from ..enums import Role
from ..models import Manager, Tenant

log = logging.getLogger("rentiful.provisioning")

User = Union[Tenant, Manager]


def model_for_role(role: str):
    return Manager if role == Role.manager.value else Tenant


def _find(db: Session, model, cognito_id: str):
    return db.scalar(select(model).where(model.cognito_id == cognito_id))


def _defaults(principal: Principal) -> dict:
    name = (principal.name or "").strip() or principal.sub
    email = (principal.email or "").strip() or ""
    return {"cognito_id": principal.sub, "name": name, "email": email, "phone_number": ""}


def provision_user(db: Session, principal: Principal) -> tuple[User, bool]:
    """
    Insert-or-fetch the Tenant/Manager row for an authenticated identity.

    Returns (user, created). Safe under concurrent first requests for the same
    identity: the unique cognito_id makes the losing insert a no-op (or an
    IntegrityError on dialects without ON CONFLICT), and both callers re-read
    the single winning row.
    """
    model = model_for_role(principal.role)

    existing = _find(db, model, principal.sub)
    if existing is not None:
        return existing, False

    values = _defaults(principal)
    dialect = db.get_bind().dialect.name

    if dialect in ("postgresql", "sqlite"):
        ins = (postgresql.insert if dialect == "postgresql" else sqlite.insert)(model.__table__)
        res = db.execute(ins.values(**values).on_conflict_do_nothing(index_elements=["cognito_id"]))
        db.commit()
        created = bool(res.rowcount)
    else:
        try:
            db.execute(insert(model.__table__).values(**values))
            db.commit()
            created = True
        except IntegrityError:
            db.rollback()
            created = False

    row = _find(db, model, principal.sub)
    if row is None:
        raise RuntimeError(f"provisioning did not produce a {model.__name__} for {principal.sub}")

    if created:
        log.info("provisioned %s", model.__name__.lower(), extra={"cognito_id": principal.sub, "role": principal.role})
    return row, created
