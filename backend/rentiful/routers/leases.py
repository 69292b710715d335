# backend/rentiful/routers/leases.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import get_principal
from ..db import get_db
from ..models import Lease, Payment
from ..schemas import LeaseWithTenantOut, PaymentOut
from ..services.ownership import must_get_lease, parse_id

router = APIRouter(prefix="/leases", tags=["leases"], dependencies=[Depends(get_principal)])


@router.get("", response_model=list[LeaseWithTenantOut])
def list_leases(db: Session = Depends(get_db)):
    q = select(Lease).options(selectinload(Lease.tenant)).order_by(Lease.id)
    return list(db.scalars(q).all())


@router.get("/{lease_id}/payments", response_model=list[PaymentOut])
def get_lease_payments(lease_id: str, db: Session = Depends(get_db)):
    lease = must_get_lease(db, lease_id=parse_id(lease_id, label="lease id"))
    q = select(Payment).where(Payment.lease_id == lease.id).order_by(Payment.due_date, Payment.id)
    return list(db.scalars(q).all())
