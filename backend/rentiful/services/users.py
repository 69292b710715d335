# backend/rentiful/services/users.py
from __future__ import annotations

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..schemas import UserCreate, UserUpdate


def create_user(db: Session, model, payload: UserCreate):
    """Manager/Tenant creation: 409 if the external id is already registered."""
    label = model.__name__.lower()
    if db.scalar(select(model.id).where(model.cognito_id == payload.cognito_id)) is not None:
        raise HTTPException(status_code=409, detail=f"{label} already exists")

    row = model(**payload.model_dump())
    db.add(row)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"{label} already exists")
    db.refresh(row)
    return row


def update_user(db: Session, row, payload: UserUpdate):
    for k, v in payload.model_dump().items():
        setattr(row, k, v)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
