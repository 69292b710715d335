# backend/rentiful/routers/managers.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from ..auth import get_principal
from ..db import get_db
from ..models import Manager, Property
from ..schemas import UserCreate, UserOut, UserUpdate
from ..services.locations import serialize_property
from ..services.ownership import must_get_manager
from ..services.users import create_user, update_user

router = APIRouter(prefix="/managers", tags=["managers"], dependencies=[Depends(get_principal)])


@router.get("/{cognito_id}", response_model=UserOut)
def get_manager(cognito_id: str, db: Session = Depends(get_db)):
    return must_get_manager(db, cognito_id=cognito_id)


@router.post("", response_model=UserOut, status_code=201)
def create_manager(payload: UserCreate, db: Session = Depends(get_db)):
    return create_user(db, Manager, payload)


@router.put("/{cognito_id}", response_model=UserOut)
def update_manager(cognito_id: str, payload: UserUpdate, db: Session = Depends(get_db)):
    row = must_get_manager(db, cognito_id=cognito_id)
    return update_user(db, row, payload)


@router.get("/{cognito_id}/properties")
def get_manager_properties(cognito_id: str, db: Session = Depends(get_db)):
    must_get_manager(db, cognito_id=cognito_id)

    q = (
        select(Property)
        .where(Property.manager_cognito_id == cognito_id)
        .options(selectinload(Property.location), selectinload(Property.amenity_links))
        .order_by(Property.id)
    )
    return [serialize_property(p) for p in db.scalars(q).all()]
