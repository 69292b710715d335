# backend/rentiful/routers/applications.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_principal, require_manager, require_tenant
from ..db import get_db
from ..schemas import ApplicationCreate, ApplicationOut, ApplicationStatusUpdate
from ..services.applications import create_application, list_applications, update_application_status
from ..services.ownership import parse_id

router = APIRouter(prefix="/applications", tags=["applications"])


@router.get("", response_model=list[ApplicationOut], dependencies=[Depends(get_principal)])
def get_applications(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    user_type: Optional[str] = Query(default=None, alias="userType"),
    db: Session = Depends(get_db),
):
    return list_applications(db, user_id=user_id, user_type=user_type)


@router.post("", response_model=ApplicationOut, status_code=201, dependencies=[Depends(require_tenant)])
def post_application(payload: ApplicationCreate, db: Session = Depends(get_db)):
    return create_application(db, payload)


@router.put("/{application_id}/status", response_model=ApplicationOut, dependencies=[Depends(require_manager)])
def put_application_status(application_id: str, payload: ApplicationStatusUpdate, db: Session = Depends(get_db)):
    return update_application_status(
        db,
        application_id=parse_id(application_id, label="application id"),
        status=payload.status,
    )
