# backend/rentiful/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import Principal, get_principal
from ..db import get_db
from ..schemas import AuthUserOut, UserOut
from ..services.provisioning import provision_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=AuthUserOut)
def me(p: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Authenticated user plus their Tenant/Manager record, created on first call."""
    user, _created = provision_user(db, p)

    return AuthUserOut(
        cognito_info={"userId": p.sub, "email": p.email, "username": p.name},
        user_info=UserOut.model_validate(user).model_dump(by_alias=True, mode="json"),
        user_role=p.role,
    )
