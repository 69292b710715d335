# backend/rentiful/auth.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import jwt
from fastapi import Depends, Header, HTTPException, Request

from .config import settings
from .enums import Role


@dataclass(frozen=True)
class Principal:
    sub: str  # identity-provider subject id == Manager/Tenant.cognito_id
    role: str  # tenant | manager
    email: Optional[str] = None
    name: Optional[str] = None


def _normalize_role(raw: Any) -> Optional[str]:
    role = str(raw or "").strip().lower()
    return role if role in (Role.tenant.value, Role.manager.value) else None


# -------------------------
# JWT (issued by the identity provider; we only decode)
# -------------------------
def decode_token(token: str) -> dict[str, Any]:
    options = {"verify_signature": bool(settings.jwt_verify_signature)}
    if not settings.jwt_audience:
        options["verify_aud"] = False

    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=list(settings.jwt_algorithms),
            audience=settings.jwt_audience or None,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")


def _principal_from_claims(claims: dict[str, Any]) -> Principal:
    sub = str(claims.get("sub") or "").strip()
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub")

    role = _normalize_role(claims.get(settings.role_claim))
    if role is None:
        raise HTTPException(status_code=403, detail="Token has no usable role claim")

    return Principal(
        sub=sub,
        role=role,
        email=claims.get("email"),
        name=claims.get("name") or claims.get("cognito:username") or claims.get("username"),
    )


# -------------------------
# get_principal
# -------------------------
def get_principal(
    request: Request,
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> Principal:
    """
    Auth modes (in priority order):
      1) Authorization: Bearer <identity-provider JWT>
      2) dev header spoofing (ONLY if settings.auth_mode == "dev")
    """
    if authorization and str(authorization).lower().startswith("bearer "):
        token = str(authorization).split(" ", 1)[1].strip()
        if not token:
            raise HTTPException(status_code=401, detail="Empty bearer token")
        return _principal_from_claims(decode_token(token))

    if settings.auth_mode == "dev":
        sub = (request.headers.get(settings.dev_header_user_sub) or "").strip()
        if not sub:
            raise HTTPException(status_code=401, detail=f"Missing {settings.dev_header_user_sub} for dev auth")

        role = _normalize_role(request.headers.get(settings.dev_header_user_role) or Role.tenant.value)
        if role is None:
            raise HTTPException(status_code=403, detail="Unknown role")

        return Principal(
            sub=sub,
            role=role,
            email=(request.headers.get(settings.dev_header_user_email) or "").strip() or None,
            name=(request.headers.get(settings.dev_header_user_name) or "").strip() or None,
        )

    raise HTTPException(status_code=401, detail="Not authenticated")


def require_role(*roles: Role):
    allowed = {r.value for r in roles}

    def _dep(p: Principal = Depends(get_principal)) -> Principal:
        if p.role not in allowed:
            raise HTTPException(status_code=403, detail=f"Requires role: {', '.join(sorted(allowed))}")
        return p

    return _dep


require_manager = require_role(Role.manager)
require_tenant = require_role(Role.tenant)
