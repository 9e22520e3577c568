# FILE: medicare/api/deps.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException
from jose import JWTError, jwt

from medicare.core.config import settings
from medicare.core.rbac import ROLES
from medicare.db.session import get_db  # noqa: F401  re-exported for routes


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str]
    role: str
    patient_id: Optional[str] = None


# =========================================================
# AUTH HELPERS
# =========================================================
def _extract_bearer(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def _decode_token(raw_token: str) -> dict:
    try:
        return jwt.decode(raw_token,
                          settings.JWT_SECRET,
                          algorithms=[settings.JWT_ALG])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")


def user_from_claims(payload: dict) -> CurrentUser:
    sub = payload.get("sub")
    role = (payload.get("role") or "").strip().lower()
    if not sub:
        raise HTTPException(status_code=401, detail="Token has no subject")
    if role not in ROLES:
        raise HTTPException(status_code=401, detail="Token has no valid role")
    return CurrentUser(
        id=str(sub),
        email=payload.get("email"),
        role=role,
        patient_id=payload.get("patientId") or payload.get("patient_id"),
    )


def current_user(authorization: Optional[str] = Header(
    None)) -> CurrentUser:
    token = _extract_bearer(authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user_from_claims(_decode_token(token))
