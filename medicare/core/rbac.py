# FILE: medicare/core/rbac.py
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from fastapi import HTTPException, status

logger = logging.getLogger(__name__)

ADMIN = "admin"
DOCTOR = "doctor"
NURSE = "nurse"
PHARMACIST = "pharmacist"
PATIENT = "patient"

STAFF = frozenset({ADMIN, DOCTOR, NURSE, PHARMACIST})
ROLES = STAFF | {PATIENT}

# collection -> action -> roles allowed
POLICY = {
    "patients": {
        "read": STAFF,
        "write": frozenset({ADMIN, DOCTOR, NURSE}),
        "delete": frozenset({ADMIN}),
    },
    "prescriptions": {
        "read": STAFF,
        "create": frozenset({ADMIN, DOCTOR}),
        # pharmacists dispense
        "write": frozenset({ADMIN, DOCTOR, PHARMACIST}),
        "delete": frozenset({ADMIN}),
    },
    "treatments": {
        "read": STAFF,
        "write": frozenset({ADMIN, DOCTOR, NURSE}),
        "delete": frozenset({ADMIN}),
    },
    "appointments": {
        "read": STAFF,
        "write": STAFF,
        "delete": STAFF,
    },
    # applies to other users' notifications; owners always reach their own
    "notifications": {
        "read": frozenset({ADMIN}),
        "create": frozenset({ADMIN}),
        "write": frozenset({ADMIN}),
        "delete": frozenset({ADMIN}),
    },
    "users": {
        "read": frozenset({ADMIN}),
        "write": frozenset({ADMIN}),
        "delete": frozenset({ADMIN}),
    },
}


def _role(user: Any) -> str:
    return (getattr(user, "role", None) or "").strip().lower()


def is_admin_user(user: Any) -> bool:
    return _role(user) == ADMIN


def is_staff(user: Any) -> bool:
    return _role(user) in STAFF


def allowed_roles(collection: str, action: str) -> frozenset:
    rules = POLICY.get(collection, {})
    if action == "create" and "create" not in rules:
        action = "write"
    return rules.get(action, frozenset())


def can(user: Any, collection: str, action: str) -> bool:
    return _role(user) in allowed_roles(collection, action)


def forbid(user: Any, message: Optional[str] = None) -> None:
    logger.warning("Access denied for user %s (role=%s): %s",
                   getattr(user, "id", None), _role(user) or "-",
                   message or "forbidden")
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=message or "You do not have permission to perform this action.",
    )


def require_roles(user: Any,
                  roles: Iterable[str],
                  *,
                  message: Optional[str] = None) -> None:
    """Raise 403 unless the user holds one of `roles`."""
    if _role(user) not in set(roles):
        forbid(user, message)


def require(user: Any, collection: str, action: str) -> None:
    require_roles(user,
                  allowed_roles(collection, action),
                  message=f"Not permitted to {action} {collection}")


def can_access_patient(user: Any, patient_id: str) -> bool:
    """Staff see every patient; a patient-role user sees only their own."""
    if is_staff(user):
        return True
    if _role(user) == PATIENT:
        return bool(patient_id) and getattr(user, "patient_id",
                                            None) == patient_id
    return False


def require_patient_access(user: Any, patient_id: str) -> None:
    if not can_access_patient(user, patient_id):
        forbid(user, "Not permitted to view this patient")
