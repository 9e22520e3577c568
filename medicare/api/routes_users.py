# FILE: medicare/api/routes_users.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from medicare.api.deps import CurrentUser, current_user, get_db
from medicare.api.emr_router_utils import get_or_404
from medicare.api.response import ok
from medicare.core import rbac
from medicare.crud import collections
from medicare.schemas.emr import UserCreate, UserUpdate

router = APIRouter()


@router.get("/me")
def whoami(me: CurrentUser = Depends(current_user)):
    return ok({
        "id": me.id,
        "email": me.email,
        "role": me.role,
        "patientId": me.patient_id,
    })


@router.get("")
def list_users(db: Session = Depends(get_db),
               me: CurrentUser = Depends(current_user)):
    rbac.require(me, "users", "read")
    return ok(collections.users.get_all(db))


@router.get("/{user_id}")
def get_user(user_id: str,
             db: Session = Depends(get_db),
             me: CurrentUser = Depends(current_user)):
    rbac.require(me, "users", "read")
    return ok(get_or_404(db, collections.users, user_id))


@router.post("", status_code=201)
def create_user(payload: UserCreate,
                db: Session = Depends(get_db),
                me: CurrentUser = Depends(current_user)):
    rbac.require(me, "users", "create")
    return ok(collections.users.create(db, payload), status_code=201)


@router.patch("/{user_id}")
def update_user(user_id: str,
                payload: UserUpdate,
                db: Session = Depends(get_db),
                me: CurrentUser = Depends(current_user)):
    rbac.require(me, "users", "write")
    get_or_404(db, collections.users, user_id)
    return ok(collections.users.update(db, user_id, payload))


@router.delete("/{user_id}")
def delete_user(user_id: str,
                db: Session = Depends(get_db),
                me: CurrentUser = Depends(current_user)):
    rbac.require(me, "users", "delete")
    get_or_404(db, collections.users, user_id)
    collections.users.delete(db, user_id)
    return ok({"id": user_id, "deleted": True})
