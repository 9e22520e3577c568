# FILE: medicare/api/emr_router_utils.py
# No `from __future__ import annotations` here: FastAPI has to see the real
# body models inside the factory closures.
from typing import List, Type

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from medicare.api.deps import CurrentUser, current_user, get_db
from medicare.api.response import ok
from medicare.core import rbac
from medicare.crud import collections
from medicare.crud.collections import DocumentCollection


def get_or_404(db: Session, store: DocumentCollection, doc_id: str):
    obj = store.get(db, doc_id)
    if obj is None:
        raise HTTPException(status_code=404,
                            detail=f"{store.name[:-1].capitalize()} not found")
    return obj


def ensure_patient_exists(db: Session, patient_id: str) -> None:
    get_or_404(db, collections.patients, patient_id)


def visible_records(db: Session, store: DocumentCollection,
                    me: CurrentUser) -> List:
    """Everything for staff; a patient-role user only sees their own."""
    if rbac.is_staff(me):
        return store.get_all(db)
    if me.role == rbac.PATIENT and me.patient_id:
        return store.get_by_patient(db, me.patient_id)
    rbac.forbid(me, f"Not permitted to read {store.name}")


def patient_records_router(store: DocumentCollection,
                           create_model: Type[BaseModel],
                           update_model: Type[BaseModel]) -> APIRouter:
    """
    CRUD routes for a collection whose documents belong to one patient
    (prescriptions, treatments, appointments).
    """
    router = APIRouter()
    name = store.name

    @router.get("")
    def list_records(db: Session = Depends(get_db),
                     me: CurrentUser = Depends(current_user)):
        return ok(visible_records(db, store, me))

    @router.get("/{doc_id}")
    def get_record(doc_id: str,
                   db: Session = Depends(get_db),
                   me: CurrentUser = Depends(current_user)):
        obj = get_or_404(db, store, doc_id)
        if not rbac.is_staff(me):
            rbac.require_patient_access(me, obj.patient_id)
        return ok(obj)

    @router.post("", status_code=201)
    def create_record(payload: create_model,
                      db: Session = Depends(get_db),
                      me: CurrentUser = Depends(current_user)):
        rbac.require(me, name, "create")
        ensure_patient_exists(db, payload.patient_id)
        return ok(store.create(db, payload), status_code=201)

    @router.patch("/{doc_id}")
    def update_record(doc_id: str,
                      payload: update_model,
                      db: Session = Depends(get_db),
                      me: CurrentUser = Depends(current_user)):
        rbac.require(me, name, "write")
        get_or_404(db, store, doc_id)
        return ok(store.update(db, doc_id, payload))

    @router.delete("/{doc_id}")
    def delete_record(doc_id: str,
                      db: Session = Depends(get_db),
                      me: CurrentUser = Depends(current_user)):
        rbac.require(me, name, "delete")
        get_or_404(db, store, doc_id)
        store.delete(db, doc_id)
        return ok({"id": doc_id, "deleted": True})

    return router
