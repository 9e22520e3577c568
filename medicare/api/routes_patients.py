# FILE: medicare/api/routes_patients.py
from __future__ import annotations

import logging
import unicodedata
from io import BytesIO
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from medicare.api.deps import CurrentUser, current_user, get_db
from medicare.api.emr_router_utils import get_or_404
from medicare.api.response import ok
from medicare.core import rbac
from medicare.crud import collections
from medicare.schemas.emr import PatientCreate, PatientUpdate
from medicare.services.pdfs.report import ReportFile, generate_report

logger = logging.getLogger(__name__)

router = APIRouter()


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII name plus the RFC 5987 UTF-8 name."""
    ascii_name = (unicodedata.normalize("NFKD", filename).encode(
        "ascii", "ignore").decode("ascii"))
    ascii_name = ascii_name.replace('"', "").replace("\\", "")
    return (f'attachment; filename="{ascii_name}"; '
            f"filename*=UTF-8''{quote(filename, safe='')}")


def pdf_response(report: ReportFile) -> StreamingResponse:
    return StreamingResponse(
        BytesIO(report.content),
        media_type=report.media_type,
        headers={
            "Content-Disposition": content_disposition(report.filename),
            "X-Report-Pages": str(report.page_count),
        },
    )


# ---------- Patients ----------
@router.get("")
def list_patients(db: Session = Depends(get_db),
                  me: CurrentUser = Depends(current_user)):
    if rbac.is_staff(me):
        return ok(collections.patients.get_all(db))
    if me.role == rbac.PATIENT and me.patient_id:
        own = collections.patients.get(db, me.patient_id)
        return ok([own] if own else [])
    rbac.forbid(me, "Not permitted to read patients")


@router.get("/{patient_id}")
def get_patient(patient_id: str,
                db: Session = Depends(get_db),
                me: CurrentUser = Depends(current_user)):
    rbac.require_patient_access(me, patient_id)
    return ok(get_or_404(db, collections.patients, patient_id))


@router.post("", status_code=201)
def create_patient(payload: PatientCreate,
                   db: Session = Depends(get_db),
                   me: CurrentUser = Depends(current_user)):
    rbac.require(me, "patients", "create")
    if not payload.created_by:
        payload = payload.model_copy(update={"created_by": me.id})
    return ok(collections.patients.create(db, payload), status_code=201)


@router.patch("/{patient_id}")
def update_patient(patient_id: str,
                   payload: PatientUpdate,
                   db: Session = Depends(get_db),
                   me: CurrentUser = Depends(current_user)):
    rbac.require(me, "patients", "write")
    get_or_404(db, collections.patients, patient_id)
    if payload.updated_by is None:
        payload.updated_by = me.id
    return ok(collections.patients.update(db, patient_id, payload))


@router.delete("/{patient_id}")
def delete_patient(patient_id: str,
                   db: Session = Depends(get_db),
                   me: CurrentUser = Depends(current_user)):
    rbac.require(me, "patients", "delete")
    get_or_404(db, collections.patients, patient_id)
    collections.patients.delete(db, patient_id)
    return ok({"id": patient_id, "deleted": True})


# ---------- Per-patient records ----------
@router.get("/{patient_id}/prescriptions")
def patient_prescriptions(patient_id: str,
                          db: Session = Depends(get_db),
                          me: CurrentUser = Depends(current_user)):
    rbac.require_patient_access(me, patient_id)
    get_or_404(db, collections.patients, patient_id)
    return ok(collections.prescriptions.get_by_patient(db, patient_id))


@router.get("/{patient_id}/treatments")
def patient_treatments(patient_id: str,
                       db: Session = Depends(get_db),
                       me: CurrentUser = Depends(current_user)):
    rbac.require_patient_access(me, patient_id)
    get_or_404(db, collections.patients, patient_id)
    return ok(collections.treatments.get_by_patient(db, patient_id))


@router.get("/{patient_id}/appointments")
def patient_appointments(patient_id: str,
                         db: Session = Depends(get_db),
                         me: CurrentUser = Depends(current_user)):
    rbac.require_patient_access(me, patient_id)
    get_or_404(db, collections.patients, patient_id)
    return ok(collections.appointments.get_by_patient(db, patient_id))


# ---------- Report (PDF) ----------
@router.get("/{patient_id}/report")
def patient_report(
        patient_id: str,
        style: str = Query("clinical", description="clinical | form"),
        db: Session = Depends(get_db),
        me: CurrentUser = Depends(current_user),
):
    rbac.require_patient_access(me, patient_id)
    patient = get_or_404(db, collections.patients, patient_id)

    # all data is loaded before the canvas is created
    rx = collections.prescriptions.get_by_patient(db, patient_id)
    tx = collections.treatments.get_by_patient(db, patient_id)

    report = generate_report(patient, rx, tx, style)
    logger.info("Report %s (%d pages) for patient %s requested by %s",
                report.filename, report.page_count, patient_id, me.id)
    return pdf_response(report)
