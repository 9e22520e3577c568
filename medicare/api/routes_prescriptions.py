# FILE: medicare/api/routes_prescriptions.py
from __future__ import annotations

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from medicare.api.deps import CurrentUser, current_user, get_db
from medicare.api.emr_router_utils import get_or_404, patient_records_router
from medicare.api.response import ok
from medicare.core import rbac
from medicare.crud import collections
from medicare.schemas.emr import PrescriptionCreate, PrescriptionUpdate

router = patient_records_router(collections.prescriptions, PrescriptionCreate,
                                PrescriptionUpdate)


@router.post("/{prescription_id}/dispense")
def dispense(prescription_id: str,
             db: Session = Depends(get_db),
             me: CurrentUser = Depends(current_user)):
    rbac.require_roles(me, {rbac.PHARMACIST, rbac.ADMIN},
                       message="Only pharmacists can dispense prescriptions")
    rx = get_or_404(db, collections.prescriptions, prescription_id)
    if rx.dispensed:
        raise HTTPException(status_code=409,
                            detail="Prescription already dispensed")
    if rx.status == "cancelled":
        raise HTTPException(status_code=409,
                            detail="Cancelled prescriptions cannot be dispensed")
    return ok(collections.dispense_prescription(db, prescription_id, me.id))
