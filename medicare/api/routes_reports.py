# FILE: medicare/api/routes_reports.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query

from medicare.api.deps import CurrentUser, current_user
from medicare.api.response import ok
from medicare.api.routes_patients import pdf_response
from medicare.core import rbac
from medicare.schemas.report import ReportPayload
from medicare.services.pdfs.report import generate_report
from medicare.services.pdfs.styles import STYLES

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/styles")
def list_styles(me: CurrentUser = Depends(current_user)):
    return ok([{
        "key": s.key,
        "title": s.labels["title"],
        "filenamePrefix": s.filename_prefix,
    } for s in STYLES.values()])


@router.post("")
def render_report(
        payload: ReportPayload,
        style: str = Query("clinical", description="clinical | form"),
        me: CurrentUser = Depends(current_user),
):
    """Render a report from a posted snapshot instead of stored records."""
    rbac.require_roles(me, rbac.STAFF,
                       message="Only staff can render ad-hoc reports")
    report = generate_report(payload.patient, payload.prescriptions,
                             payload.treatments, style)
    return pdf_response(report)
