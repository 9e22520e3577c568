# FILE: medicare/services/pdfs/report.py
from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from types import ModuleType
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from medicare.schemas.report import (
    PatientSnapshot,
    PrescriptionSnapshot,
    TreatmentSnapshot,
)
from medicare.services.pdfs import clinical, form
from medicare.services.pdfs.blocks import RenderContext
from medicare.services.pdfs.errors import MissingFieldError, UnknownStyleError
from medicare.services.pdfs.fields import g
from medicare.services.pdfs.layout import LayoutState, Placement
from medicare.services.pdfs.styles import STYLES, Branding, ReportStyle
from medicare.services.pdfs.surface import NumberedCanvas, PageSurface
from medicare.services.pdfs.text import REGULAR
from medicare.utils.timezone import now_report

logger = logging.getLogger(__name__)

_RENDERERS: Mapping[str, ModuleType] = {
    "clinical": clinical,
    "form": form,
}

_UNSAFE = re.compile(r'[\\/:*?"<>|]+')


@dataclass
class ReportFile:
    filename: str
    content: bytes
    page_count: int
    style: str
    placements: List[Placement] = field(default_factory=list, repr=False)
    media_type: str = "application/pdf"


def get_style(key: str) -> ReportStyle:
    style = STYLES.get((key or "").strip().lower())
    if style is None:
        raise UnknownStyleError(key)
    return style


def _filename_part(s: str) -> str:
    s = _UNSAFE.sub("", s.strip())
    return re.sub(r"\s+", "-", s.strip()) or "Unknown"


def report_filename(patient: Any, style: ReportStyle | str,
                    on: date) -> str:
    """<Prefix>_<LastName>_<FirstName>_<YYYY-MM-DD>.pdf"""
    if isinstance(style, str):
        style = get_style(style)
    last = _filename_part(g(patient, "last_name") or "")
    first = _filename_part(g(patient, "first_name") or "")
    return f"{style.filename_prefix}_{last}_{first}_{on.isoformat()}.pdf"


# -----------------------------
# Input coercion
# -----------------------------
def _snapshot(obj: Any, model):
    if isinstance(obj, model):
        return obj
    if isinstance(obj, BaseModel):
        obj = obj.model_dump()
    return model.model_validate(obj or {})


def _coerce_patient(patient: Any) -> PatientSnapshot:
    p = _snapshot(patient, PatientSnapshot)
    for key, label in (("first_name", "first name"), ("last_name",
                                                      "last name")):
        if not (g(p, key) or "").strip():
            raise MissingFieldError(label)
    return p


def _coerce_records(records: Optional[Iterable[Any]], model,
                    patient_id: Optional[str]) -> List[Any]:
    out = []
    for rec in records or ():
        item = _snapshot(rec, model)
        if patient_id and item.patient_id and item.patient_id != patient_id:
            logger.warning("Skipping %s %s: belongs to patient %s, not %s",
                           model.__name__, item.id, item.patient_id,
                           patient_id)
            continue
        out.append(item)
    return out


def _page_stamp(style: ReportStyle):

    def _stamp(surface: PageSurface, page: int, total: int) -> None:
        label = style.page_label.format(page=page, total=total)
        y = surface.page_height - 8
        if style.page_label_align == "center":
            surface.text(surface.page_width / 2, y, label, font=REGULAR,
                         size=8, align="center")
        else:
            surface.text(surface.page_width - style.margin, y, label,
                         font=REGULAR, size=8, align="right")

    return _stamp


# -----------------------------
# Entry point
# -----------------------------
def generate_report(patient: Any,
                    prescriptions: Optional[Sequence[Any]] = (),
                    treatments: Optional[Sequence[Any]] = (),
                    style: str = "clinical",
                    *,
                    generated_at: Optional[datetime] = None,
                    branding: Optional[Branding] = None) -> ReportFile:
    """
    Lay out one patient's record as a paginated PDF.

    Synchronous and self-contained: every call owns its canvas, buffer and
    layout state. Any exception aborts the call and no bytes are returned.
    """
    report_style = get_style(style)
    renderer = _RENDERERS[report_style.key]

    p = _coerce_patient(patient)
    rx = _coerce_records(prescriptions, PrescriptionSnapshot, p.id)
    tx = _coerce_records(treatments, TreatmentSnapshot, p.id)
    generated_at = generated_at or now_report()
    branding = branding or Branding.from_settings()

    logger.info(
        "Generating %s report for %s %s (%d prescriptions, %d treatments)",
        report_style.key, p.first_name, p.last_name, len(rx), len(tx))

    page_w, page_h = A4
    buf = io.BytesIO()
    try:
        canv = NumberedCanvas(buf,
                              pagesize=A4,
                              page_stamp=_page_stamp(report_style))
        canv.setTitle(report_style.meta.get("title", ""))
        canv.setAuthor(branding.org_name)
        canv.setSubject(f"{p.first_name} {p.last_name}")

        surface = PageSurface(canv, page_w / mm, page_h / mm)
        state = LayoutState(
            page_width=surface.page_width,
            page_height=surface.page_height,
            margin=report_style.margin,
            top=report_style.top,
            footer_height=report_style.footer_height,
        )
        ctx = RenderContext(
            surface=surface,
            state=state,
            style=report_style,
            branding=branding,
            patient=p,
            prescriptions=rx,
            treatments=tx,
            generated_at=generated_at,
        )

        def _on_new_page(_state: LayoutState) -> None:
            surface.new_page()
            renderer.decorate_page(ctx)

        state.on_new_page = _on_new_page

        renderer.decorate_page(ctx)
        for section in report_style.sections:
            renderer.SECTIONS[section](ctx)

        canv.showPage()
        page_count = canv.page_count
        canv.save()
        content = buf.getvalue()
    finally:
        buf.close()

    return ReportFile(
        filename=report_filename(p, report_style, generated_at.date()),
        content=content,
        page_count=page_count,
        style=report_style.key,
        placements=list(state.placements),
    )


__all__: Tuple[str, ...] = (
    "ReportFile",
    "generate_report",
    "get_style",
    "report_filename",
)
