# FILE: medicare/services/pdfs/clinical.py
"""
Clinical Record layout: pink section bars and one bordered box per record.
"""
from __future__ import annotations

from typing import Callable, Dict

from reportlab.lib import colors

from medicare.services.pdfs.blocks import (
    MIN_SEGMENT,
    RenderContext,
    draw_box,
    plan_box,
)
from medicare.services.pdfs.fields import full_name, g, present
from medicare.services.pdfs.styles import (
    DARK_GRAY,
    LIGHT_GRAY,
    MUTED,
    NOTICE_BG,
    NOTICE_RED,
    PINK,
    STATUS_COLORS,
)
from medicare.services.pdfs.text import BOLD, REGULAR

HEADER_BAR = 8.0
FOOTER_BAND = 25.0
SECTION_BAR = 8.0
SECTION_GAP = 5.0
SECTION_BLOCK = SECTION_BAR + SECTION_GAP
BOX_GAP = 8.0
RECORD_GAP = 5.0
TITLE_HEIGHT = 22.0
NOTICE_HEIGHT = 20.0


def _content_x_w(ctx: RenderContext) -> tuple[float, float]:
    m = ctx.state.margin
    return m, ctx.state.page_width - 2 * m


# -----------------------------
# Page decoration
# -----------------------------
def decorate_page(ctx: RenderContext) -> None:
    s = ctx.surface
    b = ctx.branding
    W, H = s.page_width, s.page_height
    m = ctx.state.margin

    s.rect(0, 0, W, HEADER_BAR, fill=PINK)

    footer_y = H - FOOTER_BAND
    s.rect(0, footer_y, W, FOOTER_BAND, fill=LIGHT_GRAY)

    s.text(m, footer_y + 6, b.org_name, font=BOLD, size=8, color=DARK_GRAY)
    y = footer_y + 11
    for line in (b.address_line1, b.address_line2, b.contact_line,
                 f"Website: {b.website}" if b.website else ""):
        if line:
            s.text(m, y, line, font=REGULAR, size=7, color=DARK_GRAY)
            y += 4

    s.text(W / 2, footer_y + 6, ctx.label("courtesy_line1"), size=6,
           color=MUTED, align="center")
    s.text(W / 2,
           footer_y + 10,
           ctx.label("courtesy_line2").format(org=b.org_name),
           size=6,
           color=MUTED,
           align="center")


def section_bar(ctx: RenderContext, title: str, *, keep_with: float = 0.0,
                trigger: float = 0.0) -> None:
    state = ctx.state
    x, w = _content_x_w(ctx)
    state.ensure_room(SECTION_BLOCK + keep_with, trigger)
    top = state.place(SECTION_BAR, "section")
    ctx.surface.rect(x, top, w, SECTION_BAR, fill=PINK)
    ctx.surface.text(x + 3, top + 5.5, title, font=BOLD, size=11,
                     color=colors.white)
    state.advance(SECTION_GAP)


# -----------------------------
# Sections
# -----------------------------
def render_title(ctx: RenderContext) -> None:
    s = ctx.surface
    state = ctx.state
    m = state.margin
    top = state.place(TITLE_HEIGHT, "title")
    # the only timestamp printed in the document
    s.text(s.page_width - m, top + 2, ctx.generated_at.date().isoformat(),
           size=9, color=DARK_GRAY, align="right")
    s.text(m, top + 10, ctx.label("title"), font=BOLD, size=18, color=PINK)
    state.advance(4)


def render_patient(ctx: RenderContext) -> None:
    p = ctx.patient
    x, w = _content_x_w(ctx)
    status = (g(p, "status") or "active").lower()
    plan = plan_box(
        ctx.style.fields["patient"],
        p,
        kind="patient",
        x=x,
        width=w,
        title=full_name(p),
        title_size=14,
        badge=(status.upper(),
               STATUS_COLORS.get(status, STATUS_COLORS["active"])),
    )
    section_bar(ctx, ctx.label("patient"), keep_with=min(plan.height,
                                                         MIN_SEGMENT))
    draw_box(ctx, plan, trigger=0, gap=BOX_GAP)


def render_emergency(ctx: RenderContext) -> None:
    p = ctx.patient
    if not (present(g(p, "emergency_contact_name"))
            or present(g(p, "emergency_contact_phone"))):
        return
    x, w = _content_x_w(ctx)
    plan = plan_box(ctx.style.fields["emergency"], p, kind="emergency",
                    x=x, width=w)
    section_bar(ctx, ctx.label("emergency"), keep_with=plan.height)
    draw_box(ctx, plan, trigger=0, gap=BOX_GAP)


def render_history(ctx: RenderContext) -> None:
    x, w = _content_x_w(ctx)
    plan = plan_box(ctx.style.fields["history"], ctx.patient, kind="history",
                    x=x, width=w)
    section_bar(ctx, ctx.label("history"), keep_with=min(plan.height,
                                                         MIN_SEGMENT))
    draw_box(ctx, plan, trigger=0, gap=BOX_GAP)


def _render_records(ctx: RenderContext, records, section: str,
                    fields_key: str, title_key: str) -> None:
    if not records:
        return
    x, w = _content_x_w(ctx)
    fields = ctx.style.fields[fields_key]
    plans = [
        plan_box(fields, rec, kind=fields_key, x=x, width=w,
                 title=(g(rec, title_key) or "").strip() or "N/A")
        for rec in records
    ]
    section_bar(ctx,
                ctx.label(section),
                keep_with=min(plans[0].height, MIN_SEGMENT),
                trigger=ctx.style.section_trigger)
    for plan in plans:
        draw_box(ctx, plan, trigger=ctx.style.block_trigger, gap=RECORD_GAP)


def render_prescriptions(ctx: RenderContext) -> None:
    _render_records(ctx, ctx.prescriptions, "prescriptions", "prescription",
                    "medication")


def render_treatments(ctx: RenderContext) -> None:
    _render_records(ctx, ctx.treatments, "treatments", "treatment",
                    "treatment_type")


def render_confidentiality(ctx: RenderContext) -> None:
    s = ctx.surface
    state = ctx.state
    x, w = _content_x_w(ctx)
    state.advance(5)
    state.ensure_room(NOTICE_HEIGHT, 60)
    top = state.place(NOTICE_HEIGHT, "notice")
    s.rect(x, top, w, NOTICE_HEIGHT, fill=NOTICE_BG, radius=3)
    s.text(x + 3, top + 6, ctx.label("notice_title"), font=BOLD, size=8,
           color=NOTICE_RED)
    s.text(x + 3, top + 11, ctx.label("notice_line1"), size=7,
           color=DARK_GRAY)
    s.text(x + 3, top + 16, ctx.label("notice_line2"), size=7,
           color=DARK_GRAY)


SECTIONS: Dict[str, Callable[[RenderContext], None]] = {
    "title": render_title,
    "patient": render_patient,
    "emergency": render_emergency,
    "history": render_history,
    "prescriptions": render_prescriptions,
    "treatments": render_treatments,
    "confidentiality": render_confidentiality,
}
