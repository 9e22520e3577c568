# FILE: medicare/services/pdfs/form.py
"""
Prescription Form layout: bilingual labels, free-flowing text, dashed
list items and a signature box. Nothing is boxed except the signature.
"""
from __future__ import annotations

from typing import Callable, Dict, List

from medicare.services.pdfs.blocks import (
    FlowLine,
    RenderContext,
    flow,
    flow_height,
    labeled_lines,
)
from medicare.services.pdfs.fields import (
    age_years,
    full_name,
    g,
    resolve_all,
)
from medicare.services.pdfs.styles import DARK_GRAY, MUTED, RULE
from medicare.services.pdfs.text import (
    BOLD,
    FORM_BOLD,
    FORM_TEXT,
    SMALL,
    text_width,
    wrap_lines,
)

HEADING_HEIGHT = 10.0
ITEM_INDENT = 5.0
ITEM_GAP = 2.0
SIGNATURE_W = 75.0
SIGNATURE_H = 28.0


def _x_w(ctx: RenderContext) -> tuple[float, float]:
    m = ctx.state.margin
    return m, ctx.state.page_width - 2 * m


# -----------------------------
# Page decoration
# -----------------------------
def decorate_page(ctx: RenderContext) -> None:
    s = ctx.surface
    b = ctx.branding
    W = s.page_width
    m = ctx.state.margin
    s.text(W / 2, 14, b.org_name, font=BOLD, size=12, color=DARK_GRAY,
           align="center")
    address = ", ".join(x for x in (b.address_line1, b.address_line2) if x)
    if address:
        s.text(W / 2, 19, address, size=8, color=MUTED, align="center")
    if b.contact_line:
        s.text(W / 2, 23, b.contact_line, size=8, color=MUTED,
               align="center")
    s.line(m, 26, W - m, 26, color=RULE, width=0.6)


def section_heading(ctx: RenderContext, title: str, *,
                    keep_with: float = 0.0) -> None:
    """Centred, underlined section title."""
    s = ctx.surface
    state = ctx.state
    state.ensure_room(HEADING_HEIGHT + keep_with, ctx.style.section_trigger)
    top = state.place(HEADING_HEIGHT, "section")
    cx = s.page_width / 2
    base = top + 6
    s.text(cx, base, title, font=BOLD, size=11, color=DARK_GRAY,
           align="center")
    half = text_width(title, BOLD, 11) / 2
    s.line(cx - half, base + 1, cx + half, base + 1, color=DARK_GRAY,
           width=0.5)
    state.advance(2)


# -----------------------------
# Sections
# -----------------------------
def render_title(ctx: RenderContext) -> None:
    s = ctx.surface
    state = ctx.state
    m = state.margin
    top = state.place(18, "title")
    cx = s.page_width / 2
    title = ctx.label("title")
    s.text(cx, top + 5, title, font=BOLD, size=14, color=DARK_GRAY,
           align="center")
    half = text_width(title, BOLD, 14) / 2
    s.line(cx - half, top + 6.5, cx + half, top + 6.5, color=DARK_GRAY,
           width=0.7)
    # the only timestamp printed in the document
    s.text(s.page_width - m, top + 13,
           f"{ctx.label('date')}: {ctx.generated_at.date().isoformat()}",
           size=9, color=DARK_GRAY, align="right")


def _detail_lines(rules, record, width: float, indent: float) -> List[FlowLine]:
    out: List[FlowLine] = []
    for label, value in resolve_all(rules, record):
        out.extend(labeled_lines(label, value, width - indent, FORM_TEXT,
                                 indent=indent))
    return out


def render_patient(ctx: RenderContext) -> None:
    p = ctx.patient
    x, w = _x_w(ctx)

    lines: List[FlowLine] = []
    identity = full_name(p)
    age = age_years(g(p, "date_of_birth"), ctx.generated_at.date())
    if age is not None:
        identity += f" | {ctx.label('age')}: {age} {ctx.label('years')}"
    lines.extend(labeled_lines(ctx.label("name"), identity, w, FORM_TEXT))
    lines.extend(_detail_lines(ctx.style.fields["patient"].full, p, w, 0))

    section_heading(ctx, ctx.label("patient"),
                    keep_with=FORM_TEXT.line_height * 2)
    flow(ctx, lines, x=x)
    ctx.state.advance(3)


def _item(head: str, rules, record, width: float) -> List[FlowLine]:
    lines = [
        FlowLine(ln, FORM_BOLD)
        for ln in wrap_lines(f"- {head}", FORM_BOLD.font, FORM_BOLD.size,
                             width)
    ]
    lines.extend(_detail_lines(rules, record, width, ITEM_INDENT))
    return lines


def _render_items(ctx: RenderContext, records, section: str, fields_key: str,
                  head: Callable[[object], str]) -> None:
    if not records:
        return
    x, w = _x_w(ctx)
    rules = ctx.style.fields[fields_key].full
    items = [_item(head(rec), rules, rec, w) for rec in records]
    section_heading(ctx, ctx.label(section),
                    keep_with=min(flow_height(items[0]), 30))
    for lines in items:
        flow(ctx, lines, x=x, trigger=ctx.style.block_trigger, kind="item")
        ctx.state.advance(ITEM_GAP)
    ctx.state.advance(2)


def _rx_head(rx) -> str:
    med = (g(rx, "medication") or "").strip() or "N/A"
    dosage = (g(rx, "dosage") or "").strip()
    return f"{med} {dosage}".strip()


def _tx_head(tx) -> str:
    return (g(tx, "treatment_type") or "").strip() or "N/A"


def render_prescriptions(ctx: RenderContext) -> None:
    _render_items(ctx, ctx.prescriptions, "prescriptions", "prescription",
                  _rx_head)


def render_treatments(ctx: RenderContext) -> None:
    _render_items(ctx, ctx.treatments, "treatments", "treatment", _tx_head)


def render_signature(ctx: RenderContext) -> None:
    s = ctx.surface
    state = ctx.state
    m = state.margin
    state.advance(4)
    state.ensure_room(SIGNATURE_H, SIGNATURE_H + 10)
    top = state.place(SIGNATURE_H, "signature")
    x = s.page_width - m - SIGNATURE_W
    s.rect(x, top, SIGNATURE_W, SIGNATURE_H, stroke=DARK_GRAY, line_width=0.6)
    s.text(x + SIGNATURE_W / 2, top + 5, ctx.label("signature"), font=BOLD,
           size=8, color=DARK_GRAY, align="center")
    s.line(x + 8, top + SIGNATURE_H - 6, x + SIGNATURE_W - 8,
           top + SIGNATURE_H - 6, color=MUTED, width=0.4, dash=[1, 2])


def render_confidentiality(ctx: RenderContext) -> None:
    s = ctx.surface
    state = ctx.state
    cx = s.page_width / 2
    state.advance(4)
    lines = [
        FlowLine(ctx.label("confidential_en"), SMALL, align="center",
                 color=MUTED),
        FlowLine(ctx.label("confidential_fr"), SMALL, align="center",
                 color=MUTED),
    ]
    flow(ctx, lines, x=state.margin, kind="footer", center_x=cx)


SECTIONS: Dict[str, Callable[[RenderContext], None]] = {
    "title": render_title,
    "patient": render_patient,
    "prescriptions": render_prescriptions,
    "treatments": render_treatments,
    "signature": render_signature,
    "confidentiality": render_confidentiality,
}
