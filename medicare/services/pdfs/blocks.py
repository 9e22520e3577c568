# FILE: medicare/services/pdfs/blocks.py
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple

from reportlab.lib import colors

from medicare.services.pdfs.fields import resolve_all
from medicare.services.pdfs.layout import LayoutState
from medicare.services.pdfs.styles import (
    DARK_GRAY,
    PINK,
    PINK_LIGHT,
    Branding,
    RecordFields,
    ReportStyle,
)
from medicare.services.pdfs.surface import PageSurface
from medicare.services.pdfs.text import BOLD, LABEL, VALUE, TextTier, wrap_lines

# Box geometry (mm)
TITLE_BLOCK = 9.0
NO_TITLE_PAD = 2.0
ROW_GAP = 2.0
PAD_BOTTOM = 2.0
INSET = 3.0
LABEL_RISE = 3.0  # label baseline below the top of its row
MIN_SEGMENT = TITLE_BLOCK + LABEL.line_height + VALUE.line_height + ROW_GAP + PAD_BOTTOM

_EPS = 1e-6


@dataclass
class RenderContext:
    surface: PageSurface
    state: LayoutState
    style: ReportStyle
    branding: Branding
    patient: Any
    prescriptions: Sequence[Any]
    treatments: Sequence[Any]
    generated_at: datetime

    def label(self, key: str) -> str:
        return self.style.labels[key]


# -------------------------------
# Boxed records
# -------------------------------
@dataclass
class FieldRow:
    label: str
    lines: List[str]

    @property
    def height(self) -> float:
        return LABEL.line_height + len(self.lines) * VALUE.line_height + ROW_GAP


@dataclass
class BoxPlan:
    """Everything needed to draw one bordered record, measured up front."""
    kind: str
    x: float
    width: float
    title: Optional[str] = None
    title_size: float = 11
    badge: Optional[Tuple[str, colors.Color]] = None
    left: List[FieldRow] = field(default_factory=list)
    right: List[FieldRow] = field(default_factory=list)
    full: List[FieldRow] = field(default_factory=list)

    @property
    def head_height(self) -> float:
        return TITLE_BLOCK if self.title else NO_TITLE_PAD

    @property
    def columns_height(self) -> float:
        return max(sum(r.height for r in self.left),
                   sum(r.height for r in self.right))

    @property
    def full_height(self) -> float:
        return sum(r.height for r in self.full)

    @property
    def height(self) -> float:
        return (self.head_height + self.columns_height + self.full_height +
                PAD_BOTTOM)

    def split(self, first_avail: float, page_avail: float) -> List["BoxPlan"]:
        """
        Break an oversized box into segments, each no taller than the space
        it will be drawn in. Rows are stacked in one column and cut on
        wrapped-line boundaries.
        """
        rows = self.left + self.right + self.full
        segments: List[BoxPlan] = []
        cur: List[FieldRow] = []
        avail = first_avail
        title = self.title
        badge = self.badge

        def _used() -> float:
            head = TITLE_BLOCK if title else NO_TITLE_PAD
            return head + sum(r.height for r in cur) + PAD_BOTTOM

        def _close() -> None:
            segments.append(
                replace(self,
                        title=title,
                        badge=badge,
                        left=[],
                        right=[],
                        full=list(cur)))

        for row in rows:
            label = row.label
            lines = list(row.lines)
            while lines:
                room = avail - _used() - LABEL.line_height - ROW_GAP
                n = int((room + _EPS) // VALUE.line_height)
                if n < 1 and cur:
                    _close()
                    cur = []
                    avail = page_avail
                    title = f"{self.title} (continued)" if self.title else None
                    badge = None
                    continue
                n = max(n, 1)
                cur.append(FieldRow(label, lines[:n]))
                lines = lines[n:]
                label = f"{row.label} (cont.)"
        _close()
        return segments


def _rows(rules, record, width: float) -> List[FieldRow]:
    return [
        FieldRow(label, _wrap_value(value, width))
        for label, value in resolve_all(rules, record)
    ]


def _wrap_value(value: str, width: float) -> List[str]:
    return wrap_lines(value, VALUE.font, VALUE.size, width)


def plan_box(fields: RecordFields,
             record: Any,
             *,
             kind: str,
             x: float,
             width: float,
             title: Optional[str] = None,
             title_size: float = 11,
             badge: Optional[Tuple[str, colors.Color]] = None) -> BoxPlan:
    col_w = width / 2 - 8
    full_w = width - 2 * INSET
    return BoxPlan(
        kind=kind,
        x=x,
        width=width,
        title=title,
        title_size=title_size,
        badge=badge,
        left=_rows(fields.left, record, col_w),
        right=_rows(fields.right, record, col_w),
        full=_rows(fields.full, record, full_w),
    )


def _draw_rows(surface: PageSurface, rows: List[FieldRow], x: float,
               y: float) -> float:
    for row in rows:
        base = y + LABEL_RISE
        surface.text(x, base, row.label, font=LABEL.font, size=LABEL.size,
                     color=DARK_GRAY)
        surface.lines(x,
                      base + LABEL.line_height,
                      row.lines,
                      VALUE.line_height,
                      font=VALUE.font,
                      size=VALUE.size,
                      color=DARK_GRAY)
        y += row.height
    return y


def _draw_badge(surface: PageSurface, x: float, baseline: float, text: str,
                fill: colors.Color) -> None:
    w = max(18.0, surface.text_width(text, BOLD, 7) + 4)
    surface.rect(x, baseline - 4, w, 5, fill=fill, radius=1)
    surface.text(x + 2, baseline - 0.5, text, font=BOLD, size=7,
                 color=colors.white)


def draw_segment(surface: PageSurface, plan: BoxPlan, top: float) -> None:
    x = plan.x
    surface.rect(x, top, plan.width, plan.height, stroke=PINK_LIGHT,
                 line_width=0.5)
    y = top + plan.head_height
    if plan.title:
        baseline = top + 6
        surface.text(x + INSET, baseline, plan.title, font=BOLD,
                     size=plan.title_size, color=PINK)
        if plan.badge:
            name_w = surface.text_width(plan.title, BOLD, plan.title_size)
            _draw_badge(surface, x + INSET + name_w + 3, baseline,
                        plan.badge[0], plan.badge[1])

    _draw_rows(surface, plan.left, x + INSET, y)
    _draw_rows(surface, plan.right, x + plan.width / 2 + 5, y)
    _draw_rows(surface, plan.full, x + INSET, y + plan.columns_height)


def draw_box(ctx: RenderContext, plan: BoxPlan, *, trigger: float,
             gap: float) -> List[BoxPlan]:
    """
    Compute-then-draw: the border is sized from the plan before anything is
    drawn, and the cursor moves by exactly plan.height + gap.
    """
    state = ctx.state
    state.ensure_room(plan.height, trigger)
    if plan.height <= state.remaining + _EPS:
        segments = [plan]
    else:
        if state.remaining < MIN_SEGMENT:
            state.new_page()
        segments = plan.split(state.remaining, state.content_height)

    for i, seg in enumerate(segments):
        if i:
            state.new_page()
        top = state.place(seg.height, seg.kind)
        draw_segment(ctx.surface, seg, top)
    state.advance(gap)
    return segments


# -------------------------------
# Free-flowing lines
# -------------------------------
@dataclass
class FlowLine:
    text: str
    tier: TextTier = VALUE
    indent: float = 0.0
    bold_prefix: str = ""
    align: str = "left"
    color: colors.Color = DARK_GRAY


def labeled_lines(label: str,
                  value: str,
                  width: float,
                  tier: TextTier,
                  *,
                  indent: float = 0.0) -> List[FlowLine]:
    """'Label: value' wrapped to width; the label is drawn bold on line one."""
    prefix = f"{label}: "
    # bold prefix is slightly wider than its regular measurement
    wrapped = wrap_lines(prefix + value, tier.font, tier.size, width - 3)
    head = prefix.rstrip()
    if not wrapped[0].startswith(head):
        return [FlowLine(ln, tier, indent) for ln in wrapped]
    out = [FlowLine(wrapped[0][len(head):].lstrip(), tier, indent, prefix)]
    out.extend(FlowLine(ln, tier, indent) for ln in wrapped[1:])
    return out


def flow_height(lines: Sequence[FlowLine]) -> float:
    return sum(ln.tier.line_height for ln in lines)


def flow(ctx: RenderContext,
         lines: Sequence[FlowLine],
         *,
         x: float,
         trigger: float = 0.0,
         kind: str = "line",
         center_x: Optional[float] = None) -> None:
    """
    Keep the whole run together when it fits on a page; otherwise let it
    continue line by line across pages.
    """
    state = ctx.state
    surface = ctx.surface
    state.ensure_room(flow_height(lines), trigger)
    for ln in lines:
        lh = ln.tier.line_height
        state.ensure_room(lh)
        top = state.place(lh, kind)
        base = top + lh - 1
        lx = x + ln.indent
        if ln.align == "center":
            surface.text(center_x if center_x is not None else lx, base,
                         ln.text, font=ln.tier.font, size=ln.tier.size,
                         color=ln.color, align="center")
            continue
        if ln.bold_prefix:
            prefix = ln.bold_prefix
            surface.text(lx, base, prefix, font=BOLD, size=ln.tier.size,
                         color=ln.color)
            lx += surface.text_width(prefix, BOLD, ln.tier.size)
        surface.text(lx, base, ln.text, font=ln.tier.font, size=ln.tier.size,
                     color=ln.color)
