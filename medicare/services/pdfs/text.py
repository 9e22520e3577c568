# FILE: medicare/services/pdfs/text.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics

REGULAR = "Helvetica"
BOLD = "Helvetica-Bold"


@dataclass(frozen=True)
class TextTier:
    font: str
    size: float
    line_height: float  # mm per wrapped line


LABEL = TextTier(BOLD, 8, 4)
VALUE = TextTier(REGULAR, 9, 4)
SMALL = TextTier(REGULAR, 7, 4)
FORM_TEXT = TextTier(REGULAR, 9.5, 4.5)
FORM_BOLD = TextTier(BOLD, 10, 5)


def clean_text(v: Any) -> str:
    if v is None:
        return ""
    s = str(v).replace("\r\n", "\n").replace("\r", "\n")
    return s.replace("\u2011", "-").strip()


def text_width(text: str, font: str, size: float) -> float:
    """Width of a single line in mm."""
    return pdfmetrics.stringWidth(text or "", font, size) / mm


def _break_long_word(word: str, font: str, size: float,
                     max_w: float) -> List[str]:
    parts: List[str] = []
    cur = ""
    for ch in word:
        if cur and pdfmetrics.stringWidth(cur + ch, font, size) > max_w:
            parts.append(cur)
            cur = ch
        else:
            cur += ch
    if cur:
        parts.append(cur)
    return parts


def wrap_lines(text: Any, font: str, size: float,
               width_mm: float) -> List[str]:
    """
    Greedy word wrap against the font metrics.
    Embedded newlines start a new line; words wider than the
    line are hard-broken. Always returns at least one line.
    """
    s = clean_text(text)
    if not s:
        return [""]

    max_w = width_mm * mm
    lines: List[str] = []
    for para in s.split("\n"):
        words = para.split()
        if not words:
            lines.append("")
            continue
        cur = ""
        for w in words:
            cand = (cur + " " + w).strip()
            if pdfmetrics.stringWidth(cand, font, size) <= max_w:
                cur = cand
                continue
            if cur:
                lines.append(cur)
            if pdfmetrics.stringWidth(w, font, size) > max_w:
                *head, cur = _break_long_word(w, font, size, max_w)
                lines.extend(head)
            else:
                cur = w
        if cur:
            lines.append(cur)
    return lines or [""]


def estimate_height(text: Any,
                    width_mm: float,
                    tier: TextTier = VALUE,
                    *,
                    fallback: str = "N/A") -> float:
    s = clean_text(text) or fallback
    return len(wrap_lines(s, tier.font, tier.size, width_mm)) * tier.line_height
