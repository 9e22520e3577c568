# FILE: medicare/services/pdfs/surface.py
from __future__ import annotations

from typing import Callable, List, Optional

from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas as rl_canvas

from medicare.services.pdfs.text import REGULAR, text_width, wrap_lines

PageStamp = Callable[["PageSurface", int, int], None]


# -----------------------------
# Page-number canvas (stamped once the page count is known)
# -----------------------------
class NumberedCanvas(rl_canvas.Canvas):
    def __init__(self, *args, page_stamp: Optional[PageStamp] = None,
                 **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []
        self._page_stamp = page_stamp

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        num_pages = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            if self._page_stamp is not None:
                surface = PageSurface.for_canvas(self)
                self.saveState()
                self._page_stamp(surface, self._pageNumber, num_pages)
                self.restoreState()
            super().showPage()
        super().save()

    @property
    def page_count(self) -> int:
        return len(self._saved_page_states)


class PageSurface:
    """
    Drawing primitives in millimetres with the origin at the top-left,
    over a reportlab canvas (origin bottom-left, points).
    """

    def __init__(self, canv: rl_canvas.Canvas, page_width: float,
                 page_height: float):
        self.canvas = canv
        self.page_width = page_width
        self.page_height = page_height

    @classmethod
    def for_canvas(cls, canv: rl_canvas.Canvas) -> "PageSurface":
        w, h = canv._pagesize
        return cls(canv, w / mm, h / mm)

    def _y(self, y: float) -> float:
        return (self.page_height - y) * mm

    # --- state ---
    def set_font(self, font: str, size: float) -> None:
        self.canvas.setFont(font, size)

    def set_fill(self, color: colors.Color) -> None:
        self.canvas.setFillColor(color)

    def set_stroke(self, color: colors.Color, width: float = 0.5) -> None:
        self.canvas.setStrokeColor(color)
        self.canvas.setLineWidth(width)

    # --- text ---
    def text(self,
             x: float,
             y: float,
             s: str,
             *,
             font: str = REGULAR,
             size: float = 9,
             color: colors.Color = colors.black,
             align: str = "left") -> None:
        """Draw one line with its baseline at `y`."""
        self.canvas.setFont(font, size)
        self.canvas.setFillColor(color)
        if align == "right":
            self.canvas.drawRightString(x * mm, self._y(y), s)
        elif align == "center":
            self.canvas.drawCentredString(x * mm, self._y(y), s)
        else:
            self.canvas.drawString(x * mm, self._y(y), s)

    def lines(self,
              x: float,
              y: float,
              lines: List[str],
              line_height: float,
              **kwargs) -> float:
        """Draw pre-wrapped lines; returns the baseline after the last one."""
        for ln in lines:
            self.text(x, y, ln, **kwargs)
            y += line_height
        return y

    def text_width(self, s: str, font: str, size: float) -> float:
        return text_width(s, font, size)

    def wrap(self, s: str, font: str, size: float,
             width: float) -> List[str]:
        return wrap_lines(s, font, size, width)

    # --- shapes ---
    def rect(self,
             x: float,
             y: float,
             w: float,
             h: float,
             *,
             stroke: Optional[colors.Color] = None,
             fill: Optional[colors.Color] = None,
             line_width: float = 0.5,
             radius: float = 0.0) -> None:
        c = self.canvas
        c.saveState()
        if stroke is not None:
            c.setStrokeColor(stroke)
            c.setLineWidth(line_width)
        if fill is not None:
            c.setFillColor(fill)
        args = (x * mm, self._y(y + h), w * mm, h * mm)
        if radius:
            c.roundRect(*args,
                        radius * mm,
                        stroke=1 if stroke is not None else 0,
                        fill=1 if fill is not None else 0)
        else:
            c.rect(*args,
                   stroke=1 if stroke is not None else 0,
                   fill=1 if fill is not None else 0)
        c.restoreState()

    def line(self,
             x1: float,
             y1: float,
             x2: float,
             y2: float,
             *,
             color: colors.Color = colors.black,
             width: float = 0.5,
             dash: Optional[List[float]] = None) -> None:
        c = self.canvas
        c.saveState()
        c.setStrokeColor(color)
        c.setLineWidth(width)
        if dash:
            c.setDash(dash)
        c.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))
        c.restoreState()

    # --- pages ---
    def new_page(self) -> None:
        self.canvas.showPage()
