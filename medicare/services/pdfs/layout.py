# FILE: medicare/services/pdfs/layout.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from medicare.services.pdfs.errors import LayoutOverflowError

logger = logging.getLogger(__name__)

# float slack when comparing accumulated mm values
_EPS = 1e-6


@dataclass(frozen=True)
class Placement:
    page: int
    top: float
    bottom: float
    kind: str


@dataclass
class LayoutState:
    """
    Vertical write position on the current page.

    All values are millimetres measured from the top-left corner, the way
    the page is read. `footer_height` is the band the page decoration
    keeps for itself above the bottom margin.
    """
    page_width: float
    page_height: float
    margin: float
    top: float
    footer_height: float = 0.0
    page: int = 1
    y: Optional[float] = None
    on_new_page: Optional[Callable[["LayoutState"], None]] = field(
        default=None, repr=False)
    placements: List[Placement] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        if self.y is None:
            self.y = self.top

    @property
    def bottom_limit(self) -> float:
        return self.page_height - self.margin - self.footer_height

    @property
    def content_height(self) -> float:
        """Usable height of an empty page."""
        return self.bottom_limit - self.top

    @property
    def remaining(self) -> float:
        return self.bottom_limit - self.y

    @property
    def at_page_top(self) -> bool:
        return abs(self.y - self.top) < _EPS

    def advance(self, height: float) -> float:
        before = self.y
        self.y += height
        return before

    def new_page(self) -> None:
        self.page += 1
        self.y = self.top
        logger.debug("page break -> page %s", self.page)
        if self.on_new_page is not None:
            self.on_new_page(self)

    def ensure_room(self, height: float, trigger: float = 0.0) -> bool:
        """
        Break the page when less than max(height, trigger) is left.
        A fresh page is never broken again; oversized blocks must split.
        """
        if self.at_page_top:
            return False
        if self.remaining + _EPS < max(height, trigger):
            self.new_page()
            return True
        return False

    def place(self, height: float, kind: str) -> float:
        """Reserve `height` at the cursor for one drawn block; returns its top."""
        if self.y + height > self.bottom_limit + _EPS:
            raise LayoutOverflowError(
                f"{kind} block of {height:.1f}mm does not fit on page "
                f"{self.page} at y={self.y:.1f}mm")
        top = self.advance(height)
        self.placements.append(Placement(self.page, top, self.y, kind))
        return top
