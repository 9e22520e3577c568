# FILE: medicare/services/pdfs/errors.py
from __future__ import annotations


class ReportError(Exception):
    """Base class for report generation failures."""


class MissingFieldError(ReportError):
    def __init__(self, field: str):
        super().__init__(f"Patient {field} is required to generate a report")
        self.field = field


class UnknownStyleError(ReportError):
    def __init__(self, style: str):
        super().__init__(f"Unknown report style: {style!r}")
        self.style = style


class LayoutOverflowError(ReportError):
    """A block was placed past the printable bottom of a page."""
