# FILE: medicare/utils/timezone.py
from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from medicare.core.config import settings


def report_tz() -> ZoneInfo:
    return ZoneInfo(settings.REPORT_TIMEZONE)


def now_report() -> datetime:
    """
    Aware "now" in the configured report timezone.
    Used for report generation dates and ages.
    """
    return datetime.now(report_tz())


def utcnow_iso() -> str:
    """ISO-8601 UTC timestamp as stored on documents (createdAt/updatedAt)."""
    return datetime.now(timezone.utc).isoformat()
