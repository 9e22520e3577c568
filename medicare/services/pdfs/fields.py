# FILE: medicare/services/pdfs/fields.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional, Sequence

from medicare.services.pdfs.text import clean_text
from medicare.utils.timezone import report_tz

REQUIRED = "required"  # always rendered, "N/A" when absent
OPTIONAL = "optional"  # row omitted when absent
FALLBACK = "fallback"  # always rendered, literal text when absent


# -------------------------------
# Presence + formatting helpers
# -------------------------------
def present(v: Any) -> bool:
    if v is None:
        return False
    if isinstance(v, (list, tuple, set)):
        return any(present(x) for x in v)
    return bool(clean_text(v))


def g(obj: Any, key: str, default: Any = None) -> Any:
    if obj is None:
        return default
    if isinstance(obj, dict):
        return obj.get(key, default)
    return getattr(obj, key, default)


def attr(key: str) -> Callable[[Any], Any]:
    return lambda obj: g(obj, key)


def fmt_text(v: Any) -> str:
    return clean_text(v)


def fmt_upper(v: Any) -> str:
    return clean_text(v).upper()


def fmt_capitalized(v: Any) -> str:
    s = clean_text(v)
    return s[:1].upper() + s[1:]


def fmt_list(v: Any) -> str:
    if isinstance(v, (list, tuple)):
        return ", ".join(clean_text(x) for x in v if present(x))
    return clean_text(v)


def to_date(v: Any) -> Optional[date]:
    if not v:
        return None
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    s = str(v).strip()
    try:
        return datetime.fromisoformat(s.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in ("%d-%m-%Y", "%d/%m/%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(s[:10], fmt).date()
        except ValueError:
            continue
    return None


def fmt_date(v: Any) -> str:
    d = to_date(v)
    return d.isoformat() if d else clean_text(v)


def fmt_datetime(v: Any) -> str:
    """Month/day/year and 12-hour clock, in the report timezone."""
    dt = v
    if isinstance(v, str):
        try:
            dt = datetime.fromisoformat(v.strip().replace("Z", "+00:00"))
        except ValueError:
            return clean_text(v)
    if not isinstance(dt, datetime):
        return clean_text(v)
    if dt.tzinfo is not None:
        dt = dt.astimezone(report_tz())
    hour = dt.hour % 12 or 12
    ampm = "AM" if dt.hour < 12 else "PM"
    return (f"{dt.month}/{dt.day}/{dt.year} "
            f"{hour}:{dt.minute:02d}:{dt.second:02d} {ampm}")


def age_years(dob: Any, asof: date) -> Optional[int]:
    d = to_date(dob)
    if not d:
        return None
    years = asof.year - d.year - ((asof.month, asof.day) < (d.month, d.day))
    return max(0, years)


def full_name(patient: Any) -> str:
    return " ".join(
        x for x in (clean_text(g(patient, "first_name")),
                    clean_text(g(patient, "last_name"))) if x)


# -------------------------------
# Field rules
# -------------------------------
@dataclass(frozen=True)
class FieldRule:
    label: str
    getter: Callable[[Any], Any]
    fmt: Callable[[Any], str] = fmt_text
    policy: str = OPTIONAL
    fallback: str = "N/A"

    def resolve(self, record: Any) -> Optional[str]:
        """Display value, or None when the row must not be rendered."""
        raw = self.getter(record)
        value = self.fmt(raw) if present(raw) else ""
        if value:
            return value
        if self.policy == OPTIONAL:
            return None
        return self.fallback


def field(label: str,
          key: str,
          fmt: Callable[[Any], str] = fmt_text,
          policy: str = OPTIONAL,
          fallback: str = "N/A") -> FieldRule:
    return FieldRule(label, attr(key), fmt, policy, fallback)


def resolve_all(rules: Sequence[FieldRule],
                record: Any) -> list[tuple[str, str]]:
    out: list[tuple[str, str]] = []
    for rule in rules:
        value = rule.resolve(record)
        if value is not None:
            out.append((rule.label, value))
    return out
