"""Common utilities for the Life OS backend."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from dateutil.relativedelta import relativedelta

from ..config import settings


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def local_today() -> date:
    """Get today's date in the configured user timezone."""
    return datetime.now(ZoneInfo(settings.timezone)).date()


def sanitize_string(value: str | None, max_length: int = 255) -> str | None:
    """Sanitize a string value by stripping whitespace and truncating.

    Blank strings become None so optional columns are stored as NULL.
    """
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if len(value) > max_length:
        return value[:max_length]
    return value


def month_start(value: date) -> date:
    """First day of the month containing ``value``."""
    return value.replace(day=1)


def month_key(value: date) -> str:
    """Month bucket key in ``yyyy-MM`` form."""
    return value.strftime("%Y-%m")


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end``, truncated toward zero."""
    delta = relativedelta(end, start)
    return delta.years * 12 + delta.months


def safe_div(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is not positive."""
    if not denominator or denominator <= 0:
        return 0.0
    return numerator / denominator


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes as UTC so stored and incoming values compare."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
