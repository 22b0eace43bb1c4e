# /carepoint/utils/time_util.py
from datetime import date, datetime, timezone

from carepoint.utils.errors import ValidationError


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def utcnow_iso() -> str:
    return utcnow().isoformat()


def parse_date(value, field_name='date') -> str:
    """Normalizes a date-like value to an ISO ``YYYY-MM-DD`` string.

    Accepts ``date``/``datetime`` objects and ISO strings with or without a
    time component; anything else is a ValidationError.
    """
    if value is None or value == '':
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10]).isoformat()
        except ValueError:
            pass
    raise ValidationError(f"Invalid {field_name}: expected YYYY-MM-DD")


def parse_datetime(value, field_name='datetime') -> datetime:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            raise ValidationError(f"Invalid {field_name}: expected ISO 8601")
    else:
        raise ValidationError(f"{field_name} is required")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def today_iso() -> str:
    return utcnow().date().isoformat()
