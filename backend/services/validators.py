"""
Input validation helpers shared by the domain services.

All helpers raise ValidationError (HTTP 400) with a message naming the
offending fields.
"""

from datetime import datetime, timezone

from services.errors import ValidationError


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data, fields):
    """Raise if any of `fields` is missing or blank in the request body."""
    missing = [field for field in fields if _is_blank(data.get(field))]
    if missing:
        raise ValidationError(f"Please provide all required fields: {', '.join(missing)}")


def parse_datetime(value, field):
    """ISO-8601 string -> naive UTC datetime. None passes through."""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            text = str(value).strip()
            if text.endswith('Z'):
                text = text[:-1] + '+00:00'
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field} must be an ISO-8601 date/time")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_float(value, field, default=None):
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number")


def parse_int(value, field, default=None, minimum=None):
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float) and value != number:
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return number


def require_strings(data, fields):
    """Raise if any of `fields` holds something other than a string."""
    wrong = [field for field in fields if not isinstance(data.get(field), str)]
    if wrong:
        raise ValidationError(f"{', '.join(wrong)} must be a string")
