"""
Request body helpers

The API accepts camelCase JSON. These helpers read the body and coerce the
few typed fields the business layer needs. A value of the wrong JSON type is
a ValidationFailedError, never a database error.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from flask import request

from asset_tracker.buisness.core.errors import ValidationFailedError


def json_body():
    """Parsed JSON object, or {} for an empty or non-object body"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_str(value, field):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationFailedError(f"Invalid text for {field}")
    return value


def parse_datetime(value, field):
    """ISO 8601 date or datetime; offsets are converted to naive UTC"""
    if value in (None, ''):
        return None
    if not isinstance(value, str):
        raise ValidationFailedError(f"Invalid date for {field}")
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        raise ValidationFailedError(f"Invalid date for {field}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_decimal(value, field):
    if value in (None, ''):
        return None
    if isinstance(value, bool):
        raise ValidationFailedError(f"Invalid number for {field}")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ValidationFailedError(f"Invalid number for {field}")
    if not number.is_finite():
        raise ValidationFailedError(f"Invalid number for {field}")
    return number


def parse_int(value, field):
    if value in (None, ''):
        return None
    if isinstance(value, bool):
        raise ValidationFailedError(f"Invalid id for {field}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationFailedError(f"Invalid id for {field}")


def parse_bool(value, field):
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ('true', 'false'):
        return value.lower() == 'true'
    raise ValidationFailedError(f"Invalid boolean for {field}")


def pick(data, mapping, text_fields=()):
    """
    Rename present camelCase keys to model attribute names.

    Attributes named in text_fields must be strings (or null).
    """
    fields = {attr: data[key] for key, attr in mapping.items() if key in data}
    for key, attr in mapping.items():
        if attr in text_fields and attr in fields:
            fields[attr] = parse_str(fields[attr], key)
    return fields
