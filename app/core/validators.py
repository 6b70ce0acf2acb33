"""Input checks shared by the service layer.

Every function returns the normalized value or raises
``ValidationError`` naming the offending field.
"""

import re
import uuid
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError

E = TypeVar("E", bound=Enum)

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_datetime_adapter = TypeAdapter(datetime)


def require_string(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field, f"{field} must be a non-empty string")
    return value.strip()


def require_email(value: Any, field: str = "email") -> str:
    email = require_string(value, field)
    if not _EMAIL_RE.match(email):
        raise ValidationError(field, f"{field} must be a valid email address")
    return email.lower()


def require_date(value: Any, field: str) -> datetime:
    """Parse a date-like value into a naive UTC datetime.

    Accepts ``datetime`` and ``date`` objects, ISO-8601 strings and unix
    timestamps. Aware datetimes are converted to UTC before the tzinfo is
    dropped so every stored timestamp compares against ``utcnow()``.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(field, f"{field} must be a valid date")
    if isinstance(value, date) and not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    try:
        parsed = _datetime_adapter.validate_python(value)
    except PydanticValidationError as exc:
        raise ValidationError(field, f"{field} must be a valid date") from exc
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def require_enum(value: Any, enum_cls: type[E], field: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(str(member.value) for member in enum_cls)
        raise ValidationError(field, f"{field} must be one of {allowed}") from exc


def require_list(value: Any, field: str) -> list:
    if not isinstance(value, (list, tuple)):
        raise ValidationError(field, f"{field} must be a list")
    return list(value)


def require_positive_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(field, f"{field} must be a positive integer")
    return value


def require_mapping(value: Any, field: str) -> dict:
    if not isinstance(value, Mapping):
        raise ValidationError(field, f"{field} must be a mapping")
    return dict(value)


def require_id(value: Any, field: str) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    if isinstance(value, str):
        try:
            return uuid.UUID(value.strip())
        except ValueError:
            pass
    raise ValidationError(field, f"{field} must be a valid identifier")
