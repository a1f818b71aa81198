"""
Shared field types for request schemas.

Text fields are trimmed and length-checked first, then sanitized, so stored
values never carry markup beyond what the field allows.
"""
from datetime import datetime, timezone
from typing import Annotated, Optional
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from hiretrack_app.utils.sanitize import strip_html, sanitize_rich_text
from hiretrack_app.utils.validation import validate_email, validate_password


class RequestSchema(BaseModel):
    model_config = ConfigDict(extra='ignore')

    def provided(self):
        """Fields the client actually sent, so updates leave the rest untouched."""
        return {name: getattr(self, name) for name in self.model_fields_set}


def _required(message):
    def check(value):
        if not value:
            raise ValueError(message)
        return value
    return check


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def plain_text(max_length, required=None):
    """Trimmed text with all markup removed; `required` is the empty-value message."""
    parts = [str, StringConstraints(strip_whitespace=True, max_length=max_length),
             AfterValidator(strip_html)]
    if required:
        parts.append(AfterValidator(_required(required)))
    return Annotated[tuple(parts)]


def rich_text(max_length, required=None):
    """Text that keeps basic formatting tags."""
    parts = [str, StringConstraints(max_length=max_length), AfterValidator(sanitize_rich_text)]
    if required:
        parts.append(AfterValidator(_required(required)))
    return Annotated[tuple(parts)]


def choice(values, label):
    """String restricted to `values`."""
    def check(value):
        if value not in values:
            raise ValueError(f"Invalid {label}. Must be one of: {', '.join(values)}")
        return value
    return Annotated[str, AfterValidator(check)]


def _check_email(value):
    if not validate_email(value):
        raise ValueError('Invalid email address')
    return value


def _check_password(value):
    is_valid, error = validate_password(value)
    if not is_valid:
        raise ValueError(error)
    return value


def _to_naive_utc(value):
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


EmailAddress = Annotated[str, StringConstraints(strip_whitespace=True, max_length=255),
                         AfterValidator(_check_email), AfterValidator(strip_html)]

Password = Annotated[str, StringConstraints(max_length=128), AfterValidator(_check_password)]

Timestamp = Annotated[datetime, AfterValidator(_to_naive_utc)]

# Form posts send "" for empty optional inputs
OptionalTimestamp = Annotated[Optional[datetime], BeforeValidator(_blank_to_none), AfterValidator(_to_naive_utc)]

Score = Annotated[int, Field(ge=1, le=5)]

OptionalScore = Annotated[Optional[Score], BeforeValidator(_blank_to_none)]

OptionalId = Annotated[Optional[Annotated[str, StringConstraints(max_length=36)]], BeforeValidator(_blank_to_none)]

Url = plain_text(500)
