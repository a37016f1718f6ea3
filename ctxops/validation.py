"""Request body parsing for the JSON API.

Each schema is a tuple of :class:`Field` entries mapping a camelCase JSON key
onto a model attribute. :func:`parse_payload` returns a dict keyed by model
attribute and raises :class:`~ctxops.errors.ValidationError` describing the
first offending field.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Iterable, Mapping

from ctxops.errors import ValidationError

_MISSING = object()


def parse_text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("Expected a string.")
    return value


def parse_required_text(value: Any) -> str:
    text = parse_text(value).strip()
    if not text:
        raise ValueError("Must not be empty.")
    return text


def parse_number(value: Any) -> float:
    if isinstance(value, bool):
        raise ValueError("Expected a number.")
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            raise ValueError("Expected a number.") from None
    else:
        raise ValueError("Expected a number.")
    if math.isnan(number) or math.isinf(number):
        raise ValueError("Expected a finite number.")
    return number


def parse_positive_number(value: Any) -> float:
    number = parse_number(value)
    if number <= 0:
        raise ValueError("Must be greater than zero.")
    return number


def parse_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("Expected an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ValueError("Expected an integer.")


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    raise ValueError("Expected true or false.")


def parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Expected an ISO 8601 date.")
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValueError("Expected an ISO 8601 date.") from None
    # Stored as naive UTC.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


@dataclass(frozen=True)
class Field:
    key: str
    attr: str
    parser: Callable[[Any], Any]
    required: bool = False
    default: Any = _MISSING
    choices: tuple[str, ...] | None = None
    nullable: bool = True


def parse_payload(
    fields: Iterable[Field],
    data: Any,
    *,
    partial: bool = False,
) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError("Request body must be a JSON object.")

    parsed: dict[str, Any] = {}
    for field in fields:
        if field.key not in data:
            if partial:
                continue
            if field.required:
                raise ValidationError(f"{field.key}: Required")
            if field.default is not _MISSING:
                parsed[field.attr] = field.default
            continue

        raw = data[field.key]
        if raw is None:
            if field.required:
                raise ValidationError(f"{field.key}: Required")
            if not field.nullable:
                raise ValidationError(f"{field.key}: Must not be null.")
            parsed[field.attr] = None
            continue

        try:
            value = field.parser(raw)
        except ValueError as exc:
            raise ValidationError(f"{field.key}: {exc}") from None

        if field.choices is not None and value not in field.choices:
            allowed = ", ".join(field.choices)
            raise ValidationError(f"{field.key}: Expected one of {allowed}.")
        parsed[field.attr] = value
    return parsed


def parse_lines(fields: Iterable[Field], data: Any, *, label: str = "items") -> list[dict[str, Any]]:
    if not isinstance(data, list):
        raise ValidationError(f"{label}: Expected an array.")

    fields = tuple(fields)
    lines = []
    for index, entry in enumerate(data):
        try:
            lines.append(parse_payload(fields, entry))
        except ValidationError as exc:
            raise ValidationError(f"{label}[{index}].{exc.message}") from None
    return lines
