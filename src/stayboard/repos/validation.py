# src/stayboard/repos/validation.py

from __future__ import annotations

from typing import Any

from ..core.errors import ValidationError
from ..core.models import PropertyType

TITLE_MIN = 3
DESCRIPTION_MIN = 10


def validate_task(title: str | None, description: str | None) -> tuple[str, str]:
    """Return the trimmed (title, description) or raise ValidationError."""
    t = (title or "").strip()
    d = (description or "").strip()
    if not t:
        raise ValidationError("title", "Title is required")
    if len(t) < TITLE_MIN:
        raise ValidationError("title", f"Title must be at least {TITLE_MIN} characters")
    if not d:
        raise ValidationError("description", "Description is required")
    if len(d) < DESCRIPTION_MIN:
        raise ValidationError("description", f"Description must be at least {DESCRIPTION_MIN} characters")
    return t, d


def _non_negative(fields: dict[str, Any], name: str, cast: type) -> None:
    if name not in fields:
        return
    try:
        value = cast(fields[name])
    except (TypeError, ValueError) as e:
        raise ValidationError(name, f"{name} must be a number") from e
    if value < 0:
        raise ValidationError(name, f"{name} cannot be negative")
    fields[name] = value


def validate_property_fields(fields: dict[str, Any], *, partial: bool = False) -> dict[str, Any]:
    """
    Normalize property fields in place and return them.

    partial=True checks only the keys present (edits); otherwise title,
    location, price and type are required.
    """
    required = () if partial else ("title", "location", "price", "type")
    for name in required:
        if fields.get(name) in (None, ""):
            raise ValidationError(name, f"{name} is required")

    for name in ("title", "location"):
        if name in fields:
            value = str(fields[name] or "").strip()
            if not value:
                raise ValidationError(name, f"{name} cannot be empty")
            fields[name] = value

    if "description" in fields:
        fields["description"] = str(fields["description"] or "").strip()

    _non_negative(fields, "price", float)
    _non_negative(fields, "area", float)
    _non_negative(fields, "bedrooms", int)
    _non_negative(fields, "bathrooms", int)

    if "type" in fields:
        try:
            fields["type"] = PropertyType(fields["type"])
        except ValueError as e:
            raise ValidationError("type", f"unknown property type {fields['type']!r}") from e

    for name in ("amenities", "images"):
        if name in fields:
            raw = fields[name] or []
            if isinstance(raw, str):
                raise ValidationError(name, f"{name} must be a list")
            fields[name] = [str(x).strip() for x in raw if str(x).strip()]

    return fields
