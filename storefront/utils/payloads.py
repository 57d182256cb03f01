# storefront/utils/payloads.py
from __future__ import annotations
from .errors import ValidationError
from .parsing import parse_bool


def text_fields(data: dict, *, required=(), optional=(), creating=True, errors=None) -> dict:
    """
    Collect string fields from a JSON body.

    ``required`` fields must be non-blank on create, and when present on
    update. ``optional`` fields are copied when present (blank -> None).
    Missing-field messages are added to ``errors`` when given, otherwise
    raised straight away.
    """
    own_errors = errors is None
    errors = {} if own_errors else errors
    values = {}
    for field in required:
        if not creating and field not in data:
            continue
        v = data.get(field)
        if not isinstance(v, str) or not v.strip():
            errors[field] = f"{field} is required"
        else:
            values[field] = v.strip()
    for field in optional:
        if field in data:
            v = data.get(field)
            if v is not None and not isinstance(v, str):
                errors[field] = f"{field} must be a string"
            else:
                values[field] = (v.strip() or None) if v else None
    if own_errors and errors:
        raise ValidationError(errors)
    return values


def flag_field(data: dict, field: str, values: dict, *, creating=True, default=True):
    if field in data:
        values[field] = parse_bool(data.get(field), default)
    elif creating:
        values[field] = default


def bilingual_fields(data: dict, creating=True) -> dict:
    """name_en/name_ar (+ descriptions, logo, status) as used by categories, sub-categories and brands."""
    values = text_fields(
        data,
        required=("name_en", "name_ar"),
        optional=("description_en", "description_ar", "logo"),
        creating=creating,
    )
    flag_field(data, "status", values, creating=creating)
    return values
