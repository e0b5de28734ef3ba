# src/billdash/schemas/forms.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Mapping, Type, TypeVar

from pydantic import ValidationError

from .base import FormSchema

S = TypeVar("S", bound=FormSchema)


@dataclass(frozen=True)
class FormValidation(Generic[S]):
    """Outcome of validating one form submission."""

    success: bool
    data: S | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)


def _clean(raw: Mapping[str, Any], fields: list[str]) -> dict[str, Any]:
    # HTML forms submit "" for untouched inputs; those count as missing.
    cleaned: dict[str, Any] = {}
    for name in fields:
        value = raw.get(name)
        if isinstance(value, str):
            value = value.strip()
            if not value:
                continue
        if value is not None:
            cleaned[name] = value
    return cleaned


def _form_fields(schema: Type[FormSchema]) -> list[str]:
    return [f.alias or name for name, f in schema.model_fields.items()]


def flatten_errors(schema: Type[FormSchema], exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = str(loc[0]) if loc else "__root__"
        message = schema.field_messages.get(name, err.get("msg", "Invalid value."))
        bucket = errors.setdefault(name, [])
        if message not in bucket:
            bucket.append(message)
    return errors


def validate_form(schema: Type[S], raw: Mapping[str, Any]) -> FormValidation[S]:
    """Validate raw form fields against ``schema`` without raising."""
    values = _clean(raw, _form_fields(schema))
    try:
        data = schema.model_validate(values)
    except ValidationError as exc:
        return FormValidation(success=False, errors=flatten_errors(schema, exc))
    return FormValidation(success=True, data=data)
