from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict


class APIModel(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        extra="ignore",
        populate_by_name=True,
    )


class FormSchema(APIModel):
    """Base for schemas bound to HTML form submissions.

    ``field_messages`` maps a form field name to the single human-readable
    message reported for any failure on that field.
    """

    field_messages: ClassVar[dict[str, str]] = {}
