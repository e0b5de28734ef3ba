from __future__ import annotations

from typing import ClassVar

from pydantic import Field

from .base import FormSchema


class CustomerForm(FormSchema):
    field_messages: ClassVar[dict[str, str]] = {
        "name": "Please enter your full name.",
        "email": "Please enter a valid email.",
        "image_url": "Please enter a valid url.",
    }

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    image_url: str = Field(min_length=1)
