from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import ClassVar, Literal

from pydantic import Field, field_validator

from .base import FormSchema

InvoiceStatus = Literal["pending", "paid"]


def _to_cents(dollars: Decimal) -> int:
    return int((dollars * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class InvoiceForm(FormSchema):
    field_messages: ClassVar[dict[str, str]] = {
        "customerId": "Please select a customer.",
        "amount": "Please enter an amount greater than $0.",
        "status": "Please select an invoice status.",
    }

    customer_id: str = Field(alias="customerId", min_length=1)
    amount: Decimal = Field(gt=0, allow_inf_nan=False)
    status: InvoiceStatus

    @field_validator("amount")
    @classmethod
    def _whole_cent(cls, v: Decimal) -> Decimal:
        if _to_cents(v) < 1:
            raise ValueError("amount rounds to zero cents")
        return v

    @property
    def amount_in_cents(self) -> int:
        return _to_cents(self.amount)
