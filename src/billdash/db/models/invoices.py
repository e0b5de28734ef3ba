# src/billdash/db/models/invoices.py
from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

import sqlalchemy as sa
from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billdash.db.base import Base, UUIDMixin

if TYPE_CHECKING:
    from .customers import Customer

INVOICE_STATUSES = ("pending", "paid")


class Invoice(UUIDMixin, Base):
    __tablename__ = "invoices"
    __table_args__ = (
        sa.CheckConstraint("amount > 0", name="amount_positive"),
        sa.CheckConstraint("status IN ('pending', 'paid')", name="status_valid"),
        {"comment": "Invoices; amount is stored in cents."},
    )

    customer_id: Mapped[str] = mapped_column(
        sa.String(36), ForeignKey("customers.id"), nullable=False, index=True
    )
    amount: Mapped[int] = mapped_column(sa.Integer, nullable=False)
    status: Mapped[str] = mapped_column(sa.String(16), nullable=False)
    date: Mapped[dt.date] = mapped_column(sa.Date, nullable=False)

    customer: Mapped["Customer"] = relationship(back_populates="invoices")

    def __repr__(self) -> str:
        return f"<Invoice id={self.id} amount={self.amount} status={self.status}>"
