# src/billdash/db/models/customers.py
from __future__ import annotations

from typing import TYPE_CHECKING, List

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from billdash.db.base import Base, UUIDMixin

if TYPE_CHECKING:
    from .invoices import Invoice


class Customer(UUIDMixin, Base):
    __tablename__ = "customers"
    __table_args__ = {"comment": "People or companies invoices are issued to."}

    name: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    email: Mapped[str] = mapped_column(sa.String(255), nullable=False)
    image_url: Mapped[str] = mapped_column(sa.String(255), nullable=False)

    invoices: Mapped[List["Invoice"]] = relationship(back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.name!r}>"
