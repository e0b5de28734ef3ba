# src/billdash/services/storage.py
from __future__ import annotations

import datetime as dt

import sqlalchemy as sa
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from billdash.app_logger import get_logger
from billdash.db.base import generate_uuid_str
from billdash.db.models import Customer, Invoice
from billdash.errors import StorageError

log = get_logger("storage")


class SqlStorage:
    """Storage port over an async SQLAlchemy session.

    Every call runs a single parameterized statement and commits it.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _run(self, stmt) -> int:
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StorageError(str(e)) from e
        return result.rowcount

    # ---- invoices ------------------------------------------------------------
    async def insert_invoice(
        self, *, customer_id: str, amount: int, status: str, date: dt.date
    ) -> str:
        new_id = generate_uuid_str()
        await self._run(
            sa.insert(Invoice).values(
                id=new_id, customer_id=customer_id, amount=amount, status=status, date=date
            )
        )
        return new_id

    async def update_invoice(
        self, invoice_id: str, *, customer_id: str, amount: int, status: str
    ) -> int:
        return await self._run(
            sa.update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(customer_id=customer_id, amount=amount, status=status)
        )

    async def delete_invoice(self, invoice_id: str) -> int:
        return await self._run(sa.delete(Invoice).where(Invoice.id == invoice_id))

    # ---- customers -----------------------------------------------------------
    async def insert_customer(self, *, name: str, email: str, image_url: str) -> str:
        new_id = generate_uuid_str()
        await self._run(
            sa.insert(Customer).values(id=new_id, name=name, email=email, image_url=image_url)
        )
        return new_id

    async def update_customer(
        self, customer_id: str, *, name: str, email: str, image_url: str
    ) -> int:
        return await self._run(
            sa.update(Customer)
            .where(Customer.id == customer_id)
            .values(name=name, email=email, image_url=image_url)
        )

    async def delete_customer(self, customer_id: str) -> int:
        return await self._run(sa.delete(Customer).where(Customer.id == customer_id))
