# src/billdash/services/ports.py
from __future__ import annotations

import datetime as dt
from typing import Protocol


class InvoiceStorage(Protocol):
    async def insert_invoice(
        self, *, customer_id: str, amount: int, status: str, date: dt.date
    ) -> str:
        """Insert one invoice and return its new id."""
        ...

    async def update_invoice(
        self, invoice_id: str, *, customer_id: str, amount: int, status: str
    ) -> int:
        """Update one invoice; return the number of rows touched."""
        ...

    async def delete_invoice(self, invoice_id: str) -> int: ...


class CustomerStorage(Protocol):
    async def insert_customer(self, *, name: str, email: str, image_url: str) -> str: ...

    async def update_customer(
        self, customer_id: str, *, name: str, email: str, image_url: str
    ) -> int: ...

    async def delete_customer(self, customer_id: str) -> int: ...


class Storage(InvoiceStorage, CustomerStorage, Protocol):
    """Mutation target. Implementations raise ``StorageError`` on any failure."""


class Notifier(Protocol):
    async def revalidate_path(self, path: str) -> None:
        """Mark every cached render under ``path`` stale."""
        ...


# listing pages mutations revalidate
INVOICES_PATH = "/dashboard/invoices"
CUSTOMERS_PATH = "/dashboard/customers"


async def revalidate(notifier: Notifier, *paths: str) -> None:
    for path in paths:
        await notifier.revalidate_path(path)
