# src/billdash/services/queries.py
"""Read side for the dashboard pages."""
from __future__ import annotations

import math

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from billdash.db.models import Customer, Invoice
from billdash.schemas.views import (
    CardData,
    CustomerField,
    CustomerRecord,
    CustomersTableRow,
    InvoiceRecord,
    InvoicesTableRow,
    LatestInvoice,
)
from billdash.utils import cents_to_dollars, format_currency

ITEMS_PER_PAGE = 6
LATEST_INVOICES = 5


def _sum_when(status: str):
    return sa.func.coalesce(
        sa.func.sum(sa.case((Invoice.status == status, Invoice.amount), else_=0)), 0
    )


def _invoice_search(query: str):
    pattern = f"%{query}%"
    return sa.or_(
        Customer.name.ilike(pattern),
        Customer.email.ilike(pattern),
        sa.cast(Invoice.amount, sa.String).ilike(pattern),
        sa.cast(Invoice.date, sa.String).ilike(pattern),
        Invoice.status.ilike(pattern),
    )


async def fetch_customers(session: AsyncSession) -> list[CustomerField]:
    result = await session.execute(
        sa.select(Customer.id, Customer.name).order_by(Customer.name.asc())
    )
    return [CustomerField.model_validate(dict(row)) for row in result.mappings().all()]


async def fetch_customer_by_id(session: AsyncSession, customer_id: str) -> CustomerRecord | None:
    result = await session.execute(
        sa.select(Customer.id, Customer.name, Customer.email, Customer.image_url)
        .where(Customer.id == customer_id)
    )
    row = result.mappings().first()
    return CustomerRecord.model_validate(dict(row)) if row else None


async def fetch_filtered_customers(session: AsyncSession, query: str = "") -> list[CustomersTableRow]:
    pattern = f"%{query}%"
    stmt = (
        sa.select(
            Customer.id,
            Customer.name,
            Customer.email,
            Customer.image_url,
            sa.func.count(Invoice.id).label("total_invoices"),
            _sum_when("pending").label("total_pending"),
            _sum_when("paid").label("total_paid"),
        )
        .outerjoin(Invoice, Invoice.customer_id == Customer.id)
        .where(sa.or_(Customer.name.ilike(pattern), Customer.email.ilike(pattern)))
        .group_by(Customer.id, Customer.name, Customer.email, Customer.image_url)
        .order_by(Customer.name.asc())
    )
    result = await session.execute(stmt)
    rows = []
    for row in result.mappings().all():
        data = dict(row)
        data["total_pending"] = format_currency(data["total_pending"])
        data["total_paid"] = format_currency(data["total_paid"])
        rows.append(CustomersTableRow.model_validate(data))
    return rows


async def fetch_invoice_by_id(session: AsyncSession, invoice_id: str) -> InvoiceRecord | None:
    result = await session.execute(
        sa.select(Invoice.id, Invoice.customer_id, Invoice.amount, Invoice.status)
        .where(Invoice.id == invoice_id)
    )
    row = result.mappings().first()
    if not row:
        return None
    data = dict(row)
    data["amount"] = cents_to_dollars(data["amount"])
    return InvoiceRecord.model_validate(data)


async def fetch_filtered_invoices(
    session: AsyncSession, query: str = "", current_page: int = 1
) -> list[InvoicesTableRow]:
    offset = (max(current_page, 1) - 1) * ITEMS_PER_PAGE
    stmt = (
        sa.select(
            Invoice.id,
            Invoice.customer_id,
            Customer.name,
            Customer.email,
            Customer.image_url,
            Invoice.date,
            Invoice.amount,
            Invoice.status,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_invoice_search(query))
        .order_by(Invoice.date.desc(), Invoice.id)
        .limit(ITEMS_PER_PAGE)
        .offset(offset)
    )
    result = await session.execute(stmt)
    return [InvoicesTableRow.model_validate(dict(row)) for row in result.mappings().all()]


async def fetch_invoices_pages(session: AsyncSession, query: str = "") -> int:
    stmt = (
        sa.select(sa.func.count(Invoice.id))
        .join(Customer, Invoice.customer_id == Customer.id)
        .where(_invoice_search(query))
    )
    count = (await session.execute(stmt)).scalar_one()
    return math.ceil(count / ITEMS_PER_PAGE)


async def fetch_latest_invoices(session: AsyncSession) -> list[LatestInvoice]:
    stmt = (
        sa.select(
            Invoice.id,
            Invoice.amount,
            Customer.name,
            Customer.email,
            Customer.image_url,
        )
        .join(Customer, Invoice.customer_id == Customer.id)
        .order_by(Invoice.date.desc(), Invoice.id)
        .limit(LATEST_INVOICES)
    )
    result = await session.execute(stmt)
    latest = []
    for row in result.mappings().all():
        data = dict(row)
        data["amount"] = format_currency(data["amount"])
        latest.append(LatestInvoice.model_validate(data))
    return latest


async def fetch_card_data(session: AsyncSession) -> CardData:
    invoice_count = (await session.execute(sa.select(sa.func.count(Invoice.id)))).scalar_one()
    customer_count = (await session.execute(sa.select(sa.func.count(Customer.id)))).scalar_one()
    totals = (
        await session.execute(sa.select(_sum_when("paid").label("paid"), _sum_when("pending").label("pending")))
    ).mappings().one()
    return CardData(
        number_of_invoices=invoice_count,
        number_of_customers=customer_count,
        total_paid_invoices=format_currency(totals["paid"]),
        total_pending_invoices=format_currency(totals["pending"]),
    )
