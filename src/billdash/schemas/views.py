from __future__ import annotations

import datetime as dt
from decimal import Decimal

from .base import APIModel


class CustomerField(APIModel):
    id: str
    name: str


class CustomerRecord(APIModel):
    id: str
    name: str
    email: str
    image_url: str


class CustomersTableRow(CustomerRecord):
    total_invoices: int
    total_pending: str
    total_paid: str


class InvoiceRecord(APIModel):
    id: str
    customer_id: str
    amount: Decimal  # dollars
    status: str


class InvoicesTableRow(APIModel):
    id: str
    customer_id: str
    name: str
    email: str
    image_url: str
    date: dt.date
    amount: int  # cents
    status: str


class LatestInvoice(APIModel):
    id: str
    name: str
    email: str
    image_url: str
    amount: str


class CardData(APIModel):
    number_of_invoices: int
    number_of_customers: int
    total_paid_invoices: str
    total_pending_invoices: str
