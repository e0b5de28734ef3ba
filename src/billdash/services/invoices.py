# src/billdash/services/invoices.py
"""Invoice mutations: validate the form, run one statement, invalidate the listing."""
from __future__ import annotations

import datetime as dt
from typing import Any, Mapping

from billdash.app_logger import get_logger
from billdash.errors import StorageError
from billdash.schemas import InvoiceForm, validate_form

from .ports import CUSTOMERS_PATH, INVOICES_PATH, Notifier, Storage, revalidate
from .results import Deleted, Failed, Invalid, MutationResult, Saved

log = get_logger("services.invoices")

# customer totals are summed from invoices, so both listings go stale
AFFECTED_PATHS = (INVOICES_PATH, CUSTOMERS_PATH)


def _today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


async def create_invoice(
    form: Mapping[str, Any],
    *,
    storage: Storage,
    notifier: Notifier,
    today: dt.date | None = None,
) -> MutationResult:
    validated = validate_form(InvoiceForm, form)
    if not validated.success:
        return Invalid(
            errors=validated.errors,
            message="Missing Fields. Failed to Create Invoice.",
        )

    data = validated.data
    issued = today or _today()
    try:
        invoice_id = await storage.insert_invoice(
            customer_id=data.customer_id,
            amount=data.amount_in_cents,
            status=data.status,
            date=issued,
        )
    except StorageError:
        log.exception("create_invoice failed for customer_id=%s", data.customer_id)
        return Failed(message="Database Error: Failed to Create Invoice.")

    log.info("created invoice id=%s amount=%s status=%s", invoice_id, data.amount_in_cents, data.status)
    await revalidate(notifier, *AFFECTED_PATHS)
    return Saved(id=invoice_id, redirect_to=INVOICES_PATH)


async def update_invoice(
    invoice_id: str,
    form: Mapping[str, Any],
    *,
    storage: Storage,
    notifier: Notifier,
) -> MutationResult:
    validated = validate_form(InvoiceForm, form)
    if not validated.success:
        return Invalid(
            errors=validated.errors,
            message="Missing Fields. Failed to Update Invoice.",
        )

    data = validated.data
    try:
        touched = await storage.update_invoice(
            invoice_id,
            customer_id=data.customer_id,
            amount=data.amount_in_cents,
            status=data.status,
        )
    except StorageError:
        log.exception("update_invoice failed for id=%s", invoice_id)
        return Failed(message="Database Error: Failed to Update Invoice.")

    if not touched:
        log.warning("update_invoice matched no row for id=%s", invoice_id)
    await revalidate(notifier, *AFFECTED_PATHS)
    return Saved(id=invoice_id, redirect_to=INVOICES_PATH)


async def delete_invoice(
    invoice_id: str,
    *,
    storage: Storage,
    notifier: Notifier,
) -> MutationResult:
    try:
        removed = await storage.delete_invoice(invoice_id)
    except StorageError:
        log.exception("delete_invoice failed for id=%s", invoice_id)
        return Failed(message="Database Error: Failed to Delete Invoice.")

    if not removed:
        log.warning("delete_invoice matched no row for id=%s", invoice_id)
    await revalidate(notifier, *AFFECTED_PATHS)
    return Deleted(id=invoice_id, message="Deleted Invoice")
