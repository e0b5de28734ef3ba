# src/billdash/services/customers.py
from __future__ import annotations

from typing import Any, Mapping

from billdash.app_logger import get_logger
from billdash.errors import StorageError
from billdash.schemas import CustomerForm, validate_form

from .ports import CUSTOMERS_PATH, INVOICES_PATH, Notifier, Storage, revalidate
from .results import Deleted, Failed, Invalid, MutationResult, Saved

log = get_logger("services.customers")

# invoice rows show the customer name, email and avatar; a new
# customer has no invoices yet, so only an edit or delete touches them
AFFECTED_PATHS = (CUSTOMERS_PATH, INVOICES_PATH)


async def create_customer(
    form: Mapping[str, Any],
    *,
    storage: Storage,
    notifier: Notifier,
) -> MutationResult:
    validated = validate_form(CustomerForm, form)
    if not validated.success:
        return Invalid(
            errors=validated.errors,
            message="Missing Fields. Failed to Create Customer.",
        )

    data = validated.data
    try:
        customer_id = await storage.insert_customer(
            name=data.name, email=data.email, image_url=data.image_url
        )
    except StorageError:
        log.exception("create_customer failed")
        return Failed(message="Database Error: Failed to Create Customer.")

    log.info("created customer id=%s", customer_id)
    await revalidate(notifier, CUSTOMERS_PATH)
    return Saved(id=customer_id, redirect_to=CUSTOMERS_PATH)


async def update_customer(
    customer_id: str,
    form: Mapping[str, Any],
    *,
    storage: Storage,
    notifier: Notifier,
) -> MutationResult:
    validated = validate_form(CustomerForm, form)
    if not validated.success:
        return Invalid(
            errors=validated.errors,
            message="Missing Fields. Failed to Update Customer.",
        )

    data = validated.data
    try:
        touched = await storage.update_customer(
            customer_id, name=data.name, email=data.email, image_url=data.image_url
        )
    except StorageError:
        log.exception("update_customer failed for id=%s", customer_id)
        return Failed(message="Database Error: Failed to Update Customer.")

    if not touched:
        log.warning("update_customer matched no row for id=%s", customer_id)
    await revalidate(notifier, *AFFECTED_PATHS)
    return Saved(id=customer_id, redirect_to=CUSTOMERS_PATH)


async def delete_customer(
    customer_id: str,
    *,
    storage: Storage,
    notifier: Notifier,
) -> MutationResult:
    try:
        removed = await storage.delete_customer(customer_id)
    except StorageError:
        log.exception("delete_customer failed for id=%s", customer_id)
        return Failed(message="Database Error: Failed to Delete Customer.")

    if not removed:
        log.warning("delete_customer matched no row for id=%s", customer_id)
    await revalidate(notifier, *AFFECTED_PATHS)
    return Deleted(id=customer_id, message="Deleted Customer")
