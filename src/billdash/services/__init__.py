from .results import Saved, Deleted, Invalid, Failed, MutationResult
from .ports import Storage, Notifier
from .invoices import create_invoice, update_invoice, delete_invoice
from .customers import create_customer, update_customer, delete_customer

__all__ = [
    "Saved", "Deleted", "Invalid", "Failed", "MutationResult",
    "Storage", "Notifier",
    "create_invoice", "update_invoice", "delete_invoice",
    "create_customer", "update_customer", "delete_customer",
]
