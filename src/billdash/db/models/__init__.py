from .customers import Customer
from .invoices import Invoice, INVOICE_STATUSES

__all__ = ["Customer", "Invoice", "INVOICE_STATUSES"]
