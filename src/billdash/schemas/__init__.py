from .forms import FormValidation, validate_form
from .invoice import InvoiceForm
from .customer import CustomerForm

__all__ = ["FormValidation", "validate_form", "InvoiceForm", "CustomerForm"]
