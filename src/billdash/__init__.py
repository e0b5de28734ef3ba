"""billdash: invoices and customers administration dashboard."""

__version__ = "0.1.0"
