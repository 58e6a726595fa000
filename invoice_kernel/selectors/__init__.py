"""Read-only selectors for the invoice kernel."""

from invoice_kernel.selectors.base import BaseSelector
from invoice_kernel.selectors.invoice_selector import InvoiceSelector, invoice_to_dto

__all__ = [
    "BaseSelector",
    "InvoiceSelector",
    "invoice_to_dto",
]
