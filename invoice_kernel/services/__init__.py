"""Kernel services: the write side of the invoice kernel."""

from invoice_kernel.services.account_service import AccountService
from invoice_kernel.services.base import BaseService
from invoice_kernel.services.invoice_service import InvoiceChanges, InvoiceService
from invoice_kernel.services.token_service import TokenService

__all__ = [
    "AccountService",
    "BaseService",
    "InvoiceChanges",
    "InvoiceService",
    "TokenService",
]
