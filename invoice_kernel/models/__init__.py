"""ORM models for the invoice kernel."""

from invoice_kernel.models.account import Account, AccountStatus
from invoice_kernel.models.invoice import Invoice

__all__ = [
    "Account",
    "AccountStatus",
    "Invoice",
]
