"""
Pure domain layer.

This module contains value objects, DTOs and invoice logic with NO
dependencies on:
- ORM (SQLAlchemy)
- Database
- Configuration or environment
- I/O

All domain objects are immutable and deterministic.
"""

from invoice_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from invoice_kernel.domain.derivation import (
    DefaultRates,
    DerivationEngine,
    DerivedFields,
    derive_invoice_fields,
)
from invoice_kernel.domain.dtos import AccountInfo, InvoiceInfo, TokenClaims
from invoice_kernel.domain.query import InvoiceDateRange, parse_query_date
from invoice_kernel.domain.validation import (
    InvoiceCandidate,
    ValidationResult,
    ensure_valid,
    validate_invoice,
)
from invoice_kernel.domain.values import Money, Rate

__all__ = [
    "AccountInfo",
    "Clock",
    "DefaultRates",
    "DerivationEngine",
    "DerivedFields",
    "DeterministicClock",
    "InvoiceCandidate",
    "InvoiceDateRange",
    "InvoiceInfo",
    "Money",
    "Rate",
    "SystemClock",
    "TokenClaims",
    "ValidationResult",
    "derive_invoice_fields",
    "ensure_valid",
    "parse_query_date",
    "validate_invoice",
]
