"""
Immutable DTOs handed out by services and selectors.

Services and selectors never return ORM instances.  These objects are what
crosses the kernel boundary, and ``InvoiceInfo.to_wire()`` fixes the exact
string shapes other systems rely on:

    payment_amount, fee, tax_amount, total_amount -> "104400.00"
    fee_rate, tax_rate                            -> "0.0400"
    issue_date, payment_due_date                  -> "2025-01-31"
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Any
from uuid import UUID

from invoice_kernel.domain.values import Money, Rate


def _as_utc(moment: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored timestamp is UTC
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


@dataclass(frozen=True)
class InvoiceInfo:
    id: UUID
    owner_id: UUID
    issue_date: date
    payment_amount: Money
    fee: Money
    fee_rate: Rate
    tax_amount: Money
    tax_rate: Rate
    total_amount: Money
    payment_due_date: date
    created_at: datetime
    updated_at: datetime

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the canonical string shapes."""
        return {
            "id": str(self.id),
            "user_id": str(self.owner_id),
            "issue_date": self.issue_date.isoformat(),
            "payment_amount": str(self.payment_amount),
            "fee": str(self.fee),
            "fee_rate": str(self.fee_rate),
            "tax_amount": str(self.tax_amount),
            "tax_rate": str(self.tax_rate),
            "total_amount": str(self.total_amount),
            "payment_due_date": self.payment_due_date.isoformat(),
            "created_at": _as_utc(self.created_at).isoformat(),
            "updated_at": _as_utc(self.updated_at).isoformat(),
        }


@dataclass(frozen=True)
class AccountInfo:
    id: UUID
    email: str
    status: str

    def to_wire(self) -> dict[str, Any]:
        return {"id": str(self.id), "email": self.email, "status": self.status}


@dataclass(frozen=True)
class TokenClaims:
    """Verified contents of a bearer token."""

    account_id: UUID
    email: str
    expires_at: datetime
