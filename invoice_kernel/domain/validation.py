"""
Validation -- structural and business checks for an invoice candidate.

Responsibility:
    Decides whether a fully derived invoice may be persisted.  Every check
    runs; violations are collected in a fixed order rather than stopping at
    the first one, so a caller can report all problems together.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Check order:
    1. owner_id present
    2. issue_date present
    3. payment_amount present and greater than 0
    4. payment_due_date present
    5. payment_due_date on or after issue_date (only when both dates exist)

The store repeats the positivity check as a CHECK constraint; this module
does not rely on it and the store does not rely on this module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from invoice_kernel.domain.values import Money
from invoice_kernel.exceptions import FieldError, ValidationFailedError

BLANK = "can't be blank"
NOT_POSITIVE = "must be greater than 0"
DUE_BEFORE_ISSUE = "must be on or after issue_date"


@dataclass(frozen=True)
class InvoiceCandidate:
    """An invoice about to be persisted, after derivation."""

    owner_id: UUID | None
    issue_date: date | None
    payment_amount: Money | None
    payment_due_date: date | None


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[FieldError, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise ValidationFailedError(self.errors)


def validate_invoice(candidate: InvoiceCandidate) -> ValidationResult:
    """Run every check and return the ordered list of violations."""
    errors: list[FieldError] = []

    if candidate.owner_id is None:
        errors.append(FieldError("owner_id", BLANK))

    if candidate.issue_date is None:
        errors.append(FieldError("issue_date", BLANK))

    if candidate.payment_amount is None:
        errors.append(FieldError("payment_amount", BLANK))
    elif not candidate.payment_amount.is_positive:
        # Zero and negative amounts share one message
        errors.append(FieldError("payment_amount", NOT_POSITIVE))

    if candidate.payment_due_date is None:
        errors.append(FieldError("payment_due_date", BLANK))

    if (
        candidate.issue_date is not None
        and candidate.payment_due_date is not None
        and candidate.payment_due_date < candidate.issue_date
    ):
        errors.append(FieldError("payment_due_date", DUE_BEFORE_ISSUE))

    return ValidationResult(errors=tuple(errors))


def ensure_valid(candidate: InvoiceCandidate) -> None:
    """
    Raise if the candidate fails any check.

    Raises:
        ValidationFailedError: Carrying every violation in check order.
    """
    validate_invoice(candidate).raise_if_invalid()
