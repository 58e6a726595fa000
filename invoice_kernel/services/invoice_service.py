"""
InvoiceService -- the single write path for invoices.

Responsibility:
    Runs every create and update through the same pipeline:

        inputs -> derive (fee, tax, total) -> validate -> persist (flush)

    Derived fields are always recomputed before validation, so a stored
    invoice can never carry a fee or total that belongs to different inputs.

Architecture position:
    Kernel > Services -- imperative shell around the pure derivation and
    validation functions in ``invoice_kernel.domain``.

Invariants enforced:
    - owner_id comes from the caller's authenticated account and is never
      changed by an update.
    - Rates stored on an invoice are carried forward on update unless the
      caller passes new ones.
    - created_at / updated_at come from the injected Clock.

Failure modes:
    - InvalidAmountError if a raw amount or rate is not numeric.
    - ValidationFailedError carrying every failed check, in check order.
    - InvoiceNotFoundError on update of a missing or foreign invoice.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from invoice_kernel.domain.clock import Clock, SystemClock
from invoice_kernel.domain.derivation import DerivationEngine, DerivedFields
from invoice_kernel.domain.dtos import InvoiceInfo
from invoice_kernel.domain.validation import InvoiceCandidate, ensure_valid
from invoice_kernel.domain.values import Money, Rate
from invoice_kernel.exceptions import InvoiceNotFoundError
from invoice_kernel.logging_config import LogContext, get_logger
from invoice_kernel.models.invoice import Invoice
from invoice_kernel.selectors.invoice_selector import invoice_to_dto
from invoice_kernel.services.base import BaseService

logger = get_logger("services.invoice")

RawAmount = Money | Decimal | int | str
RawRate = Rate | Decimal | int | str


@dataclass(frozen=True)
class InvoiceChanges:
    """
    A partial update.  A field left as None keeps its stored value.
    """

    issue_date: date | None = None
    payment_amount: RawAmount | None = None
    payment_due_date: date | None = None
    fee_rate: RawRate | None = None
    tax_rate: RawRate | None = None


class InvoiceService(BaseService[Invoice]):
    """
    Creates and updates invoices for one owner at a time.

    Contract:
        Every public method returns an InvoiceInfo DTO, flushes but never
        commits, and raises instead of returning partial results.
    """

    def __init__(
        self,
        session: Session,
        engine: DerivationEngine,
        clock: Clock | None = None,
    ):
        super().__init__(session)
        self._engine = engine
        self._clock = clock or SystemClock()

    def _derive(
        self,
        payment_amount: Money | None,
        fee_rate: RawRate | None,
        tax_rate: RawRate | None,
    ) -> DerivedFields | None:
        # Without an amount there is nothing to derive; validation reports it
        if payment_amount is None:
            return None
        return self._engine.derive(payment_amount, fee_rate, tax_rate)

    def create_invoice(
        self,
        owner_id: UUID,
        issue_date: date | None,
        payment_amount: RawAmount | None,
        payment_due_date: date | None,
        fee_rate: RawRate | None = None,
        tax_rate: RawRate | None = None,
    ) -> InvoiceInfo:
        """
        Derive, validate and insert a new invoice.

        Absent rates fall back to the engine's configured defaults.

        Raises:
            InvalidAmountError: If payment_amount or a rate is not numeric.
            ValidationFailedError: If any invoice check fails.
        """
        amount = Money.of(payment_amount) if payment_amount is not None else None
        derived = self._derive(amount, fee_rate, tax_rate)

        ensure_valid(
            InvoiceCandidate(
                owner_id=owner_id,
                issue_date=issue_date,
                payment_amount=amount,
                payment_due_date=payment_due_date,
            )
        )

        now = self._clock.now()
        invoice = Invoice(
            owner_id=owner_id,
            issue_date=issue_date,
            payment_due_date=payment_due_date,
            created_at=now,
            updated_at=now,
        )
        invoice.apply_derived(derived)

        self.session.add(invoice)
        self.session.flush()

        with LogContext.bind(invoice_id=str(invoice.id)):
            logger.info(
                "invoice_created",
                extra={
                    "owner_id": str(owner_id),
                    "payment_amount": str(derived.payment_amount),
                    "total_amount": str(derived.total_amount),
                    "payment_due_date": payment_due_date.isoformat(),
                },
            )
        return invoice_to_dto(invoice)

    def update_invoice(
        self,
        owner_id: UUID,
        invoice_id: UUID,
        changes: InvoiceChanges,
    ) -> InvoiceInfo:
        """
        Apply a partial update, re-derive, validate and flush.

        The stored row is only touched once validation has passed, so a
        rejected update leaves nothing dirty in the session.

        Raises:
            InvoiceNotFoundError: If no invoice with that id belongs to owner_id.
            InvalidAmountError: If a changed amount or rate is not numeric.
            ValidationFailedError: If the updated invoice fails any check.
        """
        invoice = self._get_owned(owner_id, invoice_id)

        issue_date = changes.issue_date if changes.issue_date is not None else invoice.issue_date
        payment_due_date = (
            changes.payment_due_date
            if changes.payment_due_date is not None
            else invoice.payment_due_date
        )
        amount = (
            Money.of(changes.payment_amount)
            if changes.payment_amount is not None
            else invoice.payment_amount
        )
        fee_rate = changes.fee_rate if changes.fee_rate is not None else invoice.fee_rate
        tax_rate = changes.tax_rate if changes.tax_rate is not None else invoice.tax_rate

        derived = self._derive(amount, fee_rate, tax_rate)

        ensure_valid(
            InvoiceCandidate(
                owner_id=invoice.owner_id,
                issue_date=issue_date,
                payment_amount=amount,
                payment_due_date=payment_due_date,
            )
        )

        invoice.issue_date = issue_date
        invoice.payment_due_date = payment_due_date
        invoice.apply_derived(derived)
        invoice.updated_at = self._clock.now()
        self.session.flush()

        with LogContext.bind(invoice_id=str(invoice.id)):
            logger.info(
                "invoice_updated",
                extra={
                    "owner_id": str(owner_id),
                    "payment_amount": str(derived.payment_amount),
                    "total_amount": str(derived.total_amount),
                },
            )
        return invoice_to_dto(invoice)

    def _get_owned(self, owner_id: UUID, invoice_id: UUID) -> Invoice:
        stmt = select(Invoice).where(
            Invoice.id == invoice_id,
            Invoice.owner_id == owner_id,
        )
        invoice = self.session.scalars(stmt).one_or_none()
        if invoice is None:
            raise InvoiceNotFoundError(str(invoice_id))
        return invoice
