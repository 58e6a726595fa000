"""
Module: invoice_kernel.models.invoice
Responsibility: ORM persistence for invoices.  Stores the client-supplied
    fields together with the derived fee, tax and total.
Architecture position: Kernel > Models.  May import from db/ and the pure
    domain/ modules.  MUST NOT import from services/, selectors/, or outer
    layers.

Invariants enforced:
    - owner_id references accounts.id; deleting the account deletes its
      invoices (ON DELETE CASCADE).
    - payment_amount > 0 (ck_invoices_payment_amount_positive), a store-level
      backstop for the domain validation.
    - Money columns are NUMERIC(15, 2), rate columns NUMERIC(5, 4).

Failure modes:
    - IntegrityError on a non-positive payment_amount or unknown owner_id
      when a row bypasses the service layer.
"""

from datetime import date
from uuid import UUID

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from invoice_kernel.db.base import TrackedBase, UUIDString
from invoice_kernel.db.types import MoneyType, RateType
from invoice_kernel.domain.derivation import DerivedFields
from invoice_kernel.domain.values import Money, Rate


class Invoice(TrackedBase):
    """
    A single invoice owned by one account.

    Guarantees:
        - fee, tax_amount and total_amount are only written through
          apply_derived(), so they always belong to the stored amount and
          rates.
    """

    __tablename__ = "invoices"

    __table_args__ = (
        # CAST keeps the check numeric on SQLite, where amounts are stored as text
        CheckConstraint(
            "CAST(payment_amount AS NUMERIC) > 0",
            name="ck_invoices_payment_amount_positive",
        ),
        Index("idx_invoices_owner_id", "owner_id"),
        Index("idx_invoices_payment_due_date", "payment_due_date"),
    )

    owner_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    )

    issue_date: Mapped[date] = mapped_column(Date, nullable=False)

    payment_amount: Mapped[Money] = mapped_column(MoneyType(), nullable=False)

    fee: Mapped[Money] = mapped_column(MoneyType(), nullable=False)

    fee_rate: Mapped[Rate] = mapped_column(RateType(), nullable=False)

    tax_amount: Mapped[Money] = mapped_column(MoneyType(), nullable=False)

    tax_rate: Mapped[Rate] = mapped_column(RateType(), nullable=False)

    total_amount: Mapped[Money] = mapped_column(MoneyType(), nullable=False)

    payment_due_date: Mapped[date] = mapped_column(Date, nullable=False)

    def apply_derived(self, fields: DerivedFields) -> None:
        """Copy a derivation result onto the row."""
        self.payment_amount = fields.payment_amount
        self.fee_rate = fields.fee_rate
        self.fee = fields.fee
        self.tax_rate = fields.tax_rate
        self.tax_amount = fields.tax_amount
        self.total_amount = fields.total_amount

    def __repr__(self) -> str:
        return f"<Invoice {self.id} {self.payment_amount} due {self.payment_due_date}>"
