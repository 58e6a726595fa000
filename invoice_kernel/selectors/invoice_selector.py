"""
InvoiceSelector -- owner-scoped invoice reads.

Every query is filtered by owner_id first; there is no path that returns
another account's invoice.  Listings are ordered by payment_due_date
descending, then created_at descending, so invoices sharing a due date
come back newest first.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select

from invoice_kernel.domain.dtos import InvoiceInfo
from invoice_kernel.domain.query import InvoiceDateRange
from invoice_kernel.models.invoice import Invoice
from invoice_kernel.selectors.base import BaseSelector


def invoice_to_dto(invoice: Invoice) -> InvoiceInfo:
    """Convert an ORM Invoice to an InvoiceInfo DTO."""
    return InvoiceInfo(
        id=invoice.id,
        owner_id=invoice.owner_id,
        issue_date=invoice.issue_date,
        payment_amount=invoice.payment_amount,
        fee=invoice.fee,
        fee_rate=invoice.fee_rate,
        tax_amount=invoice.tax_amount,
        tax_rate=invoice.tax_rate,
        total_amount=invoice.total_amount,
        payment_due_date=invoice.payment_due_date,
        created_at=invoice.created_at,
        updated_at=invoice.updated_at,
    )


class InvoiceSelector(BaseSelector[Invoice]):
    """Read-only access to one owner's invoices."""

    def list_for_owner(
        self,
        owner_id: UUID,
        date_range: InvoiceDateRange | None = None,
    ) -> list[InvoiceInfo]:
        """
        List an owner's invoices, optionally within an inclusive due-date window.

        A window whose start is after its end matches nothing and yields an
        empty list.
        """
        stmt = select(Invoice).where(Invoice.owner_id == owner_id)

        if date_range is not None:
            if date_range.start is not None:
                stmt = stmt.where(Invoice.payment_due_date >= date_range.start)
            if date_range.end is not None:
                stmt = stmt.where(Invoice.payment_due_date <= date_range.end)

        stmt = stmt.order_by(
            Invoice.payment_due_date.desc(),
            Invoice.created_at.desc(),
        )

        return [invoice_to_dto(row) for row in self.session.scalars(stmt)]

    def get_for_owner(self, owner_id: UUID, invoice_id: UUID) -> InvoiceInfo | None:
        """Fetch one invoice, or None if it is missing or owned by someone else."""
        stmt = select(Invoice).where(
            Invoice.id == invoice_id,
            Invoice.owner_id == owner_id,
        )
        invoice = self.session.scalars(stmt).one_or_none()
        if invoice is None:
            return None
        return invoice_to_dto(invoice)
