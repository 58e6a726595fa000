"""
Invoice endpoints.

The owner of every invoice is the authenticated account; no request field
can set or change it.  Rates are never read from the request: new invoices
take the configured defaults and updates carry the stored rates forward.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from invoice_api.dependencies import (
    get_current_account,
    get_db_session,
    get_invoice_selector,
    get_invoice_service,
)
from invoice_api.errors import ApiError
from invoice_api.schemas import InvoiceCreateRequest, InvoiceUpdateRequest
from invoice_kernel.domain.dtos import AccountInfo
from invoice_kernel.domain.query import InvoiceDateRange
from invoice_kernel.exceptions import (
    InvalidAmountError,
    InvoiceNotFoundError,
    ValidationFailedError,
)
from invoice_kernel.logging_config import LogContext
from invoice_kernel.selectors.invoice_selector import InvoiceSelector
from invoice_kernel.services.invoice_service import InvoiceChanges, InvoiceService

router = APIRouter(prefix="/api/v1/invoices", tags=["invoices"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_invoice(
    body: InvoiceCreateRequest,
    account: AccountInfo = Depends(get_current_account),
    session: Session = Depends(get_db_session),
    service: InvoiceService = Depends(get_invoice_service),
) -> dict[str, Any]:
    with LogContext.bind(account_id=str(account.id)):
        try:
            invoice = service.create_invoice(
                owner_id=account.id,
                issue_date=body.issue_date,
                payment_amount=body.payment_amount,
                payment_due_date=body.payment_due_date,
            )
        except (ValidationFailedError, InvalidAmountError) as exc:
            raise ApiError.from_invoice_error("INVOICE_CREATION_FAILED", exc) from exc
        session.commit()
    return invoice.to_wire()


@router.get("")
def list_invoices(
    start_date: str | None = None,
    end_date: str | None = None,
    account: AccountInfo = Depends(get_current_account),
    selector: InvoiceSelector = Depends(get_invoice_selector),
) -> dict[str, Any]:
    date_range = InvoiceDateRange.from_strings(start_date, end_date)
    invoices = selector.list_for_owner(account.id, date_range)
    return {"invoices": [invoice.to_wire() for invoice in invoices]}


@router.get("/{invoice_id}")
def get_invoice(
    invoice_id: UUID,
    account: AccountInfo = Depends(get_current_account),
    selector: InvoiceSelector = Depends(get_invoice_selector),
) -> dict[str, Any]:
    invoice = selector.get_for_owner(account.id, invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(str(invoice_id))
    return invoice.to_wire()


@router.patch("/{invoice_id}")
def update_invoice(
    invoice_id: UUID,
    body: InvoiceUpdateRequest,
    account: AccountInfo = Depends(get_current_account),
    session: Session = Depends(get_db_session),
    service: InvoiceService = Depends(get_invoice_service),
) -> dict[str, Any]:
    changes = InvoiceChanges(
        issue_date=body.issue_date,
        payment_amount=body.payment_amount,
        payment_due_date=body.payment_due_date,
    )
    with LogContext.bind(account_id=str(account.id), invoice_id=str(invoice_id)):
        try:
            invoice = service.update_invoice(account.id, invoice_id, changes)
        except (ValidationFailedError, InvalidAmountError) as exc:
            raise ApiError.from_invoice_error("INVOICE_UPDATE_FAILED", exc) from exc
        session.commit()
    return invoice.to_wire()
