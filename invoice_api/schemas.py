"""Request bodies accepted by the API.

Unknown fields are ignored, so a client cannot smuggle in ``user_id`` or
rates.  Amounts accept JSON numbers or decimal strings; anything that is
not numeric reaches the kernel and is reported as an invoice error.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    model_config = ConfigDict(extra="ignore")

    email: str | None = None
    password: str | None = None


class InvoiceCreateRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    issue_date: date | None = None
    payment_amount: Decimal | str | None = None
    payment_due_date: date | None = None


class InvoiceUpdateRequest(BaseModel):
    """Partial update; omitted or null fields keep their stored values."""

    model_config = ConfigDict(extra="ignore")

    issue_date: date | None = None
    payment_amount: Decimal | str | None = None
    payment_due_date: date | None = None
