"""
Module: invoice_kernel.models.account
Responsibility: ORM persistence for the accounts that own invoices and
    authenticate against the API.
Architecture position: Kernel > Models.  May import from db/base.py only.
    MUST NOT import from services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - email is unique (uq_account_email) and stored normalized (lower case,
      stripped) by AccountService.
    - password_hash never holds a plaintext password.

Failure modes:
    - IntegrityError on duplicate email if two registrations race past the
      service-level duplicate check.
"""

from enum import Enum

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from invoice_kernel.db.base import TrackedBase


class AccountStatus(str, Enum):
    """Account lifecycle status."""

    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    LOCKED = "locked"
    CLOSED = "closed"


class Account(TrackedBase):
    """
    A login identity and invoice owner.

    Contract:
        Registration creates accounts in VERIFIED status.  Invoices reference
        accounts through invoices.owner_id and are removed with them.
    """

    __tablename__ = "accounts"

    __table_args__ = (
        UniqueConstraint("email", name="uq_account_email"),
    )

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=AccountStatus.VERIFIED.value,
    )

    password_hash: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Account {self.email} ({self.status})>"
