"""
Service layer for Account operations.

Registers accounts with a hashed password and checks credentials at login.
Returns AccountInfo DTOs instead of ORM entities.
"""

from __future__ import annotations

import re
from uuid import UUID

from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.orm import Session

from invoice_kernel.domain.clock import Clock, SystemClock
from invoice_kernel.domain.dtos import AccountInfo
from invoice_kernel.exceptions import LoginFailedError, RegistrationFailedError
from invoice_kernel.logging_config import get_logger
from invoice_kernel.models.account import Account, AccountStatus
from invoice_kernel.services.base import BaseService

logger = get_logger("services.account")

EMAIL_PATTERN = re.compile(
    r"[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*"
)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def normalize_email(email: str | None) -> str | None:
    if email is None:
        return None
    return email.strip().lower()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Stored value is not a hash passlib recognizes
        logger.warning("password_hash_unrecognized")
        return False


class AccountService(BaseService[Account]):
    """
    Registration and credential checks.

    Login failures never reveal whether the email or the password was wrong.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        super().__init__(session)
        self._clock = clock or SystemClock()

    def _to_dto(self, account: Account) -> AccountInfo:
        return AccountInfo(id=account.id, email=account.email, status=account.status)

    def _find_by_email(self, email: str) -> Account | None:
        return self.session.scalars(
            select(Account).where(Account.email == email)
        ).one_or_none()

    def _email_errors(self, email: str | None) -> list[str]:
        if not email:
            return ["Email can't be blank"]
        if not EMAIL_PATTERN.fullmatch(email):
            return ["Email is invalid"]
        if self._find_by_email(email) is not None:
            return ["Email has already been taken"]
        return []

    def register(self, email: str | None, password: str | None) -> AccountInfo:
        """
        Create a verified account.

        The email is stripped and lower-cased before any check.

        Raises:
            RegistrationFailedError: "Password can't be blank" when no
                password is given, otherwise every email problem found.
        """
        if not password:
            raise RegistrationFailedError(["Password can't be blank"])

        normalized = normalize_email(email)
        errors = self._email_errors(normalized)
        if errors:
            logger.info("registration_rejected", extra={"reasons": errors})
            raise RegistrationFailedError(errors)

        now = self._clock.now()
        account = Account(
            email=normalized,
            status=AccountStatus.VERIFIED.value,
            password_hash=hash_password(password),
            created_at=now,
            updated_at=now,
        )
        self.session.add(account)
        self.session.flush()

        logger.info("account_registered", extra={"account_id": str(account.id)})
        return self._to_dto(account)

    def authenticate(self, email: str | None, password: str | None) -> AccountInfo:
        """
        Check credentials.

        Raises:
            LoginFailedError: For an unknown email, a missing password or a
                wrong password alike.
        """
        normalized = normalize_email(email)
        account = self._find_by_email(normalized) if normalized else None

        if (
            account is None
            or not password
            or not account.password_hash
            or not verify_password(password, account.password_hash)
        ):
            logger.info("login_failed")
            raise LoginFailedError()

        logger.info("login_succeeded", extra={"account_id": str(account.id)})
        return self._to_dto(account)

    def get_account(self, account_id: UUID) -> AccountInfo | None:
        account = self.session.get(Account, account_id)
        if account is None:
            return None
        return self._to_dto(account)
