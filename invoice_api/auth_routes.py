"""Registration and login."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from invoice_api.dependencies import get_account_service, get_db_session, get_token_service
from invoice_api.schemas import Credentials
from invoice_kernel.domain.dtos import AccountInfo
from invoice_kernel.logging_config import LogContext
from invoice_kernel.services.account_service import AccountService
from invoice_kernel.services.token_service import TokenService

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _auth_payload(account: AccountInfo, tokens: TokenService) -> dict[str, Any]:
    return {"jwt": tokens.issue(account), "account": account.to_wire()}


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    body: Credentials,
    session: Session = Depends(get_db_session),
    accounts: AccountService = Depends(get_account_service),
    tokens: TokenService = Depends(get_token_service),
) -> dict[str, Any]:
    account = accounts.register(body.email, body.password)
    session.commit()
    with LogContext.bind(account_id=str(account.id)):
        return _auth_payload(account, tokens)


@router.post("/login")
def login(
    body: Credentials,
    accounts: AccountService = Depends(get_account_service),
    tokens: TokenService = Depends(get_token_service),
) -> dict[str, Any]:
    account = accounts.authenticate(body.email, body.password)
    return _auth_payload(account, tokens)
