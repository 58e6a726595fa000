"""FastAPI dependencies: configuration, database session, services, auth."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from invoice_config import AppConfig
from invoice_kernel.domain.clock import Clock
from invoice_kernel.domain.derivation import DerivationEngine
from invoice_kernel.domain.dtos import AccountInfo
from invoice_kernel.exceptions import InvalidTokenError
from invoice_kernel.selectors.invoice_selector import InvoiceSelector
from invoice_kernel.services.account_service import AccountService
from invoice_kernel.services.invoice_service import InvoiceService
from invoice_kernel.services.token_service import TokenService


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


def get_db_session(request: Request) -> Iterator[Session]:
    """
    One session per request.

    Routes commit explicitly; anything that escapes a route rolls back.
    """
    session = request.app.state.session_factory()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_token_service(
    config: AppConfig = Depends(get_config),
    clock: Clock = Depends(get_clock),
) -> TokenService:
    return TokenService(
        secret_key=config.jwt_secret_key,
        algorithm=config.jwt_algorithm,
        expires_in=config.token_ttl_seconds,
        clock=clock,
    )


def get_account_service(
    session: Session = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
) -> AccountService:
    return AccountService(session, clock)


def get_invoice_service(
    request: Request,
    session: Session = Depends(get_db_session),
    clock: Clock = Depends(get_clock),
) -> InvoiceService:
    engine: DerivationEngine = request.app.state.derivation_engine
    return InvoiceService(session, engine, clock)


def get_invoice_selector(session: Session = Depends(get_db_session)) -> InvoiceSelector:
    return InvoiceSelector(session)


def _bearer_token(authorization: str | None) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise InvalidTokenError("missing")
    token = authorization.split(" ", 1)[1].strip()
    if not token:
        raise InvalidTokenError("missing")
    return token


def get_current_account(
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
    accounts: AccountService = Depends(get_account_service),
) -> AccountInfo:
    """
    Resolve the bearer token to an existing account.

    Raises:
        InvalidTokenError: Missing header, bad token, or an account that no
            longer exists.
    """
    claims = tokens.decode(_bearer_token(authorization))
    account = accounts.get_account(claims.account_id)
    if account is None:
        raise InvalidTokenError("unknown_account")
    return account
