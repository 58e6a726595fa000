"""
TokenService -- signed bearer tokens for authenticated accounts.

Tokens are HS256 JWTs (python-jose) carrying ``sub`` and ``account_id``
(the account UUID), ``email``, ``iat`` and ``exp``.  Expiry is checked
against the injected Clock rather than the wall clock, so tests can move
time forward deterministically.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import JWTError, jwt

from invoice_kernel.domain.clock import Clock, SystemClock
from invoice_kernel.domain.dtos import AccountInfo, TokenClaims
from invoice_kernel.exceptions import InvalidTokenError
from invoice_kernel.logging_config import get_logger

logger = get_logger("services.token")

DEFAULT_EXPIRES_IN = 3600


class TokenService:
    """Issues and verifies bearer tokens. Holds no session."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_in: int = DEFAULT_EXPIRES_IN,
        clock: Clock | None = None,
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expires_in = expires_in
        self._clock = clock or SystemClock()

    def issue(self, account: AccountInfo) -> str:
        now = self._clock.now()
        expires_at = now + timedelta(seconds=self._expires_in)
        claims = {
            "sub": str(account.id),
            "account_id": str(account.id),
            "email": account.email,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def decode(self, token: str) -> TokenClaims:
        """
        Verify signature and expiry and return the claims.

        Raises:
            InvalidTokenError: If the token is malformed, signed with another
                key, missing its subject or expiry, or expired.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            logger.info("token_rejected", extra={"reason": "malformed"})
            raise InvalidTokenError("malformed") from exc

        subject = payload.get("sub") or payload.get("account_id")
        expires = payload.get("exp")
        if not subject or expires is None:
            logger.info("token_rejected", extra={"reason": "missing_claims"})
            raise InvalidTokenError("missing_claims")

        try:
            account_id = UUID(str(subject))
            expires_at = datetime.fromtimestamp(int(expires), tz=UTC)
        except (TypeError, ValueError) as exc:
            logger.info("token_rejected", extra={"reason": "malformed_claims"})
            raise InvalidTokenError("malformed_claims") from exc

        if expires_at <= self._clock.now():
            logger.info("token_rejected", extra={"reason": "expired"})
            raise InvalidTokenError("expired")

        return TokenClaims(
            account_id=account_id,
            email=payload.get("email", ""),
            expires_at=expires_at,
        )
