"""
Configuration schema (``invoice_config.schema``).

The frozen ``AppConfig`` is the only runtime configuration artifact.  It is
produced by ``invoice_config.get_active_config()`` and handed to the kernel
and the API explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass

from invoice_kernel.domain.derivation import DefaultRates
from invoice_kernel.domain.values import Rate


class ConfigurationError(ValueError):
    """Configuration could not be assembled into a valid AppConfig."""

    code: str = "CONFIGURATION_ERROR"


@dataclass(frozen=True)
class AppConfig:
    """
    Validated application configuration.

    Guarantees:
        - jwt_secret_key is non-empty.
        - token_ttl_seconds is a positive integer.
        - both default rates lie in [0, 1].
    """

    jwt_secret_key: str
    database_url: str = "sqlite+pysqlite:///./invoices.db"
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    default_fee_rate: Rate = Rate.of("0.04")
    default_tax_rate: Rate = Rate.of("0.10")
    log_level: str = "INFO"

    @property
    def default_rates(self) -> DefaultRates:
        return DefaultRates(fee_rate=self.default_fee_rate, tax_rate=self.default_tax_rate)
