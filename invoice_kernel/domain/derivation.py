"""
Derivation -- fee, tax and total from a payment amount and two rates.

Responsibility:
    Computes the derived monetary fields of an invoice.  This is the only
    place in the system where fee, tax_amount and total_amount are produced;
    services call it explicitly before every validate-and-persist step.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.  Default rates arrive
    as an explicit DefaultRates value, never from the environment.

Invariants enforced:
    - fee          = round2(payment_amount x fee_rate)
    - tax_amount   = round2(fee x tax_rate)   (tax is levied on the fee)
    - total_amount = payment_amount + fee + tax_amount, no further rounding
    - Idempotent: deriving again from a result's own inputs reproduces it
      exactly, so repeated derivation never accumulates rounding error.

Failure modes:
    - InvalidAmountError when payment_amount is absent.
    - InvalidAmountError propagated unchanged from Money.of / Rate.of when
      raw inputs are not numeric.
"""

from __future__ import annotations

from dataclasses import dataclass

from invoice_kernel.domain.values import Money, Rate
from invoice_kernel.exceptions import InvalidAmountError


@dataclass(frozen=True)
class DefaultRates:
    """Configured fallback rates applied when an invoice does not carry its own."""

    fee_rate: Rate
    tax_rate: Rate

    @classmethod
    def of(cls, fee_rate: Rate | str, tax_rate: Rate | str) -> DefaultRates:
        return cls(fee_rate=Rate.of(fee_rate), tax_rate=Rate.of(tax_rate))


@dataclass(frozen=True)
class DerivedFields:
    """The inputs of a derivation together with everything computed from them."""

    payment_amount: Money
    fee_rate: Rate
    fee: Money
    tax_rate: Rate
    tax_amount: Money
    total_amount: Money


def derive_invoice_fields(
    payment_amount: Money | str | int | None,
    fee_rate: Rate | str | int | None = None,
    tax_rate: Rate | str | int | None = None,
    *,
    defaults: DefaultRates,
) -> DerivedFields:
    """
    Derive fee, tax_amount and total_amount.

    Preconditions:
        - payment_amount is present (Money or decimal-convertible).
        - defaults supplies both fallback rates.

    Postconditions:
        - Absent rates are replaced by the configured defaults.
        - All three derived values are 2-digit Money.

    Raises:
        InvalidAmountError: If payment_amount is None, or if any raw input
            cannot be converted.
    """
    if payment_amount is None:
        raise InvalidAmountError(None, "payment_amount is required for derivation")

    amount = Money.of(payment_amount)
    effective_fee_rate = Rate.of(fee_rate) if fee_rate is not None else defaults.fee_rate
    effective_tax_rate = Rate.of(tax_rate) if tax_rate is not None else defaults.tax_rate

    fee = amount.multiply(effective_fee_rate)
    tax_amount = fee.multiply(effective_tax_rate)
    total_amount = amount.add(fee).add(tax_amount)

    return DerivedFields(
        payment_amount=amount,
        fee_rate=effective_fee_rate,
        fee=fee,
        tax_rate=effective_tax_rate,
        tax_amount=tax_amount,
        total_amount=total_amount,
    )


class DerivationEngine:
    """
    Derivation bound to one configuration.

    Contract:
        Holds the DefaultRates handed to it at construction and applies
        derive_invoice_fields with them.  Holds no other state, so one
        engine may be shared by any number of callers.
    """

    def __init__(self, defaults: DefaultRates):
        self._defaults = defaults

    @property
    def defaults(self) -> DefaultRates:
        return self._defaults

    def derive(
        self,
        payment_amount: Money | str | int | None,
        fee_rate: Rate | str | int | None = None,
        tax_rate: Rate | str | int | None = None,
    ) -> DerivedFields:
        return derive_invoice_fields(
            payment_amount, fee_rate, tax_rate, defaults=self._defaults
        )

    def rederive(self, fields: DerivedFields) -> DerivedFields:
        """Re-run derivation from an earlier result's inputs."""
        return self.derive(fields.payment_amount, fields.fee_rate, fields.tax_rate)
