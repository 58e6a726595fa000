"""Unit tests for the Rate value object."""

from decimal import Decimal

import pytest

from invoice_kernel.domain.values import Rate
from invoice_kernel.exceptions import InvalidAmountError


class TestRate:
    def test_four_fraction_digits(self):
        assert str(Rate.of("0.04")) == "0.0400"
        assert str(Rate.of("0.1")) == "0.1000"

    def test_rounds_half_up(self):
        assert str(Rate.of("0.04005")) == "0.0401"
        assert str(Rate.of("0.04004")) == "0.0400"

    def test_equal_after_rounding(self):
        assert Rate.of("0.1") == Rate.of(Decimal("0.10000"))

    def test_percent(self):
        assert Rate.of("0.04").to_percent() == "4.00"
        assert Rate.of("0.045").to_percent() == "4.50"
        assert Rate.of("0.1").to_percent() == "10.00"

    def test_compare_and_ordering(self):
        low, high = Rate.of("0.04"), Rate.of("0.10")
        assert low.compare(high) == -1
        assert high.compare(low) == 1
        assert low.compare(Rate.of("0.0400")) == 0
        assert low < high
        assert max(low, high) is high

    def test_ordering_against_other_types_is_unsupported(self):
        with pytest.raises(TypeError):
            Rate.of("0.1") < Decimal("0.2")  # noqa: B015

    @pytest.mark.parametrize("raw", ["ten percent", 0.04, False, "inf"])
    def test_invalid_input(self, raw):
        with pytest.raises(InvalidAmountError):
            Rate.of(raw)

    def test_repr(self):
        assert repr(Rate.of("0.04")) == "Rate('0.0400')"
