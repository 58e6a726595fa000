"""
Tests for InvoiceSelector.

Verifies owner scoping, inclusive due-date bounds, and ordering by
payment_due_date desc then created_at desc.
"""

from datetime import date
from uuid import uuid4

import pytest

from invoice_kernel.domain.query import InvoiceDateRange
from invoice_kernel.selectors.invoice_selector import InvoiceSelector


@pytest.fixture
def selector(session) -> InvoiceSelector:
    return InvoiceSelector(session)


@pytest.fixture
def create(invoice_service, deterministic_clock):
    """Create an invoice one second after the previous one."""

    def _create(owner_id, due: date, amount: str = "100"):
        deterministic_clock.tick()
        return invoice_service.create_invoice(owner_id, date(2025, 1, 1), amount, due)

    return _create


class TestListForOwner:
    def test_only_own_invoices(self, selector, create, account, other_account):
        mine = create(account.id, date(2025, 1, 10))
        create(other_account.id, date(2025, 1, 10))

        result = selector.list_for_owner(account.id)

        assert [i.id for i in result] == [mine.id]

    def test_empty_for_owner_without_invoices(self, selector, create, account, other_account):
        create(account.id, date(2025, 1, 10))

        assert selector.list_for_owner(other_account.id) == []

    def test_due_date_descending_then_created_desc(self, selector, create, account):
        early = create(account.id, date(2025, 1, 5))
        late = create(account.id, date(2025, 3, 1))
        same_due_first = create(account.id, date(2025, 2, 1))
        same_due_second = create(account.id, date(2025, 2, 1))

        result = selector.list_for_owner(account.id)

        assert [i.id for i in result] == [
            late.id,
            same_due_second.id,
            same_due_first.id,
            early.id,
        ]

    def test_inclusive_bounds(self, selector, create, account):
        create(account.id, date(2024, 12, 31))
        start = create(account.id, date(2025, 1, 1))
        end = create(account.id, date(2025, 1, 31))
        create(account.id, date(2025, 2, 1))

        result = selector.list_for_owner(
            account.id, InvoiceDateRange.from_strings("2025-01-01", "2025-01-31")
        )

        assert [i.id for i in result] == [end.id, start.id]

    def test_start_only(self, selector, create, account):
        create(account.id, date(2025, 1, 1))
        later = create(account.id, date(2025, 6, 1))

        result = selector.list_for_owner(account.id, InvoiceDateRange(start=date(2025, 2, 1)))

        assert [i.id for i in result] == [later.id]

    def test_end_only(self, selector, create, account):
        earlier = create(account.id, date(2025, 1, 1))
        create(account.id, date(2025, 6, 1))

        result = selector.list_for_owner(account.id, InvoiceDateRange(end=date(2025, 2, 1)))

        assert [i.id for i in result] == [earlier.id]

    def test_inverted_range_is_empty(self, selector, create, account):
        create(account.id, date(2025, 1, 15))

        result = selector.list_for_owner(
            account.id, InvoiceDateRange(start=date(2025, 2, 1), end=date(2025, 1, 1))
        )

        assert result == []

    def test_returns_value_objects(self, selector, create, account):
        create(account.id, date(2025, 1, 31), amount="100000.33")

        (info,) = selector.list_for_owner(account.id)

        assert info.to_wire()["total_amount"] == "104400.34"
        assert info.to_wire()["fee_rate"] == "0.0400"


class TestGetForOwner:
    def test_found(self, selector, create, account):
        invoice = create(account.id, date(2025, 1, 31))

        assert selector.get_for_owner(account.id, invoice.id).id == invoice.id

    def test_other_owner_gets_none(self, selector, create, account, other_account):
        invoice = create(account.id, date(2025, 1, 31))

        assert selector.get_for_owner(other_account.id, invoice.id) is None

    def test_missing(self, selector, account):
        assert selector.get_for_owner(account.id, uuid4()) is None
