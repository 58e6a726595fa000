"""
Tests for InvoiceService.

Verifies:
- create derives, validates and persists in one pipeline
- update re-derives from the stored rates and the changed amount
- rejected writes leave nothing behind
- owner scoping on update
"""

from datetime import date, timedelta
from uuid import uuid4

import pytest

from invoice_kernel.domain.derivation import DefaultRates, DerivationEngine
from invoice_kernel.domain.values import Money, Rate
from invoice_kernel.exceptions import (
    InvalidAmountError,
    InvoiceNotFoundError,
    ValidationFailedError,
)
from invoice_kernel.models.invoice import Invoice
from invoice_kernel.services.invoice_service import InvoiceChanges, InvoiceService

ISSUE = date(2025, 1, 1)
DUE = date(2025, 1, 31)


class TestCreateInvoice:
    def test_creates_with_derived_fields(self, invoice_service, owner_id):
        info = invoice_service.create_invoice(owner_id, ISSUE, "100000", DUE)

        assert info.owner_id == owner_id
        assert str(info.fee) == "4000.00"
        assert str(info.tax_amount) == "400.00"
        assert str(info.total_amount) == "104400.00"
        assert str(info.fee_rate) == "0.0400"
        assert str(info.tax_rate) == "0.1000"

    def test_persisted_row_matches_dto(self, invoice_service, session, owner_id):
        info = invoice_service.create_invoice(owner_id, ISSUE, Money.of("100000.33"), DUE)
        session.expire_all()

        row = session.get(Invoice, info.id)

        assert row.payment_amount == Money.of("100000.33")
        assert row.fee == Money.of("4000.01")
        assert row.tax_amount == Money.of("400.00")
        assert row.total_amount == Money.of("104400.34")
        assert row.fee_rate == Rate.of("0.04")

    def test_timestamps_come_from_clock(self, invoice_service, owner_id, deterministic_clock):
        info = invoice_service.create_invoice(owner_id, ISSUE, "10", DUE)

        assert info.to_wire()["created_at"] == deterministic_clock.now().isoformat()
        assert info.created_at == info.updated_at

    def test_explicit_rates(self, invoice_service, owner_id):
        info = invoice_service.create_invoice(
            owner_id, ISSUE, "1000", DUE, fee_rate="0.05", tax_rate="0.20"
        )

        assert str(info.fee) == "50.00"
        assert str(info.tax_amount) == "10.00"
        assert str(info.total_amount) == "1060.00"

    def test_collects_every_violation(self, invoice_service, owner_id, session):
        with pytest.raises(ValidationFailedError) as exc_info:
            invoice_service.create_invoice(owner_id, ISSUE, "0", ISSUE - timedelta(days=1))

        assert exc_info.value.messages() == [
            "payment_amount must be greater than 0",
            "payment_due_date must be on or after issue_date",
        ]
        assert session.query(Invoice).count() == 0

    def test_missing_amount_is_blank_not_derivation_error(self, invoice_service, owner_id):
        with pytest.raises(ValidationFailedError) as exc_info:
            invoice_service.create_invoice(owner_id, ISSUE, None, DUE)

        assert exc_info.value.messages() == ["payment_amount can't be blank"]

    def test_missing_dates(self, invoice_service, owner_id):
        with pytest.raises(ValidationFailedError) as exc_info:
            invoice_service.create_invoice(owner_id, None, "10", None)

        assert exc_info.value.messages() == [
            "issue_date can't be blank",
            "payment_due_date can't be blank",
        ]

    def test_non_numeric_amount(self, invoice_service, owner_id):
        with pytest.raises(InvalidAmountError):
            invoice_service.create_invoice(owner_id, ISSUE, "one hundred", DUE)

    def test_logs_creation(self, invoice_service, owner_id, captured_logs):
        info = invoice_service.create_invoice(owner_id, ISSUE, "100000", DUE)

        records = [r for r in captured_logs() if r["message"] == "invoice_created"]
        assert len(records) == 1
        assert records[0]["invoice_id"] == str(info.id)
        assert records[0]["total_amount"] == "104400.00"


class TestUpdateInvoice:
    @pytest.fixture
    def invoice(self, invoice_service, owner_id):
        return invoice_service.create_invoice(owner_id, ISSUE, "100000", DUE)

    def test_amount_change_rederives(self, invoice_service, owner_id, invoice):
        updated = invoice_service.update_invoice(
            owner_id, invoice.id, InvoiceChanges(payment_amount="100000.33")
        )

        assert str(updated.fee) == "4000.01"
        assert str(updated.total_amount) == "104400.34"
        assert updated.issue_date == ISSUE

    def test_stored_rates_carried_forward(self, session, owner_id, deterministic_clock):
        original = InvoiceService(
            session, DerivationEngine(DefaultRates.of("0.04", "0.10")), deterministic_clock
        ).create_invoice(owner_id, ISSUE, "1000", DUE)

        reconfigured = InvoiceService(
            session, DerivationEngine(DefaultRates.of("0.09", "0.50")), deterministic_clock
        )
        updated = reconfigured.update_invoice(
            owner_id, original.id, InvoiceChanges(payment_amount="2000")
        )

        assert updated.fee_rate == Rate.of("0.04")
        assert str(updated.fee) == "80.00"
        assert str(updated.tax_amount) == "8.00"

    def test_rate_change_rederives(self, invoice_service, owner_id, invoice):
        updated = invoice_service.update_invoice(
            owner_id, invoice.id, InvoiceChanges(fee_rate="0.05")
        )

        assert str(updated.fee) == "5000.00"
        assert str(updated.tax_amount) == "500.00"
        assert str(updated.total_amount) == "105500.00"

    def test_date_change_keeps_amounts(self, invoice_service, owner_id, invoice):
        updated = invoice_service.update_invoice(
            owner_id, invoice.id, InvoiceChanges(payment_due_date=date(2025, 3, 1))
        )

        assert updated.payment_due_date == date(2025, 3, 1)
        assert updated.total_amount == invoice.total_amount

    def test_updated_at_moves_created_at_does_not(
        self, invoice_service, owner_id, invoice, deterministic_clock
    ):
        deterministic_clock.advance(60)

        updated = invoice_service.update_invoice(
            owner_id, invoice.id, InvoiceChanges(payment_amount="5")
        )

        assert updated.created_at == invoice.created_at
        assert updated.updated_at > invoice.updated_at

    def test_rejected_update_leaves_row_untouched(
        self, invoice_service, session, owner_id, invoice
    ):
        with pytest.raises(ValidationFailedError) as exc_info:
            invoice_service.update_invoice(
                owner_id,
                invoice.id,
                InvoiceChanges(payment_amount="-1", payment_due_date=date(2024, 1, 1)),
            )
        assert exc_info.value.messages() == [
            "payment_amount must be greater than 0",
            "payment_due_date must be on or after issue_date",
        ]

        session.flush()
        session.expire_all()
        row = session.get(Invoice, invoice.id)
        assert row.payment_amount == Money.of("100000")
        assert row.payment_due_date == DUE

    def test_other_owner_cannot_update(self, invoice_service, other_account, invoice):
        with pytest.raises(InvoiceNotFoundError):
            invoice_service.update_invoice(
                other_account.id, invoice.id, InvoiceChanges(payment_amount="1")
            )

    def test_unknown_invoice(self, invoice_service, owner_id):
        with pytest.raises(InvoiceNotFoundError) as exc_info:
            invoice_service.update_invoice(owner_id, uuid4(), InvoiceChanges())
        assert exc_info.value.code == "INVOICE_NOT_FOUND"
