"""Tests for quote derivation."""

from decimal import Decimal

from conftest import make_defect
from inspection_backend.models.inspection import QuoteStatus, ReviewStatus
from inspection_backend.pricing import derive_quote, draft_quote


def test_accepted_and_pending_count_rejected_does_not(defects):
    totals = derive_quote(defects)

    assert totals.subtotal == Decimal("125.00")
    assert totals.tax == Decimal("12.50")
    assert totals.total == Decimal("137.50")


def test_recompute_is_idempotent(defects):
    assert derive_quote(defects) == derive_quote(defects)


def test_empty_ledger_is_zero():
    totals = derive_quote([])
    assert (totals.subtotal, totals.tax, totals.total) == (Decimal("0"), Decimal("0"), Decimal("0"))


def test_all_rejected_is_zero():
    ledger = [make_defect("a", "40", ReviewStatus.REJECTED), make_defect("b", "60", ReviewStatus.REJECTED)]
    assert derive_quote(ledger).total == Decimal("0.00")


def test_no_floating_point_drift():
    ledger = [make_defect(str(i), "0.10", ReviewStatus.ACCEPTED) for i in range(10)]
    totals = derive_quote(ledger)

    assert totals.subtotal == Decimal("1.00")
    assert totals.tax == Decimal("0.10")
    assert totals.total == Decimal("1.10")


def test_tax_rounds_half_up_to_two_places():
    ledger = [make_defect("a", "0.05", ReviewStatus.ACCEPTED)]
    assert derive_quote(ledger).tax == Decimal("0.01")

    ledger = [make_defect("a", "123.45", ReviewStatus.ACCEPTED)]
    totals = derive_quote(ledger)
    assert totals.tax == Decimal("12.35")
    assert totals.total == Decimal("135.80")


def test_custom_tax_rate(defects):
    totals = derive_quote(defects, Decimal("0.08"))
    assert totals.tax == Decimal("10.00")
    assert totals.total == Decimal("135.00")


def test_draft_quote_carries_totals(defects):
    quote = draft_quote(defects)

    assert quote.status == QuoteStatus.DRAFT
    assert quote.approved_by is None
    assert quote.invoice_details is None
    assert quote.total == Decimal("137.50")
