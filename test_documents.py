"""Tests for the invoice and report projections."""

from datetime import datetime
from decimal import Decimal

import pytest

from conftest import FixedSequence, make_defect
from inspection_backend.documents import project_invoice, project_report
from inspection_backend.documents.instructions import AddPage, Image, Rect, Text
from inspection_backend.documents.layout import percent_label
from inspection_backend.invoicing import issue_invoice
from inspection_backend.localization import Localizer
from inspection_backend.models.inspection import ReviewStatus
from inspection_backend.models.money import format_amount
from inspection_backend.orchestration.lifecycle import approve, ensure_quote
from inspection_backend.utils.errors import PreconditionFailedError

ISSUED = datetime(2025, 1, 31, 10, 0)


def _invoiced(inspection, reviewer):
    approved = approve(ensure_quote(inspection), reviewer)
    return issue_invoice(approved, "Saigon Shipping Co", "12 Nguyen Hue\nDistrict 1", ISSUED, FixedSequence(42))


def _text_values(document):
    return [item.text for item in document.texts()]


def test_invoice_requires_invoiced_quote(inspection, reviewer):
    with pytest.raises(PreconditionFailedError):
        project_invoice(inspection)
    with pytest.raises(PreconditionFailedError):
        project_invoice(ensure_quote(inspection))
    with pytest.raises(PreconditionFailedError):
        project_invoice(approve(ensure_quote(inspection), reviewer))


def test_invoice_contents(inspection, reviewer):
    document = project_invoice(_invoiced(inspection, reviewer))
    texts = _text_values(document)

    assert document.filename == "INV-2025-0042.pdf"
    assert document.page_count == 1
    assert "INVOICE" in texts
    assert "INV-2025-0042" in texts
    assert "01/31/2025" in texts
    assert "03/02/2025" in texts
    assert "Saigon Shipping Co" in texts
    assert "Container No: MSCU1234565" in texts
    assert "Tax (10%):" in texts
    assert ["125 VND", "12,5 VND", "137,5 VND"] == [t for t in texts if t in ("125 VND", "12,5 VND", "137,5 VND")]


def test_invoice_lists_billable_defects_in_ledger_order(inspection, reviewer):
    texts = _text_values(project_invoice(_invoiced(inspection, reviewer)))
    items = [t for t in texts if t.startswith("Repair:")]

    assert items == ["Repair: Dent - HIGH (Front)", "Repair: Hole - LOW (Front)"]
    assert not any("Rust" in t for t in texts)


def test_invoice_address_wraps_within_column(inspection, reviewer):
    document = project_invoice(_invoiced(inspection, reviewer))
    address = [item for item in document.texts() if item.text.startswith("12 Nguyen Hue")]

    assert len(address) == 1
    assert address[0].max_width == 80


def test_invoice_is_deterministic(inspection, reviewer):
    invoiced = _invoiced(inspection, reviewer)
    assert project_invoice(invoiced) == project_invoice(invoiced)


def test_invoice_in_vietnamese(inspection, reviewer):
    texts = _text_values(project_invoice(_invoiced(inspection, reviewer), lang="vi"))

    assert "HOA DON" in texts
    assert "31/01/2025" in texts
    assert "02/03/2025" in texts
    assert "Sua chua: Mop - HIGH (Mat truoc)" in texts


def test_invoice_rows_break_onto_new_page(inspection, reviewer):
    ledger = [make_defect(f"d-{i}", "10", ReviewStatus.ACCEPTED) for i in range(25)]
    invoiced = _invoiced(inspection.evolve(defects=ledger), reviewer)
    document = project_invoice(invoiced)

    instructions = list(document.instructions)
    page_break = next(i for i, item in enumerate(instructions) if isinstance(item, AddPage))
    rows_before = [
        item for item in instructions[:page_break]
        if isinstance(item, Text) and item.text.startswith("Repair:")
    ]
    rows_after = [
        item for item in instructions[page_break:]
        if isinstance(item, Text) and item.text.startswith("Repair:")
    ]

    assert document.page_count == 2
    assert len(rows_before) == 21
    assert [row.y for row in rows_before[:2]] == [110, 118]
    assert rows_before[-1].y == 270
    assert len(rows_after) == 4
    assert rows_after[0].y == 20


@pytest.mark.parametrize("count", [14, 20])
def test_invoice_totals_move_to_new_page_above_footer(inspection, reviewer, count):
    ledger = [make_defect(f"d-{i}", "10", ReviewStatus.ACCEPTED) for i in range(count)]
    document = project_invoice(_invoiced(inspection.evolve(defects=ledger), reviewer))

    instructions = list(document.instructions)
    page_break = next(i for i, item in enumerate(instructions) if isinstance(item, AddPage))
    total = next(item for item in instructions if isinstance(item, Text) and item.text == "Total:")
    footer = next(item for item in instructions if isinstance(item, Text) and item.text == "Payment Instructions:")

    assert document.page_count == 2
    assert instructions.index(total) > page_break
    assert total.y == 20 + 33
    assert total.y < footer.y
    assert all(item.y <= 276 for item in document.texts())


def test_invoice_totals_stay_with_rows_when_they_fit(inspection, reviewer):
    ledger = [make_defect(f"d-{i}", "10", ReviewStatus.ACCEPTED) for i in range(13)]
    document = project_invoice(_invoiced(inspection.evolve(defects=ledger), reviewer))
    total = next(item for item in document.texts() if item.text == "Total:")

    assert document.page_count == 1
    assert total.y == 110 + 13 * 8 + 33


def test_report_pages(inspection):
    document = project_report(inspection)

    assert document.filename == "report_MSCU1234565.pdf"
    assert document.page_count == 1 + len(inspection.images)
    images = [item for item in document.instructions if isinstance(item, Image)]
    assert [(i.source, i.x, i.y, i.width, i.height) for i in images] == [
        ("missing/front.jpg", 15, 30, 180, 100),
        ("missing/left.jpg", 15, 30, 180, 100),
    ]


def test_report_summary_without_quote(inspection):
    texts = _text_values(project_report(inspection))

    assert "Inspection Report" in texts
    assert "Date: 03/14/2025, 09:30:00 AM" in texts
    assert "Location: Cat Lai Terminal" in texts
    assert "Cost Estimate" not in texts


def test_report_summary_with_quote(inspection):
    texts = _text_values(project_report(ensure_quote(inspection)))

    assert "Cost Estimate" in texts
    assert "137,5 VND" in texts


def test_report_boxes_follow_bounding_boxes(inspection):
    document = project_report(inspection)
    boxes = [item for item in document.instructions if isinstance(item, Rect) and item.style == "S"]

    # d-2 is rejected and must not be boxed
    assert len(boxes) == 2
    first = boxes[0]
    assert (first.x, first.y, first.width, first.height) == pytest.approx((33, 50, 36, 25))
    second = boxes[1]
    assert (second.x, second.y, second.width, second.height) == pytest.approx((123, 40, 54, 30))


def test_report_labels_and_list_are_numbered_from_one(inspection):
    texts = _text_values(project_report(inspection))

    assert "1" in texts and "2" in texts
    assert "3" not in texts
    assert "Defects Found:" in texts
    assert "1. [Dent] HIGH - 100 VND" in texts
    assert "2. [Hole] LOW - 25 VND" in texts


def test_report_side_without_defects(inspection):
    document = project_report(inspection)
    notice = [item for item in document.texts() if item.text == "No defects detected on this side."]

    assert len(notice) == 1
    assert notice[0].y == 145


def test_report_localized_sides(inspection):
    texts = _text_values(project_report(inspection, lang="vi"))

    assert "Mat truoc" in texts
    assert "Ben trai" in texts
    assert "Bao cao giam dinh" in texts


def test_report_is_deterministic(inspection):
    assert project_report(inspection) == project_report(inspection)


def test_localizer_falls_back():
    localizer = Localizer()

    assert localizer.localize("fr", "total") == "Total:"
    assert localizer.localize("en", "unknown_key") == "unknown_key"
    assert localizer.localize_defect_code("vi", "UNLISTED") == "UNLISTED"
    assert localizer.localize("vi", "tax", rate="8") == "Thue (8%):"


@pytest.mark.parametrize("amount, expected", [
    ("137.50", "137,5 VND"),
    ("100", "100 VND"),
    ("1234567.25", "1.234.567,25 VND"),
    ("0", "0 VND"),
])
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


def test_percent_label():
    assert percent_label(Decimal("0.10")) == "10"
    assert percent_label(Decimal("0.085")) == "8.5"
