"""Invoice document projection."""

from decimal import Decimal
from typing import Optional

from ..ledger import billable_defects
from ..localization import Localizer
from ..models.inspection import Inspection, QuoteStatus
from ..models.money import format_amount
from ..pricing import DEFAULT_TAX_RATE
from ..utils.config import CompanyConfig
from ..utils.errors import PreconditionFailedError
from .instructions import A4_PORTRAIT, Document, PageGeometry
from .layout import DocumentBuilder, PageCursor, percent_label

FONT = "times"
HEADER_BAND = (240, 240, 240)
ROW_STEP = 8
FOOTER_Y = 260
# rule line to total baseline
TOTALS_HEIGHT = 33


def invoice_filename(invoice_number: str) -> str:
    return f"{invoice_number}.pdf"


def line_item_description(inspection: Inspection, defect, localizer: Localizer, lang: str) -> str:
    image = inspection.image_by_id(defect.image_id)
    side = localizer.localize_side(lang, image.side) if image else ""
    code = localizer.localize_defect_code(lang, defect.code)
    return f"{localizer.localize(lang, 'repair')}: {code} - {defect.severity.value} ({side})"


def project_invoice(
    inspection: Inspection,
    localizer: Optional[Localizer] = None,
    company: Optional[CompanyConfig] = None,
    lang: str = "en",
    currency: str = "VND",
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    geometry: PageGeometry = A4_PORTRAIT
) -> Document:
    """
    Lay out the invoice for an invoiced inspection.

    Line items are the non-rejected defects in ledger order, priced at their
    repair cost. Totals come from the frozen quote, not from the ledger.

    Raises:
        PreconditionFailedError: If the quote has not been invoiced
    """
    quote = inspection.quote
    if quote is None:
        raise PreconditionFailedError.quote_missing("render invoice")
    if quote.status != QuoteStatus.INVOICED or quote.invoice_details is None:
        raise PreconditionFailedError.invalid_transition(
            "render invoice", quote.status.value, QuoteStatus.INVOICED.value
        )

    localizer = localizer or Localizer()
    company = company or CompanyConfig()
    details = quote.invoice_details
    t = localizer.localize

    def money(amount) -> str:
        return format_amount(amount, currency)

    doc = DocumentBuilder(invoice_filename(details.invoice_number), geometry)

    # Header
    doc.font(FONT, "bold", 24)
    doc.text(t(lang, "invoice"), 160, 20, align="right")

    doc.font_size(14)
    doc.text(company.name, 15, 20)
    doc.font(FONT, "normal", 10)
    y = 26
    for address_line in company.address_lines:
        doc.text(address_line, 15, y)
        y += 5
    doc.text(f"{t(lang, 'tax_id')}: {company.tax_id}", 15, y)

    # Invoice meta
    doc.font(FONT, "bold")
    doc.text(t(lang, "invoice_number"), 140, 35)
    doc.text(t(lang, "invoice_date"), 140, 40)
    doc.text(t(lang, "due_date"), 140, 45)

    doc.font(FONT, "normal")
    doc.text(details.invoice_number, 170, 35)
    doc.text(localizer.format_date(lang, details.invoice_date), 170, 40)
    doc.text(localizer.format_date(lang, details.due_date), 170, 45)

    # Bill to
    doc.font(FONT, "bold")
    doc.text(t(lang, "bill_to"), 15, 55)
    doc.font(FONT, "normal")
    doc.text(details.customer_name, 15, 62)
    doc.text(details.customer_address, 15, 68, max_width=80)

    doc.font(FONT, "bold")
    doc.text(f"{t(lang, 'container_no')}: {inspection.container_number}", 15, 90)

    # Table header
    cursor = PageCursor(doc, 100)
    doc.fill_color(HEADER_BAND)
    doc.rect(15, cursor.y - 6, 180, 8, style="F")
    doc.font(FONT, "bold")
    doc.text(t(lang, "description"), 20, cursor.y)
    doc.text(t(lang, "price"), 185, cursor.y, align="right")

    cursor.skip(10)
    doc.font(FONT, "normal")

    for defect in billable_defects(inspection.defects):
        doc.text(line_item_description(inspection, defect, localizer, lang), 20, cursor.y)
        doc.text(money(defect.repair_cost), 185, cursor.y, align="right")
        cursor.advance(ROW_STEP)

    # totals stay together and clear of the footer
    cursor.ensure(TOTALS_HEIGHT, FOOTER_Y - 10)
    cursor.skip(5)
    doc.line(15, cursor.y, 195, cursor.y)
    cursor.skip(10)

    # Totals
    doc.font(FONT, "normal")
    doc.text(t(lang, "subtotal"), 140, cursor.y)
    doc.text(money(quote.subtotal), 185, cursor.y, align="right")

    cursor.skip(8)
    doc.text(t(lang, "tax", rate=percent_label(tax_rate)), 140, cursor.y)
    doc.text(money(quote.tax), 185, cursor.y, align="right")

    cursor.skip(10)
    doc.font(FONT, "bold", 12)
    doc.text(t(lang, "total"), 140, cursor.y)
    doc.text(money(quote.total), 185, cursor.y, align="right")

    # Footer
    doc.font_size(10)
    doc.font(FONT, "bold")
    doc.text(t(lang, "payment_instructions"), 15, FOOTER_Y)
    doc.font(FONT, "normal")
    doc.text(f"{t(lang, 'bank')}: {company.bank_name}", 15, FOOTER_Y + 6)
    doc.text(f"{t(lang, 'account_name')}: {company.account_name}", 15, FOOTER_Y + 11)
    doc.text(f"{t(lang, 'account_number')}: {company.account_number}", 15, FOOTER_Y + 16)

    return doc.build()
