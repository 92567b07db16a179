"""Inspection report document projection."""

from decimal import Decimal
from typing import Optional

from ..ledger import defects_for_image
from ..localization import Localizer
from ..models.inspection import Inspection
from ..models.money import format_amount
from ..pricing import DEFAULT_TAX_RATE
from .instructions import A4_PORTRAIT, Document, PageGeometry
from .layout import DocumentBuilder, PageCursor, PAGE_TOP, percent_label, project_box

FONT = "times"
MARGIN = 15
IMAGE_HEIGHT = 100
ROW_STEP = 12

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
BOX_RED = (220, 38, 38)
PANEL_BORDER = (200, 200, 200)
PANEL_FILL = (245, 247, 250)
PANEL_TEXT = (30, 41, 59)
MUTED = (80, 80, 80)
NOTICE = (100, 100, 100)


def report_filename(container_number: str) -> str:
    return f"report_{container_number}.pdf"


def project_report(
    inspection: Inspection,
    localizer: Optional[Localizer] = None,
    lang: str = "en",
    currency: str = "VND",
    tax_rate: Decimal = DEFAULT_TAX_RATE,
    geometry: PageGeometry = A4_PORTRAIT
) -> Document:
    """
    Lay out the inspection report.

    Page 1 summarises the inspection and its quote. Each image then gets its
    own page with the non-rejected defects boxed over it, numbered from 1 in
    ledger order, followed by the defect list for that image.
    """
    localizer = localizer or Localizer()
    t = localizer.localize

    def money(amount) -> str:
        return format_amount(amount, currency)

    doc = DocumentBuilder(report_filename(inspection.container_number), geometry)
    page_width = doc.page_width
    content_width = page_width - MARGIN * 2

    # Page 1: summary
    doc.font(FONT, "bold", 22)
    doc.text(t(lang, "inspection_report"), MARGIN, 20)

    doc.font_size(16)
    doc.text(inspection.container_number, MARGIN, 30)

    doc.font(FONT, "normal", 10)
    doc.text(f"{t(lang, 'inspector')}: {inspection.inspector_id}", MARGIN, 45)
    doc.text(f"{t(lang, 'date')}: {localizer.format_datetime(lang, inspection.timestamp)}", MARGIN, 50)
    doc.text(f"{t(lang, 'location')}: {inspection.location}", MARGIN, 55)

    doc.font(FONT, "bold")
    doc.text(f"{t(lang, 'status')}: {inspection.status.value}", MARGIN, 65)

    quote = inspection.quote
    if quote is not None:
        y = 75
        doc.draw_color(PANEL_BORDER)
        doc.fill_color(PANEL_FILL)
        doc.rect(MARGIN, y, content_width, 40, style="F")

        doc.font_size(14)
        doc.text_color(PANEL_TEXT)
        doc.text(t(lang, "cost_estimate"), MARGIN + 5, y + 10)

        right = page_width - MARGIN - 5
        doc.font_size(10)
        doc.font(FONT, "normal")
        doc.text(t(lang, "subtotal"), MARGIN + 5, y + 20)
        doc.text(money(quote.subtotal), right, y + 20, align="right")

        doc.text(t(lang, "tax", rate=percent_label(tax_rate)), MARGIN + 5, y + 27)
        doc.text(money(quote.tax), right, y + 27, align="right")

        doc.font(FONT, "bold")
        doc.text(t(lang, "total"), MARGIN + 5, y + 35)
        doc.text(money(quote.total), right, y + 35, align="right")

        doc.text_color(BLACK)

    # One page per image
    for image in inspection.images:
        doc.add_page()
        y = PAGE_TOP

        doc.text_color(BLACK)
        doc.font(FONT, "bold", 14)
        doc.text(localizer.localize_side(lang, image.side), MARGIN, y)
        y += 10

        image_top = y
        doc.image(image.source, MARGIN, image_top, content_width, IMAGE_HEIGHT)

        side_defects = defects_for_image(inspection.defects, image.id)

        for index, defect in enumerate(side_defects, 1):
            box_x, box_y, box_w, box_h = project_box(
                defect.bounding_box, MARGIN, image_top, content_width, IMAGE_HEIGHT
            )
            doc.draw_color(BOX_RED)
            doc.line_width(0.5)
            doc.rect(box_x, box_y, box_w, box_h)

            doc.fill_color(BOX_RED)
            doc.rect(box_x, box_y - 4, 6, 4, style="F")

            doc.text_color(WHITE)
            doc.font_size(6)
            doc.text(str(index), box_x + 1, box_y - 1)

        cursor = PageCursor(doc, image_top + IMAGE_HEIGHT + 10)

        if side_defects:
            doc.text_color(BLACK)
            doc.font_size(10)
            doc.font(FONT, "bold")
            doc.text(t(lang, "defects_found"), MARGIN, cursor.y)
            cursor.skip(8)

            for index, defect in enumerate(side_defects, 1):
                doc.font(FONT, "normal", 10)
                code = localizer.localize_defect_code(lang, defect.code)
                label = f"{index}. [{code}] {defect.severity.value} - {money(defect.repair_cost)}"
                doc.text(label, MARGIN, cursor.y)

                doc.font_size(9)
                doc.text_color(MUTED)
                doc.text(f"   {defect.description}", MARGIN, cursor.y + 5)

                doc.text_color(BLACK)
                cursor.advance(ROW_STEP)
        else:
            doc.text_color(NOTICE)
            doc.font_size(10)
            doc.font(FONT, "italic")
            doc.text(t(lang, "no_defects"), MARGIN, cursor.y + 5)

    return doc.build()
