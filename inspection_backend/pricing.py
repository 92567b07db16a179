"""Quote engine: derive subtotal, tax and total from the defect ledger."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from .models.inspection import Defect, Quote, QuoteStatus
from .models.money import ZERO, round2

DEFAULT_TAX_RATE = Decimal("0.10")


@dataclass(frozen=True)
class QuoteTotals:
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def derive_quote(defects: Iterable[Defect], tax_rate: Decimal = DEFAULT_TAX_RATE) -> QuoteTotals:
    """
    Compute quote totals for a defect ledger.

    Every defect that is not rejected is billable, whether it was explicitly
    accepted or is still pending review. Tax is rounded half-up to two places.

    Args:
        defects: Defect ledger
        tax_rate: Tax rate as a fraction of the subtotal

    Returns:
        QuoteTotals with subtotal, tax and total
    """
    subtotal = sum((d.repair_cost or ZERO for d in defects if d.is_billable), ZERO)
    tax = round2(subtotal * Decimal(tax_rate))
    return QuoteTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def draft_quote(defects: Iterable[Defect], tax_rate: Decimal = DEFAULT_TAX_RATE) -> Quote:
    """Build a DRAFT quote from the current ledger."""
    totals = derive_quote(defects, tax_rate)
    return Quote(
        subtotal=totals.subtotal,
        tax=totals.tax,
        total=totals.total,
        status=QuoteStatus.DRAFT,
    )
