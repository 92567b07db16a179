"""Container inspection review: defect ledger, quote lifecycle, invoicing and documents."""

from .ledger import set_repair_cost, set_review_status
from .pricing import derive_quote
from .invoicing import issue_invoice
from .service import ReviewService

__all__ = [
    'ReviewService',
    'derive_quote',
    'issue_invoice',
    'set_repair_cost',
    'set_review_status',
]
