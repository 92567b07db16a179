"""
Quote lifecycle state machine.

A quote moves DRAFT -> APPROVED -> INVOICED. Any change to the defect ledger
recomputes the totals and sends an approved quote back to DRAFT; once a quote
is invoiced the ledger is frozen.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from enum import Enum
from typing import Dict, Sequence, Tuple

from ..models.inspection import Defect, Inspection, InvoiceDetails, Principal, QuoteStatus
from ..pricing import DEFAULT_TAX_RATE, draft_quote
from ..utils.errors import PreconditionFailedError, UnauthorizedError

logger = logging.getLogger(__name__)


class Trigger(str, Enum):
    LEDGER_CHANGE = "change defects"
    APPROVE = "approve quote"
    INVOICE = "create invoice"


# (current status, trigger) -> next status; pairs not listed are rejected
TRANSITIONS: Dict[Tuple[QuoteStatus, Trigger], QuoteStatus] = {
    (QuoteStatus.DRAFT, Trigger.LEDGER_CHANGE): QuoteStatus.DRAFT,
    (QuoteStatus.APPROVED, Trigger.LEDGER_CHANGE): QuoteStatus.DRAFT,
    (QuoteStatus.DRAFT, Trigger.APPROVE): QuoteStatus.APPROVED,
    (QuoteStatus.APPROVED, Trigger.INVOICE): QuoteStatus.INVOICED,
}

REQUIRED_STATUS = {
    Trigger.APPROVE: QuoteStatus.DRAFT,
    Trigger.INVOICE: QuoteStatus.APPROVED,
}


def next_status(current: QuoteStatus, trigger: Trigger) -> QuoteStatus:
    """
    Resolve the status a trigger leads to.

    Raises:
        PreconditionFailedError: If the trigger is not allowed from ``current``
    """
    try:
        return TRANSITIONS[(current, trigger)]
    except KeyError:
        required = REQUIRED_STATUS.get(trigger)
        raise PreconditionFailedError.invalid_transition(
            operation=trigger.value,
            current_status=current.value,
            required_status=required.value if required else None,
        ) from None


def require_reviewer(principal: Principal, operation: str) -> None:
    """
    Capability check for quote transitions.

    Raises:
        UnauthorizedError: If the principal is neither reviewer nor admin
    """
    if not principal.is_reviewer:
        raise UnauthorizedError.reviewer_required(principal.name, principal.role.value, operation)


def ensure_quote(inspection: Inspection, tax_rate: Decimal = DEFAULT_TAX_RATE) -> Inspection:
    """Create the DRAFT quote the first time one is needed; otherwise return as is."""
    if inspection.quote is not None:
        return inspection
    logger.info(f"Deriving first quote for inspection {inspection.id}")
    return inspection.evolve(quote=draft_quote(inspection.defects, tax_rate))


def apply_ledger_change(
    inspection: Inspection,
    defects: Sequence[Defect],
    tax_rate: Decimal = DEFAULT_TAX_RATE
) -> Inspection:
    """
    Replace the ledger and recompute the quote.

    An approved quote reverts to DRAFT and loses its approver, even when the
    change left every value as it was.

    Args:
        inspection: Current aggregate
        defects: New defect ledger
        tax_rate: Tax rate for the recomputed quote

    Returns:
        New aggregate with the new ledger and a DRAFT quote

    Raises:
        PreconditionFailedError: If the quote has already been invoiced
    """
    quote = inspection.quote
    if quote is not None:
        if quote.status == QuoteStatus.INVOICED:
            number = quote.invoice_details.invoice_number if quote.invoice_details else "?"
            raise PreconditionFailedError.quote_frozen(number)
        next_status(quote.status, Trigger.LEDGER_CHANGE)
        if quote.status == QuoteStatus.APPROVED:
            logger.info(f"Approval by {quote.approved_by} invalidated by ledger change on {inspection.id}")

    defects = list(defects)
    return inspection.evolve(defects=defects, quote=draft_quote(defects, tax_rate))


def approve(inspection: Inspection, principal: Principal) -> Inspection:
    """
    Approve the current DRAFT quote.

    Totals are kept exactly as they are; the principal is recorded as approver.

    Raises:
        UnauthorizedError: If the principal is not a reviewer
        PreconditionFailedError: If there is no quote or it is not DRAFT
    """
    require_reviewer(principal, Trigger.APPROVE.value)
    quote = inspection.quote
    if quote is None:
        raise PreconditionFailedError.quote_missing(Trigger.APPROVE.value)

    status = next_status(quote.status, Trigger.APPROVE)
    approved = replace(quote, status=status, approved_by=principal.name)
    logger.info(f"Quote for {inspection.id} approved by {principal.name} (total={quote.total})")
    return inspection.evolve(quote=approved)


def mark_invoiced(inspection: Inspection, details: InvoiceDetails) -> Inspection:
    """
    Move an APPROVED quote to INVOICED with the given invoice details.

    Totals and approver are carried forward unchanged.

    Raises:
        PreconditionFailedError: If there is no quote or it is not APPROVED
    """
    quote = inspection.quote
    if quote is None:
        raise PreconditionFailedError.quote_missing(Trigger.INVOICE.value)

    status = next_status(quote.status, Trigger.INVOICE)
    invoiced = replace(quote, status=status, invoice_details=details)
    return inspection.evolve(quote=invoiced)
