"""Invoice issuer: number, date and freeze an approved quote."""

import logging
import random
from datetime import datetime, timedelta
from typing import Optional, Protocol

from .models.inspection import Inspection, InvoiceDetails
from .orchestration.lifecycle import Trigger, mark_invoiced, next_status
from .utils.errors import PreconditionFailedError

logger = logging.getLogger(__name__)

DEFAULT_DUE_DAYS = 30
MAX_SEQUENCE = 9999


class InvoiceSequence(Protocol):
    def next(self, year: int) -> int:
        ...


class RandomInvoiceSequence:
    """
    Random 0-9999 suffix per invoice.

    Uniqueness is not checked, so two invoices in the same year can collide.
    Use ``RepositoryInvoiceSequence`` where that matters.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def next(self, year: int) -> int:
        return self.rng.randint(0, MAX_SEQUENCE)


class RepositoryInvoiceSequence:
    """Monotonic per-year counter kept by the inspection repository."""

    def __init__(self, repository):
        self.repository = repository

    def next(self, year: int) -> int:
        return self.repository.next_invoice_sequence(year)


def format_invoice_number(year: int, sequence: int) -> str:
    if not 0 <= sequence <= MAX_SEQUENCE:
        raise PreconditionFailedError.invoice_sequence_invalid(sequence)
    return f"INV-{year}-{sequence:04d}"


def issue_invoice(
    inspection: Inspection,
    customer_name: str,
    customer_address: str,
    now: datetime,
    sequence: Optional[InvoiceSequence] = None,
    due_days: int = DEFAULT_DUE_DAYS
) -> Inspection:
    """
    Issue an invoice for an approved quote.

    The due date is ``now`` plus ``due_days`` whole days, so an invoice issued
    on 31 January 2025 is due on 2 March 2025. Totals are carried forward
    unchanged. Nothing is persisted or rendered here.

    Args:
        inspection: Aggregate with an APPROVED quote
        customer_name: Billed customer, must not be blank
        customer_address: Billing address, must not be blank
        now: Issue date and time
        sequence: Invoice sequence allocator (random by default)
        due_days: Payment term in days

    Returns:
        New aggregate with an INVOICED quote

    Raises:
        PreconditionFailedError: If the quote is missing or not APPROVED,
            or a customer field is blank
    """
    quote = inspection.quote
    if quote is None:
        raise PreconditionFailedError.quote_missing(Trigger.INVOICE.value)
    next_status(quote.status, Trigger.INVOICE)

    customer_name = (customer_name or "").strip()
    customer_address = (customer_address or "").strip()
    missing = [
        label for label, value in (("customer name", customer_name), ("customer address", customer_address))
        if not value
    ]
    if missing:
        raise PreconditionFailedError.customer_details_missing(missing)

    sequence = sequence or RandomInvoiceSequence()
    invoice_number = format_invoice_number(now.year, sequence.next(now.year))

    details = InvoiceDetails(
        invoice_number=invoice_number,
        invoice_date=now,
        due_date=now + timedelta(days=due_days),
        customer_name=customer_name,
        customer_address=customer_address,
    )
    invoiced = mark_invoiced(inspection, details)

    logger.info(
        f"Issued {invoice_number} for {inspection.container_number} "
        f"(total={quote.total}, due={details.due_date.date().isoformat()})"
    )
    return invoiced
