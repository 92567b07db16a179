"""
Review service: the entry point the UI layer calls.

Each operation loads the inspection, applies one change through the ledger,
quote engine and lifecycle, and stores the result as a single unit. Mutations
on the same inspection are serialized; a failed operation stores nothing.
"""

from __future__ import annotations
import logging
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

from .documents import Document, ReportLabRenderer, project_invoice, project_report
from .invoicing import InvoiceSequence, RandomInvoiceSequence, RepositoryInvoiceSequence, issue_invoice
from .ledger import set_repair_cost, set_review_status
from .localization import Localizer
from .models.inspection import Inspection, Principal, ReviewStatus
from .orchestration.lifecycle import apply_ledger_change, approve, ensure_quote, require_reviewer
from .storage.repository import InspectionRepository, JsonFileInspectionRepository
from .utils.config import Config
from .utils.errors import InspectionReviewError
from .utils.logging import clear_context, get_context, set_context

logger = logging.getLogger(__name__)


class ReviewService:
    """
    Orchestrates defect review, quote approval, invoicing and document export.

    Attributes:
        repository: Inspection storage
        config: Pricing, invoicing, company and document settings
        localizer: Translation lookup for documents
        renderer: PDF renderer used by the export operations
        sequence: Invoice sequence allocator
        clock: Source of the current time for invoicing
    """

    def __init__(
        self,
        repository: InspectionRepository,
        config: Optional[Config] = None,
        localizer: Optional[Localizer] = None,
        renderer: Optional[ReportLabRenderer] = None,
        sequence: Optional[InvoiceSequence] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        self.repository = repository
        self.config = config or Config.default()
        self.localizer = localizer or Localizer()
        self.renderer = renderer or ReportLabRenderer(
            output_dir=self.config.storage.output_dir,
            invariant=self.config.documents.invariant
        )
        if sequence is None:
            if self.config.invoicing.sequence == "counter":
                sequence = RepositoryInvoiceSequence(repository)
            else:
                sequence = RandomInvoiceSequence()
        self.sequence = sequence
        self.clock = clock

        self._locks: Dict[str, List[Any]] = {}
        self._locks_guard = threading.Lock()

        logger.info(
            f"Initialized ReviewService: sequence={type(self.sequence).__name__}, "
            f"tax_rate={self.config.pricing.tax_rate}"
        )

    @classmethod
    def from_config(cls, config: Config) -> "ReviewService":
        """Build a service backed by the JSON file repository from ``config``."""
        repository = JsonFileInspectionRepository(config.storage.data_dir)
        return cls(repository=repository, config=config)

    @property
    def tax_rate(self):
        return self.config.pricing.tax_rate

    # Serialization

    @contextmanager
    def _locked(self, inspection_id: str) -> Iterator[None]:
        # registry entry is [lock, number of callers using it]; dropped when unused
        with self._locks_guard:
            entry = self._locks.setdefault(inspection_id, [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._locks_guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[inspection_id]

    @contextmanager
    def _review_context(self, inspection_id: str, operation: str) -> Iterator[None]:
        previous = get_context()
        set_context(inspection_id=inspection_id, component=operation)
        try:
            yield
        finally:
            clear_context()
            set_context(**previous)

    def _mutate(
        self,
        inspection_id: str,
        operation: str,
        change: Callable[[Inspection], Inspection]
    ) -> Inspection:
        with self._locked(inspection_id), self._review_context(inspection_id, operation):
            current = self.repository.get(inspection_id)
            try:
                updated = change(current)
            except InspectionReviewError as e:
                logger.warning(f"{operation} rejected for {inspection_id}: {e}", extra={"error": e.to_dict()})
                raise
            self.repository.put(updated)
            logger.info(
                f"{operation} applied to {inspection_id}: quote="
                f"{updated.quote.status.value if updated.quote else 'none'}"
            )
            return updated

    # Review operations

    def open_review(self, inspection_id: str) -> Inspection:
        """
        Load an inspection for review, deriving its first DRAFT quote if needed.

        Raises:
            NotFoundError: If the inspection does not exist
        """
        inspection = self.repository.get(inspection_id)
        if inspection.quote is not None:
            return inspection
        return self._mutate(inspection_id, "derive quote", lambda current: ensure_quote(current, self.tax_rate))

    def review_defect(
        self,
        inspection_id: str,
        defect_id: str,
        status: ReviewStatus,
        principal: Principal
    ) -> Inspection:
        """
        Accept or reject a defect and recompute the quote.

        Raises:
            UnauthorizedError: If the principal is not a reviewer
            NotFoundError: If the inspection or defect does not exist
            PreconditionFailedError: If the quote is already invoiced
        """
        require_reviewer(principal, "review defects")
        status = ReviewStatus(status)

        def change(current: Inspection) -> Inspection:
            defects = set_review_status(current.defects, defect_id, status)
            return apply_ledger_change(current, defects, self.tax_rate)

        return self._mutate(inspection_id, "review defect", change)

    def edit_repair_cost(
        self,
        inspection_id: str,
        defect_id: str,
        amount: Any,
        principal: Principal
    ) -> Inspection:
        """
        Set a defect's repair cost and recompute the quote.

        Raises:
            UnauthorizedError: If the principal is not a reviewer
            NotFoundError: If the inspection or defect does not exist
            InvalidCostError: If the amount is negative or not a finite number
            PreconditionFailedError: If the quote is already invoiced
        """
        require_reviewer(principal, "edit repair costs")

        def change(current: Inspection) -> Inspection:
            defects = set_repair_cost(current.defects, defect_id, amount)
            return apply_ledger_change(current, defects, self.tax_rate)

        return self._mutate(inspection_id, "edit repair cost", change)

    def approve_quote(self, inspection_id: str, principal: Principal) -> Inspection:
        """
        Approve the DRAFT quote.

        Raises:
            UnauthorizedError: If the principal is not a reviewer
            PreconditionFailedError: If there is no DRAFT quote
        """
        require_reviewer(principal, "approve quote")
        return self._mutate(inspection_id, "approve quote", lambda current: approve(current, principal))

    def create_invoice(
        self,
        inspection_id: str,
        principal: Principal,
        customer_name: str,
        customer_address: str,
        now: Optional[datetime] = None
    ) -> Inspection:
        """
        Invoice the APPROVED quote.

        Raises:
            UnauthorizedError: If the principal is not a reviewer
            PreconditionFailedError: If the quote is not APPROVED or a customer field is blank
        """
        require_reviewer(principal, "create invoice")

        def change(current: Inspection) -> Inspection:
            return issue_invoice(
                current,
                customer_name,
                customer_address,
                now=now or self.clock(),
                sequence=self.sequence,
                due_days=self.config.invoicing.due_days,
            )

        return self._mutate(inspection_id, "create invoice", change)

    def next_pending_container(self) -> Optional[str]:
        item = self.repository.find_next_pending()
        return item.container_number if item else None

    # Documents

    def invoice_document(self, inspection_id: str, lang: Optional[str] = None) -> Document:
        """
        Project the invoice of an invoiced inspection.

        Raises:
            NotFoundError: If the inspection does not exist
            PreconditionFailedError: If the quote has not been invoiced
        """
        inspection = self.repository.get(inspection_id)
        return project_invoice(
            inspection,
            localizer=self.localizer,
            company=self.config.company,
            lang=lang or self.config.documents.language,
            currency=self.config.pricing.currency,
            tax_rate=self.tax_rate,
        )

    def report_document(self, inspection_id: str, lang: Optional[str] = None) -> Document:
        """Project the inspection report; works in any quote state."""
        inspection = self.repository.get(inspection_id)
        return project_report(
            inspection,
            localizer=self.localizer,
            lang=lang or self.config.documents.language,
            currency=self.config.pricing.currency,
            tax_rate=self.tax_rate,
        )

    def export_invoice(self, inspection_id: str, lang: Optional[str] = None) -> Path:
        """Render the invoice to ``<output_dir>/<invoice number>.pdf``."""
        return self.renderer.render(self.invoice_document(inspection_id, lang))

    def export_report(self, inspection_id: str, lang: Optional[str] = None) -> Path:
        """Render the report to ``<output_dir>/report_<container number>.pdf``."""
        return self.renderer.render(self.report_document(inspection_id, lang))
