"""Invoice and inspection report projections plus the PDF renderer."""

from .instructions import A4_PORTRAIT, Document, PageGeometry
from .invoice import invoice_filename, project_invoice
from .renderer import ReportLabRenderer
from .report import project_report, report_filename

__all__ = [
    'A4_PORTRAIT',
    'Document',
    'PageGeometry',
    'ReportLabRenderer',
    'invoice_filename',
    'project_invoice',
    'project_report',
    'report_filename',
]
