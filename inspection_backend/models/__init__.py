"""Inspection, defect and quote data models."""

from .inspection import (
    BoundingBox,
    ContainerImage,
    Defect,
    Inspection,
    InspectionStatus,
    InvoiceDetails,
    ManifestItem,
    Principal,
    Quote,
    QuoteStatus,
    ReviewStatus,
    Role,
    Severity,
)
from .money import format_amount, to_money

__all__ = [
    'BoundingBox',
    'ContainerImage',
    'Defect',
    'Inspection',
    'InspectionStatus',
    'InvoiceDetails',
    'ManifestItem',
    'Principal',
    'Quote',
    'QuoteStatus',
    'ReviewStatus',
    'Role',
    'Severity',
    'format_amount',
    'to_money',
]
