"""Utility modules for configuration, logging, and error handling."""

from .errors import (
    ErrorType,
    ErrorContext,
    InspectionReviewError,
    NotFoundError,
    PreconditionFailedError,
    InvalidCostError,
    UnauthorizedError,
)

__all__ = [
    'ErrorType',
    'ErrorContext',
    'InspectionReviewError',
    'NotFoundError',
    'PreconditionFailedError',
    'InvalidCostError',
    'UnauthorizedError',
]
