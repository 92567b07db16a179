"""Error handling utilities for the inspection review system."""

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


class ErrorType(Enum):
    """Enumeration of error types in the inspection review system."""

    # Lookup Errors
    INSPECTION_NOT_FOUND = "INSPECTION_NOT_FOUND"
    DEFECT_NOT_FOUND = "DEFECT_NOT_FOUND"

    # Workflow Errors
    QUOTE_MISSING = "QUOTE_MISSING"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    CUSTOMER_DETAILS_MISSING = "CUSTOMER_DETAILS_MISSING"
    QUOTE_FROZEN = "QUOTE_FROZEN"
    INVOICE_SEQUENCE_INVALID = "INVOICE_SEQUENCE_INVALID"

    # Ledger Errors
    INVALID_COST = "INVALID_COST"

    # Capability Errors
    UNAUTHORIZED = "UNAUTHORIZED"

    # Configuration Errors
    CONFIG_MISSING = "CONFIG_MISSING"
    CONFIG_INVALID = "CONFIG_INVALID"

    # General Errors
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


@dataclass
class ErrorContext:
    """
    Context information for errors in the inspection review system.

    Attributes:
        error_type: Type of error from ErrorType enum
        message: Human-readable error message
        details: Optional additional error details
        original_exception: Optional original exception that caused this error
    """

    error_type: ErrorType
    message: str
    details: Optional[Dict[str, Any]] = None
    original_exception: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error context to dictionary for logging/serialization.

        Returns:
            Dictionary representation of error context
        """
        return {
            "error_type": self.error_type.value,
            "message": self.message,
            "details": self.details or {},
            "original_exception": str(self.original_exception) if self.original_exception else None
        }


class InspectionReviewError(Exception):
    """
    Base exception for all inspection review errors.

    Every failure of a review operation is raised as a subclass of this
    exception so callers can tell a rejected operation apart from a bug.

    Attributes:
        context: ErrorContext with detailed error information
    """

    def __init__(self, context: ErrorContext):
        """
        Initialize inspection review error.

        Args:
            context: ErrorContext with error details
        """
        self.context = context
        super().__init__(context.message)

    def __str__(self) -> str:
        """String representation of the error."""
        return f"{self.context.error_type.value}: {self.context.message}"

    @property
    def error_type(self) -> ErrorType:
        return self.context.error_type

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of error
        """
        return self.context.to_dict()


class NotFoundError(InspectionReviewError):
    """Exception for operations on an inspection or defect id that does not exist."""

    @classmethod
    def inspection(cls, inspection_id: str) -> "NotFoundError":
        """
        Create error for a missing inspection.

        Args:
            inspection_id: Identifier that was looked up

        Returns:
            NotFoundError instance
        """
        context = ErrorContext(
            error_type=ErrorType.INSPECTION_NOT_FOUND,
            message=f"Inspection '{inspection_id}' not found",
            details={"inspection_id": inspection_id}
        )
        return cls(context)

    @classmethod
    def defect(cls, defect_id: str) -> "NotFoundError":
        """
        Create error for a missing defect.

        Args:
            defect_id: Identifier that was looked up

        Returns:
            NotFoundError instance
        """
        context = ErrorContext(
            error_type=ErrorType.DEFECT_NOT_FOUND,
            message=f"Defect '{defect_id}' not found",
            details={"defect_id": defect_id}
        )
        return cls(context)


class PreconditionFailedError(InspectionReviewError):
    """Exception for workflow operations attempted in the wrong state."""

    @classmethod
    def quote_missing(cls, operation: str) -> "PreconditionFailedError":
        """
        Create error for an operation that needs a quote when none exists.

        Args:
            operation: Name of the attempted operation

        Returns:
            PreconditionFailedError instance
        """
        context = ErrorContext(
            error_type=ErrorType.QUOTE_MISSING,
            message=f"Cannot {operation}: inspection has no quote",
            details={"operation": operation}
        )
        return cls(context)

    @classmethod
    def invalid_transition(
        cls,
        operation: str,
        current_status: str,
        required_status: Optional[str] = None
    ) -> "PreconditionFailedError":
        """
        Create error for a transition not allowed from the current status.

        Args:
            operation: Name of the attempted operation
            current_status: Status the quote is in
            required_status: Status the operation needs, if any

        Returns:
            PreconditionFailedError instance
        """
        message = f"Cannot {operation} while quote is {current_status}"
        if required_status:
            message += f" (requires {required_status})"
        context = ErrorContext(
            error_type=ErrorType.INVALID_TRANSITION,
            message=message,
            details={
                "operation": operation,
                "current_status": current_status,
                "required_status": required_status
            }
        )
        return cls(context)

    @classmethod
    def quote_frozen(cls, invoice_number: str) -> "PreconditionFailedError":
        """
        Create error for a ledger mutation after the quote was invoiced.

        Args:
            invoice_number: Number of the issued invoice

        Returns:
            PreconditionFailedError instance
        """
        context = ErrorContext(
            error_type=ErrorType.QUOTE_FROZEN,
            message=f"Defects cannot change after invoice {invoice_number} was issued",
            details={"invoice_number": invoice_number}
        )
        return cls(context)

    @classmethod
    def customer_details_missing(cls, missing_fields: list) -> "PreconditionFailedError":
        """
        Create error for invoicing without complete customer details.

        Args:
            missing_fields: Names of empty customer fields

        Returns:
            PreconditionFailedError instance
        """
        context = ErrorContext(
            error_type=ErrorType.CUSTOMER_DETAILS_MISSING,
            message=f"Customer details incomplete: {', '.join(missing_fields)} required",
            details={"missing_fields": list(missing_fields)}
        )
        return cls(context)

    @classmethod
    def invoice_sequence_invalid(cls, sequence: int) -> "PreconditionFailedError":
        """
        Create error for an invoice sequence that does not fit four digits.

        Args:
            sequence: Sequence value that was allocated

        Returns:
            PreconditionFailedError instance
        """
        context = ErrorContext(
            error_type=ErrorType.INVOICE_SEQUENCE_INVALID,
            message=f"Invoice sequence {sequence} is outside 0-9999",
            details={"sequence": sequence}
        )
        return cls(context)


class InvalidCostError(InspectionReviewError):
    """Exception for non-numeric, non-finite or negative repair costs."""

    @classmethod
    def for_amount(
        cls,
        defect_id: str,
        amount: Any,
        reason: str,
        error: Optional[Exception] = None
    ) -> "InvalidCostError":
        """
        Create error for a rejected repair cost.

        Args:
            defect_id: Defect the cost was meant for
            amount: Rejected input value
            reason: Why the amount was rejected
            error: Optional original conversion exception

        Returns:
            InvalidCostError instance
        """
        context = ErrorContext(
            error_type=ErrorType.INVALID_COST,
            message=f"Invalid repair cost {amount!r} for defect '{defect_id}': {reason}",
            details={"defect_id": defect_id, "amount": repr(amount), "reason": reason},
            original_exception=error
        )
        return cls(context)


class UnauthorizedError(InspectionReviewError):
    """Exception for principals without reviewer capability."""

    @classmethod
    def reviewer_required(cls, principal_name: str, role: str, operation: str) -> "UnauthorizedError":
        """
        Create error for an operation attempted without reviewer capability.

        Args:
            principal_name: Name of the calling principal
            role: Role of the calling principal
            operation: Name of the attempted operation

        Returns:
            UnauthorizedError instance
        """
        context = ErrorContext(
            error_type=ErrorType.UNAUTHORIZED,
            message=f"'{principal_name}' ({role}) is not allowed to {operation}",
            details={"principal": principal_name, "role": role, "operation": operation}
        )
        return cls(context)
