"""Inspection aggregate data models."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

from .money import ZERO, to_money


class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class ReviewStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class QuoteStatus(str, Enum):
    DRAFT = "DRAFT"
    APPROVED = "APPROVED"
    INVOICED = "INVOICED"


class InspectionStatus(str, Enum):
    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    COMPLETED = "COMPLETED"


class Role(str, Enum):
    INSPECTOR = "INSPECTOR"
    REVIEWER = "REVIEWER"
    ADMIN = "ADMIN"
    VIEWER = "VIEWER"


@dataclass(frozen=True)
class Principal:
    """
    A caller of review operations.

    Attributes:
        name: Display name, recorded as approver on approval
        role: Role of the caller; REVIEWER and ADMIN may transition quotes
    """
    name: str
    role: Role

    @property
    def is_reviewer(self) -> bool:
        return self.role in (Role.REVIEWER, Role.ADMIN)


@dataclass(frozen=True)
class BoundingBox:
    """
    Defect extent as percentages (0-100) of the image width and height.

    Attributes:
        xmin: Left edge
        ymin: Top edge
        xmax: Right edge
        ymax: Bottom edge
    """
    xmin: float
    ymin: float
    xmax: float
    ymax: float

    def __post_init__(self):
        if not (0 <= self.xmin < self.xmax <= 100):
            raise ValueError(f"invalid horizontal extent {self.xmin}..{self.xmax}")
        if not (0 <= self.ymin < self.ymax <= 100):
            raise ValueError(f"invalid vertical extent {self.ymin}..{self.ymax}")

    def to_dict(self) -> Dict[str, float]:
        return {"xmin": self.xmin, "ymin": self.ymin, "xmax": self.xmax, "ymax": self.ymax}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BoundingBox":
        return cls(
            xmin=float(data["xmin"]),
            ymin=float(data["ymin"]),
            xmax=float(data["xmax"]),
            ymax=float(data["ymax"]),
        )


@dataclass(frozen=True)
class Defect:
    """
    One detected or reviewed anomaly on one image.

    Attributes:
        id: Defect identifier
        image_id: Identifier of the image the defect was found on
        bounding_box: Normalized extent on that image
        code: Defect category code (e.g. "DENT", "RUST")
        severity: LOW, MEDIUM or HIGH
        description: Free-text description from detection or review
        status: Review decision; defects are never deleted, only rejected
        repair_cost: Estimated repair cost, zero until set
    """
    id: str
    image_id: str
    bounding_box: BoundingBox
    code: str
    severity: Severity
    description: str = ""
    status: ReviewStatus = ReviewStatus.PENDING
    repair_cost: Decimal = ZERO

    @property
    def is_billable(self) -> bool:
        return self.status != ReviewStatus.REJECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "image_id": self.image_id,
            "bounding_box": self.bounding_box.to_dict(),
            "code": self.code,
            "severity": self.severity.value,
            "description": self.description,
            "status": self.status.value,
            "repair_cost": str(self.repair_cost),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Defect":
        return cls(
            id=data["id"],
            image_id=data["image_id"],
            bounding_box=BoundingBox.from_dict(data["bounding_box"]),
            code=data["code"],
            severity=Severity(data["severity"]),
            description=data.get("description", ""),
            status=ReviewStatus(data.get("status", ReviewStatus.PENDING.value)),
            repair_cost=to_money(data.get("repair_cost")),
        )


@dataclass(frozen=True)
class ContainerImage:
    """
    One photographed side of the container.

    Attributes:
        id: Image identifier
        side: Side label (e.g. "FRONT", "LEFT", "ROOF")
        source: File path or ``data:`` URI with the pixels
    """
    id: str
    side: str
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "side": self.side, "source": self.source}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContainerImage":
        return cls(id=data["id"], side=data["side"], source=data["source"])


@dataclass(frozen=True)
class InvoiceDetails:
    """
    Billing details frozen into a quote when it is invoiced.

    Attributes:
        invoice_number: ``INV-<year>-<4-digit sequence>``
        invoice_date: Issue date and time
        due_date: Issue date plus the payment term
        customer_name: Billed customer
        customer_address: Billing address, may span several lines
    """
    invoice_number: str
    invoice_date: datetime
    due_date: datetime
    customer_name: str
    customer_address: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "invoice_number": self.invoice_number,
            "invoice_date": self.invoice_date.isoformat(),
            "due_date": self.due_date.isoformat(),
            "customer_name": self.customer_name,
            "customer_address": self.customer_address,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceDetails":
        return cls(
            invoice_number=data["invoice_number"],
            invoice_date=datetime.fromisoformat(data["invoice_date"]),
            due_date=datetime.fromisoformat(data["due_date"]),
            customer_name=data["customer_name"],
            customer_address=data["customer_address"],
        )


@dataclass(frozen=True)
class Quote:
    """
    Financial summary derived from the defect ledger.

    Attributes:
        subtotal: Sum of repair costs of non-rejected defects
        tax: Tax on the subtotal
        total: Subtotal plus tax
        status: DRAFT, APPROVED or INVOICED
        approved_by: Approver name, set only while approved or invoiced
        invoice_details: Set only once invoiced
    """
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    status: QuoteStatus = QuoteStatus.DRAFT
    approved_by: Optional[str] = None
    invoice_details: Optional[InvoiceDetails] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subtotal": str(self.subtotal),
            "tax": str(self.tax),
            "total": str(self.total),
            "status": self.status.value,
            "approved_by": self.approved_by,
            "invoice_details": self.invoice_details.to_dict() if self.invoice_details else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quote":
        details = data.get("invoice_details")
        return cls(
            subtotal=to_money(data["subtotal"]),
            tax=to_money(data["tax"]),
            total=to_money(data["total"]),
            status=QuoteStatus(data.get("status", QuoteStatus.DRAFT.value)),
            approved_by=data.get("approved_by"),
            invoice_details=InvoiceDetails.from_dict(details) if details else None,
        )


@dataclass(frozen=True)
class Inspection:
    """
    Aggregate root for one container inspection.

    Persisted as a single unit after every mutation. Instances are never
    changed in place; operations return a new instance via ``evolve``.
    """
    id: str
    container_number: str
    inspector_id: str
    timestamp: datetime
    location: str
    status: InspectionStatus = InspectionStatus.PENDING
    images: List[ContainerImage] = field(default_factory=list)
    defects: List[Defect] = field(default_factory=list)
    quote: Optional[Quote] = None

    def evolve(self, **changes: Any) -> "Inspection":
        return replace(self, **changes)

    def image_by_id(self, image_id: str) -> Optional[ContainerImage]:
        for image in self.images:
            if image.id == image_id:
                return image
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "container_number": self.container_number,
            "inspector_id": self.inspector_id,
            "timestamp": self.timestamp.isoformat(),
            "location": self.location,
            "status": self.status.value,
            "images": [image.to_dict() for image in self.images],
            "defects": [defect.to_dict() for defect in self.defects],
            "quote": self.quote.to_dict() if self.quote else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Inspection":
        quote = data.get("quote")
        return cls(
            id=data["id"],
            container_number=data["container_number"],
            inspector_id=data["inspector_id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            location=data.get("location", ""),
            status=InspectionStatus(data.get("status", InspectionStatus.PENDING.value)),
            images=[ContainerImage.from_dict(item) for item in data.get("images", [])],
            defects=[Defect.from_dict(item) for item in data.get("defects", [])],
            quote=Quote.from_dict(quote) if quote else None,
        )


@dataclass(frozen=True)
class ManifestItem:
    """A container on the shipping manifest awaiting inspection review."""
    container_number: str
    inspection_id: Optional[str] = None
    status: InspectionStatus = InspectionStatus.PENDING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "container_number": self.container_number,
            "inspection_id": self.inspection_id,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManifestItem":
        return cls(
            container_number=data["container_number"],
            inspection_id=data.get("inspection_id"),
            status=InspectionStatus(data.get("status", InspectionStatus.PENDING.value)),
        )
