"""Shared fixtures for the inspection review tests."""

from datetime import datetime
from decimal import Decimal

import pytest

from inspection_backend.models.inspection import (
    BoundingBox,
    ContainerImage,
    Defect,
    Inspection,
    InspectionStatus,
    ManifestItem,
    Principal,
    ReviewStatus,
    Role,
    Severity,
)
from inspection_backend.service import ReviewService
from inspection_backend.documents.renderer import ReportLabRenderer
from inspection_backend.storage.repository import InMemoryInspectionRepository
from inspection_backend.utils.config import Config


class FixedSequence:
    """Invoice sequence that always returns the same number."""

    def __init__(self, value: int = 42):
        self.value = value
        self.calls = 0

    def next(self, year: int) -> int:
        self.calls += 1
        return self.value


def make_defect(
    defect_id,
    cost="0",
    status=ReviewStatus.PENDING,
    image_id="img-front",
    box=(10, 20, 30, 45),
    code="DENT",
    severity=Severity.HIGH,
    description="Dent on panel",
):
    return Defect(
        id=defect_id,
        image_id=image_id,
        bounding_box=BoundingBox(*box),
        code=code,
        severity=severity,
        description=description,
        status=status,
        repair_cost=Decimal(cost).quantize(Decimal("0.01")),
    )


@pytest.fixture
def defects():
    return [
        make_defect("d-1", "100", ReviewStatus.ACCEPTED),
        make_defect("d-2", "50", ReviewStatus.REJECTED, box=(50, 50, 70, 70), code="RUST"),
        make_defect("d-3", "25", ReviewStatus.PENDING, box=(60, 10, 90, 40), code="HOLE", severity=Severity.LOW),
    ]


@pytest.fixture
def inspection(defects):
    return Inspection(
        id="INSP-1",
        container_number="MSCU1234565",
        inspector_id="inspector.nguyen",
        timestamp=datetime(2025, 3, 14, 9, 30),
        location="Cat Lai Terminal",
        status=InspectionStatus.COMPLETED,
        images=[
            ContainerImage(id="img-front", side="FRONT", source="missing/front.jpg"),
            ContainerImage(id="img-left", side="LEFT", source="missing/left.jpg"),
        ],
        defects=defects,
    )


@pytest.fixture
def reviewer():
    return Principal(name="Linh Tran", role=Role.REVIEWER)


@pytest.fixture
def viewer():
    return Principal(name="Guest", role=Role.VIEWER)


@pytest.fixture
def repository(inspection):
    return InMemoryInspectionRepository(
        inspections=[inspection],
        manifest=[
            ManifestItem(container_number="MSCU1234565", inspection_id="INSP-1", status=InspectionStatus.COMPLETED),
            ManifestItem(container_number="TGHU7654321"),
        ],
    )


@pytest.fixture
def fixed_now():
    return datetime(2025, 1, 31, 10, 0)


@pytest.fixture
def service(repository, tmp_path, fixed_now):
    return ReviewService(
        repository=repository,
        config=Config.default(),
        renderer=ReportLabRenderer(output_dir=tmp_path / "documents"),
        sequence=FixedSequence(42),
        clock=lambda: fixed_now,
    )
