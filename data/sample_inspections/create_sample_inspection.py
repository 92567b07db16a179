"""
Script to generate a sample inspection for local testing.
Creates placeholder container photos and an inspection record with detected
defects in the JSON repository layout.
"""

import os
import sys
from datetime import datetime
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from inspection_backend.models.inspection import (  # noqa: E402
    BoundingBox,
    ContainerImage,
    Defect,
    Inspection,
    InspectionStatus,
    ManifestItem,
    Severity,
)
from inspection_backend.models.money import to_money  # noqa: E402
from inspection_backend.storage.repository import JsonFileInspectionRepository  # noqa: E402

PHOTO_DIR = Path("photos")
DATA_DIR = Path(os.getenv("INSPECTION_DATA_DIR", "../inspections"))


def create_placeholder_photo(filename, text, size=(1200, 600), bg_color=(70, 110, 150)):
    """Create a placeholder container photo with a label."""
    img = Image.new('RGB', size, color=bg_color)
    draw = ImageDraw.Draw(img)

    # Corrugation lines so the boxes have something to sit on
    for x in range(0, size[0], 40):
        draw.line([(x, 0), (x, size[1])], fill=tuple(max(c - 25, 0) for c in bg_color), width=6)

    try:
        font = ImageFont.truetype("arial.ttf", 48)
    except OSError:
        font = ImageFont.load_default()

    bbox = draw.textbbox((0, 0), text, font=font)
    position = ((size[0] - (bbox[2] - bbox[0])) / 2, (size[1] - (bbox[3] - bbox[1])) / 2)
    draw.text(position, text, fill=(235, 235, 235), font=font)

    img.save(filename, 'JPEG', quality=85)
    print(f"Created {filename}")


def create_sample_inspection():
    """Create photos, the inspection record and a one-item manifest."""
    PHOTO_DIR.mkdir(exist_ok=True)

    sides = [("img-front", "FRONT", (70, 110, 150)), ("img-left", "LEFT", (150, 80, 60)), ("img-roof", "ROOF", (90, 90, 90))]
    images = []
    for image_id, side, color in sides:
        path = PHOTO_DIR / f"{image_id}.jpg"
        create_placeholder_photo(path, f"MSCU1234565 - {side}", bg_color=color)
        images.append(ContainerImage(id=image_id, side=side, source=str(path.resolve())))

    defects = [
        Defect(
            id="d-1",
            image_id="img-front",
            bounding_box=BoundingBox(12, 20, 30, 45),
            code="DENT",
            severity=Severity.MEDIUM,
            description="Dent on front panel near door hinge",
            repair_cost=to_money(1500000),
        ),
        Defect(
            id="d-2",
            image_id="img-front",
            bounding_box=BoundingBox(60, 55, 78, 80),
            code="RUST",
            severity=Severity.LOW,
            description="Surface rust on lower rail",
            repair_cost=to_money(450000),
        ),
        Defect(
            id="d-3",
            image_id="img-left",
            bounding_box=BoundingBox(40, 10, 55, 35),
            code="HOLE",
            severity=Severity.HIGH,
            description="Puncture through side wall",
            repair_cost=to_money(3200000),
        ),
    ]

    inspection = Inspection(
        id="INSP-0001",
        container_number="MSCU1234565",
        inspector_id="inspector.nguyen",
        timestamp=datetime(2025, 3, 14, 9, 30),
        location="Cat Lai Terminal, Gate 3",
        status=InspectionStatus.COMPLETED,
        images=images,
        defects=defects,
    )

    repository = JsonFileInspectionRepository(str(DATA_DIR))
    repository.put(inspection)
    repository.save_manifest([
        ManifestItem(container_number="MSCU1234565", inspection_id="INSP-0001", status=InspectionStatus.COMPLETED),
        ManifestItem(container_number="TGHU7654321"),
    ])
    print(f"Created inspection {inspection.id} in {DATA_DIR}")


if __name__ == "__main__":
    print("Generating sample inspection...")
    create_sample_inspection()
    print("\nSample inspection created successfully!")
