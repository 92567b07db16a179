"""Layout helpers shared by the invoice and report projections."""

from typing import List, Optional, Tuple

from ..models.inspection import BoundingBox
from .instructions import (
    A4_PORTRAIT,
    AddPage,
    Document,
    Image,
    Instruction,
    Line,
    PageGeometry,
    Rect,
    RGB,
    SetDrawColor,
    SetFillColor,
    SetFont,
    SetFontSize,
    SetLineWidth,
    SetTextColor,
    Text,
)

PAGE_TOP = 20.0
PAGE_BOTTOM = 270.0


class DocumentBuilder:
    """Collects drawing instructions for one document."""

    def __init__(self, filename: str, geometry: PageGeometry = A4_PORTRAIT):
        self.filename = filename
        self.geometry = geometry
        self.instructions: List[Instruction] = []

    @property
    def page_width(self) -> float:
        return self.geometry.width

    def font(self, family: str = "times", style: str = "normal", size: Optional[float] = None) -> None:
        self.instructions.append(SetFont(family, style))
        if size is not None:
            self.instructions.append(SetFontSize(size))

    def font_size(self, size: float) -> None:
        self.instructions.append(SetFontSize(size))

    def text_color(self, color: RGB) -> None:
        self.instructions.append(SetTextColor(color))

    def draw_color(self, color: RGB) -> None:
        self.instructions.append(SetDrawColor(color))

    def fill_color(self, color: RGB) -> None:
        self.instructions.append(SetFillColor(color))

    def line_width(self, width: float) -> None:
        self.instructions.append(SetLineWidth(width))

    def text(self, text: str, x: float, y: float, align: str = "left", max_width: Optional[float] = None) -> None:
        self.instructions.append(Text(x, y, text, align, max_width))

    def rect(self, x: float, y: float, width: float, height: float, style: str = "S") -> None:
        self.instructions.append(Rect(x, y, width, height, style))

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.instructions.append(Line(x1, y1, x2, y2))

    def image(self, source: str, x: float, y: float, width: float, height: float) -> None:
        self.instructions.append(Image(source, x, y, width, height))

    def add_page(self) -> None:
        self.instructions.append(AddPage())

    def build(self) -> Document:
        return Document(self.filename, tuple(self.instructions), self.geometry)


class PageCursor:
    """
    Vertical cursor with the row page-break policy.

    After a row is placed the cursor advances by the row step; if it is then
    past ``bottom`` a page is added and the cursor goes back to ``top``. Rows
    are therefore never split and never reordered.
    """

    def __init__(self, builder: DocumentBuilder, y: float, top: float = PAGE_TOP, bottom: float = PAGE_BOTTOM):
        self.builder = builder
        self.y = y
        self.top = top
        self.bottom = bottom

    def advance(self, step: float) -> bool:
        """Move down one row; returns True when a new page was started."""
        self.y += step
        if self.y > self.bottom:
            self.builder.add_page()
            self.y = self.top
            return True
        return False

    def ensure(self, height: float, limit: Optional[float] = None) -> bool:
        """Start a new page unless a block of ``height`` fits above ``limit``."""
        limit = self.bottom if limit is None else limit
        if self.y + height > limit:
            self.builder.add_page()
            self.y = self.top
            return True
        return False

    def skip(self, step: float) -> None:
        """Move down without the page-break check."""
        self.y += step


def project_box(
    box: BoundingBox,
    left: float,
    top: float,
    width: float,
    height: float
) -> Tuple[float, float, float, float]:
    """
    Map a normalized 0-100 bounding box onto a placed image rectangle.

    Returns:
        (x, y, width, height) in page coordinates
    """
    return (
        left + (box.xmin / 100) * width,
        top + (box.ymin / 100) * height,
        ((box.xmax - box.xmin) / 100) * width,
        ((box.ymax - box.ymin) / 100) * height,
    )


def percent_label(rate) -> str:
    """Tax rate as a percentage without trailing zeros, e.g. 0.10 -> "10"."""
    value = (rate * 100).normalize()
    return format(value, "f")
