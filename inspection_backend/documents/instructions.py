"""Drawing instructions produced by the document projections.

Coordinates are millimetres with the origin at the top-left corner of the
page; text ``y`` is the baseline. A ``Document`` is plain data, so two
projections of the same inspection compare equal instruction by instruction.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class PageGeometry:
    width: float = 210.0
    height: float = 297.0


A4_PORTRAIT = PageGeometry()


@dataclass(frozen=True)
class SetFont:
    family: str
    style: str = "normal"  # normal | bold | italic | bolditalic


@dataclass(frozen=True)
class SetFontSize:
    size: float


@dataclass(frozen=True)
class SetTextColor:
    color: RGB


@dataclass(frozen=True)
class SetDrawColor:
    color: RGB


@dataclass(frozen=True)
class SetFillColor:
    color: RGB


@dataclass(frozen=True)
class SetLineWidth:
    width: float


@dataclass(frozen=True)
class Text:
    x: float
    y: float
    text: str
    align: str = "left"  # left | right
    max_width: Optional[float] = None


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    style: str = "S"  # S stroke | F fill | FD both


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class Image:
    source: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class AddPage:
    pass


Instruction = Union[
    SetFont, SetFontSize, SetTextColor, SetDrawColor, SetFillColor,
    SetLineWidth, Text, Rect, Line, Image, AddPage,
]


@dataclass(frozen=True)
class Document:
    """
    A finished projection ready for rendering.

    Attributes:
        filename: File name to export under (e.g. ``INV-2025-0042.pdf``)
        instructions: Ordered drawing instructions
        geometry: Page size in millimetres
    """
    filename: str
    instructions: Tuple[Instruction, ...]
    geometry: PageGeometry = A4_PORTRAIT

    @property
    def page_count(self) -> int:
        return 1 + sum(1 for item in self.instructions if isinstance(item, AddPage))

    def texts(self):
        """Text instructions in order, mostly useful for inspection in tests."""
        return [item for item in self.instructions if isinstance(item, Text)]
