"""Render drawing instructions to PDF with reportlab."""

import base64
import io
import logging
from pathlib import Path
from typing import Optional, Union

from PIL import Image as PILImage
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas

from .instructions import (
    AddPage,
    Document,
    Image,
    Line,
    Rect,
    SetDrawColor,
    SetFillColor,
    SetFont,
    SetFontSize,
    SetLineWidth,
    SetTextColor,
    Text,
)

logger = logging.getLogger(__name__)

FONT_NAMES = {
    ("times", "normal"): "Times-Roman",
    ("times", "bold"): "Times-Bold",
    ("times", "italic"): "Times-Italic",
    ("times", "bolditalic"): "Times-BoldItalic",
    ("helvetica", "normal"): "Helvetica",
    ("helvetica", "bold"): "Helvetica-Bold",
    ("helvetica", "italic"): "Helvetica-Oblique",
    ("helvetica", "bolditalic"): "Helvetica-BoldOblique",
    ("courier", "normal"): "Courier",
    ("courier", "bold"): "Courier-Bold",
    ("courier", "italic"): "Courier-Oblique",
    ("courier", "bolditalic"): "Courier-BoldOblique",
}

LINE_HEIGHT_FACTOR = 1.15
PLACEHOLDER_FILL = (0.85, 0.85, 0.85)


def load_image(source: str) -> ImageReader:
    """
    Open an image from a file path or a ``data:<mime>;base64,`` URI.

    Raises:
        FileNotFoundError: If a path does not exist
        ValueError: If a data URI is malformed
    """
    if source.startswith("data:"):
        header, _, payload = source.partition(",")
        if ";base64" not in header or not payload:
            raise ValueError("only base64 data URIs are supported")
        raw = base64.b64decode(payload)
        return ImageReader(PILImage.open(io.BytesIO(raw)))

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    return ImageReader(str(path))


class _CanvasState:
    """Graphics state tracked across pages; reportlab resets it on showPage."""

    def __init__(self):
        self.font_family = "times"
        self.font_style = "normal"
        self.font_size = 16.0
        self.text_color = (0, 0, 0)
        self.draw_color = (0, 0, 0)
        self.fill_color = (0, 0, 0)
        self.line_width = 0.2

    @property
    def font_name(self) -> str:
        return FONT_NAMES.get((self.font_family, self.font_style), "Times-Roman")


class ReportLabRenderer:
    """
    Document drawing primitive backed by a reportlab canvas.

    Converts the top-left millimetre coordinates of the instructions to
    reportlab's bottom-left points. With ``invariant`` set, the PDF carries no
    timestamps or random ids, so the same document always yields the same bytes.
    """

    def __init__(self, output_dir: Union[str, Path] = "data/documents", invariant: bool = True):
        self.output_dir = Path(output_dir)
        self.invariant = invariant

    def render(self, document: Document, filename: Optional[str] = None) -> Path:
        """
        Render a document and save it under the output directory.

        Args:
            document: Projected document
            filename: Override for ``document.filename``

        Returns:
            Path of the written PDF
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / (filename or document.filename)
        path.write_bytes(self.render_bytes(document))
        logger.info(f"Saved {path} ({document.page_count} page(s))")
        return path

    def render_bytes(self, document: Document) -> bytes:
        """Render a document to PDF bytes without touching the filesystem."""
        buffer = io.BytesIO()
        page_size = (document.geometry.width * mm, document.geometry.height * mm)
        c = canvas.Canvas(buffer, pagesize=page_size, invariant=1 if self.invariant else 0)
        c.setTitle(document.filename)

        state = _CanvasState()
        self._apply_state(c, state)

        for instruction in document.instructions:
            self._draw(c, state, instruction, document.geometry.height)

        c.showPage()
        c.save()
        return buffer.getvalue()

    # Drawing primitives

    def _apply_state(self, c: canvas.Canvas, state: _CanvasState) -> None:
        c.setFont(state.font_name, state.font_size)
        c.setStrokeColorRGB(*[v / 255 for v in state.draw_color])
        c.setLineWidth(state.line_width * mm)

    def _fill(self, c: canvas.Canvas, rgb) -> None:
        c.setFillColorRGB(*[v / 255 for v in rgb])

    def _draw(self, c: canvas.Canvas, state: _CanvasState, instruction, page_height: float) -> None:
        def top(y: float) -> float:
            return (page_height - y) * mm

        if isinstance(instruction, SetFont):
            state.font_family = instruction.family.lower()
            state.font_style = instruction.style.lower()
            c.setFont(state.font_name, state.font_size)
        elif isinstance(instruction, SetFontSize):
            state.font_size = instruction.size
            c.setFont(state.font_name, state.font_size)
        elif isinstance(instruction, SetTextColor):
            state.text_color = instruction.color
        elif isinstance(instruction, SetDrawColor):
            state.draw_color = instruction.color
            c.setStrokeColorRGB(*[v / 255 for v in instruction.color])
        elif isinstance(instruction, SetFillColor):
            state.fill_color = instruction.color
        elif isinstance(instruction, SetLineWidth):
            state.line_width = instruction.width
            c.setLineWidth(instruction.width * mm)
        elif isinstance(instruction, Text):
            self._draw_text(c, state, instruction, top)
        elif isinstance(instruction, Rect):
            fill = "F" in instruction.style.upper()
            stroke = "S" in instruction.style.upper() or "D" in instruction.style.upper()
            if fill:
                self._fill(c, state.fill_color)
            c.rect(
                instruction.x * mm,
                top(instruction.y + instruction.height),
                instruction.width * mm,
                instruction.height * mm,
                stroke=1 if stroke else 0,
                fill=1 if fill else 0,
            )
        elif isinstance(instruction, Line):
            c.line(instruction.x1 * mm, top(instruction.y1), instruction.x2 * mm, top(instruction.y2))
        elif isinstance(instruction, Image):
            self._draw_image(c, instruction, top)
        elif isinstance(instruction, AddPage):
            c.showPage()
            self._apply_state(c, state)
        else:
            raise TypeError(f"Unknown drawing instruction {instruction!r}")

    def _draw_text(self, c: canvas.Canvas, state: _CanvasState, instruction: Text, top) -> None:
        self._fill(c, state.text_color)
        if instruction.max_width:
            lines = simpleSplit(instruction.text, state.font_name, state.font_size, instruction.max_width * mm)
        else:
            lines = instruction.text.splitlines() or [""]

        baseline = top(instruction.y)
        leading = state.font_size * LINE_HEIGHT_FACTOR
        for line in lines:
            if instruction.align == "right":
                c.drawRightString(instruction.x * mm, baseline, line)
            else:
                c.drawString(instruction.x * mm, baseline, line)
            baseline -= leading

    def _draw_image(self, c: canvas.Canvas, instruction: Image, top) -> None:
        x = instruction.x * mm
        y = top(instruction.y + instruction.height)
        width = instruction.width * mm
        height = instruction.height * mm
        try:
            reader = load_image(instruction.source)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load image {instruction.source[:60]!r}: {e}; drawing placeholder")
            c.saveState()
            c.setFillColorRGB(*PLACEHOLDER_FILL)
            c.rect(x, y, width, height, stroke=0, fill=1)
            c.restoreState()
            return
        c.drawImage(reader, x, y, width=width, height=height)
