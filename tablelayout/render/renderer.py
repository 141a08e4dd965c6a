"""Draw collaborator and page geometry.

The engine positions cells with a top-left origin in points. A
TableRenderer receives fully resolved cells and border boxes and puts them
on the current page; ``next_page`` starts a new one. Renderer failures are
reported as RenderError and abort the table render.

Example:
    ```python
    from pathlib import Path
    from tablelayout.render.renderer import ReportLabRenderer, page_size_from_name

    renderer = ReportLabRenderer.for_file(Path("table.pdf"), page_size_from_name("A4"))
    table = await auto_table(options, renderer, measurer)
    renderer.save()
    ```
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from reportlab.lib.pagesizes import A4, landscape, legal, letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from tablelayout.exceptions.render_error import RenderError
from tablelayout.layout.spacing import parse_spacing
from tablelayout.render.style_utils import hex_to_rgb

if TYPE_CHECKING:
    from tablelayout.layout.table_model import Cell

logger = logging.getLogger(__name__)

_PAGE_SIZE_MAP = {
    "A4": A4,
    "Letter": letter,
    "Legal": legal,
}


@dataclass(frozen=True)
class PageSize:
    """Page width and height in points."""

    width: float
    height: float


def page_size_from_name(
    name: str,
    orientation: Literal["portrait", "landscape"] = "portrait",
) -> PageSize:
    """Get page geometry for a named page size.

    Args:
        name: One of "A4", "Letter", "Legal" (unknown names fall back to A4)
        orientation: Page orientation

    Returns:
        PageSize in points
    """
    pagesize = _PAGE_SIZE_MAP.get(name)
    if pagesize is None:
        logger.warning(f"Unknown page size '{name}', using A4")
        pagesize = A4
    if orientation == "landscape":
        pagesize = landscape(pagesize)
    return PageSize(width=pagesize[0], height=pagesize[1])


class TableRenderer(ABC):
    """Abstract draw collaborator."""

    @property
    @abstractmethod
    def page_size(self) -> PageSize:
        """Geometry of the current page."""
        raise NotImplementedError("Subclasses must implement page_size")

    @abstractmethod
    async def draw_cell(self, cell: "Cell") -> None:
        """Draw a cell's background, borders and text at its position."""
        raise NotImplementedError("Subclasses must implement draw_cell")

    @abstractmethod
    async def draw_border(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        line_width: float,
        line_color: str,
    ) -> None:
        """Draw an unfilled rectangle, used for the table border."""
        raise NotImplementedError("Subclasses must implement draw_border")

    @abstractmethod
    async def next_page(self) -> None:
        """Close the current page and start a new one."""
        raise NotImplementedError("Subclasses must implement next_page")


class NullRenderer(TableRenderer):
    """Renderer that draws nothing, used to lay out tables without output."""

    def __init__(self, page_size: PageSize) -> None:
        self._page_size = page_size
        self.page_count = 1

    @property
    def page_size(self) -> PageSize:
        return self._page_size

    async def draw_cell(self, cell: "Cell") -> None:
        return None

    async def draw_border(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        line_width: float,
        line_color: str,
    ) -> None:
        return None

    async def next_page(self) -> None:
        self.page_count += 1


class ReportLabRenderer(TableRenderer):
    """Draws onto a reportlab canvas.

    Attributes:
        canvas: Target reportlab canvas
        page_count: Number of pages started so far
    """

    def __init__(self, canvas: Canvas, page_size: PageSize) -> None:
        self.canvas = canvas
        self._page_size = page_size
        self.page_count = 1

    @classmethod
    def for_file(cls, output_path: Path, page_size: PageSize) -> "ReportLabRenderer":
        canvas = Canvas(str(output_path), pagesize=(page_size.width, page_size.height))
        return cls(canvas, page_size)

    @property
    def page_size(self) -> PageSize:
        return self._page_size

    def _to_pdf_y(self, y: float, height: float = 0.0) -> float:
        return self._page_size.height - y - height

    def _draw_cell(self, cell: "Cell") -> None:
        canvas = self.canvas
        styles = cell.styles
        bottom = self._to_pdf_y(cell.y, cell.height)

        fill = hex_to_rgb(styles.fill_color)
        if fill:
            canvas.setFillColorRGB(*fill)
            canvas.rect(cell.x, bottom, cell.width, cell.height, stroke=0, fill=1)

        stroke = hex_to_rgb(styles.line_color)
        border = parse_spacing(styles.line_width, 0)
        if stroke:
            canvas.setStrokeColorRGB(*stroke)
            top = bottom + cell.height
            right = cell.x + cell.width
            edges = (
                (border.top, cell.x, top, right, top),
                (border.bottom, cell.x, bottom, right, bottom),
                (border.left, cell.x, bottom, cell.x, top),
                (border.right, right, bottom, right, top),
            )
            for line_width, x1, y1, x2, y2 in edges:
                if line_width > 0:
                    canvas.setLineWidth(line_width)
                    canvas.line(x1, y1, x2, y2)

        text_color = hex_to_rgb(styles.text_color) or (0.0, 0.0, 0.0)
        canvas.setFillColorRGB(*text_color)

        padding = parse_spacing(styles.cell_padding, 0)
        line_advance = styles.font_size * styles.line_height
        text_height = len(cell.text) * line_advance
        if styles.vertical_alignment == "top":
            text_top = cell.y + padding.top
        elif styles.vertical_alignment == "bottom":
            text_top = cell.y + cell.height - padding.bottom - text_height
        else:
            text_top = cell.y + (cell.height - text_height) / 2

        for line_number, line in enumerate(cell.text):
            if not line:
                continue
            line_width = pdfmetrics.stringWidth(line, styles.font_name, styles.font_size)
            line_width += styles.character_spacing * (len(line) - 1)
            if styles.alignment == "right":
                line_x = cell.x + cell.width - padding.right - line_width
            elif styles.alignment == "center":
                line_x = cell.x + (cell.width - line_width) / 2
            else:
                line_x = cell.x + padding.left
            # Baseline sits one font size below the top of the line box
            baseline = text_top + line_number * line_advance + styles.font_size
            text_object = canvas.beginText()
            text_object.setFont(styles.font_name, styles.font_size)
            text_object.setCharSpace(styles.character_spacing)
            text_object.setTextOrigin(line_x, self._to_pdf_y(baseline))
            text_object.textLine(line)
            canvas.drawText(text_object)

    async def draw_cell(self, cell: "Cell") -> None:
        try:
            self._draw_cell(cell)
        except Exception as e:
            raise RenderError(
                "Failed to draw cell",
                context={"section": cell.section, "x": cell.x, "y": cell.y, "error": str(e)},
            ) from e

    async def draw_border(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        line_width: float,
        line_color: str,
    ) -> None:
        stroke = hex_to_rgb(line_color)
        if line_width <= 0 or stroke is None or height <= 0:
            return
        try:
            self.canvas.setStrokeColorRGB(*stroke)
            self.canvas.setLineWidth(line_width)
            self.canvas.rect(x, self._to_pdf_y(y, height), width, height, stroke=1, fill=0)
        except Exception as e:
            raise RenderError(
                "Failed to draw table border",
                context={"x": x, "y": y, "width": width, "height": height, "error": str(e)},
            ) from e

    async def next_page(self) -> None:
        try:
            self.canvas.showPage()
        except Exception as e:
            raise RenderError("Failed to start a new page", context={"error": str(e)}) from e
        self.page_count += 1
        logger.debug(f"Started page {self.page_count}")

    def save(self) -> None:
        """Finalize the PDF document."""
        try:
            self.canvas.save()
        except Exception as e:
            raise RenderError("Failed to save PDF", context={"error": str(e)}) from e
