"""Tests for the reportlab renderer, page geometry and color helpers."""

from unittest.mock import MagicMock

import pytest
from reportlab.lib.pagesizes import A4, landscape, letter
from reportlab.pdfbase import pdfmetrics

from tablelayout.exceptions import RenderError
from tablelayout.render.renderer import NullRenderer, PageSize, ReportLabRenderer, page_size_from_name
from tablelayout.render.style_utils import hex_to_rgb
from tests.fixtures.table_builders import make_cell


def positioned_cell(text: str = "Hi", **styles):
    cell = make_cell(text, **styles)
    cell.x, cell.y, cell.width, cell.height = 10, 10, 50, 20
    return cell


@pytest.fixture
def canvas() -> MagicMock:
    """Create a mock reportlab canvas."""
    return MagicMock()


@pytest.fixture
def renderer(canvas: MagicMock) -> ReportLabRenderer:
    """Create a renderer on a 200x100pt page."""
    return ReportLabRenderer(canvas, PageSize(200, 100))


class TestHexToRgb:
    """Tests for hex_to_rgb."""

    def test_six_digit_colors(self) -> None:
        """Test 6-digit colors convert to 0-1 floats."""
        assert hex_to_rgb("#ffffff") == (1.0, 1.0, 1.0)
        assert hex_to_rgb("#000000") == (0.0, 0.0, 0.0)

    def test_three_digit_colors(self) -> None:
        """Test 3-digit colors are expanded."""
        assert hex_to_rgb("#f00") == (1.0, 0.0, 0.0)

    def test_empty_means_no_color(self) -> None:
        """Test empty and missing colors mean nothing is painted."""
        assert hex_to_rgb("") is None
        assert hex_to_rgb(None) is None

    def test_invalid_color_raises(self) -> None:
        """Test malformed colors are rejected."""
        with pytest.raises(ValueError):
            hex_to_rgb("#12")


class TestPageSizeFromName:
    """Tests for page_size_from_name."""

    def test_named_sizes(self) -> None:
        """Test page sizes come from reportlab."""
        assert page_size_from_name("A4") == PageSize(*A4)
        assert page_size_from_name("Letter") == PageSize(*letter)

    def test_landscape(self) -> None:
        """Test landscape swaps width and height."""
        assert page_size_from_name("A4", "landscape") == PageSize(*landscape(A4))

    def test_unknown_name_falls_back_to_a4(self) -> None:
        """Test unknown names use A4."""
        assert page_size_from_name("Tabloid") == PageSize(*A4)


class TestReportLabRenderer:
    """Tests for ReportLabRenderer against a mock canvas."""

    @pytest.mark.asyncio
    async def test_fill_uses_bottom_left_origin(self, renderer, canvas) -> None:
        """Test the background box is flipped into PDF coordinates."""
        await renderer.draw_cell(positioned_cell(fill_color="#ff0000"))

        canvas.setFillColorRGB.assert_any_call(1.0, 0.0, 0.0)
        canvas.rect.assert_called_once_with(10, 70, 50, 20, stroke=0, fill=1)

    @pytest.mark.asyncio
    async def test_no_fill_without_color(self, renderer, canvas) -> None:
        """Test an empty fill color paints nothing."""
        await renderer.draw_cell(positioned_cell())

        canvas.rect.assert_not_called()

    @pytest.mark.asyncio
    async def test_borders_per_side(self, renderer, canvas) -> None:
        """Test only sides with a positive width are stroked."""
        await renderer.draw_cell(positioned_cell(line_width={"top": 1, "bottom": 2}))

        assert canvas.line.call_count == 2
        canvas.line.assert_any_call(10, 90, 60, 90)
        canvas.line.assert_any_call(10, 70, 60, 70)

    @pytest.mark.asyncio
    async def test_uniform_border(self, renderer, canvas) -> None:
        """Test a numeric line width strokes all four sides."""
        await renderer.draw_cell(positioned_cell(line_width=0.5))

        assert canvas.line.call_count == 4
        canvas.setLineWidth.assert_called_with(0.5)

    @pytest.mark.asyncio
    async def test_text_left_middle(self, renderer, canvas) -> None:
        """Test left-aligned text is vertically centered in the cell."""
        await renderer.draw_cell(positioned_cell())

        text_object = canvas.beginText.return_value
        text_object.setTextOrigin.assert_called_once_with(15, 75)
        text_object.textLine.assert_called_once_with("Hi")
        canvas.drawText.assert_called_once_with(text_object)

    @pytest.mark.asyncio
    async def test_text_right_top(self, renderer, canvas) -> None:
        """Test right-aligned top text sits inside the padding."""
        await renderer.draw_cell(positioned_cell(alignment="right", vertical_alignment="top"))

        width = pdfmetrics.stringWidth("Hi", "Helvetica", 10)
        x, y = canvas.beginText.return_value.setTextOrigin.call_args.args
        assert x == pytest.approx(60 - 5 - width)
        assert y == pytest.approx(100 - (10 + 5 + 10))

    @pytest.mark.asyncio
    async def test_empty_lines_are_not_drawn(self, renderer, canvas) -> None:
        """Test blank lines take space but draw nothing."""
        await renderer.draw_cell(positioned_cell("a\n\nb"))

        assert canvas.drawText.call_count == 2

    @pytest.mark.asyncio
    async def test_draw_cell_failure_raises_render_error(self, renderer, canvas) -> None:
        """Test canvas failures are wrapped."""
        canvas.drawText.side_effect = RuntimeError("font missing")

        with pytest.raises(RenderError) as exc_info:
            await renderer.draw_cell(positioned_cell())

        assert exc_info.value.context["section"] == "body"

    @pytest.mark.asyncio
    async def test_draw_border(self, renderer, canvas) -> None:
        """Test the table border is an unfilled flipped rectangle."""
        await renderer.draw_border(10, 10, 180, 60, 1, "#000000")

        canvas.rect.assert_called_once_with(10, 30, 180, 60, stroke=1, fill=0)

    @pytest.mark.asyncio
    async def test_zero_width_border_is_skipped(self, renderer, canvas) -> None:
        """Test a zero table line width draws nothing."""
        await renderer.draw_border(10, 10, 180, 60, 0, "#000000")

        canvas.rect.assert_not_called()

    @pytest.mark.asyncio
    async def test_next_page(self, renderer, canvas) -> None:
        """Test starting a page shows the current one."""
        await renderer.next_page()

        canvas.showPage.assert_called_once()
        assert renderer.page_count == 2

    @pytest.mark.asyncio
    async def test_next_page_failure(self, renderer, canvas) -> None:
        """Test page failures are wrapped."""
        canvas.showPage.side_effect = OSError("closed")

        with pytest.raises(RenderError):
            await renderer.next_page()

    def test_save(self, renderer, canvas) -> None:
        """Test saving finalizes the canvas."""
        renderer.save()

        canvas.save.assert_called_once()


class TestNullRenderer:
    """Tests for NullRenderer."""

    @pytest.mark.asyncio
    async def test_counts_pages_and_draws_nothing(self) -> None:
        """Test the null renderer only tracks pages."""
        renderer = NullRenderer(PageSize(100, 100))

        await renderer.draw_cell(positioned_cell())
        await renderer.draw_border(0, 0, 10, 10, 1, "#000000")
        await renderer.next_page()

        assert renderer.page_count == 2
        assert renderer.page_size == PageSize(100, 100)
