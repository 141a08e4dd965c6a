"""Tests for the engine entry points."""

import logging
from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError
from reportlab.lib.pagesizes import letter

from tablelayout import auto_table, create_table, dry_run_auto_table
from tablelayout.config import reload_config
from tablelayout.exceptions import LayoutError, RenderError
from tablelayout.models.table_options import TableOptions
from tablelayout.render.measurement import ReportLabTextMeasurer
from tablelayout.render.renderer import PageSize
from tests.fixtures.sample_tables import (
    sample_inventory_options,
    sample_keyed_report_options,
    sample_ledger_options,
)
from tests.fixtures.table_builders import FixedWidthMeasurer, RecordingRenderer


def geometry(table) -> list[tuple]:
    return [
        (row.section, row.index, index, cell.x, cell.y, cell.width, cell.height)
        for row in table.all_rows()
        for index, cell in sorted(row.cells.items())
    ]


class TestCreateTable:
    """Tests for create_table."""

    @pytest.mark.asyncio
    async def test_lays_out_without_drawing(
        self, measurer: FixedWidthMeasurer, page_size: PageSize
    ) -> None:
        """Test widths and heights are resolved and nothing is positioned yet."""
        table = await create_table(sample_inventory_options(), page_size, measurer)

        assert sum(column.width for column in table.columns) == pytest.approx(380)
        assert all(row.height == 20 for row in table.all_rows())
        assert table.pages == []

    @pytest.mark.asyncio
    async def test_accepts_validated_options(
        self, measurer: FixedWidthMeasurer, page_size: PageSize
    ) -> None:
        """Test a TableOptions instance is used as is."""
        options = TableOptions(body=[["a", "b"]], table_width=100)

        table = await create_table(options, page_size, measurer)

        assert table.get_width() == 100

    @pytest.mark.asyncio
    async def test_invalid_options_raise(self, measurer: FixedWidthMeasurer, page_size: PageSize) -> None:
        """Test invalid options are reported before layout starts."""
        with pytest.raises(ValidationError):
            await create_table({"body": [["a"]], "rowPageBreak": "never"}, page_size, measurer)

        assert measurer.calls == []

    @pytest.mark.asyncio
    async def test_no_room_for_table_raises(self, measurer: FixedWidthMeasurer) -> None:
        """Test margins that leave no width raise LayoutError."""
        with pytest.raises(LayoutError):
            await create_table({"body": [["a"]], "margin": 60}, PageSize(100, 100), measurer)

    @pytest.mark.asyncio
    async def test_measurer_failure_propagates(self, page_size: PageSize) -> None:
        """Test a failing measurer aborts the layout."""
        measurer = FixedWidthMeasurer()
        measurer.width_of_text = AsyncMock(side_effect=RuntimeError("font server down"))

        with pytest.raises(RuntimeError, match="font server down"):
            await create_table({"body": [["a"]]}, page_size, measurer)

    @pytest.mark.asyncio
    async def test_default_measurer_is_reportlab(self, page_size: PageSize) -> None:
        """Test a ReportLabTextMeasurer is used when none is given."""
        with patch(
            "tablelayout.layout.engine.ReportLabTextMeasurer", wraps=ReportLabTextMeasurer
        ) as measurer_class:
            table = await create_table({"body": [["Hello"]]}, page_size)

        measurer_class.assert_called_once_with()
        assert table.columns[0].width == pytest.approx(400)

    @pytest.mark.asyncio
    async def test_default_page_size_from_config(self, measurer: FixedWidthMeasurer) -> None:
        """Test the configured page size is used when none is given."""
        with patch.dict("os.environ", {"TABLELAYOUT_DEFAULT_PAGE_SIZE": "Letter"}):
            reload_config()
            table = await create_table({"body": [["a"]], "margin": 36}, measurer=measurer)

        assert table.get_width() == pytest.approx(letter[0] - 72)

    @pytest.mark.asyncio
    async def test_empty_table(self, measurer: FixedWidthMeasurer, page_size: PageSize) -> None:
        """Test a table with no rows lays out to zero height."""
        table = await create_table({}, page_size, measurer)

        assert table.columns == []
        assert table.get_height() == 0


class TestAutoTable:
    """Tests for auto_table."""

    @pytest.mark.asyncio
    async def test_draws_every_section(self, measurer: FixedWidthMeasurer, page_size: PageSize) -> None:
        """Test head, body and foot cells all reach the renderer."""
        renderer = RecordingRenderer(page_size)

        table = await auto_table(sample_keyed_report_options(), renderer, measurer)

        assert len(renderer.cells("head")) == 2
        assert len(renderer.cells("body")) == 4
        assert len(renderer.cells("foot")) == 2
        assert table.foot[0].cells[0].y == 70

    @pytest.mark.asyncio
    async def test_short_row_draws_only_present_cells(
        self, measurer: FixedWidthMeasurer, page_size: PageSize
    ) -> None:
        """Test columns a row has no value for are skipped, not drawn empty."""
        renderer = RecordingRenderer(page_size)
        drawn = []

        table = await auto_table(
            {
                "body": [["a", "b", "c"], ["only"]],
                "showHead": False,
                "didDrawCell": lambda data: drawn.append(data.cell.text),
            },
            renderer,
            measurer,
        )

        assert [call[3] for call in renderer.cells("body")] == [("a",), ("b",), ("c",), ("only",)]
        assert drawn == [["a"], ["b"], ["c"], ["only"]]
        assert sorted(table.body[1].cells) == [0]
        assert table.body[1].height == 20

    @pytest.mark.asyncio
    async def test_draw_failure_is_logged_with_location(
        self, measurer: FixedWidthMeasurer, page_size: PageSize, caplog
    ) -> None:
        """Test a renderer failure is logged with its table position and re-raised."""
        renderer = RecordingRenderer(page_size)
        renderer.draw_cell = AsyncMock(side_effect=RuntimeError("ink out"))

        with caplog.at_level(logging.ERROR, logger="tablelayout.layout.engine"):
            with pytest.raises(RenderError) as exc_info:
                await auto_table({"body": [["a"]]}, renderer, measurer)

        assert exc_info.value.location == "body row 0, column 0"
        assert "Table drawing aborted at body row 0, column 0" in caplog.text

    @pytest.mark.asyncio
    async def test_cells_tile_each_row(self, measurer: FixedWidthMeasurer, page_size: PageSize) -> None:
        """Test cells are placed left to right at the column widths."""
        renderer = RecordingRenderer(page_size)

        table = await auto_table(sample_inventory_options(), renderer, measurer)

        for row in table.all_rows():
            x = table.settings.margin.left
            for column in table.columns:
                cell = row.cells[column.index]
                assert cell.x == pytest.approx(x)
                x += column.width


class TestDryRunAutoTable:
    """Tests for dry_run_auto_table."""

    @pytest.mark.asyncio
    async def test_reports_pages_without_drawing(
        self, measurer: FixedWidthMeasurer, small_page: PageSize
    ) -> None:
        """Test the dry run paginates and records page assignment."""
        table = await dry_run_auto_table(sample_ledger_options(10), small_page, measurer)

        assert len(table.pages) == 4
        assert table.pages[-1].body_rows == [9]

    @pytest.mark.asyncio
    async def test_layout_is_deterministic(
        self, measurer: FixedWidthMeasurer, small_page: PageSize
    ) -> None:
        """Test the same options give the same geometry every time."""
        options = sample_ledger_options(25)
        options["body"][3] = ["a much longer entry that wraps onto several lines " * 3]
        options["foot"] = [["total"]]

        first = await dry_run_auto_table(options, small_page, measurer)
        second = await dry_run_auto_table(options, small_page, FixedWidthMeasurer())

        assert geometry(first) == geometry(second)
        assert [page.body_rows for page in first.pages] == [page.body_rows for page in second.pages]

    @pytest.mark.asyncio
    async def test_matches_drawn_layout(
        self, measurer: FixedWidthMeasurer, small_page: PageSize
    ) -> None:
        """Test a dry run predicts where auto_table places rows."""
        dry = await dry_run_auto_table(sample_ledger_options(7), small_page, measurer)
        drawn = await auto_table(
            sample_ledger_options(7), RecordingRenderer(small_page), FixedWidthMeasurer()
        )

        assert geometry(dry) == geometry(drawn)
