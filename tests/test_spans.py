"""Tests for column and row span resolution."""

import pytest

from tablelayout.layout.engine import create_table
from tablelayout.layout.spans import apply_col_spans, apply_row_spans, rows_left_in_section
from tablelayout.render.renderer import PageSize
from tests.fixtures.table_builders import FixedWidthMeasurer, make_cell, make_row, make_table


class TestApplyColSpans:
    """Tests for apply_col_spans."""

    def test_anchor_takes_covered_widths(self) -> None:
        """Test a span of two over widths 20 and 30 gives the anchor 50."""
        anchor = make_cell("wide")
        anchor.col_span = 2
        row = make_row([anchor, make_cell("covered"), make_cell("c")])
        table = make_table([row], [20, 30, 40])

        apply_col_spans(table)

        assert anchor.width == 50
        assert sorted(row.cells) == [0, 2]
        assert row.cells[2].width == 40

    def test_span_is_clamped_to_last_column(self) -> None:
        """Test a span reaching past the last column stops there."""
        anchor = make_cell("wide")
        anchor.col_span = 5
        row = make_row([make_cell("a"), anchor])
        table = make_table([row], [20, 30])

        apply_col_spans(table)

        assert anchor.width == 30

    @pytest.mark.asyncio
    async def test_span_geometry_after_layout(
        self, measurer: FixedWidthMeasurer, page_size: PageSize
    ) -> None:
        """Test a parsed column span ends up as wide as the columns it covers."""
        table = await create_table(
            {
                "body": [[{"content": "x", "colSpan": 2}], ["a", "b"]],
                "columnStyles": {0: {"cellWidth": 20}, 1: {"cellWidth": 30}},
            },
            page_size,
            measurer,
        )

        first = table.body[0]
        assert [column.width for column in table.columns] == [20, 30]
        assert first.cells[0].width == 50
        assert 1 not in first.cells


class TestApplyRowSpans:
    """Tests for apply_row_spans."""

    def test_anchor_accumulates_covered_row_heights(self) -> None:
        """Test the anchor grows by each covered row's height."""
        anchor = make_cell("tall")
        anchor.row_span = 3
        rows = [
            make_row([anchor, make_cell("a")], index=0),
            make_row([make_cell("stale"), make_cell("b")], index=1),
            make_row([make_cell("stale"), make_cell("c")], index=2),
        ]
        rows[0].height, rows[1].height, rows[2].height = 20, 25, 30
        table = make_table(rows, [50, 50])

        apply_row_spans(table)

        assert anchor.height == 75
        assert sorted(rows[1].cells) == [1]
        assert sorted(rows[2].cells) == [1]
        assert rows[1].cells[1].height == 25

    def test_span_stops_at_section_end(self) -> None:
        """Test a row span in the last body row does not eat foot cells."""
        anchor = make_cell("tall")
        anchor.row_span = 4
        body = [make_row([anchor], index=0)]
        foot = [make_row([make_cell("total", section="foot")], index=0, section="foot")]
        body[0].height = 20
        foot[0].height = 15
        table = make_table(body, [50], foot=foot)

        apply_row_spans(table)

        assert anchor.height == 20
        assert 0 in table.foot[0].cells

    def test_rows_left_in_section(self) -> None:
        """Test counting rows after a position within the same section."""
        head = [make_row([make_cell("h", section="head")], section="head")]
        body = [make_row([make_cell("b")], index=i) for i in range(3)]
        rows = head + body

        assert rows_left_in_section(rows, 0) == 0
        assert rows_left_in_section(rows, 1) == 2
        assert rows_left_in_section(rows, 3) == 0

    @pytest.mark.asyncio
    async def test_row_span_height_after_layout(
        self, measurer: FixedWidthMeasurer, page_size: PageSize
    ) -> None:
        """Test a tall spanning cell stretches the last row it covers."""
        table = await create_table(
            {"body": [[{"content": "l1\nl2\nl3\nl4", "rowSpan": 2}, "a"], ["b"]]},
            page_size,
            measurer,
        )

        first, second = table.body
        anchor = first.cells[0]
        assert first.height == 20
        assert second.height == 30
        assert anchor.height == 50
        assert sorted(second.cells) == [1]
        assert second.cells[1].height == 30
