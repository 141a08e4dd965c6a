"""Content fitting.

Wraps every live cell's text to its final width (after column spans), then
derives content heights and row heights. A cell spanning several rows does
not stretch its anchor row; instead its height is carried forward and the
last row it covers grows by whatever the covered rows did not already
provide.
"""

import logging

from tablelayout.layout.spans import rows_left_in_section
from tablelayout.layout.table_model import Cell, Table
from tablelayout.render.measurement import TextMeasurer, split_text_to_size

logger = logging.getLogger(__name__)


async def wrap_cell(cell: Cell, measurer: TextMeasurer) -> None:
    """Replace the cell's lines with lines wrapped to its width."""
    box_width = max(cell.width - cell.padding("horizontal"), 0.0)
    cell.text = await split_text_to_size(
        measurer,
        "\n".join(cell.text),
        box_width,
        cell.styles.font_name,
        cell.styles.font_size,
        cell.styles.character_spacing,
    )
    cell.content_height = cell.get_content_height()


async def fit_content(table: Table, measurer: TextMeasurer) -> None:
    """Wrap text and compute row heights, walking rows in table order."""
    rows = table.all_rows()
    # Carried per row-spanning cell: [rows still to visit, height still owed]
    pending_spans: list[list[float]] = []

    for row_index, row in enumerate(rows):
        row.height = 0.0
        for column in table.columns:
            cell = row.cells.get(column.index)
            if cell is None:
                continue
            await wrap_cell(cell, measurer)

            if cell.row_span > 1:
                span_rows = 1 + min(cell.row_span - 1, rows_left_in_section(rows, row_index))
                pending_spans.append([span_rows, cell.content_height])
            elif cell.content_height > row.height:
                row.height = cell.content_height

        for span in pending_spans:
            if span[0] == 1 and span[1] > row.height:
                row.height = span[1]
        for span in pending_spans:
            span[0] -= 1
            span[1] -= row.height
        pending_spans = [span for span in pending_spans if span[0] > 0]

    logger.debug(f"Fitted content for {len(rows)} rows")
