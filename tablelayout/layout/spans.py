"""Span resolution.

Column spans run after widths are resolved: the anchor cell's width becomes
the sum of the columns it covers and the covered columns are removed from
the row. Row spans run after content fitting, once row heights are known:
the anchor cell's height accumulates the heights of the rows it covers and
those rows lose their cell for the anchor's columns.

Both walks use table order (head, body, foot). A row span never reaches
past the end of the anchor's section.
"""

import logging

from tablelayout.layout.table_model import Cell, Row, Table

logger = logging.getLogger(__name__)


def rows_left_in_section(rows: list[Row], row_index: int) -> int:
    """Number of rows after ``row_index`` that belong to the same section."""
    section = rows[row_index].section
    count = 0
    for row in rows[row_index + 1:]:
        if row.section != section:
            break
        count += 1
    return count


def apply_col_spans(table: Table) -> None:
    """Widen column-span anchors and drop the cells they cover.

    An anchor takes the summed width of the columns it covers; a span
    running past the last column is clamped there.

    Args:
        table: Table with resolved column widths
    """
    columns = table.columns
    for row in table.all_rows():
        position = 0
        while position < len(columns):
            column = columns[position]
            cell = row.cells.get(column.index)
            if cell is None:
                position += 1
                continue

            span = max(1, min(cell.col_span, len(columns) - position))
            covered = columns[position:position + span]
            cell.width = sum(covered_column.width for covered_column in covered)
            for covered_column in covered[1:]:
                row.cells.pop(covered_column.index, None)
            position += span


def apply_row_spans(table: Table) -> None:
    """Grow row-span anchors over the rows they cover, in table order.

    Covered cells are removed from later rows. A span stops at the end of
    its section.

    Args:
        table: Table with fitted row heights
    """
    rows = table.all_rows()
    # column index -> (anchor cell, rows still covered)
    pending: dict[int, tuple[Cell, int]] = {}

    for row_index, row in enumerate(rows):
        for column in table.columns:
            state = pending.get(column.index)
            if state is not None:
                anchor, rows_left = state
                anchor.height += row.height
                for covered_index in range(column.index, column.index + anchor.col_span):
                    row.cells.pop(covered_index, None)
                if rows_left <= 1:
                    del pending[column.index]
                else:
                    pending[column.index] = (anchor, rows_left - 1)
                continue

            cell = row.cells.get(column.index)
            if cell is None:
                continue
            cell.height = row.height
            if cell.row_span > 1:
                rows_left = min(cell.row_span - 1, rows_left_in_section(rows, row_index))
                if rows_left > 0:
                    pending[column.index] = (cell, rows_left)
