"""Column width resolution.

Every live cell is measured for its natural width (widest line) and its
readable width (longest word), both including horizontal padding. Per cell
``cell_width`` mode:

- number: the cell asks for exactly that width
- ``wrap``: the natural width, clamped to the page's available width
- ``auto``: the natural width, floored at ``min_cell_width`` (or the
  configured default)

Columns holding a numeric-width cell are fixed; the rest start at their
wrapped width and share the difference to the table width proportionally to
that wrapped width. The first resize pass keeps whole words readable; if
width is still left over, a second pass only respects ``min_width``.
"""

import logging
from typing import Callable

from tablelayout.config import get_config
from tablelayout.layout.table_model import Cell, Column, Table
from tablelayout.models.cell_styles import CellStyles
from tablelayout.render.measurement import TextMeasurer

logger = logging.getLogger(__name__)

# Rounding applied to the leftover after each resize pass
RESIZE_PRECISION = 1e10

MAX_RESIZE_PASSES = 100


async def get_string_width(lines: list[str], styles: CellStyles, measurer: TextMeasurer) -> float:
    """Width of the widest line."""
    widest = 0.0
    for line in lines:
        width = await measurer.width_of_text(
            styles.font_name, line, styles.font_size, styles.character_spacing
        )
        widest = max(widest, width)
    return widest


def get_page_available_width(table: Table, page_width: float) -> float:
    """Page width left between the table's left and right margins."""
    margin = table.settings.margin
    return page_width - (margin.left + margin.right)


async def measure_cell(cell: Cell, available_width: float, measurer: TextMeasurer) -> None:
    """Fill a cell's content, readable, minimum and wrapped widths."""
    padding = cell.padding("horizontal")
    cell.content_width = await get_string_width(cell.text, cell.styles, measurer) + padding

    words = " ".join(cell.text).split() or [""]
    longest_word_width = await get_string_width(words, cell.styles, measurer)
    cell.min_readable_width = longest_word_width + padding

    cell_width = cell.styles.cell_width
    if not isinstance(cell_width, str):
        cell.min_width = float(cell_width)
        cell.wrapped_width = float(cell_width)
    elif cell_width == "wrap":
        width = min(cell.content_width, available_width)
        cell.min_width = width
        cell.wrapped_width = width
    else:
        cell.min_width = cell.styles.min_cell_width or get_config().default_min_cell_width
        cell.wrapped_width = max(cell.content_width, cell.min_width)


async def calculate(table: Table, page_width: float, measurer: TextMeasurer) -> None:
    """Measure all live cells and aggregate per-column width requirements.

    ``did_parse_cell`` hooks run on each cell right before it is measured.
    Cells spanning several columns do not contribute to column widths; a
    column without any other cell is seeded from its column style instead.
    """
    available_width = get_page_available_width(table, page_width)
    for row in table.all_rows():
        for column in table.columns:
            cell = row.cells.get(column.index)
            if cell is None:
                continue
            table.hooks.call_cell_hooks("did_parse_cell", table, cell, row, column, None)
            await measure_cell(cell, available_width, measurer)

    for column in table.columns:
        live_cells = [
            row.cells[column.index]
            for row in table.all_rows()
            if column.index in row.cells and row.cells[column.index].col_span == 1
        ]
        for cell in live_cells:
            column.wrapped_width = max(column.wrapped_width, cell.wrapped_width)
            column.min_width = max(column.min_width, cell.min_width)
            column.min_readable_width = max(column.min_readable_width, cell.min_readable_width)

        if not live_cells:
            column_styles = table.styles.for_column(column)
            seed = column_styles.get("cell_width") or column_styles.get("min_cell_width")
            if isinstance(seed, (int, float)) and not isinstance(seed, bool):
                column.min_width = float(seed)
                column.wrapped_width = float(seed)


def resize_columns(
    columns: list[Column],
    resize_width: float,
    get_min_width: Callable[[Column], float],
) -> float:
    """Distribute ``resize_width`` over columns proportional to wrapped width.

    Columns are clamped to ``get_min_width``. Passes repeat over the columns
    that can still move until nothing is left or nothing can move.

    Args:
        columns: Resizable columns, updated in place
        resize_width: Width to add (positive) or remove (negative)
        get_min_width: Floor for a column's width

    Returns:
        Width that could not be distributed
    """
    for _ in range(MAX_RESIZE_PASSES):
        if not columns:
            break

        initial_resize_width = resize_width
        sum_wrapped_width = sum(column.wrapped_width for column in columns)

        for column in columns:
            if sum_wrapped_width > 0:
                ratio = column.wrapped_width / sum_wrapped_width
            else:
                ratio = 1 / len(columns)
            suggested_width = column.width + initial_resize_width * ratio
            min_width = get_min_width(column)
            new_width = max(suggested_width, min_width)

            resize_width -= new_width - column.width
            column.width = new_width

        resize_width = round(resize_width * RESIZE_PRECISION) / RESIZE_PRECISION
        if not resize_width:
            break

        if resize_width < 0:
            # Only columns above their floor can shrink further
            columns = [column for column in columns if column.width > get_min_width(column)]

    return resize_width


async def calculate_widths(table: Table, page_width: float, measurer: TextMeasurer) -> None:
    """Resolve every column's final width."""
    await calculate(table, page_width, measurer)

    resizable_columns: list[Column] = []
    initial_table_width = 0.0
    for column in table.columns:
        custom_width = column.get_max_custom_cell_width(table)
        if custom_width:
            column.width = custom_width
        else:
            column.width = column.wrapped_width
            resizable_columns.append(column)
        initial_table_width += column.width

    resize_width = table.get_width() - initial_table_width

    if resize_width:
        resize_width = resize_columns(
            resizable_columns,
            resize_width,
            lambda column: max(column.min_readable_width, column.min_width),
        )

    if resize_width:
        resize_width = resize_columns(
            resizable_columns,
            resize_width,
            lambda column: column.min_width,
        )

    if resize_width:
        logger.debug(f"Discarding {resize_width} of undistributable table width")

    logger.debug(f"Resolved column widths: {[round(c.width, 4) for c in table.columns]}")
