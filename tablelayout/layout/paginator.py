"""Pagination driver.

Places head, body and foot rows onto pages through the draw collaborator.
Each body row is either printed whole, split at a line boundary with the
overflow carried to the next page as a remainder row, or deferred whole to
the next page. Page breaks draw the repeated foot, close the page's table
border and redraw the repeated head.
"""

import logging
import math
from enum import Enum
from typing import TYPE_CHECKING

from tablelayout.exceptions.base import TableLayoutError
from tablelayout.exceptions.render_error import RenderError
from tablelayout.layout.table_model import (
    REMAINDER_ROW_INDEX,
    Cell,
    Column,
    Cursor,
    PageLayout,
    Row,
    Table,
)

if TYPE_CHECKING:
    from tablelayout.render.renderer import TableRenderer

logger = logging.getLogger(__name__)


class RowPlacement(str, Enum):
    """Decision taken for a body row against the current page."""

    PRINT = "print"
    SPLIT = "split"
    DEFER_WHOLE = "defer_whole"
    FORCE_PRINT = "force_print"


def get_remaining_page_space(
    table: Table, is_last_row: bool, cursor: Cursor, page_height: float
) -> float:
    """Vertical space left for body rows on the current page.

    The foot height is reserved when the foot is drawn on this page: always
    for ``everyPage``, and for ``lastPage`` while placing the last body row.
    """
    bottom_content_height = table.settings.margin.bottom
    show_foot = table.settings.show_foot
    if show_foot == "everyPage" or (show_foot == "lastPage" and is_last_row):
        bottom_content_height += table.get_foot_height()
    return page_height - cursor.y - bottom_content_height


def get_usable_page_height(table: Table, row: Row, page_height: float) -> float:
    """Tallest row a single page can hold."""
    margin = table.settings.margin
    usable_height = page_height - margin.vertical
    if row.section == "body":
        usable_height -= table.get_head_height() + table.get_foot_height()
    return usable_height


def decide_row_placement(
    row: Row,
    remaining_space: float,
    table: Table,
    page_height: float,
    page_is_fresh: bool = False,
) -> RowPlacement:
    """Decide how a row is placed on the current page.

    Args:
        row: Row to place
        remaining_space: Space left on the current page
        table: Owning table
        page_height: Page height in points
        page_is_fresh: True when the page was just started by a page break
            and holds no body content yet. Deferring from such a page can
            never succeed, so the row is split there instead, or printed
            whole when not even one line fits.

    Returns:
        The RowPlacement for this row
    """
    columns = table.columns
    if row.can_entire_row_fit(remaining_space, columns):
        return RowPlacement.PRINT

    usable_height = get_usable_page_height(table, row, page_height)
    minimum_height = row.get_minimum_row_height(columns)

    if minimum_height > usable_height:
        logger.warning(
            f"Row {row.source_index} in {row.section} needs at least {minimum_height:.2f}pt "
            f"but a page holds {usable_height:.2f}pt; content will overflow the page"
        )
        return RowPlacement.FORCE_PRINT

    if page_is_fresh:
        if minimum_height > remaining_space:
            logger.warning(
                f"Row {row.source_index} in {row.section} does not fit on an empty page; "
                f"placing it anyway"
            )
            return RowPlacement.FORCE_PRINT
        return RowPlacement.SPLIT

    if minimum_height >= remaining_space:
        return RowPlacement.DEFER_WHOLE
    if row.get_max_cell_height(columns) > usable_height:
        return RowPlacement.SPLIT
    if table.settings.row_page_break != "avoid":
        return RowPlacement.SPLIT
    return RowPlacement.DEFER_WHOLE


def get_remaining_line_count(cell: Cell, remaining_space: float) -> int:
    """Number of the cell's lines that fit in ``remaining_space``."""
    vertical_padding = cell.padding("vertical")
    line_advance = cell.styles.font_size * cell.styles.line_height
    remaining_lines = math.floor((remaining_space - vertical_padding) / line_advance)
    return max(0, remaining_lines)


def modify_row_to_fit(row: Row, remaining_space: float, table: Table) -> Row:
    """Truncate a row to ``remaining_space`` and return the overflow.

    Each live cell keeps the lines that fit; the remaining lines move to a
    copy of the cell in the returned remainder row. Both rows get their
    heights recomputed and every cell takes its row's height.

    Args:
        row: Row to truncate in place
        remaining_space: Space left on the current page
        table: Owning table

    Returns:
        Remainder row with index ``-1``
    """
    remainder_cells: dict[int, Cell] = {}
    row.height = 0.0
    remainder_height = 0.0

    for column in table.columns:
        cell = row.cells.get(column.index)
        if cell is None:
            continue

        remainder_cell = cell.copy()
        line_count = get_remaining_line_count(cell, remaining_space)
        remainder_cell.text = cell.text[line_count:]
        cell.text = cell.text[:line_count]

        cell.content_height = cell.get_content_height()
        if cell.content_height >= remaining_space:
            cell.content_height = remaining_space
            remainder_cell.styles.min_cell_height = max(
                0.0, remainder_cell.styles.min_cell_height - remaining_space
            )
        row.height = max(row.height, cell.content_height)

        remainder_cell.content_height = remainder_cell.get_content_height()
        remainder_height = max(remainder_height, remainder_cell.content_height)

        remainder_cells[column.index] = remainder_cell

    remainder_row = Row(
        row.raw,
        REMAINDER_ROW_INDEX,
        row.section,
        remainder_cells,
        source_index=row.source_index,
    )
    remainder_row.height = remainder_height

    for cell in remainder_row.cells.values():
        cell.height = remainder_row.height
    for cell in row.cells.values():
        cell.height = row.height

    return remainder_row


async def print_row(
    table: Table,
    row: Row,
    cursor: Cursor,
    columns: list[Column],
    renderer: "TableRenderer",
) -> None:
    """Draw a row column by column at the cursor and advance the cursor."""
    cursor.x = table.settings.margin.left
    for column in columns:
        cell = row.cells.get(column.index)
        if cell is None:
            cursor.x += column.width
            continue

        cell.x = cursor.x
        cell.y = cursor.y

        if not table.hooks.call_cell_hooks("will_draw_cell", table, cell, row, column, cursor):
            cursor.x += column.width
            continue

        try:
            await renderer.draw_cell(cell)
        except TableLayoutError:
            raise
        except Exception as e:
            raise RenderError(
                "Renderer failed to draw cell",
                context={
                    "section": row.section,
                    "row": row.source_index,
                    "column": column.index,
                    "error": str(e),
                },
            ) from e

        table.hooks.call_cell_hooks("did_draw_cell", table, cell, row, column, cursor)
        cursor.x += column.width

    cursor.y += row.height


async def add_table_border(
    table: Table, start: Cursor, cursor: Cursor, renderer: "TableRenderer"
) -> None:
    """Draw the table border box from ``start`` down to the cursor."""
    settings = table.settings
    try:
        await renderer.draw_border(
            start.x,
            start.y,
            table.get_width(),
            cursor.y - start.y,
            settings.table_line_width,
            settings.table_line_color,
        )
    except TableLayoutError:
        raise
    except Exception as e:
        raise RenderError(
            "Renderer failed to draw table border",
            context={"page_number": table.page_number, "error": str(e)},
        ) from e


async def add_page(
    table: Table,
    start: Cursor,
    cursor: Cursor,
    renderer: "TableRenderer",
) -> None:
    """Close the current page and continue the table on a new one."""
    settings = table.settings
    margin = settings.margin

    if settings.show_foot == "everyPage":
        for row in table.foot:
            await print_row(table, row, cursor, table.columns, renderer)

    table.hooks.call_page_hooks("did_draw_page", table, cursor)
    await add_table_border(table, start, cursor, renderer)
    if table.pages:
        table.pages[-1].end_y = cursor.y

    try:
        await renderer.next_page()
    except TableLayoutError:
        raise
    except Exception as e:
        raise RenderError(
            "Renderer failed to start a new page",
            context={"page_number": table.page_number, "error": str(e)},
        ) from e

    table.page_number += 1
    cursor.x = margin.left
    cursor.y = margin.top
    start.x = margin.left
    start.y = margin.top
    table.pages.append(PageLayout(page_number=table.page_number, start_y=cursor.y))
    logger.debug(f"Continuing table on page {table.page_number}")

    table.hooks.call_page_hooks("will_draw_page", table, cursor)

    if settings.show_head == "everyPage":
        for row in table.head:
            await print_row(table, row, cursor, table.columns, renderer)


async def print_full_row(
    table: Table,
    row: Row,
    is_last_row: bool,
    start: Cursor,
    cursor: Cursor,
    renderer: "TableRenderer",
) -> None:
    """Place a body row, splitting or deferring it across pages as needed.

    Runs as a loop holding at most one pending row: the row itself, or
    after a split, its remainder.
    """
    page_height = renderer.page_size.height
    columns = table.columns
    pending: Row | None = row
    page_is_fresh = False

    while pending is not None:
        remaining_space = get_remaining_page_space(table, is_last_row, cursor, page_height)
        placement = decide_row_placement(
            pending, remaining_space, table, page_height, page_is_fresh
        )

        if placement in (RowPlacement.PRINT, RowPlacement.FORCE_PRINT):
            await print_row(table, pending, cursor, columns, renderer)
            table.pages[-1].body_rows.append(pending.source_index)
            pending = None
        elif placement is RowPlacement.SPLIT:
            remainder = modify_row_to_fit(pending, remaining_space, table)
            logger.debug(
                f"Split row {pending.source_index} at {remaining_space:.2f}pt on page "
                f"{table.page_number}"
            )
            await print_row(table, pending, cursor, columns, renderer)
            table.pages[-1].body_rows.append(pending.source_index)
            await add_page(table, start, cursor, renderer)
            page_is_fresh = True
            pending = remainder
        else:
            logger.debug(f"Deferring row {pending.source_index} to page {table.page_number + 1}")
            await add_page(table, start, cursor, renderer)
            page_is_fresh = True


async def draw_table(table: Table, renderer: "TableRenderer") -> None:
    """Paginate and draw a laid-out table.

    Args:
        table: Table with widths, spans and row heights resolved
        renderer: Draw collaborator receiving cells, borders and page breaks

    Raises:
        RenderError: If the renderer fails; pages already drawn stay drawn
    """
    page_height = renderer.page_size.height
    settings = table.settings
    margin = settings.margin

    start_y = settings.start_y if settings.start_y is not None else margin.top
    cursor = Cursor(margin.left, start_y)

    min_table_bottom = start_y + margin.bottom + table.get_head_height() + table.get_foot_height()
    if settings.page_break == "avoid":
        min_table_bottom += sum(row.height for row in table.body)

    table.page_number = 1
    table.pages = []

    if settings.page_break == "always" or (
        settings.start_y is not None and min_table_bottom > page_height
    ):
        logger.debug("Table does not start on the current page, breaking first")
        try:
            await renderer.next_page()
        except TableLayoutError:
            raise
        except Exception as e:
            raise RenderError(
                "Renderer failed to start a new page", context={"error": str(e)}
            ) from e
        cursor.y = margin.top

    table.pages.append(PageLayout(page_number=table.page_number, start_y=cursor.y))
    table.hooks.call_page_hooks("will_draw_page", table, cursor)

    start = cursor.copy()

    if settings.show_head in ("firstPage", "everyPage"):
        for row in table.head:
            await print_row(table, row, cursor, table.columns, renderer)

    last_index = len(table.body) - 1
    for row in table.body:
        await print_full_row(table, row, row.index == last_index, start, cursor, renderer)

    if settings.show_foot in ("lastPage", "everyPage"):
        for row in table.foot:
            await print_row(table, row, cursor, table.columns, renderer)

    await add_table_border(table, start, cursor, renderer)
    table.pages[-1].end_y = cursor.y
    table.hooks.call_page_hooks("did_draw_page", table, cursor)

    logger.info(
        f"Drew table with {len(table.body)} body rows across {len(table.pages)} page(s)"
    )
