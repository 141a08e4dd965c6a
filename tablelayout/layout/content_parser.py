"""Content parser.

Turns validated TableOptions into Columns and per-section Rows of Cells
with resolved styles. Style layers apply lowest to highest:

engine defaults -> ``styles`` -> section styles -> column styles (body only)
-> alternate row styles (even body rows) -> the cell's own ``styles``

Row spans are bookkept here: a column covered by a row span from an earlier
row gets no cell, and neither does a column the row has no value for.
Column spans likewise consume no input slots for the columns they cover, so
ordered rows list only the cells that exist.
"""

import logging
from typing import Any

from tablelayout.exceptions.layout_error import LayoutError
from tablelayout.layout.hooks import HookRegistry
from tablelayout.layout.spacing import parse_spacing
from tablelayout.layout.table_model import Cell, Column, Row, Section, Table, TableStyles
from tablelayout.models.cell_styles import CellStyles, default_styles, normalize_style_keys
from tablelayout.models.table_options import (
    CellDef,
    ColumnDef,
    RowInput,
    TableOptions,
    TableSettings,
)

logger = logging.getLogger(__name__)

# Marks a column a raw row holds no value for
MISSING = object()


def parse_options(options: TableOptions | dict[str, Any]) -> TableOptions:
    """Validate raw caller options.

    Args:
        options: TableOptions instance or a plain mapping of options

    Returns:
        Validated TableOptions

    Raises:
        pydantic.ValidationError: If an option has an invalid value
    """
    if isinstance(options, TableOptions):
        return options
    return TableOptions.model_validate(options)


def build_settings(options: TableOptions, page_width: float) -> TableSettings:
    """Normalize options into TableSettings.

    Raises:
        LayoutError: If no positive table width can be derived
    """
    margin = parse_spacing(options.margin, 0)

    if options.show_head is True:
        show_head = "everyPage"
    elif options.show_head is False:
        show_head = "never"
    else:
        show_head = options.show_head

    if options.show_foot is True:
        show_foot = "everyPage"
    elif options.show_foot is False:
        show_foot = "never"
    else:
        show_foot = options.show_foot

    table_width = options.table_width
    if table_width is None:
        table_width = page_width - margin.horizontal
    if table_width <= 0:
        raise LayoutError(
            "Table width must be positive",
            context={"table_width": table_width, "page_width": page_width},
        )

    settings = TableSettings(
        start_y=options.start_y,
        margin=margin,
        page_break=options.page_break,
        row_page_break=options.row_page_break,
        table_width=table_width,
        show_head=show_head,
        show_foot=show_foot,
        table_line_width=options.table_line_width,
    )
    if options.table_line_color is not None:
        settings.table_line_color = options.table_line_color
    return settings


def build_styles(options: TableOptions) -> TableStyles:
    """Collect the option style layers with keys normalized to snake_case.

    Args:
        options: Validated table options

    Returns:
        TableStyles holding the table, section, alternate row and column layers
    """
    return TableStyles(
        styles=normalize_style_keys(options.styles),
        head_styles=normalize_style_keys(options.head_styles),
        body_styles=normalize_style_keys(options.body_styles),
        foot_styles=normalize_style_keys(options.foot_styles),
        alternate_row_styles=normalize_style_keys(options.alternate_row_styles),
        column_styles={
            key: normalize_style_keys(value) for key, value in options.column_styles.items()
        },
    )


def _as_cell_input(raw_cell: Any) -> Any:
    if CellDef.is_cell_def(raw_cell):
        return CellDef.model_validate(raw_cell)
    return raw_cell


def parse_columns(head: list[RowInput], body: list[RowInput], foot: list[RowInput]) -> list[Any]:
    """Derive column inputs from the first available row.

    Ordered rows give positional keys; keyed rows give one column per key.
    A cell spanning N columns contributes N columns (``key``, ``key_1`` ...).
    """
    first_row: RowInput = (head or body or foot or [[]])[0]
    items = list(first_row.items()) if isinstance(first_row, dict) else list(enumerate(first_row))

    result: list[Any] = []
    for key, value in items:
        cell_input = _as_cell_input(value)
        col_span = cell_input.col_span if isinstance(cell_input, CellDef) else 1
        for i in range(col_span):
            if isinstance(first_row, dict):
                data_key: str | int = key if i == 0 else f"{key}_{i}"
            else:
                data_key = len(result)
            result.append(ColumnDef(data_key=data_key))
    return result


def create_columns(column_inputs: list[Any]) -> list[Column]:
    """Build Columns, keyed by declared ``data_key`` or by position."""
    columns = []
    for index, raw in enumerate(column_inputs):
        if isinstance(raw, dict):
            raw = ColumnDef.model_validate(raw)
        if isinstance(raw, ColumnDef) and raw.data_key is not None:
            data_key = raw.data_key
        else:
            data_key = index
        columns.append(Column(data_key, raw, index))
    return columns


def _section_title(section: Section, column_input: Any) -> str | None:
    if section == "head":
        if isinstance(column_input, ColumnDef):
            return column_input.header
        if isinstance(column_input, (str, int, float)) and not isinstance(column_input, bool):
            return str(column_input)
    elif section == "foot" and isinstance(column_input, ColumnDef):
        return column_input.footer
    return None


def generate_section_row(columns: list[Column], section: Section) -> dict[Any, str] | None:
    """Synthesize a head or foot row from column headers or footers."""
    section_row: dict[Any, str] = {}
    for column in columns:
        if column.raw is None:
            continue
        title = _section_title(section, column.raw)
        if title is not None:
            section_row[column.data_key] = title
    return section_row or None


def cell_styles(
    section: Section,
    column: Column,
    row_index: int,
    styles: TableStyles,
    cell_override: dict[str, Any] | None = None,
) -> CellStyles:
    """Resolve the effective style of one cell by layering."""
    merged = default_styles()
    merged.update(styles.styles)
    merged.update(styles.for_section(section))
    if section == "body":
        merged.update(styles.for_column(column))
        if row_index % 2 == 0:
            merged.update(styles.alternate_row_styles)
    merged.update(normalize_style_keys(cell_override))
    return CellStyles(**merged)


def _read_raw_cell(raw_row: RowInput, column: Column, slot: int) -> Any:
    """Value a row holds for ``column``, or ``MISSING`` when it has none."""
    if isinstance(raw_row, dict):
        if column.data_key in raw_row:
            return raw_row[column.data_key]
        return raw_row.get(str(column.data_key), MISSING)
    if 0 <= slot < len(raw_row):
        return raw_row[slot]
    return MISSING


def parse_section(
    section: Section,
    section_rows: list[RowInput],
    columns: list[Column],
    styles: TableStyles,
) -> list[Row]:
    """Parse raw rows of one section into Rows.

    Columns a row has no value for, and columns covered by an earlier row
    span or by a column span, get no cell. An explicit ``None`` value still
    gets an empty cell.

    Args:
        section: Section the rows belong to
        section_rows: Raw ordered or keyed rows
        columns: Table columns
        styles: Table style layers

    Returns:
        One Row per raw row, each holding a sparse column index to Cell map
    """
    # column index -> [rows still covered, columns covered to the right]
    row_spans_left: dict[int, list[int]] = {}
    rows: list[Row] = []

    for row_index, raw_row in enumerate(section_rows):
        cells: dict[int, Cell] = {}
        skipped_for_row_spans = 0
        col_spans_added = 0
        column_spans_left = 0

        for column in columns:
            span_state = row_spans_left.get(column.index)
            if span_state is None or span_state[0] == 0:
                if column_spans_left == 0:
                    slot = column.index - col_spans_added - skipped_for_row_spans
                    value = _read_raw_cell(raw_row, column, slot)
                    if value is MISSING:
                        row_spans_left[column.index] = [0, 0]
                        continue

                    raw_cell = _as_cell_input(value)
                    override = raw_cell.styles if isinstance(raw_cell, CellDef) else None
                    resolved = cell_styles(section, column, row_index, styles, override)
                    cell = Cell(raw_cell, resolved, section)
                    cells[column.index] = cell

                    column_spans_left = cell.col_span - 1
                    row_spans_left[column.index] = [cell.row_span - 1, column_spans_left]
                else:
                    column_spans_left -= 1
                    col_spans_added += 1
            else:
                span_state[0] -= 1
                column_spans_left = span_state[1]
                skipped_for_row_spans += 1

        rows.append(Row(raw_row, row_index, section, cells))

    return rows


def parse_content(
    options: TableOptions,
    settings: TableSettings,
    styles: TableStyles,
    hooks: HookRegistry,
) -> Table:
    """Build a Table with fully populated rows from validated options."""
    column_inputs = options.columns
    if column_inputs is None:
        column_inputs = parse_columns(options.head, options.body, options.foot)
    columns = create_columns(column_inputs)

    head = list(options.head)
    foot = list(options.foot)
    if not head:
        section_row = generate_section_row(columns, "head")
        if section_row:
            head.append(section_row)
    if not foot:
        section_row = generate_section_row(columns, "foot")
        if section_row:
            foot.append(section_row)

    table = Table(
        settings=settings,
        styles=styles,
        hooks=hooks,
        columns=columns,
        head=parse_section("head", head, columns, styles),
        body=parse_section("body", list(options.body), columns, styles),
        foot=parse_section("foot", foot, columns, styles),
    )
    logger.debug(
        f"Parsed table: {len(columns)} columns, {len(table.head)} head, "
        f"{len(table.body)} body, {len(table.foot)} foot rows"
    )
    return table
