"""Engine entry points.

Example:
    ```python
    from pathlib import Path
    from tablelayout import auto_table
    from tablelayout.render import ReportLabRenderer, ReportLabTextMeasurer, page_size_from_name

    renderer = ReportLabRenderer.for_file(Path("report.pdf"), page_size_from_name("A4"))
    table = await auto_table(
        {"head": [["Name", "Qty"]], "body": [["Bolts", 12], ["Nuts", 40]]},
        renderer,
        ReportLabTextMeasurer(),
    )
    renderer.save()
    ```
"""

import logging
from typing import Any

from tablelayout.config import get_config
from tablelayout.exceptions.base import TableLayoutError
from tablelayout.layout.content_parser import (
    build_settings,
    build_styles,
    parse_content,
    parse_options,
)
from tablelayout.layout.fitter import fit_content
from tablelayout.layout.hooks import HookRegistry
from tablelayout.layout.paginator import draw_table
from tablelayout.layout.spans import apply_col_spans, apply_row_spans
from tablelayout.layout.table_model import Table
from tablelayout.layout.widths import calculate_widths
from tablelayout.models.table_options import TableOptions
from tablelayout.render.measurement import ReportLabTextMeasurer, TextMeasurer
from tablelayout.render.renderer import NullRenderer, PageSize, TableRenderer, page_size_from_name

logger = logging.getLogger(__name__)


async def create_table(
    options: TableOptions | dict[str, Any],
    page_size: PageSize | None = None,
    measurer: TextMeasurer | None = None,
) -> Table:
    """Parse options and lay out a table without drawing it.

    Runs the layout passes in order: parse, did_parse_cell hooks and
    measurement, width resolution, column spans, content fitting, row spans.

    Args:
        options: Table options, validated through TableOptions
        page_size: Page geometry the table is laid out for (defaults to the
            configured default page size)
        measurer: Text measurer (defaults to ReportLabTextMeasurer)

    Returns:
        Table with resolved column widths, cell sizes and row heights

    Raises:
        pydantic.ValidationError: If options are invalid
        LayoutError: If no positive table width can be derived
        MeasurementError: If the measurer fails
    """
    measurer = measurer or ReportLabTextMeasurer()
    page_size = page_size or page_size_from_name(get_config().default_page_size)

    table_options = parse_options(options)
    settings = build_settings(table_options, page_size.width)
    styles = build_styles(table_options)
    hooks = HookRegistry.from_options(table_options)

    table = parse_content(table_options, settings, styles, hooks)
    await calculate_widths(table, page_size.width, measurer)
    apply_col_spans(table)
    await fit_content(table, measurer)
    apply_row_spans(table)

    logger.debug(f"Created {table!r} with height {table.get_height():.2f}")
    return table


async def auto_table(
    options: TableOptions | dict[str, Any],
    renderer: TableRenderer,
    measurer: TextMeasurer | None = None,
) -> Table:
    """Lay out a table and draw it through ``renderer``.

    Raises:
        RenderError: If the renderer fails mid-draw
    """
    table = await create_table(options, renderer.page_size, measurer)
    try:
        await draw_table(table, renderer)
    except TableLayoutError as e:
        where = f" at {e.location}" if e.location else ""
        logger.error(f"Table drawing aborted{where}: {e}")
        raise
    return table


async def dry_run_auto_table(
    options: TableOptions | dict[str, Any],
    page_size: PageSize | None = None,
    measurer: TextMeasurer | None = None,
) -> Table:
    """Lay out and paginate a table without drawing anything.

    The returned table carries final cell positions and one PageLayout per
    page the table would touch.
    """
    page_size = page_size or page_size_from_name(get_config().default_page_size)
    return await auto_table(options, NullRenderer(page_size), measurer)
