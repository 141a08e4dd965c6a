"""Layout engine: parsing, width resolution, spans, fitting and pagination.

Passes run in a fixed order over a single Table:
content_parser -> widths -> spans (columns) -> fitter -> spans (rows) -> paginator
"""

from tablelayout.layout.engine import auto_table, create_table, dry_run_auto_table
from tablelayout.layout.spacing import parse_spacing
from tablelayout.layout.table_model import Cell, Column, PageLayout, Row, Table

__all__ = [
    "Cell",
    "Column",
    "PageLayout",
    "Row",
    "Table",
    "auto_table",
    "create_table",
    "dry_run_auto_table",
    "parse_spacing",
]
