"""Table layout and pagination engine.

Lays out tabular content (head/body/foot rows, column declarations and
per-cell styling) inside a content box, resolving column widths, spans and
wrapped cell heights, then walks the rows deciding whether each one prints,
splits across a page boundary or moves whole to the next page.
"""

from tablelayout.layout.engine import auto_table, create_table, dry_run_auto_table

__version__ = "0.3.0"

__all__ = [
    "auto_table",
    "create_table",
    "dry_run_auto_table",
]
