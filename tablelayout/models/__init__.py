"""Pydantic models for the caller-facing table options and resolved styles."""

from tablelayout.models.cell_styles import CellStyles, default_styles, normalize_style_keys
from tablelayout.models.spacing import Spacing
from tablelayout.models.table_options import (
    CellDef,
    ColumnDef,
    TableOptions,
    TableSettings,
)

__all__ = [
    "CellDef",
    "CellStyles",
    "ColumnDef",
    "Spacing",
    "TableOptions",
    "TableSettings",
    "default_styles",
    "normalize_style_keys",
]
