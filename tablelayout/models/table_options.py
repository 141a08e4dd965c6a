"""Caller options for laying out a table.

This module defines the Pydantic models that validate the options a caller
passes to the engine (section contents, column declarations, style layers,
page-break policies and hooks) and the normalized settings derived from
them.

Example:
    ```python
    from tablelayout.models.table_options import TableOptions

    options = TableOptions(
        head=[["Name", "City"]],
        body=[["Alice", "New York"], ["Bob", "Paris"]],
        table_width=300,
        margin={"top": 36, "horizontal": 40},
        show_head="everyPage",
        row_page_break="avoid",
    )
    ```
"""

from typing import Any, Callable, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from tablelayout.models.spacing import Spacing

Hook = Callable[..., Any]
HookInput = Union[Hook, list[Hook], None]
RowInput = Union[list[Any], dict[str, Any]]

PageBreak = Literal["auto", "avoid", "always"]
RowPageBreak = Literal["auto", "avoid"]
ShowHead = Literal["everyPage", "firstPage", "never"]
ShowFoot = Literal["everyPage", "lastPage", "never"]


class ColumnDef(BaseModel):
    """Declared column.

    Attributes:
        header: Title used to synthesize a head row when none is supplied
        footer: Title used to synthesize a foot row when none is supplied
        data_key: Key used to read keyed rows and column styles
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    header: Optional[str] = None
    footer: Optional[str] = None
    data_key: Optional[Union[str, int]] = None


class CellDef(BaseModel):
    """Explicit cell input with spans and a per-cell style override.

    Attributes:
        content: Cell text (converted with ``str``; None becomes empty)
        col_span: Number of columns the cell covers
        row_span: Number of rows the cell covers
        styles: Partial style mapping with the highest precedence
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    content: Any = ""
    col_span: int = Field(default=1, ge=1)
    row_span: int = Field(default=1, ge=1)
    styles: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def is_cell_def(cls, value: Any) -> bool:
        """Return True when a raw row value is a mapping describing a cell."""
        if not isinstance(value, dict):
            return False
        known = set(cls.model_fields) | {f.alias for f in cls.model_fields.values() if f.alias}
        return bool(value) and set(value) <= known


class TableOptions(BaseModel):
    """Everything the caller supplies for one table.

    Style layers (``styles``, ``head_styles`` ...) are partial mappings
    keyed by CellStyles field names in snake_case or camelCase. Each hook
    option accepts a single callable or a list of them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="forbid",
    )

    start_y: Optional[float] = None
    table_width: Optional[float] = None
    margin: Any = None
    page_break: PageBreak = "auto"
    row_page_break: RowPageBreak = "auto"
    show_head: Union[bool, ShowHead] = "everyPage"
    show_foot: Union[bool, ShowFoot] = "everyPage"
    table_line_width: float = Field(default=0.0, ge=0.0)
    table_line_color: Optional[str] = None

    head: list[RowInput] = Field(default_factory=list)
    body: list[RowInput] = Field(default_factory=list)
    foot: list[RowInput] = Field(default_factory=list)
    columns: Optional[list[Any]] = None

    styles: dict[str, Any] = Field(default_factory=dict)
    head_styles: dict[str, Any] = Field(default_factory=dict)
    body_styles: dict[str, Any] = Field(default_factory=dict)
    foot_styles: dict[str, Any] = Field(default_factory=dict)
    alternate_row_styles: dict[str, Any] = Field(default_factory=dict)
    column_styles: dict[Union[int, str], dict[str, Any]] = Field(default_factory=dict)

    did_parse_cell: HookInput = None
    will_draw_cell: HookInput = None
    did_draw_cell: HookInput = None
    will_draw_page: HookInput = None
    did_draw_page: HookInput = None

    @field_validator(
        "did_parse_cell", "will_draw_cell", "did_draw_cell", "will_draw_page", "did_draw_page"
    )
    @classmethod
    def validate_hooks(cls, value: HookInput) -> HookInput:
        """Ensure every hook entry is callable.

        Raises:
            ValueError: If a hook is not callable
        """
        handlers = value if isinstance(value, list) else [value]
        for handler in handlers:
            if handler is not None and not callable(handler):
                raise ValueError(f"Hook must be callable, got {type(handler).__name__}")
        return value


class TableSettings(BaseModel):
    """Settings normalized from TableOptions.

    Attributes:
        start_y: Vertical start position, None to start at the top margin
        margin: Resolved page margins
        page_break: Page-break policy for the whole table
        row_page_break: Whether rows may split across pages
        table_width: Resolved table width in points
        show_head: Head visibility policy
        show_foot: Foot visibility policy
        table_line_width: Width of the border drawn around the table
        table_line_color: Color of the border drawn around the table
    """

    start_y: Optional[float] = None
    margin: Spacing = Field(default_factory=Spacing)
    page_break: PageBreak = "auto"
    row_page_break: RowPageBreak = "auto"
    table_width: float = 0.0
    show_head: ShowHead = "everyPage"
    show_foot: ShowFoot = "everyPage"
    table_line_width: float = 0.0
    table_line_color: str = "#000000"
