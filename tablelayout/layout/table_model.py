"""Cell, row, column and table model.

The grid is a list of rows per section, each row holding a sparse mapping
from column index to its own Cell. Spans never share a Cell: the anchor
cell's geometry grows and covered positions are simply absent from the
mapping.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from tablelayout.layout.spacing import parse_spacing
from tablelayout.models.cell_styles import CellStyles
from tablelayout.models.table_options import CellDef, TableSettings

if TYPE_CHECKING:
    from tablelayout.layout.hooks import HookRegistry

logger = logging.getLogger(__name__)

Section = Literal["head", "body", "foot"]
PaddingName = Literal["vertical", "horizontal", "top", "bottom", "left", "right"]

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")

# Row index used for the overflow part of a row split across pages
REMAINDER_ROW_INDEX = -1


@dataclass
class Cursor:
    """Current draw position, top-left origin, in points."""

    x: float = 0.0
    y: float = 0.0

    def copy(self) -> "Cursor":
        return Cursor(self.x, self.y)


@dataclass
class PageLayout:
    """What one page received while the table was paginated.

    Attributes:
        page_number: 1-based page number relative to the table start
        start_y: Y position where the table starts on this page
        end_y: Y position of the cursor when the page was closed
        body_rows: Indices of body rows (or their split parts) placed here
    """

    page_number: int
    start_y: float
    end_y: float = 0.0
    body_rows: list[int] = field(default_factory=list)


@dataclass
class TableStyles:
    """Style layers applied while parsing cells, already key-normalized."""

    styles: dict[str, Any] = field(default_factory=dict)
    head_styles: dict[str, Any] = field(default_factory=dict)
    body_styles: dict[str, Any] = field(default_factory=dict)
    foot_styles: dict[str, Any] = field(default_factory=dict)
    alternate_row_styles: dict[str, Any] = field(default_factory=dict)
    column_styles: dict[Any, dict[str, Any]] = field(default_factory=dict)

    def for_section(self, section: Section) -> dict[str, Any]:
        return {
            "head": self.head_styles,
            "body": self.body_styles,
            "foot": self.foot_styles,
        }[section]

    def for_column(self, column: "Column") -> dict[str, Any]:
        """Column style layer, looked up by data key then by index."""
        for key in (column.data_key, column.index, str(column.data_key), str(column.index)):
            if key in self.column_styles:
                return self.column_styles[key]
        return {}


class Cell:
    """A single cell and its derived geometry.

    Attributes:
        raw: Input the cell was created from
        styles: Resolved style record
        section: Section of the owning row
        text: Line array; split on newlines at creation, wrapped by the fitter
        col_span: Number of columns covered
        row_span: Number of rows covered
        content_width: Widest line plus horizontal padding
        content_height: Height needed by the lines plus vertical padding
        wrapped_width: Width the cell asks for before resizing
        min_readable_width: Longest word plus horizontal padding
        min_width: Narrowest width the cell accepts
        width: Final width, including columns covered by a col span
        height: Final height, including rows covered by a row span
        x: Draw position, assigned during pagination
        y: Draw position, assigned during pagination
    """

    def __init__(self, raw: Any, styles: CellStyles, section: Section) -> None:
        self.raw = raw
        self.styles = styles
        self.section = section

        if isinstance(raw, CellDef):
            content = raw.content
            self.col_span = raw.col_span
            self.row_span = raw.row_span
        else:
            content = raw
            self.col_span = 1
            self.row_span = 1

        content = "" if content is None else str(content)
        self.text: list[str] = _LINE_SPLIT_RE.split(content)

        self.content_width = 0.0
        self.content_height = 0.0
        self.wrapped_width = 0.0
        self.min_readable_width = 0.0
        self.min_width = 0.0

        self.width = 0.0
        self.height = 0.0
        self.x = 0.0
        self.y = 0.0

    def get_content_height(self) -> float:
        """Height of the current lines plus vertical padding.

        Returns:
            ``max(lines * font_size * line_height + vertical padding, min_cell_height)``
        """
        line_count = len(self.text)
        line_height = self.styles.font_size * self.styles.line_height
        height = line_count * line_height + self.padding("vertical")
        return max(height, self.styles.min_cell_height)

    def padding(self, name: PaddingName) -> float:
        padding = parse_spacing(self.styles.cell_padding, 0)
        if name == "vertical":
            return padding.vertical
        if name == "horizontal":
            return padding.horizontal
        return getattr(padding, name)

    def copy(self) -> "Cell":
        """Independent copy sharing no mutable state with this cell."""
        clone = Cell.__new__(Cell)
        clone.__dict__.update(self.__dict__)
        clone.styles = self.styles.model_copy(deep=True)
        clone.text = list(self.text)
        return clone

    def __repr__(self) -> str:
        return (
            f"Cell(section={self.section!r}, text={self.text!r}, "
            f"x={self.x}, y={self.y}, width={self.width}, height={self.height})"
        )


class Column:
    """A table column.

    Attributes:
        data_key: Declared key, or the positional index
        raw: Declared column input, if any
        index: 0-based position
        wrapped_width: Widest wrapped width of the column's live cells
        min_readable_width: Widest longest-word width of its live cells
        min_width: Largest minimum width of its live cells
        width: Resolved width
    """

    def __init__(self, data_key: str | int, raw: Any, index: int) -> None:
        self.data_key = data_key
        self.raw = raw
        self.index = index

        self.wrapped_width = 0.0
        self.min_readable_width = 0.0
        self.min_width = 0.0
        self.width = 0.0

    def get_max_custom_cell_width(self, table: "Table") -> float:
        """Largest numeric ``cell_width`` declared by a cell of this column."""
        max_width = 0.0
        for row in table.all_rows():
            cell = row.cells.get(self.index)
            if cell and not isinstance(cell.styles.cell_width, str):
                max_width = max(max_width, float(cell.styles.cell_width))
        return max_width

    def __repr__(self) -> str:
        return f"Column(data_key={self.data_key!r}, index={self.index}, width={self.width})"


class Row:
    """A table row.

    Attributes:
        raw: Input the row was created from
        index: Position within its section, ``-1`` for split remainders
        section: Owning section
        cells: Column index to Cell; covered columns are absent
        height: Resolved row height
    """

    def __init__(
        self,
        raw: Any,
        index: int,
        section: Section,
        cells: dict[int, Cell],
        source_index: int | None = None,
    ) -> None:
        self.raw = raw
        self.index = index
        self.section = section
        self.cells = cells
        self.height = 0.0
        # Index of the content row a remainder row was split from
        self.source_index = index if source_index is None else source_index

    @property
    def is_remainder(self) -> bool:
        return self.index == REMAINDER_ROW_INDEX

    def get_max_cell_height(self, columns: list[Column]) -> float:
        return max(
            (self.cells[column.index].height for column in columns if column.index in self.cells),
            default=0.0,
        )

    def can_entire_row_fit(self, height: float, columns: list[Column]) -> bool:
        return self.get_max_cell_height(columns) <= height

    def get_minimum_row_height(self, columns: list[Column]) -> float:
        """Largest one-line-plus-padding requirement across the live cells."""
        minimum = 0.0
        for column in columns:
            cell = self.cells.get(column.index)
            if cell is None:
                continue
            line_advance = cell.styles.font_size * cell.styles.line_height
            one_line_height = cell.padding("vertical") + line_advance
            minimum = max(minimum, one_line_height)
        return minimum

    def __repr__(self) -> str:
        return (
            f"Row(section={self.section!r}, index={self.index}, "
            f"height={self.height}, cells={sorted(self.cells)})"
        )


class Table:
    """Root aggregate owning settings, styles, hooks, columns and rows.

    A Table is mutated in place by each layout pass and must not be shared
    between concurrent layout calls.
    """

    def __init__(
        self,
        settings: TableSettings,
        styles: TableStyles,
        hooks: "HookRegistry",
        columns: list[Column],
        head: list[Row],
        body: list[Row],
        foot: list[Row],
    ) -> None:
        self.settings = settings
        self.styles = styles
        self.hooks = hooks

        self.columns = columns
        self.head = head
        self.body = body
        self.foot = foot

        self.page_number = 1
        self.pages: list[PageLayout] = []

    def get_head_height(self) -> float:
        return sum(row.get_max_cell_height(self.columns) for row in self.head)

    def get_foot_height(self) -> float:
        return sum(row.get_max_cell_height(self.columns) for row in self.foot)

    def get_body_height(self) -> float:
        return sum(row.get_max_cell_height(self.columns) for row in self.body)

    def get_height(self) -> float:
        return self.get_head_height() + self.get_body_height() + self.get_foot_height()

    def get_width(self) -> float:
        return self.settings.table_width

    def all_rows(self) -> list[Row]:
        """Rows in table order: head, then body, then foot."""
        return self.head + self.body + self.foot

    def __repr__(self) -> str:
        return (
            f"Table(columns={len(self.columns)}, head={len(self.head)}, "
            f"body={len(self.body)}, foot={len(self.foot)}, width={self.get_width()})"
        )
