"""Hook dispatch.

Callers extend the engine with five named hooks:

- ``did_parse_cell``: after a cell is parsed, before it is measured
- ``will_draw_cell``: before a cell is drawn; returning ``False`` skips it
- ``did_draw_cell``: after a cell is drawn
- ``will_draw_page``: before anything is drawn on a page
- ``did_draw_page``: after everything is drawn on a page

Handlers run in registration order and receive a HookData view with
read/write access to the table, cursor and (for cell hooks) the cell, row
and column. Only an explicit ``False`` is an abort signal; any other return
value, including None, lets dispatch continue.
"""

import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Iterable

if TYPE_CHECKING:
    from tablelayout.layout.table_model import Cell, Column, Cursor, Row, Table
    from tablelayout.models.table_options import TableOptions

logger = logging.getLogger(__name__)

CELL_HOOKS = ("did_parse_cell", "will_draw_cell", "did_draw_cell")
PAGE_HOOKS = ("will_draw_page", "did_draw_page")
HOOK_NAMES = CELL_HOOKS + PAGE_HOOKS

_LINE_SPLIT_RE = re.compile(r"\r\n|\r|\n")


class HookData:
    """View handed to page hooks."""

    def __init__(self, table: "Table", cursor: "Cursor | None") -> None:
        self.table = table
        self.page_number = table.page_number
        self.settings = table.settings
        self.cursor = cursor


class CellHookData(HookData):
    """View handed to cell hooks."""

    def __init__(
        self,
        table: "Table",
        cell: "Cell",
        row: "Row",
        column: "Column",
        cursor: "Cursor | None",
    ) -> None:
        super().__init__(table, cursor)
        self.cell = cell
        self.row = row
        self.column = column
        self.section = row.section


class HookRegistry:
    """Ordered handlers for each named hook."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Callable[..., Any]]] = {name: [] for name in HOOK_NAMES}

    @classmethod
    def from_options(cls, options: "TableOptions") -> "HookRegistry":
        registry = cls()
        for name in HOOK_NAMES:
            value = getattr(options, name)
            if value is None:
                continue
            handlers: Iterable[Callable[..., Any]] = value if isinstance(value, list) else [value]
            for handler in handlers:
                registry.register(name, handler)
        return registry

    def register(self, name: str, handler: Callable[..., Any]) -> None:
        """Append a handler to the named hook.

        Raises:
            ValueError: If the hook name is unknown or the handler is not callable
        """
        if name not in self._handlers:
            raise ValueError(f"Unknown hook '{name}', expected one of {HOOK_NAMES}")
        if not callable(handler):
            raise ValueError(f"Hook '{name}' handler must be callable")
        self._handlers[name].append(handler)

    def handlers(self, name: str) -> list[Callable[..., Any]]:
        return list(self._handlers[name])

    def call_cell_hooks(
        self,
        name: str,
        table: "Table",
        cell: "Cell",
        row: "Row",
        column: "Column",
        cursor: "Cursor | None",
    ) -> bool:
        """Run cell handlers until one returns ``False``.

        Returns:
            False if a handler aborted, True otherwise
        """
        for handler in self._handlers[name]:
            data = CellHookData(table, cell, row, column, cursor)
            aborted = handler(data) is False
            # Handlers may assign a plain string to cell.text
            if not isinstance(cell.text, list):
                cell.text = _LINE_SPLIT_RE.split(str(cell.text))
            if aborted:
                logger.debug(f"Hook '{name}' aborted cell in column {column.index}")
                return False
        return True

    def call_page_hooks(self, name: str, table: "Table", cursor: "Cursor") -> None:
        for handler in self._handlers[name]:
            handler(HookData(table, cursor))
