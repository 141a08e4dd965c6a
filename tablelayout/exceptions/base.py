"""Base exception class for all table layout errors.

Every engine error carries a message and a context mapping. The context
names where in the table the failure happened (``section``, ``row``,
``column``, ``page_number``) and, for wrapped collaborator failures, the
original error text under ``error``.
"""

from typing import Any


class TableLayoutError(Exception):
    """Base exception for all table layout errors.

    Attributes:
        message: Error message describing what went wrong
        context: Table position and collaborator details for the failure
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = dict(context or {})

    @property
    def location(self) -> str:
        """Table position recorded in the context.

        Returns:
            Text such as ``"body row 3, column 1, page 2"``, or an empty
            string when the context names no position
        """
        context = self.context
        parts = []
        if "section" in context:
            section = str(context["section"])
            if "row" in context:
                section = f"{section} row {context['row']}"
            parts.append(section)
        if "column" in context:
            parts.append(f"column {context['column']}")
        if "page_number" in context:
            parts.append(f"page {context['page_number']}")
        return ", ".join(parts)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        context_str = f", context={self.context}" if self.context else ""
        return f"{self.__class__.__name__}({self.message!r}{context_str})"
