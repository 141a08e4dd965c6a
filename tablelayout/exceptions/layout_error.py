"""Layout error exception.

This module defines the LayoutError exception raised when caller input
cannot be laid out at all, such as a table with no positive width.
"""

from tablelayout.exceptions.base import TableLayoutError


class LayoutError(TableLayoutError):
    """Raised when a table cannot be laid out.

    Malformed but recoverable input (spacing, sparse rows) is normalized
    instead; this error is reserved for geometry the engine cannot honor.
    """

    pass
