"""Render error exception.

This module defines the RenderError exception raised when the draw
collaborator fails while placing a cell, a border or a new page.
"""

from tablelayout.exceptions.base import TableLayoutError


class RenderError(TableLayoutError):
    """Raised when drawing onto the output surface fails.

    Pages drawn before the failure are not rolled back; the caller owns
    the output surface.
    """

    pass
