"""Measurement error exception.

This module defines the MeasurementError exception raised when the text
measurement collaborator fails, e.g. for an unregistered font.
"""

from tablelayout.exceptions.base import TableLayoutError


class MeasurementError(TableLayoutError):
    """Raised when measuring text width fails.

    A measurement failure aborts the whole table layout.
    """

    pass
