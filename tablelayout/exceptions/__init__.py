"""Custom exception classes for the table layout engine.

This package contains the exception hierarchy:
- TableLayoutError: Base exception for all engine errors
- LayoutError: Raised when caller input cannot be laid out
- MeasurementError: Raised when the measurement collaborator fails
- RenderError: Raised when the draw collaborator fails
"""

from tablelayout.exceptions.base import TableLayoutError
from tablelayout.exceptions.layout_error import LayoutError
from tablelayout.exceptions.measurement_error import MeasurementError
from tablelayout.exceptions.render_error import RenderError

__all__ = [
    "TableLayoutError",
    "LayoutError",
    "MeasurementError",
    "RenderError",
]
