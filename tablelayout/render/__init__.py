"""Collaborators the engine talks to: text measurement and drawing.

This package contains:
- TextMeasurer / ReportLabTextMeasurer: text width measurement and wrapping
- TableRenderer / ReportLabRenderer / NullRenderer: drawing and page geometry
"""

from tablelayout.render.measurement import (
    MeasurementCache,
    ReportLabTextMeasurer,
    TextMeasurer,
    split_text_to_size,
)
from tablelayout.render.renderer import (
    NullRenderer,
    PageSize,
    ReportLabRenderer,
    TableRenderer,
    page_size_from_name,
)

__all__ = [
    "MeasurementCache",
    "NullRenderer",
    "PageSize",
    "ReportLabRenderer",
    "ReportLabTextMeasurer",
    "TableRenderer",
    "TextMeasurer",
    "page_size_from_name",
    "split_text_to_size",
]
