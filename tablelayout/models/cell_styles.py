"""Resolved cell style record.

This module defines the CellStyles Pydantic model holding the style of one
cell after every style layer has been applied, and the helpers used to
layer partial style mappings supplied by the caller.

Example:
    ```python
    from tablelayout.models.cell_styles import CellStyles, normalize_style_keys

    layer = normalize_style_keys({"fontSize": 12, "fill_color": "#eeeeee"})
    styles = CellStyles(**layer)
    ```
"""

import logging
from collections.abc import Mapping
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tablelayout.config import get_config

logger = logging.getLogger(__name__)

CellWidth = Union[float, Literal["auto", "wrap"]]

# Names accepted from the wider option surface that map onto a field
_EXTRA_ALIASES = {
    "backgroundColor": "fill_color",
    "background_color": "fill_color",
    "fontColor": "text_color",
    "font_color": "text_color",
    "borderColor": "line_color",
    "border_color": "line_color",
    "borderWidth": "line_width",
    "border_width": "line_width",
    "padding": "cell_padding",
}


class CellStyles(BaseModel):
    """Style of a single cell.

    Attributes:
        font_name: Font identifier passed to the measurement collaborator
        fill_color: Background color in hex, empty for none
        text_color: Text color in hex
        line_height: Line height multiplier applied to font_size
        character_spacing: Extra space in points between characters
        alignment: Horizontal text alignment
        vertical_alignment: Vertical text alignment
        font_size: Font size in points
        cell_padding: Padding as any spacing input (scalar, list or mapping)
        line_color: Border color in hex, empty for none
        line_width: Border width, a number or a per-side mapping
        cell_width: ``auto``, ``wrap`` or a fixed width in points
        min_cell_height: Minimum cell height in points
        min_cell_width: Minimum width of ``auto`` cells in points
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    font_name: str = "Helvetica"
    fill_color: str = ""
    text_color: str = "#000000"
    line_height: float = Field(default=1.0, gt=0.0)
    character_spacing: float = 0.0
    alignment: Literal["left", "center", "right"] = "left"
    vertical_alignment: Literal["top", "middle", "bottom"] = "middle"
    font_size: float = Field(default=10.0, gt=0.0)
    cell_padding: Any = 5.0
    line_color: str = "#000000"
    line_width: Union[float, dict[str, float]] = 0.0
    cell_width: CellWidth = "auto"
    min_cell_height: float = 0.0
    min_cell_width: float = 0.0


def _field_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}
    for name, field in CellStyles.model_fields.items():
        lookup[name] = name
        if field.alias:
            lookup[field.alias] = name
    lookup.update(_EXTRA_ALIASES)
    return lookup


_FIELD_LOOKUP = _field_lookup()


def normalize_style_keys(layer: Mapping[str, Any] | None) -> dict[str, Any]:
    """Map a partial style mapping onto CellStyles field names.

    Both snake_case and camelCase names are accepted. Unknown keys are
    dropped.

    Args:
        layer: Partial style mapping supplied by the caller (may be None)

    Returns:
        New dictionary keyed by CellStyles field names
    """
    if not layer:
        return {}

    normalized: dict[str, Any] = {}
    for key, value in layer.items():
        field_name = _FIELD_LOOKUP.get(key)
        if field_name is None:
            logger.debug(f"Ignoring unknown style property: {key}")
            continue
        normalized[field_name] = value
    return normalized


def default_styles() -> dict[str, Any]:
    """Engine default style layer, drawn from the configuration."""
    config = get_config()
    return {
        "font_name": config.default_font_name,
        "fill_color": "",
        "text_color": "#000000",
        "line_height": 1.0,
        "character_spacing": 0.0,
        "alignment": "left",
        "vertical_alignment": "middle",
        "font_size": config.default_font_size,
        "cell_padding": config.default_cell_padding,
        "line_color": config.default_line_color,
        "line_width": 0.0,
        "cell_width": "auto",
        "min_cell_height": 0.0,
        "min_cell_width": 0.0,
    }
