"""Color utilities for drawing table cells and borders."""

import logging

logger = logging.getLogger(__name__)


def hex_to_rgb(hex_color: str | None) -> tuple[float, float, float] | None:
    """Convert hex color to RGB tuple for ReportLab.

    Args:
        hex_color: Hex color string (e.g., "#1a1a1a" or "#1a1"); an empty
            string or None means "do not paint"

    Returns:
        RGB tuple with values 0.0-1.0, or None for no color

    Raises:
        ValueError: If the string is not a 3- or 6-digit hex color
    """
    if not hex_color:
        return None

    value = hex_color.lstrip("#")

    # Handle 3-digit hex colors
    if len(value) == 3:
        value = "".join(c * 2 for c in value)
    if len(value) != 6:
        raise ValueError(f"Invalid hex color: {hex_color!r}")

    # Convert to RGB (0-255) then normalize to 0.0-1.0
    r = int(value[0:2], 16) / 255.0
    g = int(value[2:4], 16) / 255.0
    b = int(value[4:6], 16) / 255.0

    return (r, g, b)
