"""Spacing resolver.

Normalizes margin, padding and border-width input into a four-sided box.
Accepted shapes:

- a number, applied to every side
- a sequence in CSS shorthand order (top, right, bottom, left) with the
  usual 1-, 2- and 3-value expansions
- a mapping with any of ``top``/``right``/``bottom``/``left`` plus the
  ``vertical``/``horizontal`` aliases, which win over the sides they cover

Anything unresolvable falls back to the default, side by side. This never
raises.
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from tablelayout.models.spacing import Spacing

logger = logging.getLogger(__name__)


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _side(value: Any, default: float) -> float:
    number = _as_number(value)
    return default if number is None else number


def parse_spacing(value: Any, default: float = 0.0) -> Spacing:
    """Resolve a spacing input into a Spacing box.

    Args:
        value: Scalar, 1-4 element sequence, mapping, Spacing or None
        default: Value used for every side that cannot be resolved

    Returns:
        Spacing with all four sides set
    """
    if isinstance(value, Spacing):
        return value.model_copy()

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        sides = list(value)
        if len(sides) >= 4:
            top, right, bottom, left = sides[:4]
        elif len(sides) == 3:
            top, right, bottom = sides
            left = right
        elif len(sides) == 2:
            top, right = sides
            bottom, left = top, right
        elif len(sides) == 1:
            top = right = bottom = left = sides[0]
        else:
            top = right = bottom = left = None
        return Spacing(
            top=_side(top, default),
            right=_side(right, default),
            bottom=_side(bottom, default),
            left=_side(left, default),
        )

    if isinstance(value, Mapping):
        top = value.get("top")
        bottom = value.get("bottom")
        left = value.get("left")
        right = value.get("right")
        vertical = _as_number(value.get("vertical"))
        horizontal = _as_number(value.get("horizontal"))
        if vertical is not None:
            top = bottom = vertical
        if horizontal is not None:
            left = right = horizontal
        return Spacing(
            top=_side(top, default),
            right=_side(right, default),
            bottom=_side(bottom, default),
            left=_side(left, default),
        )

    number = _as_number(value)
    if number is None:
        if value is not None:
            logger.debug(f"Unresolvable spacing {value!r}, using default {default}")
        number = default
    return Spacing(top=number, right=number, bottom=number, left=number)
