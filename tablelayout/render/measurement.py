"""Text measurement collaborator and line wrapping.

The engine never computes glyph metrics itself. It asks a TextMeasurer for
the rendered width of a string and builds everything else (content widths,
longest-word widths, wrapped lines) on top of that answer. The measurer must
be deterministic for fixed inputs; layout determinism depends on it.

Example:
    ```python
    from tablelayout.render.measurement import ReportLabTextMeasurer, split_text_to_size

    measurer = ReportLabTextMeasurer()
    lines = await split_text_to_size(measurer, "Alice is a web designer", 60, "Helvetica", 10)
    ```
"""

import logging
import re
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any

from reportlab.pdfbase import pdfmetrics

from tablelayout.config import get_config
from tablelayout.exceptions.measurement_error import MeasurementError

logger = logging.getLogger(__name__)

_NEWLINE_RE = re.compile(r"\r\n|\r|\n")

CacheKey = tuple[str, str, float, float]


class MeasurementCache:
    """Bounded LRU mapping of measured text widths.

    The cache is owned by the caller and may be shared by several
    measurers, so repeated layouts of similar tables skip re-measuring.

    Attributes:
        max_size: Maximum number of entries kept
        hits: Number of lookups answered from the cache
        misses: Number of lookups that had to be measured
    """

    def __init__(self, max_size: int = 4096) -> None:
        self.max_size = max_size
        self.hits = 0
        self.misses = 0
        self._entries: OrderedDict[CacheKey, float] = OrderedDict()

    def get(self, key: CacheKey) -> float | None:
        width = self._entries.get(key)
        if width is None:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return width

    def put(self, key: CacheKey, width: float) -> None:
        self._entries[key] = width
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, misses, size, max_size and hit_rate
        """
        total = self.hits + self.misses
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": len(self._entries),
            "max_size": self.max_size,
            "hit_rate": self.hits / total if total else 0.0,
        }

    def __len__(self) -> int:
        return len(self._entries)


class TextMeasurer(ABC):
    """Abstract measurement collaborator.

    Implementations may perform I/O (e.g. loading font programs lazily), so
    the single operation is a coroutine. The engine awaits calls one at a
    time, in table order.
    """

    @abstractmethod
    async def width_of_text(
        self,
        font_name: str,
        text: str,
        font_size: float,
        character_spacing: float = 0.0,
    ) -> float:
        """Return the rendered width of ``text`` in points.

        Args:
            font_name: Font identifier
            text: Single line of text
            font_size: Font size in points
            character_spacing: Extra space in points between characters

        Returns:
            Width in points

        Raises:
            MeasurementError: If the text cannot be measured
        """
        raise NotImplementedError("Subclasses must implement width_of_text")


class ReportLabTextMeasurer(TextMeasurer):
    """Measures text with reportlab's registered font metrics.

    Standard PDF fonts (Helvetica, Times-Roman, Courier ...) are available
    out of the box; TrueType fonts must be registered with
    ``pdfmetrics.registerFont`` before use.
    """

    def __init__(self, cache: MeasurementCache | None = None) -> None:
        """Initialize the measurer.

        Args:
            cache: Optional externally supplied cache. When omitted a private
                cache is created if caching is enabled in the configuration.
        """
        config = get_config()
        if cache is None and config.measurement_cache_enabled:
            cache = MeasurementCache(config.measurement_cache_size)
        self.cache = cache

    async def width_of_text(
        self,
        font_name: str,
        text: str,
        font_size: float,
        character_spacing: float = 0.0,
    ) -> float:
        key = (font_name, text, float(font_size), float(character_spacing))
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                return cached

        try:
            width = pdfmetrics.stringWidth(text, font_name, font_size)
        except Exception as e:
            raise MeasurementError(
                f"Failed to measure text with font '{font_name}'",
                context={"font_name": font_name, "font_size": font_size, "error": str(e)},
            ) from e

        if text and character_spacing:
            width += character_spacing * (len(text) - 1)

        if self.cache is not None:
            self.cache.put(key, width)
        return width


async def _break_word(
    measurer: TextMeasurer,
    word: str,
    box_width: float,
    font_name: str,
    font_size: float,
    character_spacing: float,
) -> list[str]:
    pieces: list[str] = []
    current = ""
    for char in word:
        candidate = current + char
        width = await measurer.width_of_text(font_name, candidate, font_size, character_spacing)
        if current and width > box_width:
            pieces.append(current)
            current = char
        else:
            current = candidate
    pieces.append(current)
    return pieces


async def _wrap_paragraph(
    measurer: TextMeasurer,
    paragraph: str,
    box_width: float,
    font_name: str,
    font_size: float,
    character_spacing: float,
) -> list[str]:
    words = paragraph.split()
    if not words:
        return [""]

    lines: list[str] = []
    current = ""
    for word in words:
        candidate = f"{current} {word}" if current else word
        width = await measurer.width_of_text(font_name, candidate, font_size, character_spacing)
        if width <= box_width:
            current = candidate
            continue

        if current:
            lines.append(current)
            current = ""

        word_width = await measurer.width_of_text(font_name, word, font_size, character_spacing)
        if word_width <= box_width:
            current = word
        else:
            pieces = await _break_word(
                measurer, word, box_width, font_name, font_size, character_spacing
            )
            lines.extend(pieces[:-1])
            current = pieces[-1]

    lines.append(current)
    return lines


async def split_text_to_size(
    measurer: TextMeasurer,
    text: str,
    box_width: float,
    font_name: str,
    font_size: float,
    character_spacing: float = 0.0,
) -> list[str]:
    """Wrap text into lines that fit ``box_width``.

    Explicit line breaks are kept. Words are packed greedily; a word wider
    than the box is broken between characters, with at least one character
    per line.

    Args:
        measurer: Measurement collaborator
        text: Text to wrap
        box_width: Available width in points
        font_name: Font identifier
        font_size: Font size in points
        character_spacing: Extra space in points between characters

    Returns:
        Wrapped lines, ``[""]`` for empty text
    """
    lines: list[str] = []
    for paragraph in _NEWLINE_RE.split(text):
        lines.extend(
            await _wrap_paragraph(
                measurer, paragraph, box_width, font_name, font_size, character_spacing
            )
        )
    return lines or [""]
