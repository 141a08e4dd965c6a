"""Four-sided spacing box used for margins, cell padding and border widths."""

from pydantic import BaseModel


class Spacing(BaseModel):
    """Canonical four-sided box in points.

    Attributes:
        top: Top side
        right: Right side
        bottom: Bottom side
        left: Left side
    """

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @property
    def vertical(self) -> float:
        """Sum of the top and bottom sides."""
        return self.top + self.bottom

    @property
    def horizontal(self) -> float:
        """Sum of the left and right sides."""
        return self.left + self.right
