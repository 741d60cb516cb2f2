"""
Circle / rectangle hit testing for the drag-to-zoom gesture.

Circles and rectangles share one coordinate space (the chart's data
coordinates). The tests are orientation-agnostic: `top` is the smaller y of
the rectangle whichever way the y axis points.
"""
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np


@dataclass(frozen=True)
class CircleDescriptor:
    """Laid-out circle of one label; valid until the next redraw."""

    label: str
    center_x: float
    center_y: float
    radius: float


@dataclass(frozen=True)
class SelectionRectangle:
    left: float
    top: float
    width: float = 0.0
    height: float = 0.0

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError("width and height must be non-negative; use from_drag().")

    @classmethod
    def from_drag(cls, x0: float, y0: float, x1: float, y1: float) -> "SelectionRectangle":
        """Normalize a drag from (x0, y0) to (x1, y1) in any direction."""
        return cls(
            left=float(min(x0, x1)),
            top=float(min(y0, y1)),
            width=float(abs(x1 - x0)),
            height=float(abs(y1 - y0)),
        )

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height


def select_touched(circles: Sequence[CircleDescriptor], rect: SelectionRectangle) -> List[str]:
    """
    Labels whose circle intersects the closed rectangle, in `circles` order.

    The closest rectangle point to each center is found by clamping; a circle
    is touched iff that point lies within its radius (boundary inclusive).
    A zero-width or zero-height rectangle degrades to a point or segment test.
    """
    if not circles:
        return []

    centers = np.array([[c.center_x, c.center_y] for c in circles], float)
    radii = np.array([c.radius for c in circles], float)

    closest_x = np.clip(centers[:, 0], rect.left, rect.right)
    closest_y = np.clip(centers[:, 1], rect.top, rect.bottom)
    dx = centers[:, 0] - closest_x
    dy = centers[:, 1] - closest_y

    touched = (dx * dx + dy * dy) <= radii * radii
    return [c.label for c, hit in zip(circles, touched) if hit]


def labels_at(circles: Sequence[CircleDescriptor], x: float, y: float) -> List[str]:
    """Labels whose circle contains the point (x, y)."""
    return select_touched(circles, SelectionRectangle(left=x, top=y))
