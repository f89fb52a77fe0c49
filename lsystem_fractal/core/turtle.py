"""
Turtle graphics primitives.

The turtle keeps a 2-D position and a heading and records every forward
motion into a TurtlePath. Angles handed to ``turn_deg`` are in degrees;
the heading itself is stored in radians, modulo a full turn.
"""

import math
import logging
from typing import Iterator, List, NamedTuple, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

FULL_TURN = 2.0 * math.pi


class Point(NamedTuple):
    """A point in the drawing plane."""
    x: float
    y: float


class TurtlePath:
    """Ordered polylines traced by a turtle."""

    def __init__(self):
        self.polylines: List[List[Point]] = []

    def start_new(self, point: Point) -> None:
        """Begin a new polyline at ``point``, dropping an unused empty start."""
        if self.polylines and len(self.polylines[-1]) < 2:
            self.polylines[-1] = [point]
        else:
            self.polylines.append([point])

    def add_point(self, point: Point) -> None:
        """Extend the current polyline to ``point``."""
        if not self.polylines:
            raise RuntimeError("add_point() called before start_new()")
        self.polylines[-1].append(point)

    def segments(self) -> Iterator[Tuple[Point, Point]]:
        """Yield every drawn segment in drawing order."""
        for polyline in self.polylines:
            for start, end in zip(polyline, polyline[1:]):
                yield start, end

    @property
    def segment_count(self) -> int:
        return sum(max(len(pl) - 1, 0) for pl in self.polylines)

    @property
    def start(self) -> Optional[Point]:
        if not self.polylines:
            return None
        return self.polylines[0][0]

    @property
    def end(self) -> Optional[Point]:
        if not self.polylines:
            return None
        return self.polylines[-1][-1]

    def to_array(self) -> np.ndarray:
        """Return all vertices as an ``(n, 2)`` float array."""
        vertices = [p for pl in self.polylines for p in pl]
        if not vertices:
            return np.empty((0, 2), dtype=np.float64)
        return np.asarray(vertices, dtype=np.float64)

    def bounds(self) -> Tuple[float, float, float, float]:
        """
        Get the bounding box of the path.

        Returns:
            (xmin, xmax, ymin, ymax)
        """
        vertices = self.to_array()
        if len(vertices) == 0:
            raise ValueError("Path has no vertices")
        xmin, ymin = vertices.min(axis=0)
        xmax, ymax = vertices.max(axis=0)
        return (float(xmin), float(xmax), float(ymin), float(ymax))

    def extent(self) -> float:
        """Largest side of the bounding box."""
        xmin, xmax, ymin, ymax = self.bounds()
        return max(xmax - xmin, ymax - ymin)

    def is_closed(self, tolerance: float = 1e-9) -> bool:
        """Whether the path ends where it started."""
        if self.start is None:
            return False
        return math.dist(self.start, self.end) <= tolerance

    def __len__(self) -> int:
        return self.segment_count

    def __repr__(self) -> str:
        return f"TurtlePath(polylines={len(self.polylines)}, segments={self.segment_count})"


class Turtle:
    """A cursor with position and heading that traces a TurtlePath."""

    def __init__(self, path: Optional[TurtlePath] = None):
        self.path = path if path is not None else TurtlePath()
        self.position = Point(0.0, 0.0)
        self.heading = 0.0
        self.path.start_new(self.position)

    def set_pos(self, point: Point) -> None:
        """Jump to ``point`` without drawing."""
        self.position = Point(float(point[0]), float(point[1]))
        self.path.start_new(self.position)

    def set_rad(self, angle: float) -> None:
        """Set the absolute heading in radians."""
        self.heading = angle % FULL_TURN

    def turn_rad(self, angle: float) -> None:
        self.heading = (self.heading + angle) % FULL_TURN

    def turn_deg(self, angle: float) -> None:
        """Turn counter-clockwise by ``angle`` degrees (negative turns right)."""
        self.turn_rad(math.radians(angle))

    def forward(self, distance: float) -> None:
        """Move along the current heading, drawing a segment."""
        self.position = Point(
            self.position.x + distance * math.cos(self.heading),
            self.position.y + distance * math.sin(self.heading),
        )
        self.path.add_point(self.position)
