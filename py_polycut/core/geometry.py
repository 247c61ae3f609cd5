"""
Geometry kernel for convex host polygons.

This module provides:
- Signed area (shoelace) and centroid of a vertex list
- Convexity / simplicity validation with descriptive failures
- The immutable Polygon every other component indexes into

Integer coordinates are accumulated as exact integers before the final
halving, so areas of integer polygons within the supported coordinate range
are bit-exact.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Iterable, Sequence, Tuple

from .errors import PolygonError

MAX_VERTICES = 100
COORDINATE_LIMIT = 1_000_000


def _is_integral(pts: np.ndarray) -> bool:
    return np.issubdtype(pts.dtype, np.integer)


def _widen(pts: np.ndarray) -> np.ndarray:
    """Promote to int64 or float64; narrower types overflow in cross products."""
    if _is_integral(pts):
        return pts.astype(np.int64)
    if np.issubdtype(pts.dtype, np.number):
        return pts.astype(np.float64)
    return pts


def _as_points(points) -> np.ndarray:
    pts = np.asarray(points)
    if pts.size == 0:
        return pts.reshape(0, 2)
    return _widen(pts)


def _cross(u, v):
    return u[0] * v[1] - v[0] * u[1]


def signed_area(points) -> float:
    """
    Signed area of a polygon given as an (n, 2) vertex list.

    Positive for counter-clockwise winding, negative for clockwise.
    """
    pts = _as_points(points)
    if len(pts) == 0:
        return 0.0

    x, y = pts[:, 0], pts[:, 1]
    prev_x, prev_y = np.roll(x, 1), np.roll(y, 1)
    doubled = np.sum(prev_x * y - x * prev_y)

    if _is_integral(pts):
        return int(doubled) / 2
    return float(doubled) / 2


def polygon_centroid(points) -> Tuple[float, float]:
    """Area-weighted centroid of a non-degenerate polygon."""
    pts = _as_points(points)
    x, y = pts[:, 0], pts[:, 1]
    prev_x, prev_y = np.roll(x, 1), np.roll(y, 1)
    cross = prev_x * y - x * prev_y
    doubled_area = np.sum(cross)
    if doubled_area == 0:
        raise PolygonError("Centroid is undefined for a polygon with zero area")

    cx = np.sum((prev_x + x) * cross) / (3 * doubled_area)
    cy = np.sum((prev_y + y) * cross) / (3 * doubled_area)
    return float(cx), float(cy)


def verify_convex_polygon(points) -> int:
    """
    Check that the vertex list describes a strictly convex polygon.

    Checks every consecutive triple (wrap-around included) for collinearity
    and consistent turning, then checks every vertex against the corner at the
    last vertex so that self-overlapping star shapes are rejected as well.

    Args:
        points: (n, 2) vertex list, clockwise or counter-clockwise

    Returns:
        The turning sign: +1 for counter-clockwise, -1 for clockwise

    Raises:
        PolygonError: naming the condition that failed
    """
    pts = _as_points(points)
    n = len(pts)
    if n < 3:
        raise PolygonError("Polygon must have size at least 3")

    turn = 0
    # Same visiting order as walking prv -> cur -> nxt starting at the last vertex
    for cur in [n - 1] + list(range(n - 1)):
        prv, nxt = (cur - 1) % n, (cur + 1) % n
        sign = int(np.sign(_cross(pts[nxt] - pts[cur], pts[prv] - pts[cur])))
        if sign == 0:
            raise PolygonError(
                f"Polygon must not contain 3 consecutive colinear points (at vertex {cur})"
            )
        if turn == 0:
            turn = sign
        elif sign != turn:
            raise PolygonError(
                f"Polygon must be either listed clockwise or counter-clockwise (at vertex {cur})"
            )

    last, before_last = pts[n - 1], pts[n - 2]
    for i in range(n - 2):
        if int(np.sign(_cross(pts[i] - last, before_last - last))) != turn:
            raise PolygonError(f"Polygon must be convex (at vertex {i})")

    return turn


def is_convex_polygon(points) -> bool:
    """Boolean form of verify_convex_polygon."""
    try:
        verify_convex_polygon(points)
    except PolygonError:
        return False
    return True


@dataclass(frozen=True, eq=False)
class Polygon:
    """
    Immutable convex host polygon.

    Vertices are addressed by index, cyclically modulo n. Validation happens
    once at construction; the coordinate array is made read-only afterwards.

    Attributes:
        points: (n, 2) array of vertex coordinates
        max_vertices: upper bound on n
        coordinate_limit: bound on the absolute value of every coordinate
    """

    points: np.ndarray
    max_vertices: int = field(default=MAX_VERTICES, repr=False)
    coordinate_limit: float = field(default=COORDINATE_LIMIT, repr=False)

    def __post_init__(self):
        pts = np.array(self.points)
        if pts.size == 0:
            raise PolygonError("Polygon must have size at least 3")
        if pts.ndim != 2 or pts.shape[1] != 2:
            raise PolygonError(f"Polygon points must be (x, y) pairs, got shape {pts.shape}")
        if not np.issubdtype(pts.dtype, np.number):
            raise PolygonError(f"Polygon coordinates must be numbers, got dtype {pts.dtype}")
        pts = _widen(pts)

        n = len(pts)
        if n > self.max_vertices:
            raise PolygonError(f"Polygon must have at most {self.max_vertices} vertices, got {n}")
        if not np.all(np.isfinite(pts)):
            raise PolygonError("Polygon coordinates must be finite")

        out_of_range = np.argwhere(np.abs(pts) > self.coordinate_limit)
        if len(out_of_range) > 0:
            vertex, axis = out_of_range[0]
            raise PolygonError(
                f"Coordinate {'xy'[axis]} of vertex {vertex} is {pts[vertex, axis]}, "
                f"outside [-{self.coordinate_limit}, {self.coordinate_limit}]"
            )

        verify_convex_polygon(pts)

        pts.flags.writeable = False
        object.__setattr__(self, "points", pts)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def n(self) -> int:
        return len(self.points)

    @property
    def signed_area(self) -> float:
        return signed_area(self.points)

    @property
    def area(self) -> float:
        return abs(self.signed_area)

    @property
    def orientation(self) -> str:
        """'ccw' or 'cw'."""
        return "ccw" if self.signed_area > 0 else "cw"

    def vertex(self, index: int) -> Tuple[float, float]:
        x, y = self.points[index % self.n]
        return x.item(), y.item()

    def sub_polygon(self, indices: Iterable[int]) -> np.ndarray:
        """Coordinates of the given vertices, in the order given."""
        return self.points[list(indices)]

    def area_of(self, indices: Sequence[int]) -> float:
        return abs(signed_area(self.sub_polygon(indices)))

    def centroid_of(self, indices: Sequence[int]) -> Tuple[float, float]:
        return polygon_centroid(self.sub_polygon(indices))
