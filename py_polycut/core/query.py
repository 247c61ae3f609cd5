"""
Query resolution on a dissected polygon.

A query names two polygon vertices. Each vertex is mapped to the region that
owns the boundary edge leaving it; the regions on the dual-tree path between
the two are "kept", the rest of the polygon is "removed".
"""

from collections import deque
from dataclasses import dataclass, field
from typing import List, Tuple

import structlog

from .errors import QueryError
from .geometry import Polygon
from .subdivision import Subdivision

logger = structlog.get_logger()


@dataclass
class QueryResult:
    """Outcome of a two-vertex query."""
    query: Tuple[int, int]
    start_region: int
    stop_region: int
    path: List[int] = field(default_factory=list)  # region ids, start -> stop
    cover_vertices: List[int] = field(default_factory=list)  # ascending
    kept_area: float = 0.0
    removed_area: float = 0.0

    @property
    def total_area(self) -> float:
        return self.kept_area + self.removed_area


def check_query_vertices(n: int, qa: int, qb: int):
    for index in (qa, qb):
        if not 0 <= index < n:
            raise QueryError(f"Query vertex {index} out of range [0, {n})")
    if qa == qb:
        raise QueryError(f"Query vertices must differ, got ({qa}, {qb})")


def find_region_path(subdivision: Subdivision, start: int, stop: int) -> List[int]:
    """
    Path of region ids from start to stop in the dual tree.

    Breadth-first search from start; on a tree the first path found is the
    only one.
    """
    trace = {start: start}
    queue = deque([start])
    while queue:
        region = queue.popleft()
        if region == stop:
            break
        for nxt in subdivision.neighbors(region):
            if nxt not in trace:
                trace[nxt] = region
                queue.append(nxt)

    if stop not in trace:
        raise QueryError(f"Region {stop} is not reachable from region {start}")

    path = [stop]
    while path[-1] != start:
        path.append(trace[path[-1]])
    path.reverse()
    return path


def resolve_query(polygon: Polygon, subdivision: Subdivision, qa: int, qb: int) -> QueryResult:
    """
    Resolve query (qa, qb) into a region path and an area split.

    Raises:
        QueryError: qa == qb, or either index outside [0, n)
    """
    check_query_vertices(polygon.n, qa, qb)

    start = subdivision.boundary_region(qa)
    stop = subdivision.boundary_region(qb)
    path = find_region_path(subdivision, start, stop)

    cover = sorted({vertex for region in path for vertex in subdivision.regions[region]})
    kept = polygon.area_of(cover)
    removed = polygon.area - kept

    logger.debug("Query resolved", query=(qa, qb), path=path, kept_area=kept, removed_area=removed)
    return QueryResult(
        query=(qa, qb),
        start_region=start,
        stop_region=stop,
        path=path,
        cover_vertices=cover,
        kept_area=kept,
        removed_area=removed,
    )
