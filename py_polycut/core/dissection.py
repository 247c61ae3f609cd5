"""
Dissection engine: one polygon, one chord set, derived regions.

Regions and the dual tree are recomputed from scratch whenever the chord set
changes; the last build is cached against the chord set's version.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import structlog

from .chords import Chord, ChordSet
from .errors import OperationError, PolycutError
from .geometry import Polygon
from .query import QueryResult, check_query_vertices, resolve_query
from .subdivision import Subdivision, build_subdivision

logger = structlog.get_logger()

INSERT = "insert"
REMOVE = "remove"
QUERY = "query"
OPERATION_KINDS = (INSERT, REMOVE, QUERY)


@dataclass(frozen=True)
class Operation:
    """A single step of a mutation sequence. Vertex indices are 0-based."""
    kind: str
    a: int
    b: int

    def __post_init__(self):
        if self.kind not in OPERATION_KINDS:
            raise ValueError(f"Unknown operation kind {self.kind!r}, expected one of {OPERATION_KINDS}")


class Dissection:
    """Convex polygon plus its active chords."""

    def __init__(self, polygon: Polygon, chords: Iterable[Tuple[int, int]] = ()):
        self._polygon = polygon
        self._chord_set = ChordSet(polygon.n)
        for a, b in chords:
            self._chord_set.insert(a, b)

        self._cached_version: Optional[int] = None
        self._cached_subdivision: Optional[Subdivision] = None

    # Read-only: the cache is only valid for the chord set created here
    @property
    def polygon(self) -> Polygon:
        return self._polygon

    @property
    def chord_set(self) -> ChordSet:
        return self._chord_set

    @property
    def n(self) -> int:
        return self.polygon.n

    @property
    def chords(self) -> Tuple[Chord, ...]:
        return self.chord_set.chords

    def insert(self, a: int, b: int) -> Chord:
        return self.chord_set.insert(a, b)

    def remove(self, a: int, b: int) -> Chord:
        return self.chord_set.remove(a, b)

    def subdivision(self) -> Subdivision:
        """Regions and dual tree for the current chord set."""
        if self._cached_version != self.chord_set.version:
            self._cached_subdivision = build_subdivision(self.n, self.chord_set.chords)
            self._cached_version = self.chord_set.version
        return self._cached_subdivision

    def query(self, qa: int, qb: int) -> QueryResult:
        return resolve_query(self.polygon, self.subdivision(), qa, qb)

    def region_areas(self) -> List[float]:
        return [self.polygon.area_of(region) for region in self.subdivision().regions]

    def region_centroids(self) -> List[Tuple[float, float]]:
        return [self.polygon.centroid_of(region) for region in self.subdivision().regions]


def apply_operations(dissection: Dissection,
                     operations: Sequence[Operation]) -> Optional[Tuple[int, int]]:
    """
    Apply operations in order.

    A query marks itself as the most recent query; any later insert or remove
    clears the mark, so only a trailing query survives.

    Returns:
        The surviving query as a 0-based pair, or None

    Raises:
        OperationError: at the first failing operation (1-based ``position``);
            operations before it stay applied, the failing one is not
    """
    last_query = None
    for position, op in enumerate(operations, start=1):
        try:
            if op.kind == QUERY:
                check_query_vertices(dissection.n, op.a, op.b)
                last_query = (op.a, op.b)
            else:
                last_query = None
                if op.kind == INSERT:
                    dissection.insert(op.a, op.b)
                else:
                    dissection.remove(op.a, op.b)
        except PolycutError as e:
            logger.info("Operation rejected", position=position, kind=op.kind, error=str(e))
            raise OperationError(f"{e} (operation {position})", position, e) from e

    logger.debug("Operations applied", count=len(operations), chords=len(dissection.chord_set))
    return last_query
