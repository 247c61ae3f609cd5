"""
Planar subdivision of a convex polygon by non-crossing chords.

The polygon boundary plus the chords form a plane graph. Around each vertex
the incident edges are ordered by a rotation system; following the
"next arc" rule from any directed arc walks exactly one face (region).

Regions are discovered by a depth-first search over directed arcs. Each
directed arc belongs to at most one region; the reverse of a boundary edge
belongs to none (it faces the outside). Two regions are adjacent in the dual
graph iff they share a chord, and because the chords never cross the dual
graph is a tree with one more node than there are chords.

Key invariants:
- Region ids are assigned in DFS pre-order starting from arc (0, 1)
- Region vertex lists follow the polygon's own index order (cyclically)
- Every arc (u, v) with (u + 1) % n == v is owned by exactly one region
"""

from bisect import bisect_right
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, NamedTuple, Optional, Tuple

import numpy as np
import structlog

logger = structlog.get_logger()

Arc = Tuple[int, int]


class DualLink(NamedTuple):
    """Adjacency entry: the neighbouring region and the shared chord as seen from this side."""
    next: int
    arc: Arc


class DualEdge(NamedTuple):
    """One dual tree edge per chord. ``arc`` is directed as seen from ``region_a``."""
    region_a: int
    region_b: int
    arc: Arc

    @property
    def chord(self) -> Tuple[int, int]:
        u, v = self.arc
        return (u, v) if u <= v else (v, u)


class RotationSystem:
    """
    Per-vertex neighbour ordering for the polygon-plus-chords graph.

    Neighbours of v are sorted by their offset (w - v) mod n in descending
    order. On a convex polygon this is a consistent angular sweep around v.
    """

    def __init__(self, n: int, chords: Iterable[Tuple[int, int]] = ()):
        self.n = n
        neighbours = [[(v - 1) % n, (v + 1) % n] for v in range(n)]
        for a, b in chords:
            neighbours[a].append(b)
            neighbours[b].append(a)

        self.neighbours: List[List[int]] = []
        # Negated offsets, ascending, so bisect can search them
        self._keys: List[List[int]] = []
        for v, adj in enumerate(neighbours):
            ordered = sorted(adj, key=lambda w: self.offset(v, w), reverse=True)
            self.neighbours.append(ordered)
            self._keys.append([-self.offset(v, w) for w in ordered])

    def offset(self, origin: int, target: int) -> int:
        return (target - origin) % self.n

    def next_arc(self, src: int, dst: int) -> int:
        """
        Vertex to move to after arriving at ``dst`` from ``src``.

        The first neighbour of dst whose offset from dst is smaller than that
        of src; wraps around to the first neighbour when none is.
        """
        keys = self._keys[dst]
        pos = bisect_right(keys, -self.offset(dst, src))
        if pos == len(keys):
            pos = 0
        return self.neighbours[dst][pos]

    def iter_face_arcs(self, src: int, dst: int) -> Iterator[Arc]:
        """Yield the directed arcs of the face containing (src, dst), starting with it."""
        u, v = src, dst
        while v != src:
            yield u, v
            u, v = v, self.next_arc(u, v)
        yield u, v

    def trace_face(self, src: int, dst: int) -> List[int]:
        """Vertex list of the face containing arc (src, dst)."""
        return [u for u, _ in self.iter_face_arcs(src, dst)]


@dataclass
class Subdivision:
    """
    Regions of a dissected polygon and their dual tree.

    Attributes:
        n: polygon vertex count
        regions: regions[r] = cyclic vertex-index list of region r
        adjacency: adjacency[r] = DualLink entries of region r
        edges: one DualEdge per chord, parent first, ordered by child id
        arc_regions: (n, n) array, arc_regions[u, v] = owning region or -1
    """
    n: int
    regions: List[List[int]] = field(default_factory=list)
    adjacency: List[List[DualLink]] = field(default_factory=list)
    edges: List[DualEdge] = field(default_factory=list)
    arc_regions: Optional[np.ndarray] = field(default=None, repr=False)

    @property
    def region_count(self) -> int:
        return len(self.regions)

    def region_of_arc(self, u: int, v: int) -> Optional[int]:
        region = int(self.arc_regions[u, v])
        return None if region == -1 else region

    def boundary_region(self, vertex: int) -> int:
        """Region owning the boundary edge (vertex, vertex + 1)."""
        return int(self.arc_regions[vertex, (vertex + 1) % self.n])

    def neighbors(self, region: int) -> List[int]:
        return [link.next for link in self.adjacency[region]]

    def is_tree(self) -> bool:
        """Connected with exactly region_count - 1 edges."""
        if not self.regions:
            return False
        if len(self.edges) != self.region_count - 1:
            return False

        seen = {0}
        queue = deque([0])
        while queue:
            for nxt in self.neighbors(queue.popleft()):
                if nxt not in seen:
                    seen.add(nxt)
                    queue.append(nxt)
        return len(seen) == self.region_count


def build_subdivision(n: int, chords: Iterable[Tuple[int, int]]) -> Subdivision:
    """
    Dissect an n-gon along non-crossing chords.

    Runs the arc DFS with an explicit stack. Each stack frame holds a region
    whose face is still being walked; the walk is lazy so a child region is
    fully explored before its parent's next arc is visited, which keeps ids in
    pre-order.

    Args:
        n: polygon vertex count
        chords: pairwise non-crossing chords (not re-verified)

    Returns:
        Subdivision with len(chords) + 1 regions
    """
    chords = list(chords)
    rotation = RotationSystem(n, chords)
    subdivision = Subdivision(n=n, arc_regions=np.full((n, n), -1, dtype=np.int32))
    regions, adjacency, edges = subdivision.regions, subdivision.adjacency, subdivision.edges
    arc_regions = subdivision.arc_regions

    def open_region(src: int, dst: int, parent_link: Optional[DualLink]):
        regions.append([])
        adjacency.append([])
        return len(regions) - 1, rotation.iter_face_arcs(src, dst), parent_link

    stack = [open_region(0, 1, None)]
    while stack:
        region, arcs, parent_link = stack[-1]
        arc = next(arcs, None)

        if arc is None:
            stack.pop()
            if parent_link is not None:
                parent, parent_arc = parent_link
                adjacency[parent].append(DualLink(region, parent_arc))
                edges.append(DualEdge(parent, region, parent_arc))
            continue

        u, v = arc
        regions[region].append(u)
        arc_regions[u, v] = region

        across = int(arc_regions[v, u])
        if across != -1:
            adjacency[region].append(DualLink(across, (u, v)))
        elif (u + 1) % n != v:
            # (v, u) is interior: its region is new
            stack.append(open_region(v, u, DualLink(region, (u, v))))

    edges.sort(key=lambda edge: edge.region_b)

    if len(regions) != len(chords) + 1:
        logger.warning("Unexpected region count, chord set may cross",
                       regions=len(regions), chords=len(chords))
    logger.debug("Subdivision built", n=n, chords=len(chords), regions=len(regions))
    return subdivision
