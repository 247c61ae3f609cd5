"""
Chord set over a fixed convex polygon.

A chord joins two non-adjacent polygon vertices. The set keeps its chords
pairwise non-crossing: every insert checks only the new chord against the
chords already present, so the invariant holds inductively.
"""

from typing import Iterator, List, NamedTuple, Tuple

import structlog

from .errors import ChordError, ChordNotFoundError, CrossingChordError, DuplicateChordError

logger = structlog.get_logger()


class Chord(NamedTuple):
    """Chord in normalized form (lo < hi)."""
    lo: int
    hi: int

    @classmethod
    def of(cls, a: int, b: int) -> "Chord":
        return cls(a, b) if a <= b else cls(b, a)


def chords_cross(first: Tuple[int, int], second: Tuple[int, int]) -> bool:
    """
    Check whether two chords of a convex polygon cross.

    Chords sharing an endpoint never cross. Otherwise the chords are treated
    as index intervals on the boundary order and cross iff they interleave.
    """
    if set(first) & set(second):
        return False
    u, v = Chord.of(*first), Chord.of(*second)
    if u.lo > v.lo:
        u, v = v, u
    return v.lo < u.hi < v.hi


class ChordSet:
    """
    Ordered collection of pairwise non-crossing chords.

    ``version`` increases on every successful mutation so derived data
    (the subdivision) can be cached against it.
    """

    def __init__(self, n: int):
        if n < 3:
            raise ValueError(f"Chord set needs a polygon with at least 3 vertices, got {n}")
        self.n = n
        self._chords: List[Chord] = []
        self.version = 0

    def __len__(self) -> int:
        return len(self._chords)

    def __iter__(self) -> Iterator[Chord]:
        return iter(list(self._chords))

    def __contains__(self, pair) -> bool:
        return Chord.of(*pair) in self._chords

    def __repr__(self) -> str:
        return f"ChordSet(n={self.n}, chords={self._chords})"

    @property
    def chords(self) -> Tuple[Chord, ...]:
        return tuple(self._chords)

    def copy(self) -> "ChordSet":
        other = ChordSet(self.n)
        other._chords = list(self._chords)
        other.version = self.version
        return other

    def is_boundary_edge(self, a: int, b: int) -> bool:
        return (a - b) % self.n == 1 or (b - a) % self.n == 1

    def _check_shape(self, a: int, b: int):
        for index in (a, b):
            if not 0 <= index < self.n:
                raise ChordError(f"chord index {index} out of range [0, {self.n})", (a, b))
        if a == b:
            raise ChordError("chord must not be a single point", (a, b))
        if self.is_boundary_edge(a, b):
            raise ChordError("chord must not be polygon edge", (a, b))

    def insert(self, a: int, b: int) -> Chord:
        """
        Add chord {a, b}.

        Raises:
            ChordError: index out of range, a == b, or {a, b} is a polygon edge
            DuplicateChordError: the chord is already present
            CrossingChordError: the chord crosses an existing chord (the first
                one in insertion order is reported)
        """
        self._check_shape(a, b)
        chord = Chord.of(a, b)
        if chord in self._chords:
            raise DuplicateChordError("chord already exists", (a, b))
        for existing in self._chords:
            if chords_cross(existing, chord):
                raise CrossingChordError("chord crosses existing chord", (a, b), existing)

        self._chords.append(chord)
        self.version += 1
        logger.debug("Chord inserted", chord=chord, chord_count=len(self._chords))
        return chord

    def remove(self, a: int, b: int) -> Chord:
        """
        Remove chord {a, b}.

        Raises:
            ChordError: index out of range, a == b, or {a, b} is a polygon edge
            ChordNotFoundError: the chord is not present
        """
        self._check_shape(a, b)
        chord = Chord.of(a, b)
        try:
            self._chords.remove(chord)
        except ValueError:
            raise ChordNotFoundError("chord not found", (a, b)) from None

        self.version += 1
        logger.debug("Chord removed", chord=chord, chord_count=len(self._chords))
        return chord
