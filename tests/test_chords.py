"""Tests for chord validation and the chord set."""

import itertools

import pytest

from py_polycut.core.chords import Chord, ChordSet, chords_cross
from py_polycut.core.errors import (
    ChordError, ChordNotFoundError, CrossingChordError, DuplicateChordError
)

from conftest import parabola_points, random_chord_set


def _orient(p, q, r):
    return (q[0] - p[0]) * (r[1] - p[1]) - (q[1] - p[1]) * (r[0] - p[0])


def segments_cross(p1, p2, q1, q2):
    """Proper intersection of two segments in general position."""
    d1, d2 = _orient(q1, q2, p1), _orient(q1, q2, p2)
    d3, d4 = _orient(p1, p2, q1), _orient(p1, p2, q2)
    return d1 * d2 < 0 and d3 * d4 < 0


class TestChord:
    """Test chord normalization."""

    def test_normalized(self):
        assert Chord.of(5, 2) == Chord(2, 5)
        assert Chord.of(2, 5) == (2, 5)


class TestChordsCross:
    """Test the interleaving test."""

    def test_interleaved(self):
        assert chords_cross((0, 2), (1, 4))

    def test_nested(self):
        assert not chords_cross((0, 5), (1, 3))

    def test_disjoint(self):
        assert not chords_cross((0, 2), (3, 5))

    def test_shared_endpoint(self):
        assert not chords_cross((0, 2), (0, 4))
        assert not chords_cross((0, 2), (2, 0))

    def test_orientation_independent(self):
        assert chords_cross((2, 0), (4, 1))

    def test_matches_geometry(self):
        """Interleaving agrees with segment intersection on a convex polygon."""
        n = 9
        pts = parabola_points(n)
        pairs = [(a, b) for a, b in itertools.combinations(range(n), 2) if b - a not in (1, n - 1)]
        for first, second in itertools.combinations(pairs, 2):
            if set(first) & set(second):
                continue
            expected = segments_cross(pts[first[0]], pts[first[1]], pts[second[0]], pts[second[1]])
            assert chords_cross(first, second) == expected, (first, second)

    def test_symmetric(self):
        n = 10
        pairs = list(itertools.combinations(range(n), 2))
        for first, second in itertools.product(pairs, repeat=2):
            assert chords_cross(first, second) == chords_cross(second, first)


class TestChordSetInsert:
    """Test validated insertion."""

    def test_insert(self):
        chord_set = ChordSet(4)
        assert chord_set.insert(2, 0) == Chord(0, 2)
        assert (0, 2) in chord_set
        assert (2, 0) in chord_set
        assert len(chord_set) == 1

    def test_polygon_edge(self):
        chord_set = ChordSet(4)
        with pytest.raises(ChordError, match="chord must not be polygon edge"):
            chord_set.insert(0, 1)
        with pytest.raises(ChordError, match="chord must not be polygon edge"):
            chord_set.insert(3, 0)
        assert len(chord_set) == 0

    def test_single_point(self):
        with pytest.raises(ChordError, match="single point"):
            ChordSet(6).insert(2, 2)

    @pytest.mark.parametrize("a,b", [(-1, 2), (0, 6), (7, 3)])
    def test_out_of_range(self, a, b):
        with pytest.raises(ChordError, match="out of range"):
            ChordSet(6).insert(a, b)

    def test_duplicate(self):
        chord_set = ChordSet(6)
        chord_set.insert(0, 3)
        with pytest.raises(DuplicateChordError):
            chord_set.insert(3, 0)
        assert chord_set.chords == (Chord(0, 3),)

    def test_crossing_names_existing_chord(self):
        chord_set = ChordSet(6)
        chord_set.insert(0, 2)
        chord_set.insert(0, 4)
        with pytest.raises(CrossingChordError) as excinfo:
            chord_set.insert(1, 4)
        assert excinfo.value.other == (0, 2)
        assert "(0, 2)" in str(excinfo.value)
        assert chord_set.chords == (Chord(0, 2), Chord(0, 4))

    def test_crossing_is_symmetric_in_order(self):
        first = ChordSet(6)
        first.insert(0, 2)
        with pytest.raises(CrossingChordError):
            first.insert(1, 4)

        second = ChordSet(6)
        second.insert(1, 4)
        with pytest.raises(CrossingChordError):
            second.insert(0, 2)

    def test_error_rendered_one_based(self):
        chord_set = ChordSet(6)
        chord_set.insert(0, 2)
        with pytest.raises(CrossingChordError) as excinfo:
            chord_set.insert(1, 4)
        assert excinfo.value.describe(index_base=1) == "chord crosses existing chord: (2, 5) crosses (1, 3)"

    def test_version_counts_successes_only(self):
        chord_set = ChordSet(6)
        chord_set.insert(0, 2)
        with pytest.raises(ChordError):
            chord_set.insert(0, 1)
        assert chord_set.version == 1

    def test_triangle_has_no_chords(self):
        chord_set = ChordSet(3)
        for a, b in itertools.permutations(range(3), 2):
            with pytest.raises(ChordError):
                chord_set.insert(a, b)


class TestChordSetRemove:
    """Test removal."""

    def test_remove(self):
        chord_set = ChordSet(6)
        chord_set.insert(0, 2)
        chord_set.insert(2, 4)
        chord_set.insert(0, 4)
        assert chord_set.remove(4, 2) == Chord(2, 4)
        assert chord_set.chords == (Chord(0, 2), Chord(0, 4))

    def test_remove_missing(self):
        chord_set = ChordSet(6)
        with pytest.raises(ChordNotFoundError, match="chord not found"):
            chord_set.remove(0, 3)
        assert chord_set.version == 0

    @pytest.mark.parametrize("a,b,reason", [
        (0, 6, "out of range"),
        (-1, 2, "out of range"),
        (3, 3, "single point"),
        (2, 3, "polygon edge"),
    ])
    def test_remove_malformed(self, a, b, reason):
        chord_set = ChordSet(6)
        chord_set.insert(0, 2)
        with pytest.raises(ChordError, match=reason) as excinfo:
            chord_set.remove(a, b)
        assert not isinstance(excinfo.value, ChordNotFoundError)
        assert chord_set.chords == (Chord(0, 2),)

    @pytest.mark.parametrize("seed", range(5))
    def test_insert_remove_round_trip(self, seed):
        chord_set = random_chord_set(20, seed)
        before = set(chord_set)
        for a, b in itertools.combinations(range(20), 2):
            try:
                chord_set.insert(a, b)
            except ChordError:
                continue
            chord_set.remove(b, a)
            assert set(chord_set) == before

    def test_removal_frees_crossing_slot(self):
        chord_set = ChordSet(6)
        chord_set.insert(0, 2)
        chord_set.remove(0, 2)
        chord_set.insert(1, 4)
        assert chord_set.chords == (Chord(1, 4),)


class TestChordSetMisc:
    """Test container behaviour."""

    def test_copy_is_independent(self):
        chord_set = ChordSet(8)
        chord_set.insert(0, 4)
        other = chord_set.copy()
        other.insert(0, 2)
        assert len(chord_set) == 1
        assert len(other) == 2

    def test_iteration_order(self):
        chord_set = ChordSet(8)
        for a, b in [(0, 4), (4, 6), (0, 2)]:
            chord_set.insert(a, b)
        assert list(chord_set) == [Chord(0, 4), Chord(4, 6), Chord(0, 2)]

    def test_too_small(self):
        with pytest.raises(ValueError):
            ChordSet(2)

    @pytest.mark.parametrize("seed", range(5))
    def test_random_sets_are_non_crossing(self, seed):
        chords = list(random_chord_set(30, seed))
        for first, second in itertools.combinations(chords, 2):
            assert not chords_cross(first, second)
