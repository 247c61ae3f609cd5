"""Shared fixtures for dissection tests."""

import random

import pytest

from py_polycut.core.chords import ChordSet
from py_polycut.core.errors import ChordError
from py_polycut.core.geometry import Polygon

SQUARE = [(0, 0), (4, 0), (4, 4), (0, 4)]
HEXAGON = [(2, 0), (4, 0), (6, 2), (4, 4), (2, 4), (0, 2)]


def parabola_points(n):
    """n integer points on y = x^2; strictly convex in boundary order."""
    return [(i, i * i) for i in range(n)]


def random_chord_set(n, seed, attempts=200):
    """Chord set built from random insert attempts, rejected ones skipped."""
    rng = random.Random(seed)
    chord_set = ChordSet(n)
    for _ in range(attempts):
        a, b = rng.randrange(n), rng.randrange(n)
        try:
            chord_set.insert(a, b)
        except ChordError:
            continue
    return chord_set


@pytest.fixture
def square():
    return Polygon(SQUARE)


@pytest.fixture
def hexagon():
    return Polygon(HEXAGON)
