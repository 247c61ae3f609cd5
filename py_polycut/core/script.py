"""
Whitespace-separated text scripts describing a polygon and chord operations.

Format (vertex numbers are 1-based)::

    n
    x1 y1 x2 y2 ... xn yn
    q
    T u v        # q lines, T is "A" (add chord), "R" (remove chord) or "?" (query)

The polygon is validated before any operation is read. Operations are applied
in order and the first failure stops the script.
"""

import math
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

import structlog

from .dissection import INSERT, QUERY, REMOVE, Dissection, Operation, apply_operations
from .errors import ChordError, OperationError, ScriptParseError
from .geometry import COORDINATE_LIMIT, MAX_VERTICES, Polygon
from .query import QueryResult

logger = structlog.get_logger()

OPERATION_CODES = {"A": INSERT, "R": REMOVE, "?": QUERY}
INDEX_BASE = 1
# Plain decimal notation only: no digit separators, hex, inf or nan
NUMBER_PATTERN = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


@dataclass
class Script:
    """Parsed script: the polygon and its 0-based operations."""
    polygon: Polygon
    operations: List[Operation] = field(default_factory=list)


@dataclass
class ScriptResult:
    """State after running a script."""
    dissection: Dissection
    last_query: Optional[Tuple[int, int]] = None  # 0-based

    def query_result(self) -> Optional[QueryResult]:
        if self.last_query is None:
            return None
        return self.dissection.query(*self.last_query)


class _Tokens:
    """Cursor over the script's tokens with typed, bounded reads."""

    def __init__(self, text: str):
        self.words = text.split()
        self.pos = 0

    def _next_word(self, name: str) -> str:
        if self.pos >= len(self.words):
            raise ScriptParseError(f"Expected {name}, but the input terminated", self.pos)
        word = self.words[self.pos]
        self.pos += 1
        return word

    def next_number(self, name: str, integer: bool = False,
                    lower: Optional[float] = None, upper: Optional[float] = None):
        word = self._next_word(name)
        index = self.pos - 1
        value = float(word) if NUMBER_PATTERN.fullmatch(word) else math.nan
        if not math.isfinite(value):
            raise ScriptParseError(f"Expected {name} to be a number, but found {word!r}", index)

        if integer:
            if value != round(value):
                raise ScriptParseError(f"Expected {name} to be an integer, but found {word!r}", index)
            value = int(value)
        if lower is not None and value < lower:
            raise ScriptParseError(
                f"Expected {name} to be greater or equal {lower}, but found {value}", index)
        if upper is not None and value > upper:
            raise ScriptParseError(
                f"Expected {name} to be less or equal {upper}, but found {value}", index)
        return value

    def next_char(self, name: str, valid: str) -> str:
        word = self._next_word(name)
        index = self.pos - 1
        if len(word) != 1:
            raise ScriptParseError(f"Expected {name} as a single character, but {word!r} found", index)
        if word not in valid:
            raise ScriptParseError(
                f"Expected {name} to be a character in {valid!r}, but {word!r} found", index)
        return word

    def finish(self):
        if self.pos != len(self.words):
            raise ScriptParseError("Not all input are consumed", self.pos)


def parse_script(text: str, max_vertices: int = MAX_VERTICES,
                 coordinate_limit: int = COORDINATE_LIMIT) -> Script:
    """
    Parse a script into a validated polygon and a list of operations.

    Raises:
        ScriptParseError: malformed token stream
        PolygonError: the polygon is not strictly convex
    """
    tokens = _Tokens(text)

    n = tokens.next_number("n", integer=True, lower=3, upper=max_vertices)
    coordinates = []
    for i in range(1, n + 1):
        x = tokens.next_number(f"polygon[{i}].x", integer=True,
                               lower=-coordinate_limit, upper=coordinate_limit)
        y = tokens.next_number(f"polygon[{i}].y", integer=True,
                               lower=-coordinate_limit, upper=coordinate_limit)
        coordinates.append((x, y))
    polygon = Polygon(coordinates, max_vertices=max_vertices, coordinate_limit=coordinate_limit)

    q = tokens.next_number("q", integer=True, lower=0)
    operations = []
    for qid in range(1, q + 1):
        code = tokens.next_char(f"queryType[{qid}]", "".join(OPERATION_CODES))
        u = tokens.next_number(f"u[{qid}]", integer=True, lower=1, upper=n)
        v = tokens.next_number(f"v[{qid}]", integer=True, lower=1, upper=n)
        if code == "?" and u == v:
            raise ScriptParseError(f"Invalid query ({u}, {v}) (query {qid}). A query needs two distinct vertices",
                                   tokens.pos - 1)
        operations.append(Operation(OPERATION_CODES[code], u - INDEX_BASE, v - INDEX_BASE))

    tokens.finish()
    return Script(polygon=polygon, operations=operations)


def run_script(source: Union[str, Script], max_vertices: int = MAX_VERTICES,
               coordinate_limit: int = COORDINATE_LIMIT) -> ScriptResult:
    """
    Parse (if needed) and run a script.

    Raises:
        ScriptParseError, PolygonError: as parse_script
        OperationError: first failing operation; chord names in the message
            use the script's 1-based numbering
    """
    script = source if isinstance(source, Script) else parse_script(
        source, max_vertices=max_vertices, coordinate_limit=coordinate_limit)
    dissection = Dissection(script.polygon)

    try:
        last_query = apply_operations(dissection, script.operations)
    except OperationError as e:
        if isinstance(e.cause, ChordError):
            message = f"{e.cause.describe(index_base=INDEX_BASE)} (query {e.position})"
            raise OperationError(message, e.position, e.cause) from e.cause
        raise

    logger.info("Script applied", n=script.polygon.n, operations=len(script.operations),
                chords=len(dissection.chord_set), has_query=last_query is not None)
    return ScriptResult(dissection=dissection, last_query=last_query)
