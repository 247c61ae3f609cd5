"""
Core dissection engine.
"""

from .geometry import Polygon, signed_area, polygon_centroid, verify_convex_polygon, is_convex_polygon
from .chords import Chord, ChordSet, chords_cross
from .subdivision import RotationSystem, Subdivision, DualEdge, DualLink, build_subdivision
from .query import QueryResult, find_region_path, resolve_query
from .dissection import Dissection, Operation, apply_operations
from .script import Script, ScriptResult, parse_script, run_script

__all__ = ['Polygon', 'signed_area', 'polygon_centroid', 'verify_convex_polygon', 'is_convex_polygon',
           'Chord', 'ChordSet', 'chords_cross',
           'RotationSystem', 'Subdivision', 'DualEdge', 'DualLink', 'build_subdivision',
           'QueryResult', 'find_region_path', 'resolve_query',
           'Dissection', 'Operation', 'apply_operations',
           'Script', 'ScriptResult', 'parse_script', 'run_script']
