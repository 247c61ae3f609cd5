"""
Convex polygon dissection by non-crossing chords.
"""
