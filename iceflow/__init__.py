"""
Ice Flow Analytics Engine

Derives advanced hockey metrics (possession share, expected goals, PDO,
movement fingerprints, flow fields, formation deviation, shift intensity
and composite value ratings) from already-extracted event records.
"""

__version__ = "0.1.0"
__author__ = "NHL Analytics Team"
