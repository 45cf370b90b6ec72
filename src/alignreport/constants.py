#!/usr/bin/env python3
"""Constants and configuration values for alignreport.

This module defines constants used throughout the package including:
- Report layout defaults (line width, tick spacing)
- Marker glyphs for the alignment track
- Fallback region name and annotation names
- Residue pairs counted as similar in alignment statistics
"""

from typing import FrozenSet, Tuple

# Report layout
DEFAULT_LINE_WIDTH = 50
TICK_INTERVAL = 10
# Regions narrower than this are labelled with an abbreviation
MIN_FULL_LABEL_WIDTH = 5

# Marker track glyphs
MARKER_IDENTITY = " "
MARKER_MISMATCH = "⨯"
MARKER_GAP = "+"
MARKER_SPECIAL_SINGLE = "─"
MARKER_SPECIAL_LEFT = "╶"
MARKER_SPECIAL_RIGHT = "╴"

# Sequence track fillers
GAP_CHAR = "-"
PAD_CHAR = "·"

# Region name used when a boundary carries no name and none came before
UNKNOWN_REGION = "Unknown"

ANNOTATION_CONSERVED = "Conserved"
ANNOTATION_N_GLYCAN = "NGlycan"

# Residue pairs that are indistinguishable or near-identical by mass
SIMILAR_PAIRS: FrozenSet[Tuple[str, str]] = frozenset(
    {
        ("I", "L"),
        ("L", "I"),
        ("I", "J"),
        ("J", "I"),
        ("L", "J"),
        ("J", "L"),
        ("D", "N"),
        ("N", "D"),
        ("E", "Q"),
        ("Q", "E"),
    }
)
