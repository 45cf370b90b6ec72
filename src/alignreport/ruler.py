#!/usr/bin/env python3
"""Ruler track: region labels and numeric ticks.

Region names are right-aligned on the last column of their region so the
label reads up to the boundary. Every tenth aligned column gets a
right-aligned number instead, unless a region label needs any of the
columns the number would occupy.

The ruler is driven one column at a time through ``advance_ruler``, which
takes and returns an explicit ``RulerState``. Pending label text is kept
reversed and consumed from the end, one character per column.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from alignreport import constants

LOGGER = logging.getLogger(__name__)


class LabelMode(Enum):
    IDLE = "idle"
    REGION = "region"
    NUMBER = "number"


@dataclass(frozen=True)
class RulerState:
    """What the ruler is currently writing and what is left of it."""

    mode: LabelMode = LabelMode.IDLE
    pending: str = ""


def region_label(name: str, width: int) -> str:
    """Label text for a region spanning ``width`` columns.

    The full name is used when it fits and the region is at least
    ``MIN_FULL_LABEL_WIDTH`` wide. Otherwise the first and last character
    are used, or only the last one for a single column.
    """
    if width <= 0 or not name:
        return ""
    if width >= constants.MIN_FULL_LABEL_WIDTH and len(name) <= width:
        return name
    if width == 1 or len(name) == 1:
        return name[-1]
    return name[0] + name[-1]


def advance_ruler(
    state: RulerState,
    region_text: Optional[str] = None,
    number_text: Optional[str] = None,
) -> Tuple[str, RulerState]:
    """Emit the ruler character for one column.

    Args:
        state: State after the previous column.
        region_text: Region label starting at this column, if any. Always
            wins over a numeric tick.
        number_text: Numeric tick starting at this column, if any. Only
            started when the ruler is idle.

    Returns:
        Tuple of (character for this column, state for the next column).
    """
    if region_text:
        state = RulerState(LabelMode.REGION, region_text[::-1])
    elif number_text and state.mode == LabelMode.IDLE:
        state = RulerState(LabelMode.NUMBER, number_text[::-1])

    if state.mode == LabelMode.IDLE:
        return " ", state
    char, rest = state.pending[-1], state.pending[:-1]
    if not rest:
        return char, RulerState()
    return char, RulerState(state.mode, rest)


def region_label_starts(
    runs: Sequence[Tuple[str, int, int]],
) -> Dict[int, str]:
    """Map start column -> label text for ``(name, first, last)`` runs."""
    starts = {}
    for name, first, last in runs:
        text = region_label(name, last - first + 1)
        if text:
            starts[last - len(text) + 1] = text
    return starts


def number_label_starts(
    positions: Sequence[Optional[int]],
    occupied: Set[int],
) -> Dict[int, str]:
    """Map start column -> tick text for every tenth aligned position.

    Args:
        positions: Per column, the 1-based aligned position or None.
        occupied: Columns already claimed by region labels.
    """
    starts = {}
    for column, position in enumerate(positions):
        if position is None or position % constants.TICK_INTERVAL != 0:
            continue
        text = str(position)
        first = column - len(text) + 1
        if first < 0 or any(c in occupied for c in range(first, column + 1)):
            continue
        starts[first] = text
    return starts


def build_ruler(
    positions: Sequence[Optional[int]],
    runs: Sequence[Tuple[str, int, int]],
) -> List[str]:
    """Ruler characters for every column of a report."""
    region_starts = region_label_starts(runs)
    occupied = {
        column
        for start, text in region_starts.items()
        for column in range(start, start + len(text))
    }
    number_starts = number_label_starts(positions, occupied)

    state = RulerState()
    chars = []
    for column in range(len(positions)):
        char, state = advance_ruler(
            state,
            region_text=region_starts.get(column),
            number_text=number_starts.get(column),
        )
        chars.append(char)
    LOGGER.debug(
        f"Built ruler with {len(region_starts)} region labels and "
        f"{len(number_starts)} ticks over {len(positions)} columns"
    )
    return chars
