#!/usr/bin/env python3
"""Summary statistics of an alignment path."""

import logging
from dataclasses import dataclass
from typing import Optional

import click
import numpy as np

from alignreport import constants
from alignreport.types import Alignment, MatchType

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AlignmentStats:
    """Column counts of an alignment.

    Attributes:
        identical: Columns where the residue is unchanged.
        similar: Identical columns plus isobaric, rotated and similar
            mismatched columns.
        gaps: Columns present in only one of the sequences.
        length: Total number of columns.
    """

    identical: int
    similar: int
    gaps: int
    length: int

    def _fraction(self, count: int) -> float:
        return count / self.length if self.length else 0.0

    @property
    def identity(self) -> float:
        return self._fraction(self.identical)

    @property
    def similarity(self) -> float:
        return self._fraction(self.similar)

    @property
    def gap_fraction(self) -> float:
        return self._fraction(self.gaps)


def alignment_stats(alignment: Alignment) -> AlignmentStats:
    """Count identical, similar and gapped columns of ``alignment``."""
    if not alignment.path:
        return AlignmentStats(0, 0, 0, 0)

    step_a = np.array([s.step_a for s in alignment.path])
    step_b = np.array([s.step_b for s in alignment.path])
    widths = np.maximum(step_a, step_b)
    types = [s.match_type for s in alignment.path]

    identity = np.array([t.preserves_identity for t in types])
    special = np.array(
        [t in (MatchType.ISOBARIC, MatchType.ROTATION) for t in types]
    )
    gap = (step_a == 0) | (step_b == 0)

    # Start of every step in the full sequences
    pos_a = alignment.start_a + np.cumsum(step_a) - step_a
    pos_b = alignment.start_b + np.cumsum(step_b) - step_b
    similar_mismatch = np.array(
        [
            t == MatchType.MISMATCH
            and (alignment.seq_a[a].code, alignment.seq_b[b].code)
            in constants.SIMILAR_PAIRS
            for t, a, b in zip(types, pos_a, pos_b)
        ]
    )

    identical = int(step_a[identity].sum())
    similar = identical + int(widths[special].sum()) + int(similar_mismatch.sum())
    stats = AlignmentStats(
        identical=identical,
        similar=similar,
        gaps=int(widths[gap].sum()),
        length=int(widths.sum()),
    )
    LOGGER.debug(f"Computed {stats}")
    return stats


def format_stats(
    stats: AlignmentStats, score: Optional[int] = None, color: bool = True
) -> str:
    """One-line summary of ``stats`` in the report header."""

    def style(text: str, **kwargs) -> str:
        return click.style(text, **kwargs) if color else text

    parts = [
        f"Identity: {style(f'{stats.identity:.3f}', fg='bright_blue')} "
        f"{style(f'({stats.identical}/{stats.length})', dim=True)}",
        f"Similarity: {style(f'{stats.similarity:.3f}', fg='blue')} "
        f"{style(f'({stats.similar}/{stats.length})', dim=True)}",
        f"Gaps: {style(f'{stats.gap_fraction:.3f}', fg='cyan')} "
        f"{style(f'({stats.gaps}/{stats.length})', dim=True)}",
    ]
    if score is not None:
        parts.append(f"Score: {style(str(score), fg='green')}")
    return ", ".join(parts)
