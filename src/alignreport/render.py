#!/usr/bin/env python3
"""Line-wrapped, multi-track text report of one or more alignments.

Each wrapped block has up to four lines:

1. ruler: region labels and numeric ticks
2. reference residues
3. query residues
4. markers (``' '`` identity, ``'⨯'`` mismatch, ``'+'`` gap, box
   drawing characters for isobaric and rotated stretches)

The report is built in two passes. ``plan_columns`` expands every step
into single columns and assigns regions by replaying the projector's
boundary queue, ``render_blocks`` lays down the ruler and wraps the
tracks into blocks of ``line_width`` columns, placing labels and ticks
per block.

Example:
    lines = render([(v_gene, v_alignment), (j_gene, j_alignment)],
                   RenderConfig(line_width=60, color=False))
    print("\\n".join(lines))
"""

import itertools
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from alignreport import constants, ruler, styling
from alignreport.config import RenderConfig
from alignreport.projector import (
    Segment,
    boundary_queue,
    lead_in_step,
    resolve_region,
)
from alignreport.reference import AnnotatedReference, Annotation, Region
from alignreport.styling import Styling
from alignreport.types import Alignment, MatchType, Residue, Step

LOGGER = logging.getLogger(__name__)

Cell = Tuple[str, Styling]


class StepKind(Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    GAP = "gap"
    SPECIAL = "special"
    CONTEXT = "context"


KIND_MARKERS = {
    StepKind.MATCH: constants.MARKER_IDENTITY,
    StepKind.MISMATCH: constants.MARKER_MISMATCH,
    StepKind.GAP: constants.MARKER_GAP,
    StepKind.CONTEXT: " ",
}

KIND_COLOURS = {
    StepKind.MISMATCH: "red",
    StepKind.GAP: "yellow",
    StepKind.SPECIAL: "yellow",
}


@dataclass
class Column:
    """Everything needed to draw one report column."""

    ref: str
    query: str
    marker: str
    kind: StepKind
    ref_modified: bool = False
    query_modified: bool = False
    annotation: Optional[Annotation] = None
    region: Optional[Region] = None
    position: Optional[int] = None


def step_kind(step: Step) -> StepKind:
    # Isobaric sets of 1/1 would otherwise count as identity or mismatch
    if step.match_type == MatchType.ISOBARIC:
        return StepKind.SPECIAL
    if step.match_type.preserves_identity:
        return StepKind.MATCH
    if step.match_type == MatchType.MISMATCH:
        return StepKind.MISMATCH
    if step.step_a == 0 or step.step_b == 0:
        return StepKind.GAP
    return StepKind.SPECIAL


def special_marker(width: int) -> str:
    if width == 1:
        return constants.MARKER_SPECIAL_SINGLE
    return (
        constants.MARKER_SPECIAL_LEFT
        + constants.MARKER_SPECIAL_SINGLE * (width - 2)
        + constants.MARKER_SPECIAL_RIGHT
    )


def _residue_char(
    sequence: Sequence[Residue], start: int, count: int, i: int
) -> Tuple[str, bool]:
    """Character (and modified flag) for column ``i`` of one step side."""
    if count == 0:
        return constants.GAP_CHAR, False
    if i < count:
        residue = sequence[start + i]
        return residue.code, residue.is_modified
    return constants.PAD_CHAR, False


def expand_step(
    step: Step,
    reference: AnnotatedReference,
    alignment: Alignment,
    a: int,
    b: int,
) -> List[Column]:
    """Expand a step starting at local positions ``a``/``b`` into columns."""
    kind = step_kind(step)
    width = step.width
    markers = (
        special_marker(width)
        if kind == StepKind.SPECIAL
        else KIND_MARKERS[kind] * width
    )
    columns = []
    for i in range(width):
        ref, ref_modified = _residue_char(alignment.seq_a, a, step.step_a, i)
        query, query_modified = _residue_char(alignment.seq_b, b, step.step_b, i)
        annotation = None
        if i < step.step_a:
            annotation = next(reference.annotations_at(a + i), None)
        columns.append(
            Column(
                ref=ref,
                query=query,
                marker=markers[i],
                kind=kind,
                ref_modified=ref_modified,
                query_modified=query_modified,
                annotation=annotation,
            )
        )
    return columns


def _context_column(ref: str, query: str) -> Column:
    return Column(ref=ref, query=query, marker=" ", kind=StepKind.CONTEXT)


def left_context(alignment: Alignment) -> List[Column]:
    """Unaligned residues before the path, right-aligned.

    When the query has an unaligned prefix the segment lead-in already
    shows both prefixes, so there is nothing left to add.
    """
    if alignment.start_b != 0:
        return []
    width = max(alignment.start_a, alignment.start_b)
    columns = []
    for i in range(width):
        ref_idx = i - (width - alignment.start_a)
        query_idx = i - (width - alignment.start_b)
        columns.append(
            _context_column(
                alignment.seq_a[ref_idx].code if ref_idx >= 0 else " ",
                alignment.seq_b[query_idx].code if query_idx >= 0 else " ",
            )
        )
    return columns


def right_context(alignment: Alignment) -> List[Column]:
    """Unaligned residues after the path, left-aligned."""
    tail_a = alignment.seq_a[alignment.end_a:]
    tail_b = alignment.seq_b[alignment.end_b:]
    return [
        _context_column(
            tail_a[i].code if i < len(tail_a) else " ",
            tail_b[i].code if i < len(tail_b) else " ",
        )
        for i in range(max(len(tail_a), len(tail_b)))
    ]


def plan_columns(
    segments: Sequence[Segment], show_context: bool = False
) -> List[Column]:
    """Expand chained segments into report columns with regions assigned.

    Regions are resolved with the same boundary queue and merge rule as
    ``projector.project``, one step at a time. Columns after the last
    boundary of the last reference carry no region.
    """
    columns: List[Column] = []
    if not segments:
        return columns
    if show_context:
        columns.extend(left_context(segments[0][1]))

    queue = boundary_queue(segments)
    pending: List[Column] = []
    len_a = 0
    last_region: Optional[Region] = None

    for reference, alignment in segments:
        steps: List[Step] = []
        lead_in = lead_in_step(alignment)
        if lead_in is not None:
            # Shown as a gap, the query residues have no reference partner
            steps.append(Step(lead_in.step_a, lead_in.step_b, MatchType.GAP))
            a, b = 0, 0
        else:
            a, b = alignment.start_a, alignment.start_b
        steps.extend(alignment.path)

        for step in steps:
            expanded = expand_step(step, reference, alignment, a, b)
            columns.extend(expanded)
            pending.extend(expanded)
            a += step.step_a
            b += step.step_b
            len_a += step.step_a

            while queue and queue[-1][1] <= len_a:
                name, threshold = queue.pop()
                region = resolve_region(name, last_region)
                for column in pending:
                    column.region = region
                pending = []
                last_region = region
                len_a -= threshold

    if queue and pending:
        region = resolve_region(queue[-1][0], last_region)
        for column in pending:
            column.region = region

    if show_context:
        columns.extend(right_context(segments[-1][1]))

    position = 0
    for column in columns:
        if column.kind != StepKind.CONTEXT:
            position += 1
            column.position = position
    return columns


def region_runs(columns: Sequence[Column]) -> List[Tuple[str, int, int]]:
    """``(name, first, last)`` for each stretch of one region."""
    runs = []
    for region, group in itertools.groupby(
        enumerate(columns), key=lambda item: item[1].region
    ):
        indices = [idx for idx, _ in group]
        if region is not None:
            runs.append((region.name, indices[0], indices[-1]))
    return runs


def _reference_style(column: Column) -> Styling:
    if column.kind == StepKind.CONTEXT:
        return Styling(dim=True)
    return (
        Styling(
            fg=styling.annotation_fg(column.annotation),
            bg=styling.region_bg(column.region),
            underline=column.ref_modified,
        )
        .or_fg(KIND_COLOURS.get(column.kind))
        .or_fg(styling.region_fg(column.region))
    )


def _query_style(column: Column) -> Styling:
    if column.kind == StepKind.CONTEXT:
        return Styling(dim=True)
    return (
        Styling(
            fg=KIND_COLOURS.get(column.kind),
            bg=styling.region_bg(column.region),
            underline=column.query_modified,
        )
        .or_fg(styling.region_fg(column.region))
    )


def build_tracks(
    columns: Sequence[Column], only_show_reference: bool = False
) -> List[List[Cell]]:
    """Ruler, reference, query and marker cells for ``columns``.

    Called once per wrapped block, so region labels only see the part of
    a region inside the block and ticks never start before its first
    column.
    """
    ruler_chars = ruler.build_ruler(
        [c.position for c in columns], region_runs(columns)
    )
    ruler_track = [(char, Styling(dim=True)) for char in ruler_chars]
    ref_track = [(c.ref, _reference_style(c)) for c in columns]
    if only_show_reference:
        query_track = [(" ", Styling()) for _ in columns]
        marker_track = [(" ", Styling()) for _ in columns]
    else:
        query_track = [(c.query, _query_style(c)) for c in columns]
        marker_track = [
            (c.marker, Styling(fg=KIND_COLOURS.get(c.kind))) for c in columns
        ]
    return [ruler_track, ref_track, query_track, marker_track]


def _join(cells: Sequence[Cell], color: bool) -> str:
    out = []
    for style, group in itertools.groupby(cells, key=lambda cell: cell[1]):
        out.append(style.apply("".join(char for char, _ in group), color))
    return "".join(out)


def render_blocks(
    segments: Sequence[Segment], config: Optional[RenderConfig] = None
) -> List[List[str]]:
    """Render chained segments into wrapped blocks of track lines.

    A track line is only kept when it has visible content; the last block
    is emitted even when it is shorter than ``line_width``.
    """
    config = config or RenderConfig()
    columns = plan_columns(segments, config.show_context)

    blocks = []
    for start in range(0, len(columns), config.line_width):
        tracks = build_tracks(
            columns[start:start + config.line_width], config.only_show_reference
        )
        block = []
        for cells in tracks:
            if "".join(char for char, _ in cells).strip():
                block.append(_join(cells, config.color))
        blocks.append(block)
    LOGGER.info(
        f"Rendered {len(columns)} columns into {len(blocks)} blocks "
        f"of width {config.line_width}"
    )
    return blocks


def render(
    segments: Sequence[Segment], config: Optional[RenderConfig] = None
) -> List[str]:
    """Render chained segments into printable lines, blocks separated by
    an empty line."""
    lines: List[str] = []
    for idx, block in enumerate(render_blocks(segments, config)):
        if idx > 0:
            lines.append("")
        lines.extend(block)
    return lines
