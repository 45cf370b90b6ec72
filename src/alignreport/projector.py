#!/usr/bin/env python3
"""Projection of germline regions and annotations onto a query.

Given one or more (reference, alignment) segments that together cover a
query, ``project`` partitions the aligned query into named regions and
lists which reference annotations land on which query positions.

Chained segments (V, then J, then C) share one query coordinate space.
When a segment's alignment does not start at query position 0 the
unaligned lead-in is attributed to the region that was open before the
segment started, so a CDR3 split across V and J comes out as one entry.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from alignreport.reference import AnnotatedReference, Annotation, Region
from alignreport.types import Alignment, MatchType, Step

LOGGER = logging.getLogger(__name__)

Segment = Tuple[AnnotatedReference, Alignment]
# (region name or None for an unnamed lead-in, reference length)
Boundary = Tuple[Optional[Region], int]


@dataclass(frozen=True)
class Projection:
    """Regions and annotations of a query, in query coordinates."""

    regions: Tuple[Tuple[Region, int], ...]
    annotations: Tuple[Tuple[Annotation, int], ...]

    @property
    def total_length(self) -> int:
        return sum(length for _, length in self.regions)

    def regions_string(self) -> str:
        return ";".join(f"{r}:{length}" for r, length in self.regions)

    def annotations_string(self) -> str:
        return ";".join(f"{a}:{position}" for a, position in self.annotations)


def lead_in_step(alignment: Alignment) -> Optional[Step]:
    """The synthetic step covering an unaligned query prefix, if any."""
    if alignment.start_b == 0:
        return None
    return Step(alignment.start_a, alignment.start_b, MatchType.FULL_IDENTITY)


def boundary_queue(segments: Sequence[Segment]) -> List[Boundary]:
    """Combined boundary table of all segments, reversed for popping."""
    queue: List[Boundary] = []
    for reference, alignment in segments:
        if alignment.start_b != 0:
            queue.append((None, alignment.start_a))
        queue.extend(reference.regions)
    queue.reverse()
    return queue


def walk_steps(segments: Sequence[Segment]) -> Iterator[Tuple[int, Step]]:
    """Yield ``(segment_index, step)`` including the synthetic lead-ins."""
    for index, (_, alignment) in enumerate(segments):
        lead_in = lead_in_step(alignment)
        if lead_in is not None:
            yield index, lead_in
        for step in alignment.path:
            yield index, step


def resolve_region(
    name: Optional[Region], last_region: Optional[Region]
) -> Region:
    if name is not None:
        return name
    if last_region is not None:
        return last_region
    return Region.unknown()


def _add_region(regions: List[List], region: Region, length: int) -> None:
    if regions and regions[-1][0] == region:
        regions[-1][1] += length
    else:
        regions.append([region, length])


def project(segments: Sequence[Segment]) -> Projection:
    """Project regions and annotations of chained segments onto the query.

    Args:
        segments: Ordered (reference, alignment) pairs. Consecutive
            alignments are expected to cover contiguous query spans.

    Returns:
        Projection whose region lengths sum to the aligned query length
        (including lead-ins) and whose annotations are in ascending query
        position.
    """
    queue = boundary_queue(segments)
    regions: List[List] = []
    annotations: List[Tuple[Annotation, int]] = []

    index_a = index_b = 0
    len_a = len_b = 0
    offset = 0
    last_region: Optional[Region] = None
    last_index: Optional[int] = None

    for index, step in walk_steps(segments):
        assert step.step_a > 0 or step.step_b > 0, "zero length step"
        if index != last_index:
            last_index = index
            offset = index_a
        index_a += step.step_a
        index_b += step.step_b
        len_a += step.step_a
        len_b += step.step_b

        while queue and queue[-1][1] <= len_a:
            name, threshold = queue.pop()
            assert threshold >= 0, "negative region length"
            region = resolve_region(name, last_region)
            _add_region(regions, region, len_b)
            last_region = region
            len_a -= threshold
            len_b = 0

        # Annotations only carry over when the residue itself is unchanged
        if step.match_type.preserves_identity:
            reference = segments[index][0]
            local = index_a - offset + step.step_a
            for annotation in reference.annotations_at(local):
                annotations.append((annotation, index_b + step.step_b))

    if queue:
        name, _ = queue[-1]
        _add_region(regions, resolve_region(name, last_region), len_b)

    projection = Projection(
        regions=tuple((r, length) for r, length in regions),
        annotations=tuple(annotations),
    )
    LOGGER.info(
        f"Projected {len(segments)} segment(s) onto {len(projection.regions)} "
        f"regions and {len(projection.annotations)} annotations"
    )
    return projection
