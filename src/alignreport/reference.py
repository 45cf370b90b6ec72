#!/usr/bin/env python3
"""Reference sequences that know their regions and point annotations.

The Projector and Renderer only talk to references through the
``AnnotatedReference`` interface, so any germline layout can be reported
on as long as it can answer two questions per reference position: which
region is this, and which annotations sit here.
"""

import abc
import bisect
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple

from alignreport import constants
from alignreport.types import Residue, parse_sequence

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Region:
    """A named contiguous interval of a reference (FR1, CDR1, CH1, ...)."""

    name: str

    @classmethod
    def unknown(cls) -> "Region":
        return cls(constants.UNKNOWN_REGION)

    @property
    def is_cdr(self) -> bool:
        return self.name.startswith("CDR")

    def __str__(self) -> str:
        return self.name


class Annotation(Enum):
    """Point label attached to one reference position."""

    CONSERVED = constants.ANNOTATION_CONSERVED
    N_GLYCAN = constants.ANNOTATION_N_GLYCAN

    def __str__(self) -> str:
        return self.value


class AnnotatedReference(abc.ABC):
    """Per-position region and annotation lookup on a reference sequence.

    Positions are 0-indexed on the full reference sequence.
    """

    name: str

    @property
    @abc.abstractmethod
    def sequence(self) -> Tuple[Residue, ...]:
        """Full reference sequence."""

    @property
    @abc.abstractmethod
    def regions(self) -> Sequence[Tuple[Region, int]]:
        """Ordered ``(region, length)`` boundary table."""

    @property
    @abc.abstractmethod
    def annotations(self) -> Sequence[Tuple[Annotation, int]]:
        """Ordered ``(annotation, position)`` pairs."""

    def region(self, position: int) -> Optional[Tuple[Region, bool]]:
        """Return the region containing ``position`` and whether it is the
        last position of that region, or None past the annotated part."""
        end = 0
        for region, length in self.regions:
            end += length
            if position < end:
                return region, position == end - 1
        return None

    def annotations_at(self, position: int) -> Iterator[Annotation]:
        for annotation, annotated in self.annotations:
            if annotated == position:
                yield annotation


@dataclass(frozen=True)
class Germline(AnnotatedReference):
    """A germline gene (IMGT V, J or C segment) with its region table.

    Attributes:
        name: Gene/allele name, e.g. ``IGHV3-23*01``.
        residues: Reference sequence.
        region_table: Ordered ``(region, length)`` pairs.
        annotation_table: Ordered ``(annotation, position)`` pairs.
        species: Optional species label carried through from the dataset.
    """

    name: str
    residues: Tuple[Residue, ...]
    region_table: Tuple[Tuple[Region, int], ...] = ()
    annotation_table: Tuple[Tuple[Annotation, int], ...] = ()
    species: Optional[str] = None
    _region_ends: Tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "residues", tuple(self.residues))
        object.__setattr__(self, "region_table", tuple(self.region_table))
        object.__setattr__(self, "annotation_table", tuple(self.annotation_table))

        ends: List[int] = []
        total = 0
        for region, length in self.region_table:
            if length < 0:
                raise ValueError(
                    f"Region {region} of {self.name} has negative length {length}"
                )
            total += length
            ends.append(total)
        if total > len(self.residues):
            raise ValueError(
                f"Regions of {self.name} cover {total} residues but the "
                f"sequence has only {len(self.residues)}"
            )
        positions = [p for _, p in self.annotation_table]
        if positions != sorted(positions):
            raise ValueError(f"Annotations of {self.name} must be sorted by position")
        for annotation, position in self.annotation_table:
            if not 0 <= position < len(self.residues):
                raise ValueError(
                    f"Annotation {annotation} at {position} is outside "
                    f"{self.name} (length {len(self.residues)})"
                )
        object.__setattr__(self, "_region_ends", tuple(ends))
        LOGGER.debug(
            f"Initialized Germline {self.name} with {len(self.region_table)} "
            f"regions and {len(self.annotation_table)} annotations"
        )

    @classmethod
    def from_strings(
        cls,
        name: str,
        sequence: str,
        regions: Sequence[Tuple[str, int]] = (),
        annotations: Sequence[Tuple[str, int]] = (),
        species: Optional[str] = None,
    ) -> "Germline":
        """Build a germline from plain names, e.g. ``[("FR1", 25), ...]``."""
        return cls(
            name=name,
            residues=tuple(parse_sequence(sequence)),
            region_table=tuple((Region(r), int(length)) for r, length in regions),
            annotation_table=tuple(
                (Annotation(a), int(position)) for a, position in annotations
            ),
            species=species,
        )

    @property
    def sequence(self) -> Tuple[Residue, ...]:
        return self.residues

    @property
    def regions(self) -> Sequence[Tuple[Region, int]]:
        return self.region_table

    @property
    def annotations(self) -> Sequence[Tuple[Annotation, int]]:
        return self.annotation_table

    def region(self, position: int) -> Optional[Tuple[Region, bool]]:
        index = bisect.bisect_right(self._region_ends, position)
        if index >= len(self.region_table):
            return None
        return self.region_table[index][0], position == self._region_ends[index] - 1

    def __len__(self) -> int:
        return len(self.residues)

    def __str__(self) -> str:
        return self.name
