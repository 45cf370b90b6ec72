#!/usr/bin/env python3
"""Alignment data model.

An alignment is an ordered path of steps between a reference sequence
(``seq_a``) and a query sequence (``seq_b``). Each step consumes
``step_a`` reference residues and ``step_b`` query residues. The path
itself is computed elsewhere; this module only describes it.

Paths can be written in a compact notation, e.g. ``"4=1X3I2:3i5="``:

- ``N=`` N identity steps (1, 1)
- ``Nm`` N identity steps where a modification changes the mass
- ``NX`` N mismatch steps (1, 1)
- ``NI`` N steps (0, 1), residues present only in the query
- ``ND`` N steps (1, 0), residues present only in the reference
- ``Ni`` / ``Nr`` one isobaric / rotated step (N, N)
- ``A:Bi`` / ``A:Br`` one isobaric / rotated step (A, B)
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

LOGGER = logging.getLogger(__name__)


class MatchType(Enum):
    """Classification of a single alignment step."""

    FULL_IDENTITY = "FullIdentity"
    IDENTITY_MASS_MISMATCH = "IdentityMassMismatch"
    MISMATCH = "Mismatch"
    ISOBARIC = "Isobaric"
    ROTATION = "Rotation"
    GAP = "Gap"

    @property
    def preserves_identity(self) -> bool:
        """Whether the residue identity survives this step."""
        return self in (MatchType.FULL_IDENTITY, MatchType.IDENTITY_MASS_MISMATCH)


@dataclass(frozen=True)
class Residue:
    """Amino acid code plus the names of any modifications on it."""

    code: str
    modifications: Tuple[str, ...] = ()

    @property
    def is_modified(self) -> bool:
        return len(self.modifications) > 0

    def __str__(self) -> str:
        return self.code + "".join(f"[{m}]" for m in self.modifications)


@dataclass(frozen=True)
class Step:
    """One unit of an alignment path."""

    step_a: int
    step_b: int
    match_type: MatchType

    def __post_init__(self) -> None:
        if self.step_a < 0 or self.step_b < 0:
            raise ValueError(
                f"Step lengths must be non-negative, got "
                f"({self.step_a}, {self.step_b})"
            )
        if self.step_a == 0 and self.step_b == 0:
            raise ValueError("Step must consume at least one residue")

    @property
    def width(self) -> int:
        """Number of report columns this step occupies."""
        return max(self.step_a, self.step_b)


_SEQUENCE_TOKEN = re.compile(r"([A-Za-z])((?:\[[^\]]*\])*)")
_MODIFICATION = re.compile(r"\[([^\]]*)\]")


def parse_sequence(text: str) -> List[Residue]:
    """Parse ``AC[Oxidation]DE`` style text into residues.

    Whitespace is ignored. Raises:
        ValueError: If the text contains anything other than residue codes
            optionally followed by bracketed modification names.
    """
    compact = "".join(text.split())
    residues = []
    pos = 0
    while pos < len(compact):
        match = _SEQUENCE_TOKEN.match(compact, pos)
        if match is None:
            raise ValueError(
                f"Invalid sequence character {compact[pos]!r} at position {pos}"
            )
        mods = tuple(_MODIFICATION.findall(match.group(2)))
        residues.append(Residue(match.group(1).upper(), mods))
        pos = match.end()
    return residues


_PATH_TOKEN = re.compile(r"(?:(\d+):(\d+)([ir])|(\d*)([=mXIDir]))")

_SINGLE_STEPS = {
    "=": (1, 1, MatchType.FULL_IDENTITY),
    "m": (1, 1, MatchType.IDENTITY_MASS_MISMATCH),
    "X": (1, 1, MatchType.MISMATCH),
    "I": (0, 1, MatchType.GAP),
    "D": (1, 0, MatchType.GAP),
}

_SPECIAL_STEPS = {"i": MatchType.ISOBARIC, "r": MatchType.ROTATION}


def parse_path(text: str) -> List[Step]:
    """Parse a compact path string into steps.

    Raises:
        ValueError: On an unknown token or a zero count.
    """
    steps: List[Step] = []
    pos = 0
    while pos < len(text):
        match = _PATH_TOKEN.match(text, pos)
        if match is None:
            raise ValueError(f"Invalid path token at position {pos} in {text!r}")
        a, b, special, count, op = match.groups()
        if special is not None:
            steps.append(Step(int(a), int(b), _SPECIAL_STEPS[special]))
        else:
            n = int(count) if count else 1
            if n == 0:
                raise ValueError(f"Zero count at position {pos} in {text!r}")
            if op in _SPECIAL_STEPS:
                steps.append(Step(n, n, _SPECIAL_STEPS[op]))
            else:
                step_a, step_b, match_type = _SINGLE_STEPS[op]
                steps.extend(Step(step_a, step_b, match_type) for _ in range(n))
        pos = match.end()
    return steps


def _step_token(step: Step) -> Tuple[str, bool]:
    """Return the token for ``step`` and whether it can be run-length merged."""
    for op, (step_a, step_b, match_type) in _SINGLE_STEPS.items():
        if (step.step_a, step.step_b, step.match_type) == (step_a, step_b, match_type):
            return op, True
    if step.match_type == MatchType.ROTATION:
        op = "r"
    elif step.match_type == MatchType.ISOBARIC:
        op = "i"
    else:
        raise ValueError(f"Step {step} has no path notation")
    if step.step_a == step.step_b:
        return f"{step.step_a}{op}", False
    return f"{step.step_a}:{step.step_b}{op}", False


def path_to_string(path: Sequence[Step]) -> str:
    """Write steps back into the compact notation, grouping runs."""
    out = []
    last: Optional[str] = None
    run = 0
    for step in path:
        token, mergeable = _step_token(step)
        if mergeable and token == last:
            run += 1
            continue
        if last is not None:
            out.append(f"{run}{last}")
        if mergeable:
            last, run = token, 1
        else:
            last, run = None, 0
            out.append(token)
    if last is not None:
        out.append(f"{run}{last}")
    return "".join(out)


@dataclass(frozen=True)
class Alignment:
    """Read-only view of an alignment between a reference and a query.

    Attributes:
        seq_a: Full reference sequence.
        seq_b: Full query sequence.
        start_a: Reference offset where the path begins.
        start_b: Query offset where the path begins.
        path: Ordered steps.
        score: Score reported by the aligner, if any.
    """

    seq_a: Tuple[Residue, ...]
    seq_b: Tuple[Residue, ...]
    start_a: int
    start_b: int
    path: Tuple[Step, ...]
    score: Optional[int] = None
    len_a: int = field(init=False)
    len_b: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "seq_a", tuple(self.seq_a))
        object.__setattr__(self, "seq_b", tuple(self.seq_b))
        object.__setattr__(self, "path", tuple(self.path))
        object.__setattr__(self, "len_a", sum(s.step_a for s in self.path))
        object.__setattr__(self, "len_b", sum(s.step_b for s in self.path))

        if self.start_a < 0 or self.start_b < 0:
            raise ValueError(
                f"start_a ({self.start_a}) and start_b ({self.start_b}) "
                f"must be non-negative"
            )
        if self.end_a > len(self.seq_a):
            raise ValueError(
                f"Path runs past the end of seq_a: start_a ({self.start_a}) + "
                f"len_a ({self.len_a}) > len(seq_a) ({len(self.seq_a)})"
            )
        if self.end_b > len(self.seq_b):
            raise ValueError(
                f"Path runs past the end of seq_b: start_b ({self.start_b}) + "
                f"len_b ({self.len_b}) > len(seq_b) ({len(self.seq_b)})"
            )
        LOGGER.debug(
            f"Created Alignment with {len(self.path)} steps "
            f"(a={self.start_a}..{self.end_a}, b={self.start_b}..{self.end_b})"
        )

    @property
    def end_a(self) -> int:
        return self.start_a + self.len_a

    @property
    def end_b(self) -> int:
        return self.start_b + self.len_b

    @classmethod
    def from_strings(
        cls,
        seq_a: str,
        seq_b: str,
        start_a: int,
        start_b: int,
        path: str,
        score: Optional[int] = None,
    ) -> "Alignment":
        """Build an alignment from sequence text and a compact path."""
        return cls(
            seq_a=tuple(parse_sequence(seq_a)),
            seq_b=tuple(parse_sequence(seq_b)),
            start_a=start_a,
            start_b=start_b,
            path=tuple(parse_path(path)),
            score=score,
        )

    def short(self) -> str:
        return path_to_string(self.path)
