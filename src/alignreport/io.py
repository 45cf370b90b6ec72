#!/usr/bin/env python3
"""Reading germline datasets and alignment requests from disk.

Supported inputs:
- JSON germline datasets with region and annotation tables
- FASTA reference files (no regions or annotations)
- JSON alignment requests describing one or more chained segments
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from Bio import SeqIO

from alignreport.reference import Germline
from alignreport.types import Alignment, parse_path, parse_sequence

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_json(path: PathLike) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object at the top level of {path}")
    return data


def read_germlines_json(path: PathLike) -> List[Germline]:
    """Read germlines from a JSON dataset.

    The file holds ``{"germlines": [...]}`` where each entry has ``name``,
    ``sequence`` and optionally ``regions`` (``[[name, length], ...]``),
    ``annotations`` (``[[name, position], ...]``) and ``species``.

    Raises:
        ValueError: If an entry is missing a required key.
    """
    data = _read_json(path)
    entries = data.get("germlines")
    if not isinstance(entries, list):
        raise ValueError(f"{path} does not contain a 'germlines' list")

    germlines = []
    for idx, entry in enumerate(entries):
        missing = [key for key in ("name", "sequence") if key not in entry]
        if missing:
            raise ValueError(
                f"Germline entry {idx} in {path} is missing {', '.join(missing)}"
            )
        germlines.append(
            Germline.from_strings(
                entry["name"],
                entry["sequence"],
                regions=[tuple(r) for r in entry.get("regions", [])],
                annotations=[tuple(a) for a in entry.get("annotations", [])],
                species=entry.get("species"),
            )
        )
    LOGGER.info(f"Loaded {len(germlines)} germlines from {path}")
    return germlines


def read_fasta_references(path: PathLike) -> List[Germline]:
    """Read plain references from a FASTA file using Biopython."""
    references = [
        Germline.from_strings(record.id, str(record.seq).replace("*", ""))
        for record in SeqIO.parse(str(path), "fasta")
    ]
    LOGGER.info(f"Loaded {len(references)} FASTA references from {path}")
    return references


def read_alignment_request(
    path: PathLike,
) -> Tuple[str, List[Dict[str, Any]]]:
    """Read an alignment request.

    Returns:
        Tuple of (default query sequence, list of raw segment entries).

    Raises:
        ValueError: If the request has no segments or a segment is missing
            a germline name or path.
    """
    data = _read_json(path)
    segments = data.get("segments")
    if not isinstance(segments, list) or not segments:
        raise ValueError(f"{path} does not contain any segments")
    query = data.get("query", "")
    for idx, segment in enumerate(segments):
        for key in ("germline", "path"):
            if key not in segment:
                raise ValueError(f"Segment {idx} in {path} is missing '{key}'")
        if not segment.get("query", query):
            raise ValueError(f"Segment {idx} in {path} has no query sequence")
    return query, segments


def build_alignment(
    germline: Germline, query: str, segment: Dict[str, Any]
) -> Alignment:
    """Turn one raw segment entry into an Alignment against ``germline``."""
    return Alignment(
        seq_a=germline.sequence,
        seq_b=tuple(parse_sequence(segment.get("query", query))),
        start_a=int(segment.get("start_a", 0)),
        start_b=int(segment.get("start_b", 0)),
        path=tuple(parse_path(segment["path"])),
        score=segment.get("score"),
    )
