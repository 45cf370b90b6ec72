"""Shared test fixtures and utilities for alignreport tests."""

import json
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import pytest

from alignreport.germlines import GermlineDatabase
from alignreport.reference import Germline
from alignreport.types import Alignment
from alignreport.util import load_segments

DATA_DIR = Path(__file__).parent / "data"
# Human IGHV2-26, IGHJ5 and IGHG1 with IMGT region lengths and conserved
# positions, plus a heavy chain aligned against them
HUMAN_IGH_GERMLINES = DATA_DIR / "human_igh_germlines.json"
HUMAN_IGH_REQUEST = DATA_DIR / "human_igh_request.json"

# A heavy chain cut into V, J and C pieces. The CDR3 starts at the end of
# the V gene and continues through three untemplated residues (RDG) into
# the J gene; the C fragment covers CH1 and the start of the hinge.
CHAIN_QUERY = "QVQLVGFSYWVRQCA" + "RDG" + "FDYWGQGT" + "ASTKGPSVFP"

CHAIN_GERMLINES: List[Dict[str, Any]] = [
    {
        "name": "TESTV*01",
        "sequence": "QVQLVGFTWVRQCA",
        "regions": [["FR1", 5], ["CDR1", 3], ["FR2", 4], ["CDR3", 2]],
        "annotations": [["NGlycan", 9], ["Conserved", 13]],
    },
    {
        "name": "TESTJ*01",
        "sequence": "YFDYWGQGT",
        "regions": [["CDR3", 3], ["FR4", 6]],
        "annotations": [["Conserved", 5]],
    },
    {
        "name": "TESTC*01",
        "sequence": "ASTKGPSVFP",
        "regions": [["CH1", 7], ["H", 3]],
        "annotations": [["Conserved", 4]],
    },
]

CHAIN_SEGMENTS: List[Dict[str, Any]] = [
    {"germline": "TESTV*01", "start_a": 0, "start_b": 0, "path": "7=1X1I6="},
    {
        "germline": "TESTJ*01",
        "query": CHAIN_QUERY[15:],
        "start_a": 1,
        "start_b": 3,
        "path": "8=",
    },
    {
        "germline": "TESTC*01",
        "query": CHAIN_QUERY[26:],
        "start_a": 0,
        "start_b": 0,
        "path": "10=",
    },
]

CHAIN_REGIONS = "FR1:5;CDR1:3;FR2:5;CDR3:8;FR4:6;CH1:7;H:2"
CHAIN_ANNOTATIONS = "Conserved:14;Conserved:22;Conserved:30"


def make_germline(
    sequence: str,
    regions: Sequence[Tuple[str, int]] = (),
    annotations: Sequence[Tuple[str, int]] = (),
    name: str = "TEST*01",
) -> Germline:
    """Create a germline from plain region and annotation names."""
    return Germline.from_strings(name, sequence, regions, annotations)


def make_segment(
    germline: Germline,
    query: str,
    path: str,
    start_a: int = 0,
    start_b: int = 0,
) -> Tuple[Germline, Alignment]:
    """Pair ``germline`` with an alignment of ``query`` along ``path``."""
    alignment = Alignment.from_strings(
        "".join(str(r) for r in germline.sequence), query, start_a, start_b, path
    )
    return germline, alignment


def chain_segments() -> List[Tuple[Germline, Alignment]]:
    """The V/J/C chained segments built from the module constants."""
    germlines = {
        entry["name"]: make_germline(
            entry["sequence"],
            [tuple(r) for r in entry["regions"]],
            [tuple(a) for a in entry["annotations"]],
            name=entry["name"],
        )
        for entry in CHAIN_GERMLINES
    }
    return [
        make_segment(
            germlines[entry["germline"]],
            entry.get("query", CHAIN_QUERY),
            entry["path"],
            entry["start_a"],
            entry["start_b"],
        )
        for entry in CHAIN_SEGMENTS
    ]


def write_chain_files(tmp_path: Path) -> Tuple[Path, Path]:
    """Write the chained fixture as a germline dataset plus a request."""
    germlines = tmp_path / "germlines.json"
    germlines.write_text(json.dumps({"germlines": CHAIN_GERMLINES}))
    request = tmp_path / "request.json"
    request.write_text(
        json.dumps({"query": CHAIN_QUERY, "segments": CHAIN_SEGMENTS})
    )
    return germlines, request


@pytest.fixture
def chain():
    return chain_segments()


@pytest.fixture
def chain_files(tmp_path):
    return write_chain_files(tmp_path)


@pytest.fixture
def human_igh():
    database = GermlineDatabase.load(HUMAN_IGH_GERMLINES)
    return load_segments(database, str(HUMAN_IGH_REQUEST))
