#!/usr/bin/env python3
"""Utility functions for alignreport.

This module provides helper functions for:
- Configuring logging
- Building chained segments from a germline dataset and a request
"""

import logging
from typing import List

from alignreport import io
from alignreport.germlines import GermlineDatabase
from alignreport.projector import Segment

LOGGER = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Configure logging level based on verbosity flag.

    Args:
        verbose: If True, set logging level to INFO. Otherwise, set to WARNING.
    """
    level = logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=level, force=True)


def load_segments(database: GermlineDatabase, request_path: str) -> List[Segment]:
    """Resolve every segment of an alignment request against ``database``.

    Raises:
        KeyError: If a segment names a germline that is not in the database.
        ValueError: If the request or one of its paths is malformed.
    """
    query, entries = io.read_alignment_request(request_path)
    segments = []
    for entry in entries:
        germline = database.get(entry["germline"])
        segments.append((germline, io.build_alignment(germline, query, entry)))
        LOGGER.info(
            f"Segment {germline.name}: start_a={entry.get('start_a', 0)} "
            f"start_b={entry.get('start_b', 0)} path={entry['path']}"
        )
    return segments
