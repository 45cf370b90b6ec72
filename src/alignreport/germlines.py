#!/usr/bin/env python3
"""Read-only germline dataset.

A ``GermlineDatabase`` is built once, explicitly, and handed to whatever
needs to look germlines up. There is no module level instance.

Example:
    db = GermlineDatabase.load("human_igh.json")
    v_gene = db.get("IGHV3-23*01")
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from alignreport import io
from alignreport.reference import Germline

LOGGER = logging.getLogger(__name__)


class GermlineDatabase:
    """Immutable name-indexed collection of germlines."""

    def __init__(self, germlines: Iterable[Germline]) -> None:
        entries: Dict[str, Germline] = {}
        for germline in germlines:
            if germline.name in entries:
                raise ValueError(f"Duplicate germline name {germline.name!r}")
            entries[germline.name] = germline
        self._entries = entries
        LOGGER.info(f"Germline database holds {len(entries)} entries")

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "GermlineDatabase":
        return cls(io.read_germlines_json(path))

    @classmethod
    def from_fasta(cls, path: Union[str, Path]) -> "GermlineDatabase":
        return cls(io.read_fasta_references(path))

    @classmethod
    def load(cls, path: Union[str, Path]) -> "GermlineDatabase":
        """Load a dataset, picking the reader from the file extension."""
        suffix = Path(path).suffix.lower()
        if suffix == ".json":
            return cls.from_json(path)
        if suffix in (".fasta", ".fa", ".faa"):
            return cls.from_fasta(path)
        raise ValueError(
            f"Unsupported germline file '{path}', expected .json or .fasta"
        )

    def get(self, name: str) -> Germline:
        """Return the germline called ``name``.

        Raises:
            KeyError: If no germline has that name.
        """
        try:
            return self._entries[name]
        except KeyError:
            available = ", ".join(sorted(self._entries)) or "none"
            raise KeyError(
                f"Germline {name!r} not found. Available germlines: {available}"
            ) from None

    def find(self, species: Optional[str] = None) -> List[Germline]:
        """All germlines, optionally restricted to one species."""
        return [
            g for g in self._entries.values()
            if species is None or g.species == species
        ]

    def __iter__(self) -> Iterator[Germline]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)
