#!/usr/bin/env python3
"""Terminal styling for report cells.

Styles are plain values; ``Styling.apply`` turns them into ANSI escapes via
``click.style`` so colour can be switched off in one place.
"""

from dataclasses import dataclass, replace
from typing import Optional

import click

from alignreport.reference import Annotation, Region

REGION_BACKGROUNDS = {
    "CDR1": "red",
    "CDR2": "green",
    "CDR3": "blue",
}

ANNOTATION_COLOURS = {
    Annotation.CONSERVED: "blue",
    Annotation.N_GLYCAN: "green",
}


@dataclass(frozen=True)
class Styling:
    """Foreground/background colour plus dim and underline for one cell."""

    fg: Optional[str] = None
    bg: Optional[str] = None
    dim: bool = False
    underline: bool = False

    @property
    def is_plain(self) -> bool:
        return self == Styling()

    def or_fg(self, color: Optional[str]) -> "Styling":
        """Set the foreground only if none is set yet."""
        return replace(self, fg=self.fg or color)

    def apply(self, text: str, enabled: bool = True) -> str:
        if not enabled or self.is_plain or not text:
            return text
        return click.style(
            text,
            fg=self.fg,
            bg=self.bg,
            dim=self.dim or None,
            underline=self.underline or None,
        )


def region_bg(region: Optional[Region]) -> Optional[str]:
    """Background colour of a CDR, None for frameworks and constant regions."""
    if region is None or not region.is_cdr:
        return None
    return REGION_BACKGROUNDS.get(region.name)


def region_fg(region: Optional[Region]) -> Optional[str]:
    return "black" if region_bg(region) else None


def annotation_fg(annotation: Optional[Annotation]) -> Optional[str]:
    if annotation is None:
        return None
    return ANNOTATION_COLOURS.get(annotation)
