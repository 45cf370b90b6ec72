#!/usr/bin/env python3
"""Configuration dataclasses for alignreport.

This module provides configuration dataclasses that consolidate report
parameters, making it easier to pass configuration from the CLI down to
the renderer and table printers.
"""

from dataclasses import dataclass, field

from alignreport import constants


@dataclass(frozen=True)
class RenderConfig:
    """Configuration for the text report.

    Attributes:
        line_width: Number of alignment columns per wrapped block.
        show_context: Show unaligned flanking residues on both sides.
        only_show_reference: Show only the reference track (and ruler).
        color: Emit ANSI colour codes.
    """

    line_width: int = constants.DEFAULT_LINE_WIDTH
    show_context: bool = False
    only_show_reference: bool = False
    color: bool = True

    def __post_init__(self) -> None:
        if self.line_width < 1:
            raise ValueError(
                f"line_width must be at least 1. Got: {self.line_width}"
            )


@dataclass(frozen=True)
class OutputConfig:
    """Configuration for tabular output.

    Attributes:
        csv: Print tables as CSV instead of box-drawn text.
    """

    csv: bool = False


@dataclass(frozen=True)
class ReportConfig:
    """Complete configuration for one report invocation.

    Example:
        config = ReportConfig(
            germlines="human_igh.json",
            alignment="request.json",
            render=RenderConfig(line_width=60, show_context=True),
        )
    """

    germlines: str
    alignment: str
    render: RenderConfig = field(default_factory=RenderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    verbose: bool = False

    @classmethod
    def from_cli_args(
        cls,
        germlines: str,
        alignment: str,
        line_width: int = constants.DEFAULT_LINE_WIDTH,
        context: bool = False,
        color: bool = True,
        csv: bool = False,
        verbose: bool = False,
    ) -> "ReportConfig":
        """Create a ReportConfig from CLI arguments."""
        return cls(
            germlines=germlines,
            alignment=alignment,
            render=RenderConfig(
                line_width=line_width,
                show_context=context,
                color=color,
            ),
            output=OutputConfig(csv=csv),
            verbose=verbose,
        )
