#!/usr/bin/env python3
"""Command-line interface for alignreport.

Commands:
- report: header statistics, the wrapped alignment report and the
  projected regions and annotations of a (chained) alignment
- regions: only the projected regions and annotations, as a table or CSV
- show: a single germline with its regions, reference track only
- list: the germlines of a dataset, optionally for one species

Usage:
    alignreport report -g germlines.json -a request.json -n 60 -c
    alignreport regions -g germlines.json -a request.json --csv
    alignreport show -g germlines.json "IGHV3-23*01"
    alignreport list -g germlines.json --species HomoSapiens
"""

import logging
from typing import List, Optional, Sequence

import click

from alignreport import constants, projector, render, stats, tables, util
from alignreport.config import OutputConfig, RenderConfig, ReportConfig
from alignreport.germlines import GermlineDatabase
from alignreport.types import Alignment, MatchType, Step

LOGGER = logging.getLogger(__name__)

_germlines_option = click.option(
    "-g",
    "--germlines",
    "germlines",
    required=True,
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=str),
    help="Germline dataset (.json with regions, or .fasta).",
)
_alignment_option = click.option(
    "-a",
    "--alignment",
    "alignment",
    required=True,
    type=click.Path(exists=True, dir_okay=False, readable=True, path_type=str),
    help="Alignment request (.json) listing the chained segments.",
)
_line_width_option = click.option(
    "-n",
    "--line-width",
    "line_width",
    type=click.IntRange(min=1),
    default=constants.DEFAULT_LINE_WIDTH,
    show_default=True,
    help="The number of columns to show on a single line of the report.",
)
_verbose_option = click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose logging.",
)


def _load(germlines: str, alignment: str) -> List[projector.Segment]:
    try:
        database = GermlineDatabase.load(germlines)
        return util.load_segments(database, alignment)
    except (KeyError, ValueError) as e:
        # KeyError wraps its message in quotes
        message = e.args[0] if isinstance(e, KeyError) and e.args else str(e)
        raise click.ClickException(str(message)) from e


def projection_rows(projection: projector.Projection) -> List[List[str]]:
    rows = [["Kind", "Name", "Value"]]
    rows.extend(["Region", str(r), str(length)] for r, length in projection.regions)
    rows.extend(
        ["Annotation", str(a), str(position)]
        for a, position in projection.annotations
    )
    return rows


def _echo_rows(rows: Sequence[Sequence[str]], output: OutputConfig) -> None:
    lines = tables.format_csv(rows) if output.csv else tables.format_table(rows)
    for line in lines:
        click.echo(line)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    help=(
        "Report which germline regions and annotations an aligned query "
        "occupies, as a wrapped multi-track text report."
    ),
)
def main() -> None:
    """Entry point for the alignreport command group."""


@main.command(help="Render the alignment report for one or more segments.")
@_germlines_option
@_alignment_option
@_line_width_option
@click.option(
    "-c",
    "--context",
    is_flag=True,
    help="Show the unaligned flanking residues on both sides.",
)
@click.option(
    "--color/--no-color",
    "color",
    default=True,
    show_default=True,
    help="Colour the report with ANSI escape codes.",
)
@click.option(
    "--csv",
    is_flag=True,
    help="Print the regions and annotations as CSV instead of a table.",
)
@_verbose_option
def report(
    germlines: str,
    alignment: str,
    line_width: int,
    context: bool,
    color: bool,
    csv: bool,
    verbose: bool,
) -> None:
    """Run the full report workflow."""
    config = ReportConfig.from_cli_args(
        germlines=germlines,
        alignment=alignment,
        line_width=line_width,
        context=context,
        color=color,
        csv=csv,
        verbose=verbose,
    )
    util.configure_logging(config.verbose)
    LOGGER.info(
        f"Starting report with germlines={config.germlines} "
        f"alignment={config.alignment} line_width={config.render.line_width}"
    )

    segments = _load(config.germlines, config.alignment)
    for reference, aln in segments:
        summary = stats.format_stats(
            stats.alignment_stats(aln), aln.score, color=config.render.color
        )
        click.echo(f"{reference.name}: {summary}")
        click.echo(f"Path: {aln.short()}")
    click.echo()

    for line in render.render(segments, config.render):
        click.echo(line)
    click.echo()

    _echo_rows(projection_rows(projector.project(segments)), config.output)


@main.command(help="Print the projected regions and annotations.")
@_germlines_option
@_alignment_option
@click.option(
    "--csv",
    is_flag=True,
    help="Print CSV instead of a table.",
)
@_verbose_option
def regions(germlines: str, alignment: str, csv: bool, verbose: bool) -> None:
    util.configure_logging(verbose)
    segments = _load(germlines, alignment)
    _echo_rows(projection_rows(projector.project(segments)), OutputConfig(csv=csv))


@main.command("list", help="List the germlines of a dataset.")
@_germlines_option
@click.option(
    "--species",
    default=None,
    help="Only list germlines of this species.",
)
@click.option(
    "--csv",
    is_flag=True,
    help="Print CSV instead of a table.",
)
@_verbose_option
def list_germlines(
    germlines: str, species: Optional[str], csv: bool, verbose: bool
) -> None:
    util.configure_logging(verbose)
    try:
        database = GermlineDatabase.load(germlines)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    rows = [["Name", "Species", "Length", "Regions"]]
    for germline in database.find(species):
        regions = ";".join(f"{r}:{length}" for r, length in germline.regions)
        rows.append(
            [germline.name, germline.species or "", str(len(germline)), regions]
        )
    LOGGER.info(f"Listing {len(rows) - 1} of {len(database)} germlines")
    _echo_rows(rows, OutputConfig(csv=csv))


@main.command(help="Show a single germline with its regions.")
@_germlines_option
@click.argument("name")
@_line_width_option
@click.option("--color/--no-color", "color", default=True, show_default=True)
@_verbose_option
def show(
    germlines: str, name: str, line_width: int, color: bool, verbose: bool
) -> None:
    util.configure_logging(verbose)
    try:
        germline = GermlineDatabase.load(germlines).get(name)
    except KeyError as e:
        raise click.ClickException(str(e.args[0])) from e
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    if not germline.sequence:
        raise click.ClickException(f"Germline {name} has an empty sequence")
    # The germline against itself: every column is an identity
    alignment = Alignment(
        seq_a=germline.sequence,
        seq_b=germline.sequence,
        start_a=0,
        start_b=0,
        path=tuple(
            Step(1, 1, MatchType.FULL_IDENTITY) for _ in germline.sequence
        ),
    )
    config = RenderConfig(
        line_width=line_width, only_show_reference=True, color=color
    )
    click.echo(f"{germline.name} ({len(germline)} residues)")
    for line in render.render([(germline, alignment)], config):
        click.echo(line)


if __name__ == "__main__":
    main()
