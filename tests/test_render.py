import click

from alignreport import render
from alignreport.config import RenderConfig
from alignreport.reference import Region
from alignreport.render import StepKind
from alignreport.types import MatchType, Step
from tests.conftest import make_germline, make_segment

PLAIN = RenderConfig(color=False)
SEQUENCE = "ACDEFGHIKLMNPQRSTVWY"


def test_wrapping_flushes_partial_last_block():
    """Test wrapping into full blocks plus a shorter last one."""
    sequence = SEQUENCE * 6
    segment = make_segment(make_germline(sequence), sequence, "120=")

    blocks = render.render_blocks([segment], RenderConfig(line_width=50, color=False))

    assert len(blocks) == 3
    # ruler, reference and query; the all-identity marker track is dropped
    assert [len(block) for block in blocks] == [3, 3, 3]
    assert [len(block[1]) for block in blocks] == [50, 50, 20]
    assert blocks[0][0] == "        10        20        30        40        50"
    assert blocks[2][0] == "       110       120"
    assert blocks[2][1] == sequence[100:]


def test_region_label_takes_priority_over_tick():
    """Test that a region label suppresses an overlapping tick."""
    germline = make_germline(SEQUENCE, regions=[("FR1", 10), ("CDR1", 10)])

    lines = render.render([make_segment(germline, SEQUENCE, "20=")], PLAIN)

    assert lines[0] == "       FR1      CDR1"


def test_chained_report(chain):
    """Test the rendered V/J/C report line by line."""
    lines = render.render(chain, PLAIN)

    assert lines == [
        "  FR1 C110FR2    CDR3   FR4 30 CH1 H",
        "QVQLVGFT-WVRQCAY··FDYWGQGTASTKGPSVFP",
        "QVQLVGFSYWVRQCARDGFDYWGQGTASTKGPSVFP",
        "       ⨯+      ╶─╴" + " " * 18,
    ]


def test_chained_columns_merge_region_across_join(chain):
    """Test that the CDR3 run spans the V/J join."""
    columns = render.plan_columns(chain)
    runs = render.region_runs(columns)

    assert [name for name, _, _ in runs] == [
        "FR1", "CDR1", "FR2", "CDR3", "FR4", "CH1", "H",
    ]
    cdr3 = [(first, last) for name, first, last in runs if name == "CDR3"]
    assert cdr3 == [(13, 20)]
    assert len(columns) == 36
    assert [c.position for c in columns] == list(range(1, 37))


def test_context_shows_flanking_residues():
    """Test the unaligned flanks drawn in context mode."""
    germline = make_germline("MKACDEFGHI")
    segment = make_segment(germline, "ACDEFGHIKL", "8=", start_a=2, start_b=0)

    with_context = render.render_blocks(
        [segment], RenderConfig(show_context=True, color=False)
    )
    without_context = render.render_blocks([segment], PLAIN)

    # No tick falls inside eight aligned columns, so the ruler is dropped
    assert with_context == [["MKACDEFGHI  ", "  ACDEFGHIKL"]]
    assert without_context == [["ACDEFGHI", "ACDEFGHI"]]


def test_context_columns_have_no_region_or_position():
    """Test that context columns carry no region and no number."""
    germline = make_germline("MKACDEFGHI", regions=[("FR1", 10)])
    segment = make_segment(germline, "ACDEFGHIKL", "8=", start_a=2, start_b=0)

    columns = render.plan_columns([segment], show_context=True)

    assert [c.kind for c in columns[:2]] == [StepKind.CONTEXT, StepKind.CONTEXT]
    assert columns[0].region is None
    assert columns[0].position is None
    assert columns[2].position == 1
    assert columns[2].region == Region("FR1")
    assert columns[-1].kind == StepKind.CONTEXT
    assert columns[-1].region is None
    assert columns[-1].position is None


def test_only_show_reference_drops_query_and_markers():
    """Test reference-only rendering."""
    germline = make_germline("ACDEFGHIKLMN", regions=[("FR1", 6), ("CDR1", 6)])
    segment = make_segment(germline, "ACDWFGHIKLMN", "3=1X8=")

    blocks = render.render_blocks(
        [segment], RenderConfig(only_show_reference=True, color=False)
    )

    assert blocks == [["   FR1  CDR1", "ACDEFGHIKLMN"]]


def test_gap_and_special_markers():
    """Test the gap and rotation markers."""
    germline = make_germline("ACDEFGH")
    segment = make_segment(germline, "ACWEGFH", "2=1I1D1=2:2r1=")

    lines = render.render([segment], PLAIN)

    assert lines == [
        "AC-DEFGH",
        "ACW-EGFH",
        "  ++ ╶╴ ",
    ]


def test_special_marker_widths():
    """Test box-drawing markers of several widths."""
    assert render.special_marker(1) == "─"
    assert render.special_marker(2) == "╶╴"
    assert render.special_marker(4) == "╶──╴"


def test_step_kind():
    """Test how match types map onto report column kinds."""
    assert render.step_kind(Step(1, 1, MatchType.ISOBARIC)) == StepKind.SPECIAL
    assert render.step_kind(Step(1, 1, MatchType.IDENTITY_MASS_MISMATCH)) == StepKind.MATCH
    assert render.step_kind(Step(1, 1, MatchType.MISMATCH)) == StepKind.MISMATCH
    assert render.step_kind(Step(0, 1, MatchType.GAP)) == StepKind.GAP
    assert render.step_kind(Step(2, 3, MatchType.ROTATION)) == StepKind.SPECIAL


def test_colour_output_styles_mismatch_and_modification():
    """Test ANSI styling of a mismatch and a modified residue."""
    germline = make_germline("ACD")
    segment = make_segment(germline, "AW[Oxidation]D", "1=1X1=")

    lines = render.render([segment], RenderConfig(color=True))

    assert click.style("⨯", fg="red") in lines[-1]
    assert click.style("W", fg="red", underline=True) in lines[1]


def test_region_background_on_cdr():
    """Test the CDR background on reference residues."""
    germline = make_germline("ACDEF", regions=[("FR1", 2), ("CDR1", 3)])
    segment = make_segment(germline, "ACDEF", "5=")

    lines = render.render([segment], RenderConfig(color=True))

    assert click.style("DEF", fg="black", bg="red") in lines[1]
    assert click.unstyle(lines[1]) == "ACDEF"


def test_columns_after_last_region_have_none():
    """Test that columns past the last boundary have no region."""
    germline = make_germline("ACDEFGH", regions=[("FR1", 4)])
    columns = render.plan_columns([make_segment(germline, "ACDEFGH", "7=")])

    assert [c.region for c in columns] == [Region("FR1")] * 4 + [None] * 3


def test_empty_input_renders_nothing():
    """Test rendering an empty segment list."""
    assert render.render([], PLAIN) == []


def test_region_label_placed_within_each_block():
    """Test that a region crossing a wrap point is labelled per block."""
    germline = make_germline(SEQUENCE, regions=[("FR1", 12), ("CDR1", 8)])
    segment = make_segment(germline, SEQUENCE, "20=")

    blocks = render.render_blocks([segment], RenderConfig(line_width=11, color=False))

    assert [block[0] for block in blocks] == ["        FR1", "1    CDR1"]


def test_tick_never_split_across_blocks():
    """Test that a tick starting before the block's first column is dropped."""
    germline = make_germline("MK" + SEQUENCE[:14])
    segment = make_segment(germline, SEQUENCE[:14], "14=", start_a=2, start_b=0)

    blocks = render.render_blocks(
        [segment], RenderConfig(line_width=11, show_context=True, color=False)
    )

    # Neither block has a whole tick, so both rulers are dropped
    assert [len(block) for block in blocks] == [2, 2]
    assert blocks[1] == [SEQUENCE[9:14], SEQUENCE[9:14]]
