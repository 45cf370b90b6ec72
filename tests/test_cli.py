from click.testing import CliRunner

from alignreport import cli
from tests.conftest import HUMAN_IGH_GERMLINES, HUMAN_IGH_REQUEST

CHAIN_RULER = "  FR1 C110FR2    CDR3   FR4 30 CH1 H"


def test_regions_csv(chain_files):
    """Test regions --csv on the chained V/J/C fixture."""
    germlines, request = chain_files

    result = CliRunner().invoke(
        cli.main, ["regions", "-g", str(germlines), "-a", str(request), "--csv"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "Kind,Name,Value",
        "Region,FR1,5",
        "Region,CDR1,3",
        "Region,FR2,5",
        "Region,CDR3,8",
        "Region,FR4,6",
        "Region,CH1,7",
        "Region,H,2",
        "Annotation,Conserved,14",
        "Annotation,Conserved,22",
        "Annotation,Conserved,30",
    ]


def test_regions_table(chain_files):
    """Test that regions prints a box-drawn table by default."""
    germlines, request = chain_files

    result = CliRunner().invoke(
        cli.main, ["regions", "-g", str(germlines), "-a", str(request)]
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[1] == "│Kind      │Name     │Value│"
    assert "│Region    │CDR3     │8    │" in lines
    assert lines[-1] == "└──────────┴─────────┴─────┘"


def test_report(chain_files):
    """Test the full report: header, rendered tracks and CSV regions."""
    germlines, request = chain_files

    result = CliRunner().invoke(
        cli.main,
        ["report", "-g", str(germlines), "-a", str(request), "--no-color", "--csv"],
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0].startswith("TESTV*01: Identity: 0.867 (13/15)")
    assert lines[1] == "Path: 7=1X1I6="
    assert lines[3] == "Path: 8="
    assert CHAIN_RULER in lines
    assert "QVQLVGFSYWVRQCARDGFDYWGQGTASTKGPSVFP" in lines
    assert "Region,CDR3,8" in lines


def test_report_wraps_lines(chain_files):
    """Test that -n wraps the report into shorter blocks."""
    germlines, request = chain_files

    result = CliRunner().invoke(
        cli.main,
        ["report", "-g", str(germlines), "-a", str(request), "--no-color", "-n", "20"],
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "QVQLVGFSYWVRQCARDGFD" in lines
    assert "YWGQGTASTKGPSVFP" in lines


def test_report_rejects_zero_width(chain_files):
    """Test that a line width below one is a usage error."""
    germlines, request = chain_files

    result = CliRunner().invoke(
        cli.main, ["report", "-g", str(germlines), "-a", str(request), "-n", "0"]
    )

    assert result.exit_code == 2


def test_show_germline(chain_files):
    """Test show on a germline with a CDR3 and FR4."""
    germlines, _ = chain_files

    result = CliRunner().invoke(
        cli.main, ["show", "-g", str(germlines), "TESTJ*01", "--no-color"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "TESTJ*01 (9 residues)",
        " C3   FR4",
        "YFDYWGQGT",
    ]


def test_show_unknown_germline(chain_files):
    """Test that an unknown germline name lists the available ones."""
    germlines, _ = chain_files

    result = CliRunner().invoke(cli.main, ["show", "-g", str(germlines), "NOPE"])

    assert result.exit_code == 1
    assert "not found" in result.output
    assert "TESTV*01" in result.output


def test_report_unsupported_germline_file(tmp_path, chain_files):
    """Test that a germline file with an unknown suffix is rejected."""
    _, request = chain_files
    germlines = tmp_path / "germlines.txt"
    germlines.write_text("nothing")

    result = CliRunner().invoke(
        cli.main, ["report", "-g", str(germlines), "-a", str(request)]
    )

    assert result.exit_code == 1
    assert "Unsupported germline file" in result.output


def test_regions_for_human_heavy_chain():
    """Test regions on the human heavy chain data set."""
    result = CliRunner().invoke(
        cli.main,
        [
            "regions",
            "-g",
            str(HUMAN_IGH_GERMLINES),
            "-a",
            str(HUMAN_IGH_REQUEST),
            "--csv",
        ],
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert "Region,CDR3,23" in lines
    assert lines[-1] == "Annotation,Conserved,136"


def test_list_germlines():
    """Test list with every germline in the data set."""
    result = CliRunner().invoke(
        cli.main, ["list", "-g", str(HUMAN_IGH_GERMLINES), "--csv"]
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "Name,Species,Length,Regions",
        "IGHV2-26*01,HomoSapiens,100,FR1:25;CDR1:10;FR2:17;CDR2:7;FR3:38;CDR3:3",
        "IGHJ5*01,HomoSapiens,17,CDR3:6;FR4:11",
        "IGHG1*01,HomoSapiens,113,CH1:98;H:15",
    ]


def test_list_germlines_for_other_species():
    """Test that list --species filters out other species."""
    result = CliRunner().invoke(
        cli.main,
        ["list", "-g", str(HUMAN_IGH_GERMLINES), "--species", "MusMusculus", "--csv"],
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["Name,Species,Length,Regions"]
