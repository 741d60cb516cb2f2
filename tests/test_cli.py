import json

import pytest

from musicvenn.cli import _code_from_reply, build_parser, main
from musicvenn.errors import ProviderError


@pytest.fixture
def offline_file(tmp_path):
    path = tmp_path / "lists.json"
    path.write_text(json.dumps({
        "Artists": {
            "Personal": ["A", "B", "C"],
            "Country": {"United States": ["B", "C", "D"], "Sweden": ["S"]},
            "World": ["C", "D", "E"],
        },
        "Tracks": {
            "Personal": ["t1"],
            "Country": {"United States": ["t1"]},
            "World": ["t2"],
        },
    }), encoding="utf-8")
    return str(path)


def test_print_regions(offline_file, capsys):
    assert main(["--offline", offline_file, "--print-regions"]) == 0
    out = capsys.readouterr().out
    for line in [
        "Personal: A",
        "Country: (none)",
        "Personal ∩ Country: B",
        "World: E",
        "Personal ∩ World: (none)",
        "Country ∩ World: D",
        "Personal ∩ Country ∩ World: C",
    ]:
        assert line in out.splitlines()


def test_print_regions_restricted(offline_file, capsys):
    assert main(["--offline", offline_file, "--print-regions", "--only", "Personal, World"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "Personal: A, B" in lines
    assert "World: D, E" in lines
    assert "Personal ∩ World: C" in lines
    assert not any(line.startswith("Country") for line in lines)


def test_other_country_and_kind(offline_file, capsys):
    assert main(["--offline", offline_file, "--print-regions", "--country", "Sweden", "--count", "10"]) == 0
    assert "Country: S" in capsys.readouterr().out.splitlines()

    assert main(["--offline", offline_file, "--print-regions", "--kind", "tracks"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert "Personal ∩ Country: t1" in lines
    assert "World: t2" in lines


def test_save(offline_file, tmp_path):
    outfile = tmp_path / "venn.png"
    assert main(["--offline", offline_file, "--save", str(outfile), "--log-file", str(tmp_path / "run.log")]) == 0
    assert outfile.stat().st_size > 0
    assert "Saved chart" in (tmp_path / "run.log").read_text(encoding="utf-8")


@pytest.mark.parametrize("argv", [
    ["--only", "Personal,Galaxy"],
    ["--count", "0"],
])
def test_bad_options_exit_with_2(offline_file, argv):
    assert main(["--offline", offline_file, "--print-regions"] + argv) == 2


def test_parser_kind_choices():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--kind", "albums"])


def test_code_from_reply():
    assert _code_from_reply("  abc \n") == "abc"
    assert _code_from_reply("http://localhost:5173/callback?code=xyz&state=1") == "xyz"
    with pytest.raises(ProviderError):
        _code_from_reply("http://localhost:5173/callback?error=access_denied")


def test_unknown_log_level_exits_with_2(offline_file, capsys):
    assert main(["--offline", offline_file, "--print-regions", "--log-level", "chatty"]) == 2
    assert "Unknown log level" in capsys.readouterr().err
