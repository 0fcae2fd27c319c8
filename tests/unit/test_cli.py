"""Tests for CLI commands."""

import json

import pytest

from kolviz.cli.commands import RUNDOWN_FINISHED, create_parser, format_rundown, main
from kolviz.parser.preparsed_parser import PreparsedLogParser


@pytest.fixture(autouse=True)
def data_dir(tmp_path, monkeypatch):
    """Keep the application log out of the user's data directory."""
    monkeypatch.setenv("LOCALAPPDATA", str(tmp_path))
    return tmp_path


class TestCreateParser:
    """Tests for argument parsing."""

    def test_parse_options(self):
        args = create_parser().parse_args(["parse", "run.txt", "--preparsed", "--no-notes"])

        assert args.command == "parse"
        assert args.file == "run.txt"
        assert args.preparsed
        assert args.no_notes

    def test_serve_defaults(self):
        args = create_parser().parse_args(["serve", "run.txt"])

        assert args.host == "127.0.0.1"
        assert args.port == 8000


class TestCommands:
    """Tests for running the commands."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out

    def test_parse_prints_rundown(self, sample_session_log, capsys):
        assert main(["parse", str(sample_session_log)]) == 0

        out = capsys.readouterr().out
        assert "The Spooky Forest" in out
        assert "===Day 2===" in out
        assert out.rstrip().endswith(RUNDOWN_FINISHED)

    def test_summary(self, sample_session_log, capsys):
        assert main(["summary", str(sample_session_log)]) == 0

        out = capsys.readouterr().out
        assert "Class: Sauceror" in out
        assert "Combats: 2" in out

    def test_summary_as_json(self, sample_preparsed_log, capsys):
        assert main(["summary", "--preparsed", str(sample_preparsed_log), "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["free_runaways"] == 1
        assert data["total_stats"] == {"mus": 1, "myst": 44, "mox": 9}

    def test_missing_file_fails(self, tmp_path, capsys):
        assert main(["parse", str(tmp_path / "missing.txt")]) == 1
        assert "not found" in capsys.readouterr().out


class TestFormatRundown:
    """Tests for the rendered rundown."""

    def test_rundown_reads_back(self, sample_preparsed_log, reference):
        original = PreparsedLogParser(sample_preparsed_log, reference=reference).parse()

        rendered = format_rundown(original)
        reread = PreparsedLogParser(reference=reference).parse_lines(rendered)

        spans = [(i.area_name, i.start_turn, i.end_turn) for i in reread.turn_intervals]
        assert spans == [(i.area_name, i.start_turn, i.end_turn) for i in original.turn_intervals]
        assert sorted(reread.day_changes) == [1, 2]
