"""Tests for the ackermann and hyperop command-line front ends."""

from __future__ import annotations

import logging

import pytest

from cli import ACKERMANN, HYPEROP, ackermann_main, build_argparser, hyperop_main


# ---------------------------------------------------------------------------
# Usage
# ---------------------------------------------------------------------------

class TestUsage:

    def test_no_arguments_prints_usage(self, capsys):
        assert ackermann_main([]) == 0
        out = capsys.readouterr().out
        assert "usage: ackermann m n" in out
        assert "Natural decimal numerals" in out

    @pytest.mark.parametrize("word", ["help", "HELP", "/?"])
    def test_ackermann_help_words(self, capsys, word):
        assert ackermann_main([word]) == 0
        assert "usage: ackermann m n" in capsys.readouterr().out

    @pytest.mark.parametrize("word", ["help", "?"])
    def test_hyperop_help_words(self, capsys, word):
        assert hyperop_main([word]) == 0
        assert "usage: hyperop n base exp" in capsys.readouterr().out

    def test_too_few_arguments(self, capsys):
        assert hyperop_main(["4", "3"]) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "usage: hyperop" in captured.err

    def test_dash_h_is_argparse_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            hyperop_main(["-h"])
        assert exc_info.value.code == 0
        assert "--max-depth" in capsys.readouterr().out

    def test_argparsers_differ_by_prog(self):
        assert build_argparser(ACKERMANN).prog == "ackermann"
        assert build_argparser(HYPEROP).prog == "hyperop"


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

class TestEvaluation:

    def test_ackermann(self, capsys):
        assert ackermann_main(["2", "3"]) == 0
        assert capsys.readouterr().out == "9\n"

    def test_ackermann_row_four(self, capsys):
        assert ackermann_main(["4", "1"]) == 0
        assert capsys.readouterr().out == "65533\n"

    def test_ackermann_large_value_printed_in_full(self, capsys):
        assert ackermann_main(["4", "2"]) == 0
        assert capsys.readouterr().out.strip() == str(2**65536 - 3)

    def test_hyperop(self, capsys):
        assert hyperop_main(["4", "3", "3"]) == 0
        assert capsys.readouterr().out == "7625597484987\n"

    def test_hyperop_zero_base(self, capsys):
        assert hyperop_main(["9", "0", "1000001"]) == 0
        assert capsys.readouterr().out == "0\n"

    def test_extra_arguments_ignored(self, capsys, caplog):
        with caplog.at_level(logging.INFO, logger="cli"):
            assert hyperop_main(["4", "2", "2", "99"]) == 0
        assert capsys.readouterr().out == "4\n"
        assert "ignoring 1 extra argument" in caplog.text


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:

    @pytest.mark.parametrize("argv, name", [
        (["x", "3", "3"], "order"),
        (["4", "3.0", "3"], "base"),
        (["4", "3", "0x3"], "exp"),
    ])
    def test_bad_numeral_names_argument(self, capsys, argv, name):
        assert hyperop_main(argv) == 2
        captured = capsys.readouterr()
        assert captured.out == ""
        assert f"cannot parse `{name}`" in captured.err

    def test_negative_numeral(self, capsys):
        assert ackermann_main(["1", "-1"]) == 2
        assert "cannot parse `n`" in capsys.readouterr().err

    def test_bit_budget(self, capsys):
        assert hyperop_main(["5", "3", "3", "--max-bits", "1000"]) == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "error: result needs at least" in captured.err

    def test_depth_budget(self, capsys):
        assert hyperop_main(["100", "2", "3", "--max-depth", "10"]) == 1
        assert "pending frames" in capsys.readouterr().err

    def test_invalid_budget_option(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            hyperop_main(["4", "2", "2", "--max-depth", "0"])
        assert exc_info.value.code == 2
        assert "max_depth" in capsys.readouterr().err
