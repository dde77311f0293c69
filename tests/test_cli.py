"""
Tests for the command line entry point
"""

import sys

import pytest

import puzzle_cli


def run(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["puzzle_cli.py", *args])
    puzzle_cli.main()


class TestCli:
    def test_sudoku(self, monkeypatch, capsys):
        run(monkeypatch, "sudoku", "--difficulty", "easy", "--seed", "5")
        out = capsys.readouterr().out
        assert "Sudoku (easy, 40 holes)" in out
        assert "Solution:" in out

    def test_sudoku_solve(self, monkeypatch, capsys):
        run(monkeypatch, "sudoku", "--seed", "5", "--solve")
        assert "Solver result:" in capsys.readouterr().out

    def test_kenken(self, monkeypatch, capsys):
        run(monkeypatch, "kenken", "--size", "4", "--seed", "1", "--solve")
        out = capsys.readouterr().out
        assert "KenKen 4x4" in out
        assert "Unsatisfiable" not in out

    def test_kenken_too_small(self, monkeypatch, capsys):
        with pytest.raises(SystemExit) as exc:
            run(monkeypatch, "kenken", "--size", "1")
        assert exc.value.code == 2
        assert "Error:" in capsys.readouterr().out

    def test_no_command(self, monkeypatch, capsys):
        run(monkeypatch)
        assert "usage" in capsys.readouterr().out.lower()
