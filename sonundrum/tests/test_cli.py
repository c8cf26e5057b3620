"""
Tests for the command-line interface.
"""

import pytest

from ..cli import main


class TestSimulate:

    def test_simulate_solves_cleanly(self, capsys):
        main(["simulate", "--modules", "Wires,Maze,Keypad", "--seed", "3"])
        out = capsys.readouterr().out
        assert "To begin, there is exactly one rule." in out
        assert "Solved: True" in out
        assert "Strikes: 0" in out

    def test_simulate_lone_module(self, capsys):
        main(["simulate", "--seed", "8"])
        out = capsys.readouterr().out
        assert "Simon's last statement" in out
        assert "Solved: True" in out


class TestPlay:

    def test_play_until_quit(self, monkeypatch, capsys):
        inputs = iter(["status", "middle", "quit"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(inputs))
        main(["play", "--modules", "Wires", "--seed", "2"])
        out = capsys.readouterr().out
        assert "[000]" in out
        assert "validator:" in out
        assert "Unknown command: middle." in out

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit):
            main([])


class TestServe:

    def test_serve_runs_uvicorn(self, monkeypatch):
        uvicorn = pytest.importorskip("uvicorn")
        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        main(["serve", "--port", "9001"])

        assert calls == [("sonundrum.api.app:app", {"host": "127.0.0.1", "port": 9001})]
