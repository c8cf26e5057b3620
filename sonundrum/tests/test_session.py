"""
Tests for sessions, the module loop and remote commands.
"""

import pytest

from ..config import EngineConfig
from ..engine_core.display import format_stage_number, wrap_for_display
from ..engine_core.rule import Button
from ..engine_core.stage_engine import StageEngine
from ..session import (
    HELP_MESSAGE,
    ModuleLoop,
    SessionManager,
    SessionState,
    parse_command,
)


class TestRemoteCommands:

    @pytest.mark.parametrize("command,button", [
        ("tl", Button.TOP_LEFT),
        ("TR", Button.TOP_RIGHT),
        ("  bl ", Button.BOTTOM_LEFT),
        ("Br", Button.BOTTOM_RIGHT),
    ])
    def test_known_tokens(self, command, button):
        assert parse_command(command) == button

    @pytest.mark.parametrize("command", ["", "top-left", "press tl", "x"])
    def test_unknown_tokens(self, command):
        assert parse_command(command) is None

    def test_help_lists_every_token(self):
        for button in Button:
            assert button.token in HELP_MESSAGE


class TestDisplay:

    def test_short_text_unchanged(self):
        assert wrap_for_display("Solve Maze next.") == "Solve Maze next."

    def test_breaks_at_last_space(self):
        assert wrap_for_display("Simon Says: Press the top-left button.") == (
            "Simon Says: Press the\ntop-left button."
        )

    def test_long_word_left_alone(self):
        word = "x" * 40
        assert wrap_for_display(word) == word

    def test_stage_numbers(self):
        assert format_stage_number(0) == "000"
        assert format_stage_number(7) == "007"
        assert format_stage_number(123) == "123"
        assert format_stage_number(None) == "???"


class TestEngineConfig:

    def test_defaults(self):
        config = EngineConfig()
        assert config.module_name == "Simon Sonundrum"
        assert config.conditional_prefix == "Simon Says: "
        assert config.poll_interval == 5
        assert config.ignored_modules == frozenset({"Simon Sonundrum"})

    def test_with_ignored_keeps_other_fields(self):
        config = EngineConfig(poll_interval=3).with_ignored(["Souvenir"])
        assert "Souvenir" in config.ignored_modules
        assert "Souvenir" in config.denylist
        assert config.poll_interval == 3

    def test_bad_poll_interval(self):
        with pytest.raises(ValueError):
            EngineConfig(poll_interval=0)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SONUNDRUM_IGNORED_MODULES", "Souvenir, Forget Me Not,")
        monkeypatch.setenv("SONUNDRUM_POLL_INTERVAL", "2")
        config = EngineConfig.from_env()
        assert config.poll_interval == 2
        assert {"Souvenir", "Forget Me Not", "Simon Sonundrum"} <= config.ignored_modules


class TestModuleLoop:

    def test_polls_every_interval(self, bomb, boundary, press_rule, scripted_catalog):
        engine = StageEngine(bomb, boundary, catalog=scripted_catalog([press_rule(conditional=False)]))
        loop = ModuleLoop(engine)
        bomb.solve("Wires")

        result = loop.tick(4)
        assert result.polls == 0
        assert engine.stage == 0

        result = loop.tick(1)
        assert result.polls == 1
        assert result.newly_solved == ["Wires"]
        assert engine.stage == 1

    def test_extra_ticks_are_harmless(self, bomb, boundary, press_rule, scripted_catalog):
        engine = StageEngine(bomb, boundary, catalog=scripted_catalog([press_rule(conditional=False)]))
        loop = ModuleLoop(engine, poll_interval=1)
        bomb.solve("Wires")
        result = loop.tick(20)
        assert result.polls == 20
        assert result.newly_solved == ["Wires"]
        assert len(engine.history) == 2

    def test_handle_command(self, bomb, boundary, press_rule, scripted_catalog):
        engine = StageEngine(bomb, boundary, catalog=scripted_catalog([press_rule(Button.BOTTOM_RIGHT)]))
        loop = ModuleLoop(engine)
        assert loop.handle_command("nonsense") is None
        assert boundary.strikes == 0
        assert loop.handle_command("tl") is False
        assert boundary.strikes == 1
        assert loop.handle_command("br") is True

    def test_force_solve_alone_on_bomb(self, empty_bomb, boundary):
        engine = StageEngine(empty_bomb, boundary)
        result = ModuleLoop(engine).force_solve()
        assert result.solved
        assert engine.is_solved
        assert boundary.strikes == 0
        assert boundary.passes == 1
        assert any("Module force solved." in line for line in boundary.log_lines)

    def test_force_solve_waits_on_other_modules(self, bomb, boundary):
        engine = StageEngine(bomb, boundary)
        result = ModuleLoop(engine).force_solve(max_ticks=50)
        assert not result.solved
        assert result.ticks == 50
        assert boundary.strikes == 0


class TestSessionManager:

    @pytest.fixture
    def manager(self):
        return SessionManager()

    def test_create_session(self, manager):
        session = manager.create_session(["Wires", "Maze"], seed=5)
        assert session.bomb.modules == ["Simon Sonundrum", "Wires", "Maze"]
        assert session.other_modules() == ["Wires", "Maze"]
        assert session.state == SessionState.ACTIVE
        assert len(session.engine.history) == 1
        assert manager.get_session(session.session_id) is session

    def test_seeded_sessions_agree(self, manager):
        a = manager.create_session(["Wires", "Maze"], seed=11)
        b = manager.create_session(["Wires", "Maze"], seed=11)
        assert a.boundary.texts == b.boundary.texts

    def test_ignored_modules_extend_config(self, manager):
        session = manager.create_session(["Wires", "Souvenir"], ignored_modules=["Souvenir"])
        assert session.other_modules() == ["Wires"]
        assert session.engine.solves_required == 1

    def test_solve_module_advances(self, manager):
        session = manager.create_session(["Wires", "Maze"], seed=1)
        session.solve_module("Wires")
        assert session.engine.stage == 1
        assert session.engine.seen_solved == ["Wires"]

    def test_cannot_solve_self(self, manager):
        session = manager.create_session(["Wires"])
        with pytest.raises(ValueError):
            session.solve_module("Simon Sonundrum")

    def test_solve_unknown_module(self, manager):
        session = manager.create_session(["Wires"])
        with pytest.raises(ValueError):
            session.solve_module("Maze")

    def test_full_session_lifecycle(self, manager):
        session = manager.create_session([], seed=3)
        session.loop.force_solve()
        assert session.state == SessionState.SOLVED
        assert not session.is_active()
        assert session.session_id not in manager.list_active_sessions()

    def test_end_session(self, manager):
        session = manager.create_session(["Wires"])
        assert manager.list_active_sessions() == [session.session_id]
        assert manager.end_session(session.session_id)
        assert session.state == SessionState.ENDED
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_cleanup_removes_only_finished(self, manager):
        finished = manager.create_session([])
        finished.loop.force_solve()
        running = manager.create_session(["Wires"])
        finished.created_at -= 7200
        running.created_at -= 7200

        assert manager.cleanup_stale_sessions(max_age_seconds=3600) == 1
        assert manager.get_session(finished.session_id) is None
        assert manager.get_session(running.session_id) is running
