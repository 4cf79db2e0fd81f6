"""
Tests for the command line recorder and history commands.
"""

import io

import pytest
from pokerlog.cli import execute, main, QuitRecording
from pokerlog.core.rules import Position, OpponentType
from pokerlog.history.storage import HandHistoryStore


HAND = """\
hand Ah Kd
CO raise 2.5 type=Fish
BTN raise 8 me
CO call
board Qs Jd 2h
CO check
BTN bet 6
CO fold
result BTN 10.5
save
"""


def _run(argv, stdin_text=""):
    stdout = io.StringIO()
    code = main(argv, stdin=io.StringIO(stdin_text), stdout=stdout)
    return code, stdout.getvalue()


class TestExecute:
    """Tests for single recorder commands."""

    def test_action_command(self, session, store):
        output = execute(session, store, "UTG raise 3bb")

        assert session.engine.actions[-1].amount == 3
        assert "HJ to act" in output

    def test_tags_parsed(self, session, store):
        execute(session, store, "UTG call type=fish style=Loose-Passive")

        tags = session.engine.actions[-1].tags
        assert tags.type == OpponentType.FISH
        assert tags.style.value == "Loose-Passive"

    def test_board_command(self, session, store):
        execute(session, store, "SB call")
        execute(session, store, "BB check")
        output = execute(session, store, "board As Kd 2h")

        assert "Board: As Kd 2h" in output
        assert session.engine.current_actor == Position.SB

    def test_waiting_status(self, session, store):
        execute(session, store, "SB call")
        output = execute(session, store, "BB check")
        assert "Waiting for Flop board" in output

    def test_invalid_input(self, session, store):
        with pytest.raises(ValueError):
            execute(session, store, "UTG shove")
        with pytest.raises(ValueError):
            execute(session, store, "UTG raise lots")
        with pytest.raises(ValueError):
            execute(session, store, "frobnicate")

    def test_quit(self, session, store):
        with pytest.raises(QuitRecording):
            execute(session, store, "quit")

    def test_blank_and_help(self, session, store):
        assert execute(session, store, "   ") == ""
        assert "result WINNER" in execute(session, store, "help")

    def test_log(self, session, store):
        assert execute(session, store, "log") == "(no actions)"
        execute(session, store, "HJ raise 2.5")
        assert execute(session, store, "log").splitlines() == [
            "[Preflop] UTG Fold",
            "[Preflop] HJ Raise 2.5bb",
        ]


class TestRecord:
    """Tests for the 'record' subcommand."""

    def test_full_hand(self, tmp_path):
        history = tmp_path / "history.json"
        code, output = _run(["--history", str(history), "record"], HAND)

        assert code == 0
        assert "Error" not in output
        assert "Saved hand" in output

        code, output = _run(["--history", str(history), "history", "list"])
        assert code == 0
        assert "hero=BTN" in output
        assert "vs Fish" in output

    def test_errors_do_not_stop_recording(self, tmp_path):
        history = tmp_path / "history.json"
        code, output = _run(
            ["--history", str(history), "record", "--hero", "BTN"],
            "UTG check\nUTG raise 3\nquit\n",
        )

        assert code == 0
        assert "Error: Cannot check" in output
        assert "HJ to act" in output

    def test_save_before_complete(self, tmp_path):
        code, output = _run(
            ["--history", str(tmp_path / "h.json"), "record"],
            "save\n",
        )
        assert code == 0
        assert "Error:" in output


class TestHistoryCommands:
    """Tests for the 'history' subcommands."""

    @pytest.fixture
    def history(self, tmp_path):
        path = tmp_path / "history.json"
        _run(["--history", str(path), "record"], HAND)
        return path

    def _hand_id(self, history):
        return HandHistoryStore(history).all()[0].id

    def test_show(self, history):
        hand_id = self._hand_id(history)
        code, output = _run(["--history", str(history), "history", "show", hand_id[:6]])

        assert code == 0
        assert "Hero hand: Ah Kd" in output
        assert "[Flop] CO Fold" in output

    def test_favorite_and_memo(self, history):
        hand_id = self._hand_id(history)
        _run(["--history", str(history), "history", "favorite", hand_id])
        code, output = _run([
            "--history", str(history), "history", "memo", hand_id, "--location", "Casino A",
        ])

        assert code == 0
        assert "Location: Casino A" in output
        code, output = _run(["--history", str(history), "history", "list", "--favorites"])
        assert output.startswith("*")

    def test_unknown_id(self, history):
        code, output = _run(["--history", str(history), "history", "show", "zzzz"])
        assert code == 1
        assert "No saved hand matches zzzz" in output

    def test_delete_and_clear(self, history):
        hand_id = self._hand_id(history)
        code, _ = _run(["--history", str(history), "history", "clear"])
        assert code == 1

        code, _ = _run(["--history", str(history), "history", "delete", hand_id])
        assert code == 0
        code, output = _run(["--history", str(history), "history", "list"])
        assert "No saved hands." in output

        code, _ = _run(["--history", str(history), "history", "clear", "--yes"])
        assert code == 0

    def test_export(self, history):
        code, output = _run(["--history", str(history), "history", "export"])
        assert code == 0
        assert '"villain_type": "Fish"' in output

    def test_corrupt_history(self, tmp_path):
        path = tmp_path / "history.json"
        path.write_text("[broken")
        code, output = _run(["--history", str(path), "history", "list"])
        assert code == 1
        assert "Failed to load hand history" in output
