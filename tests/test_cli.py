"""Tests for the command-line front end."""

import json

import pytest
from pokeradvisor.cli import app
from typer.testing import CliRunner

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)


class TestDecide:
    def test_made_hand_raises(self):
        result = runner.invoke(
            app,
            ["decide", "Ah Kh", "--board", "Qh Jh Th 2c 3d", "--pot", "100", "--bankroll", "1000",
             "--sims", "50", "--seed", "1", "--no-bluff"],
        )
        assert result.exit_code == 0, result.output
        assert "Raise 80" in result.output
        assert "100.0%" in result.output

    def test_alternate_notation_and_k_suffix(self):
        result = runner.invoke(
            app, ["decide", "1co 13co", "-b", "12co 11co 10co", "--pot", "1k", "--bankroll", "2k",
                  "--min-bet", "700", "-n", "20", "--seed", "3"],
        )
        assert result.exit_code == 0, result.output
        # 700 / 2000 = 35% of the bankroll: too much to raise
        assert "Call 700" in result.output

    def test_invalid_hand(self):
        result = runner.invoke(app, ["decide", "Ah"])
        assert result.exit_code == 1
        assert "exactly 2 cards" in result.output

    def test_invalid_card(self):
        result = runner.invoke(app, ["decide", "Ah Xx"])
        assert result.exit_code == 1
        assert "Unrecognized card" in result.output

    def test_invalid_amount(self):
        result = runner.invoke(app, ["decide", "Ah Kh", "--pot", "plenty"])
        assert result.exit_code == 1
        assert "Invalid amount" in result.output


class TestEquity:
    def test_runs(self):
        result = runner.invoke(app, ["equity", "As Ad", "--sims", "100"])
        assert result.exit_code == 0, result.output
        assert "Equity Results" in result.output

    def test_rejects_bad_board(self):
        result = runner.invoke(app, ["equity", "As Ad", "--board", "Kh Qh", "--sims", "10"])
        assert result.exit_code == 1


class TestPlay:
    def test_two_streets_then_quit(self, tmp_path):
        path = tmp_path / "hands.json"
        answers = [
            "1000",            # bankroll
            "Ah Kh",           # hand
            "30",              # pot
            "2",               # players
            "0",               # min bet
            "Qh Jh Th",        # flop
            "60",
            "2",
            "0",
            "n",               # nobody raised
            "quit",
        ]
        result = runner.invoke(app, ["play", "--no-bluff", "--history", str(path)], input="\n".join(answers) + "\n")
        assert result.exit_code == 0, result.output
        assert "Exiting" in result.output

        data = json.loads(path.read_text())
        assert len(data) == 1
        assert [s["street"] for s in data[0]["steps"]] == ["preflop", "flop"]
        assert data[0]["steps"][1]["community"] == ["Qh", "Jh", "Th"]
        assert data[0]["steps"][1]["bankroll"] == 1000

    def test_bad_input_is_asked_again(self, tmp_path):
        path = tmp_path / "hands.json"
        answers = [
            "100", "Ah", "10", "2", "0",        # one card: rejected
            "100", "Ah Kh", "10", "2", "0",
            "quit",
        ]
        result = runner.invoke(app, ["play", "--no-bluff", "--history", str(path)], input="\n".join(answers) + "\n")
        assert result.exit_code == 0, result.output
        assert "Invalid input" in result.output
        assert len(json.loads(path.read_text())[0]["steps"]) == 1


class TestHistory:
    def test_empty(self, tmp_path):
        result = runner.invoke(app, ["history", "--history", str(tmp_path / "none.json")])
        assert result.exit_code == 0
        assert "No sessions recorded." in result.output

    def test_unknown_session(self, tmp_path):
        result = runner.invoke(app, ["history", "--session", "nope", "--history", str(tmp_path / "none.json")])
        assert result.exit_code == 1
        assert "unknown session" in result.output

    def test_lists_and_shows_session(self, tmp_path):
        path = tmp_path / "hands.json"
        answers = ["500", "Ah Kh", "30", "2", "0", "quit"]
        runner.invoke(app, ["play", "--no-bluff", "--history", str(path)], input="\n".join(answers) + "\n")
        session_id = json.loads(path.read_text())[0]["id"]

        listing = runner.invoke(app, ["history", "--history", str(path)])
        assert listing.exit_code == 0
        assert "Sessions" in listing.output

        detail = runner.invoke(app, ["history", "-s", session_id, "--history", str(path)])
        assert detail.exit_code == 0
        assert session_id in detail.output
