from pathlib import Path

import cappa

from vector_race_simulator.cli import Args, render_grid
from vector_race_simulator.tracks import parse_track
from tests.test_utils import RaceScenario, RacerConfig

CONFIGS = Path(__file__).parent.parent / "configs"


def test_parse_arguments():
    args = cappa.parse(
        Args,
        argv=["-t", "oval", "--track", "chicane", "--max-turns", "10", "-v"],
    )
    assert args.track == ["oval", "chicane"]
    assert args.max_turns == 10
    assert args.verbose
    assert args.config is None


def test_single_track_race(tmp_path, capsys):
    roster = tmp_path / "roster.txt"
    roster.write_text("Bot;Star;#0000FF;2\n")

    exit_code = Args(track=["chicane"], roster=roster, max_turns=300)()

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "[chicane] WON by Star" in out
    assert "Star (astar)" in out
    assert "Completed: 1" in out


def test_bundled_config_runs(capsys):
    exit_code = Args(config=CONFIGS / "inline.toml", max_turns=300)()

    out = capsys.readouterr().out
    assert exit_code == 0
    assert "Breadth (bfs)" in out
    assert "Smooth (astar)" in out


def test_missing_config_is_an_error(tmp_path, capsys):
    exit_code = Args(config=tmp_path / "nope.toml")()

    assert exit_code == 1
    assert "Config file not found" in capsys.readouterr().err


def test_bad_roster_is_an_error(tmp_path, capsys):
    roster = tmp_path / "roster.txt"
    roster.write_text("Bot;Star;blue;2\n")

    exit_code = Args(track=["chicane"], roster=roster)()

    assert exit_code == 1
    assert "is not #RRGGBB" in capsys.readouterr().err


def test_unknown_track_is_an_error(capsys):
    exit_code = Args(track=["nowhere"])()

    assert exit_code == 1
    assert "Unknown track 'nowhere'" in capsys.readouterr().err


def test_too_many_racers_is_an_error(tmp_path, capsys):
    roster = tmp_path / "roster.txt"
    roster.write_text("".join(f"Bot;B{i};#FF0000;1\n" for i in range(3)))

    exit_code = Args(track=["chicane"], roster=roster)()

    assert exit_code == 1
    assert "start cells" in capsys.readouterr().err


def test_render_grid_draws_racers_over_cells():
    game = RaceScenario(
        [RacerConfig(0, "Ada", (1, 1)), RacerConfig(1, "Bob", (3, 1))],
        track=parse_track("#####\n#S1.#\n#..*#\n#####"),
    )

    assert render_grid(game.state).plain == "#####\n#011#\n#..*#\n#####\n"
