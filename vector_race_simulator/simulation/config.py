"""Configuration schema for race runs using msgspec."""

from __future__ import annotations

from pathlib import Path

import msgspec

from vector_race_simulator.ai.astar import DEFAULT_ASTAR_MAX_SPEED, DEFAULT_MAX_EXPANSIONS
from vector_race_simulator.ai.bfs import DEFAULT_BFS_MAX_SPEED
from vector_race_simulator.simulation.roster import RacerEntry, load_roster

__all__ = ["RaceConfig", "RacerEntry", "SearchSettings"]


class SearchSettings(msgspec.Struct):
    """Knobs for the bot searches and target selection."""

    bfs_max_speed: int = DEFAULT_BFS_MAX_SPEED
    astar_max_speed: int = DEFAULT_ASTAR_MAX_SPEED
    max_expansions: int = DEFAULT_MAX_EXPANSIONS

    # Trade shortest paths for smoother A* trajectories
    smoothing: bool = False

    # Extra distance charged to checkpoints behind the direction of travel
    alignment_penalty: float = 0.0


class RaceConfig(msgspec.Struct):
    """
    TOML-backed configuration for one or more races.

    Racers are listed inline under ``[[racers]]`` or read from ``roster_file``.
    Inline racers win when both are given.
    """

    tracks: list[str] = msgspec.field(default_factory=lambda: ["oval"])
    racers: list[RacerEntry] = msgspec.field(default_factory=list)
    roster_file: str | None = None

    # Individual racer turns before a race is aborted
    max_turns: int = 500

    search: SearchSettings = msgspec.field(default_factory=SearchSettings)

    @classmethod
    def from_toml(cls, path: str | Path) -> RaceConfig:
        """Load configuration from a TOML file path."""
        with Path(path).open("rb") as f:
            return msgspec.toml.decode(f.read(), type=cls)

    def resolve_racers(self, base_dir: Path | None = None) -> list[RacerEntry]:
        """Inline racers, else the roster file (relative paths resolve against ``base_dir``)."""
        if self.racers:
            return list(self.racers)
        if self.roster_file is None:
            return []

        roster_path = Path(self.roster_file)
        if base_dir is not None and not roster_path.is_absolute():
            roster_path = base_dir / roster_path
        return load_roster(roster_path)
