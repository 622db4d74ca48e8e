"""
Text track format and the bundled tracks.

One character per cell: ``#`` wall, ``.`` road, ``S`` start, ``*`` finish and
a digit ``1``-``9`` for a checkpoint of that sequence number. Any other
character is road. Blank lines are ignored.
"""

from __future__ import annotations

import functools
import string
from importlib import resources
from pathlib import Path
from typing import TYPE_CHECKING

from vector_race_simulator.core.geometry import Position
from vector_race_simulator.core.track import CheckpointInfo, Track
from vector_race_simulator.core.types import CellKind

if TYPE_CHECKING:
    from collections.abc import Callable

TRACK_SUFFIX = ".txt"

_SYMBOLS: dict[str, CellKind] = {
    "#": CellKind.WALL,
    ".": CellKind.ROAD,
    "S": CellKind.START,
    "*": CellKind.FINISH,
}


class TrackLoadError(ValueError):
    """Raised when a track file is missing, empty or malformed."""


def priority_for(number: int) -> int:
    if number <= 3:
        return 1
    if number <= 6:
        return 2
    return 3


def parse_track(text: str, *, source: str = "<string>") -> Track:
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        raise TrackLoadError(f"{source}: track is empty")

    width = len(lines[0])
    grid: list[list[CellKind]] = []
    checkpoints: dict[Position, CheckpointInfo] = {}

    for y, line in enumerate(lines):
        if len(line) != width:
            raise TrackLoadError(
                f"{source}: line {y + 1} has {len(line)} cells, expected {width}",
            )
        row: list[CellKind] = []
        for x, char in enumerate(line):
            if char in string.digits:
                number = int(char)
                if number < 1:
                    raise TrackLoadError(f"{source}: checkpoint 0 at ({x}, {y})")
                checkpoints[Position(x, y)] = CheckpointInfo(number, priority_for(number))
                row.append(CellKind.CHECKPOINT)
            else:
                row.append(_SYMBOLS.get(char, CellKind.ROAD))
        grid.append(row)

    return Track(grid, checkpoints)


def _bundled_names() -> list[str]:
    root = resources.files(__package__)
    return sorted(
        entry.name.removesuffix(TRACK_SUFFIX)
        for entry in root.iterdir()
        if entry.name.endswith(TRACK_SUFFIX)
    )


def discover_tracks() -> list[str]:
    """Names of the tracks shipped with the package."""
    return list(TRACK_DEFINITIONS)


def _load_bundled(name: str) -> Track:
    resource = resources.files(__package__).joinpath(name + TRACK_SUFFIX)
    return parse_track(resource.read_text(encoding="utf-8"), source=name)


TRACK_DEFINITIONS: dict[str, Callable[[], Track]] = {
    name: functools.partial(_load_bundled, name) for name in _bundled_names()
}


def load_track(name_or_path: str | Path) -> Track:
    """Load a bundled track by name, or any track file by path."""
    if isinstance(name_or_path, str) and name_or_path in TRACK_DEFINITIONS:
        return TRACK_DEFINITIONS[name_or_path]()

    path = Path(name_or_path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        known = ", ".join(TRACK_DEFINITIONS)
        raise TrackLoadError(
            f"Unknown track '{name_or_path}' (bundled tracks: {known}): {e}",
        ) from e
    return parse_track(text, source=str(path))
