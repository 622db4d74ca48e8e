"""Immutable race grid with checkpoint metadata."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from vector_race_simulator.core.geometry import Position
from vector_race_simulator.core.types import CellKind

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence


@dataclass(slots=True)
class CheckpointInfo:
    number: int
    priority: int = 1
    reached: bool = False


class Track:
    """
    Fixed-size grid of cell kinds.

    Coordinates outside the grid read as walls. Apart from the per-checkpoint
    ``reached`` flag nothing changes after construction.
    """

    def __init__(
        self,
        grid: Sequence[Sequence[CellKind]],
        checkpoints: Mapping[Position, CheckpointInfo] | None = None,
    ) -> None:
        if not grid or not grid[0]:
            raise ValueError("Track grid must contain at least one cell")

        width = len(grid[0])
        for y, row in enumerate(grid):
            if len(row) != width:
                raise ValueError(
                    f"Track rows must share one width: row {y} has {len(row)}, expected {width}",
                )

        self._grid: tuple[tuple[CellKind, ...], ...] = tuple(tuple(row) for row in grid)
        self.width: int = width
        self.height: int = len(grid)
        self._checkpoints: dict[Position, CheckpointInfo] = dict(checkpoints or {})

        for pos, info in self._checkpoints.items():
            if self.cell_at(pos) is not CellKind.CHECKPOINT:
                raise ValueError(f"Checkpoint metadata at {pos} on a non-checkpoint cell")
            if info.number < 1:
                raise ValueError(f"Checkpoint numbers start at 1, got {info.number} at {pos}")

        groups: defaultdict[int, set[Position]] = defaultdict(set)
        finishes: list[Position] = []
        starts: list[Position] = []
        for y, row in enumerate(self._grid):
            for x, kind in enumerate(row):
                pos = Position(x, y)
                match kind:
                    case CellKind.CHECKPOINT:
                        if pos not in self._checkpoints:
                            raise ValueError(f"Checkpoint cell {pos} has no sequence number")
                        groups[self._checkpoints[pos].number].add(pos)
                    case CellKind.FINISH:
                        finishes.append(pos)
                    case CellKind.START:
                        starts.append(pos)
                    case _:
                        pass

        self._groups: dict[int, frozenset[Position]] = {
            number: frozenset(cells) for number, cells in groups.items()
        }
        self._finish_positions: tuple[Position, ...] = tuple(finishes)
        self._start_positions: tuple[Position, ...] = tuple(starts)
        self.max_checkpoint: int = max(self._groups, default=0)

    # ---------- Cell queries ----------

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def cell_at(self, pos: Position) -> CellKind:
        if not self.in_bounds(pos):
            return CellKind.WALL
        return self._grid[pos.y][pos.x]

    def is_passable(self, pos: Position) -> bool:
        return self.cell_at(pos).passable

    def is_finish(self, pos: Position) -> bool:
        return self.cell_at(pos) is CellKind.FINISH

    @property
    def rows(self) -> tuple[tuple[CellKind, ...], ...]:
        return self._grid

    @property
    def finish_positions(self) -> tuple[Position, ...]:
        """Finish cells in row-major order."""
        return self._finish_positions

    @property
    def start_positions(self) -> tuple[Position, ...]:
        """Start cells in row-major order."""
        return self._start_positions

    # ---------- Checkpoints ----------

    def checkpoint_number(self, pos: Position) -> int | None:
        info = self._checkpoints.get(pos)
        return info.number if info is not None else None

    def checkpoint_info(self, pos: Position) -> CheckpointInfo | None:
        return self._checkpoints.get(pos)

    def checkpoints_in_group(self, number: int) -> frozenset[Position]:
        return self._groups.get(number, frozenset())

    def mark_checkpoint_reached(self, pos: Position) -> None:
        info = self._checkpoints.get(pos)
        if info is not None:
            info.reached = True

    def has_reached_checkpoint_in_row(self, y: int, number: int) -> bool:
        return any(
            pos.y == y and info.number == number and info.reached
            for pos, info in self._checkpoints.items()
        )
