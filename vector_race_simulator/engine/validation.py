"""Move legality: walls along the traversed cells and parked opponents."""

from __future__ import annotations

from typing import TYPE_CHECKING

from vector_race_simulator.core.types import ACCELERATIONS, CellKind
from vector_race_simulator.engine.raster import segment_cells

if TYPE_CHECKING:
    from collections.abc import Sequence

    from vector_race_simulator.core.geometry import Position, Vector
    from vector_race_simulator.core.state import RacerState, RaceState
    from vector_race_simulator.core.track import Track


def is_legal_move(
    track: Track,
    start: Position,
    end: Position,
    *,
    mover: RacerState | None = None,
    racers: Sequence[RacerState] = (),
) -> bool:
    """
    Check the segment ``start -> end`` cell by cell.

    Without a ``mover`` only walls are considered (the hypothetical states
    explored by search have no committed racer). With one, any other racer
    standing still on a traversed cell blocks the move; moving racers do not.
    """
    if start == end:
        return True

    parked: set[Position] = set()
    if mover is not None:
        parked = {
            r.position for r in racers if r.idx != mover.idx and r.velocity.is_zero
        }

    for cell in segment_cells(start, end):
        if track.cell_at(cell) is CellKind.WALL:
            return False
        if cell in parked:
            return False
    return True


def is_wall_clear(track: Track, start: Position, velocity: Vector) -> bool:
    """Wall-only check of the move ``start -> start + velocity``."""
    return is_legal_move(track, start, start.move(velocity))


def validate_acceleration(state: RaceState, racer: RacerState, acceleration: Vector) -> bool:
    new_velocity = racer.velocity + acceleration
    end = racer.position.move(new_velocity)
    return is_legal_move(
        state.track,
        racer.position,
        end,
        mover=racer,
        racers=state.racers,
    )


def legal_accelerations(state: RaceState, racer: RacerState) -> list[Vector]:
    """Accelerations the racer could take right now (e.g. to highlight them in a UI)."""
    return [acc for acc in ACCELERATIONS if validate_acceleration(state, racer, acc)]
