"""Plain data handed to observers: point-in-time notices and per-turn outcomes."""

from dataclasses import dataclass, field
from typing import Literal

from vector_race_simulator.core.geometry import Position, Vector

MoveStatus = Literal["moved", "collision", "blocked"]


@dataclass(frozen=True)
class RaceNotice:
    """Marker base class."""

    racer_idx: int
    racer_name: str


@dataclass(frozen=True)
class CollisionNotice(RaceNotice):
    start: Position
    attempted_end: Position


@dataclass(frozen=True)
class BlockedNotice(RaceNotice):
    destination: Position
    occupant_idx: int


@dataclass(frozen=True)
class CheckpointNotice(RaceNotice):
    checkpoint: Position
    number: int


@dataclass(frozen=True)
class VictoryNotice(RaceNotice):
    position: Position
    turn: int


@dataclass(frozen=True)
class TurnOutcome:
    """Result of resolving exactly one racer's turn."""

    turn: int
    racer_idx: int
    acceleration: Vector
    start: Position
    end: Position
    velocity: Vector
    status: MoveStatus
    checkpoints_passed: tuple[Position, ...] = field(default=())
    finished: bool = False
