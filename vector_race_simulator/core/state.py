from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vector_race_simulator.core.geometry import ZERO, Position, Vector

if TYPE_CHECKING:
    from vector_race_simulator.core.agent import Agent
    from vector_race_simulator.core.track import Track


@dataclass(slots=True)
class LogContext:
    engine_id: int
    total_turn: int = 0
    turn_log_count: int = 0
    current_racer_repr: str = "_"

    def new_turn(self, racer_repr: str) -> None:
        self.total_turn += 1
        self.turn_log_count = 0
        self.current_racer_repr = racer_repr

    def inc_log_count(self) -> None:
        self.turn_log_count += 1


@dataclass(slots=True)
class AIMemory:
    """Per-racer scratch state a strategy carries between its decisions."""

    stuck_turns: int = 0
    last_direction: Vector | None = None
    last_target: Position | None = None

    # Targets given up on while stuck; cleared when a checkpoint is passed
    avoid: set[Position] = field(default_factory=set)


@dataclass(slots=True)
class RacerState:
    idx: int
    name: str
    position: Position
    agent: Agent
    color: str = "#FFFFFF"
    velocity: Vector = ZERO
    next_checkpoint: int = 1
    history: list[Position] = field(default_factory=list)
    memory: AIMemory = field(default_factory=AIMemory)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.position)

    @property
    def repr(self) -> str:
        return f"{self.idx}:{self.name}"

    def commit_move(self, position: Position, velocity: Vector) -> None:
        self.position = position
        self.velocity = velocity
        self.history.append(position)

    def stop(self) -> None:
        self.velocity = ZERO

    def advance_checkpoint(self) -> None:
        assert self.next_checkpoint >= 1, "checkpoint index went below 1"
        self.next_checkpoint += 1


@dataclass(slots=True)
class RaceState:
    track: Track
    racers: list[RacerState]
    current_racer_idx: int = 0
    finished: bool = False
    winner: RacerState | None = None
    turn_count: int = 0

    def __post_init__(self) -> None:
        if not self.racers:
            raise ValueError("A race needs at least one racer")
        if not 0 <= self.current_racer_idx < len(self.racers):
            raise ValueError(f"current_racer_idx {self.current_racer_idx} out of range")

    @property
    def current_racer(self) -> RacerState:
        return self.racers[self.current_racer_idx]

    def get_racer(self, idx: int) -> RacerState:
        return self.racers[idx]

    def racer_at(self, pos: Position, *, except_idx: int | None = None) -> RacerState | None:
        for racer in self.racers:
            if racer.idx != except_idx and racer.position == pos:
                return racer
        return None

    def declare_winner(self, racer: RacerState) -> None:
        self.finished = True
        self.winner = racer

