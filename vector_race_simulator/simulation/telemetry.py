from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vector_race_simulator.ai.smart_agent import BotAgent
from vector_race_simulator.core.events import CheckpointNotice, VictoryNotice

if TYPE_CHECKING:
    from vector_race_simulator.core.events import MoveStatus, RaceNotice, TurnOutcome
    from vector_race_simulator.engine.race_engine import RaceEngine


@dataclass(frozen=True, slots=True)
class SnapshotPolicy:
    snapshot_notice_types: tuple[type[object], ...] = ()
    snapshot_on_turn_end: bool = True
    turn_end_event_name: str = "TurnEnd"


@dataclass(frozen=True, slots=True)
class StepSnapshot:
    global_step_index: int
    turn_index: int
    event_name: str
    positions: list[tuple[int, int]]
    velocities: list[tuple[int, int]]
    next_checkpoints: list[int]
    current_racer: int
    names: list[str]


@dataclass(slots=True)
class SnapshotRecorder:
    policy: SnapshotPolicy = field(default_factory=SnapshotPolicy)
    step_history: list[StepSnapshot] = field(default_factory=list)
    turn_map: dict[int, list[int]] = field(default_factory=dict)

    def on_notice(self, engine: RaceEngine, notice: RaceNotice) -> None:
        if isinstance(notice, self.policy.snapshot_notice_types):
            self.capture(
                engine,
                notice.__class__.__name__,
                turn_index=engine.state.turn_count,
            )

    def on_turn_end(self, engine: RaceEngine, outcome: TurnOutcome) -> None:
        if self.policy.snapshot_on_turn_end:
            self.capture(engine, self.policy.turn_end_event_name, turn_index=outcome.turn)

    def capture(self, engine: RaceEngine, event_name: str, *, turn_index: int) -> None:
        racers = engine.state.racers
        snapshot = StepSnapshot(
            global_step_index=len(self.step_history),
            turn_index=turn_index,
            event_name=event_name,
            positions=[(r.position.x, r.position.y) for r in racers],
            velocities=[(r.velocity.dx, r.velocity.dy) for r in racers],
            next_checkpoints=[r.next_checkpoint for r in racers],
            current_racer=engine.state.current_racer_idx,
            names=[r.name for r in racers],
        )
        self.step_history.append(snapshot)
        self.turn_map.setdefault(turn_index, []).append(snapshot.global_step_index)


@dataclass(slots=True)
class RacerMetrics:
    racer_idx: int
    racer_name: str
    strategy: str | None = None
    turns_taken: int = 0
    moves: int = 0
    collisions: int = 0
    blocked_turns: int = 0
    checkpoints_passed: int = 0
    cells_travelled: int = 0
    finished: bool = False


@dataclass(slots=True)
class TurnRecord:
    """Lightweight record of a single turn's key outcome."""

    turn_index: int
    racer_idx: int
    status: MoveStatus


@dataclass(slots=True)
class MetricsAggregator:
    """Accumulates per-racer counters from notices and turn outcomes."""

    results: dict[int, RacerMetrics] = field(default_factory=dict)
    turn_history: list[TurnRecord] = field(default_factory=list)

    def initialize_racers(self, engine: RaceEngine) -> None:
        """Must be called before the first turn."""
        for racer in engine.state.racers:
            strategy = racer.agent.strategy.name if isinstance(racer.agent, BotAgent) else None
            self.results[racer.idx] = RacerMetrics(
                racer_idx=racer.idx,
                racer_name=racer.name,
                strategy=strategy,
            )

    def on_notice(self, engine: RaceEngine, notice: RaceNotice) -> None:
        _ = engine
        match notice:
            case CheckpointNotice():
                self.results[notice.racer_idx].checkpoints_passed += 1
            case VictoryNotice():
                self.results[notice.racer_idx].finished = True
            case _:
                pass

    def on_turn_end(self, engine: RaceEngine, outcome: TurnOutcome) -> None:
        _ = engine
        stats = self.results[outcome.racer_idx]
        stats.turns_taken += 1
        match outcome.status:
            case "moved":
                stats.moves += 1
                stats.cells_travelled += outcome.start.chebyshev_to(outcome.end)
            case "collision":
                stats.collisions += 1
            case "blocked":
                stats.blocked_turns += 1

        self.turn_history.append(
            TurnRecord(
                turn_index=outcome.turn,
                racer_idx=outcome.racer_idx,
                status=outcome.status,
            ),
        )

    def finalize_metrics(self) -> list[RacerMetrics]:
        return [self.results[idx] for idx in sorted(self.results)]
