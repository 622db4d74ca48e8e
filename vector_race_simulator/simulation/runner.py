"""Race construction from configuration data, and single-race execution."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from vector_race_simulator.ai.smart_agent import BotAgent
from vector_race_simulator.ai.strategies import AStarStrategy, BFSStrategy, Strategy
from vector_race_simulator.core.agent import Agent, HumanAgent
from vector_race_simulator.core.state import LogContext, RacerState, RaceState
from vector_race_simulator.engine import ENGINE_ID_COUNTER
from vector_race_simulator.engine.checkpoints import CheckpointTracker
from vector_race_simulator.engine.race_engine import RaceEngine
from vector_race_simulator.simulation.config import SearchSettings
from vector_race_simulator.simulation.telemetry import MetricsAggregator, RacerMetrics

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from vector_race_simulator.core.agent import InputSource
    from vector_race_simulator.core.track import Track
    from vector_race_simulator.core.types import StrategyName
    from vector_race_simulator.engine.race_engine import RaceObserver
    from vector_race_simulator.simulation.roster import RacerEntry

logger = logging.getLogger("vector_race.simulation")


class RaceSetupError(ValueError):
    """The track and the roster cannot be combined into a race."""


@dataclass(slots=True)
class RaceResult:
    track: str
    winner: str | None
    turn_count: int
    aborted: bool
    execution_time_ms: float
    metrics: list[RacerMetrics] = field(default_factory=list)


def make_strategy(name: StrategyName, settings: SearchSettings) -> Strategy:
    match name:
        case "bfs":
            return BFSStrategy(settings.bfs_max_speed)
        case "astar":
            return AStarStrategy(
                settings.astar_max_speed,
                settings.max_expansions,
                smoothing=settings.smoothing,
            )


def make_agent(
    entry: RacerEntry,
    settings: SearchSettings,
    human_input: InputSource | None = None,
) -> Agent:
    match entry.kind:
        case "human":
            return HumanAgent(human_input)
        case "bot":
            return BotAgent(make_strategy(entry.strategy, settings))


def build_engine(
    track: Track,
    entries: Sequence[RacerEntry],
    *,
    settings: SearchSettings | None = None,
    observers: Iterable[RaceObserver] = (),
    human_input: InputSource | None = None,
) -> RaceEngine:
    """Place the racers on the track's start cells (row-major) and wire up an engine."""
    if settings is None:
        settings = SearchSettings()
    if not entries:
        raise RaceSetupError("A race needs at least one racer")

    starts = track.start_positions
    if len(entries) > len(starts):
        raise RaceSetupError(
            f"{len(entries)} racers but the track only has {len(starts)} start cells",
        )

    seen: set[str] = set()
    racers: list[RacerState] = []
    for idx, (entry, start) in enumerate(zip(entries, starts, strict=False)):
        if entry.name in seen:
            raise RaceSetupError(f"Duplicate racer name '{entry.name}'")
        seen.add(entry.name)
        racers.append(
            RacerState(
                idx=idx,
                name=entry.name,
                position=start,
                agent=make_agent(entry, settings, human_input),
                color=entry.color,
            ),
        )

    return RaceEngine(
        RaceState(track=track, racers=racers),
        log_context=LogContext(engine_id=next(ENGINE_ID_COUNTER)),
        checkpoints=CheckpointTracker(track, alignment_penalty=settings.alignment_penalty),
        observers=list(observers),
    )


def run_single_race(
    track_name: str,
    track: Track,
    entries: Sequence[RacerEntry],
    *,
    settings: SearchSettings | None = None,
    max_turns: int = 500,
    observers: Iterable[RaceObserver] = (),
    human_input: InputSource | None = None,
) -> RaceResult:
    """Build an engine, race to the end or to ``max_turns``, and collect metrics."""
    engine = build_engine(
        track,
        entries,
        settings=settings,
        observers=observers,
        human_input=human_input,
    )
    aggregator = MetricsAggregator()
    aggregator.initialize_racers(engine)
    engine.add_observer(aggregator)

    start_time = time.perf_counter()
    winner = engine.run_race(max_turns)
    elapsed_ms = (time.perf_counter() - start_time) * 1000

    aborted = winner is None
    if aborted:
        logger.info("Race on %s aborted after %d turns", track_name, engine.state.turn_count)

    return RaceResult(
        track=track_name,
        winner=winner.name if winner is not None else None,
        turn_count=engine.state.turn_count,
        aborted=aborted,
        execution_time_ms=elapsed_ms,
        metrics=aggregator.finalize_metrics(),
    )
