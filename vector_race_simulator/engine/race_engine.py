from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from vector_race_simulator.ai.smart_agent import BotAgent
from vector_race_simulator.core.agent import DecisionContext, HumanAgent
from vector_race_simulator.core.geometry import ZERO, Vector
from vector_race_simulator.core.types import TurnPhase, is_acceleration
from vector_race_simulator.engine.checkpoints import CheckpointTracker
from vector_race_simulator.engine.logging import ContextFilter
from vector_race_simulator.engine.movement import resolve_move

if TYPE_CHECKING:
    from vector_race_simulator.core.events import RaceNotice, TurnOutcome
    from vector_race_simulator.core.state import LogContext, RacerState, RaceState


class RaceObserver(Protocol):
    """Anything that wants to see what happens during a race (renderers, telemetry)."""

    def on_notice(self, engine: RaceEngine, notice: RaceNotice) -> None: ...
    def on_turn_end(self, engine: RaceEngine, outcome: TurnOutcome) -> None: ...


@dataclass
class RaceEngine:
    state: RaceState
    log_context: LogContext
    checkpoints: CheckpointTracker | None = None
    observers: list[RaceObserver] = field(default_factory=list)
    phase: TurnPhase = TurnPhase.AWAITING_MOVE

    _logger: logging.Logger = field(init=False, repr=False)
    _context_filter: ContextFilter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.checkpoints is None:
            self.checkpoints = CheckpointTracker(self.state.track)
        if self.state.finished:
            self.phase = TurnPhase.FINISHED

        self._logger = logging.getLogger(f"vector_race.engine.{self.log_context.engine_id}")
        self._context_filter = ContextFilter(self)
        self._logger.addFilter(self._context_filter)

    # ---------- Logging ----------

    def log_info(self, msg: str) -> None:
        self._logger.info(msg)

    def log_debug(self, msg: str) -> None:
        self._logger.debug(msg)

    def log_warning(self, msg: str) -> None:
        self._logger.warning(msg)

    def detach_logging(self) -> None:
        """Drop the logger's reference to this engine once racing is over."""
        self._logger.removeFilter(self._context_filter)

    # ---------- Observers ----------

    def add_observer(self, observer: RaceObserver) -> None:
        self.observers.append(observer)

    def notify(self, notice: RaceNotice) -> None:
        for observer in self.observers:
            observer.on_notice(self, notice)

    # ---------- Main Loop ----------

    def run_race(self, max_turns: int | None = None) -> RacerState | None:
        """
        Play turns until somebody wins.

        ``max_turns`` caps the number of individual racer turns; hitting it
        aborts the race and returns ``None``.
        """
        played = 0
        try:
            while not self.state.finished:
                if max_turns is not None and played >= max_turns:
                    self.log_warning(f"Race aborted after {played} turns without a winner")
                    return None
                self.advance_turn()
                played += 1
            return self.state.winner
        finally:
            self.detach_logging()

    def advance_turn(self) -> TurnOutcome | None:
        """Drive the current racer through one full turn. No-op once finished."""
        if self.phase is TurnPhase.FINISHED:
            return None

        racer = self.state.current_racer
        self.state.turn_count += 1
        self.log_context.new_turn(racer.repr)

        self.phase = TurnPhase.AWAITING_MOVE
        acceleration = self._request_acceleration(racer)

        self.phase = TurnPhase.RESOLVING
        outcome = resolve_move(self, racer, acceleration)

        if outcome.finished:
            self.phase = TurnPhase.FINISHED
        else:
            self.phase = TurnPhase.ADVANCING
            self._advance_racer()
            self.phase = TurnPhase.AWAITING_MOVE

        for observer in self.observers:
            observer.on_turn_end(self, outcome)
        return outcome

    def _advance_racer(self) -> None:
        n = len(self.state.racers)
        self.state.current_racer_idx = (self.state.current_racer_idx + 1) % n
        assert 0 <= self.state.current_racer_idx < n

    # ---------- Decisions ----------

    def _request_acceleration(self, racer: RacerState) -> Vector:
        assert self.checkpoints is not None
        ctx = DecisionContext(state=self.state, racer=racer, checkpoints=self.checkpoints)

        agent = racer.agent
        match agent:
            case HumanAgent(pending=None, input_source=None):
                self.log_info(f"{racer.repr} has no input pending, coasting")
                chosen = agent.choose_acceleration(ctx)
            case HumanAgent():
                chosen = agent.choose_acceleration(ctx)
            case BotAgent():
                chosen = agent.choose_acceleration(ctx)
                self.log_debug(f"{racer.repr} ({agent.strategy.name}) chose {chosen}")
            case _:
                chosen = agent.choose_acceleration(ctx)

        if not isinstance(chosen, Vector) or not is_acceleration(chosen):
            self.log_warning(f"{racer.repr} returned invalid acceleration {chosen!r}, using {ZERO}")
            return ZERO
        return chosen
