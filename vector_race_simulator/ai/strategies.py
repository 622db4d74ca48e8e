from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar, override

from vector_race_simulator.ai.astar import (
    DEFAULT_ASTAR_MAX_SPEED,
    DEFAULT_MAX_EXPANSIONS,
    AStarSearch,
)
from vector_race_simulator.ai.bfs import DEFAULT_BFS_MAX_SPEED, BreadthFirstSearch
from vector_race_simulator.ai.evaluation import chebyshev_turns, smoothed_chebyshev
from vector_race_simulator.core.geometry import ZERO
from vector_race_simulator.engine.validation import validate_acceleration

if TYPE_CHECKING:
    from vector_race_simulator.ai.search import SearchEngine
    from vector_race_simulator.core.agent import DecisionContext
    from vector_race_simulator.core.geometry import Vector
    from vector_race_simulator.core.types import StrategyName

logger = logging.getLogger("vector_race.ai")

# Consecutive idle decisions while standing still before a new target is picked.
STUCK_THRESHOLD = 3


class Strategy(ABC):
    """Turns a decision context into one acceleration using a search engine."""

    name: ClassVar[StrategyName]

    @property
    @abstractmethod
    def engine(self) -> SearchEngine: ...

    def next_acceleration(self, ctx: DecisionContext) -> Vector:
        racer = ctx.racer
        target = ctx.checkpoints.find_target(racer)
        if target is None:
            logger.debug("%s has nothing to aim for", racer.repr)
            return self._remember(ctx, ZERO)

        racer.memory.last_target = target
        result = self.engine.search(ctx.state.track, racer.position, racer.velocity, target)
        if not result.found:
            logger.debug(
                "%s: no path to %s after %d expansions",
                racer.repr,
                target,
                result.expansions,
            )
            return self._remember(ctx, ZERO)

        if not validate_acceleration(ctx.state, racer, result.acceleration):
            logger.debug(
                "%s: first move %s toward %s is blocked by an opponent",
                racer.repr,
                result.acceleration,
                target,
            )
            return self._remember(ctx, ZERO)

        return self._remember(ctx, result.acceleration)

    def _remember(self, ctx: DecisionContext, acceleration: Vector) -> Vector:
        racer = ctx.racer
        memory = racer.memory

        if not racer.velocity.is_zero:
            memory.last_direction = racer.velocity

        if acceleration.is_zero and racer.velocity.is_zero:
            memory.stuck_turns += 1
            if memory.stuck_turns >= STUCK_THRESHOLD:
                logger.debug("%s is stuck, dropping target %s", racer.repr, memory.last_target)
                if memory.last_target is not None:
                    memory.avoid.add(memory.last_target)
                ctx.checkpoints.invalidate_target(racer)
                memory.stuck_turns = 0
                memory.last_target = None
        else:
            memory.stuck_turns = 0
        return acceleration


class BFSStrategy(Strategy):
    name = "bfs"

    def __init__(self, max_speed: int = DEFAULT_BFS_MAX_SPEED) -> None:
        self._engine: BreadthFirstSearch = BreadthFirstSearch(max_speed)

    @property
    @override
    def engine(self) -> BreadthFirstSearch:
        return self._engine


class AStarStrategy(Strategy):
    name = "astar"

    def __init__(
        self,
        max_speed: int = DEFAULT_ASTAR_MAX_SPEED,
        max_expansions: int = DEFAULT_MAX_EXPANSIONS,
        *,
        smoothing: bool = False,
    ) -> None:
        heuristic = smoothed_chebyshev if smoothing else chebyshev_turns
        self._engine: AStarSearch = AStarSearch(max_speed, max_expansions, heuristic)

    @property
    @override
    def engine(self) -> AStarSearch:
        return self._engine


STRATEGY_CLASSES: dict[StrategyName, type[Strategy]] = {
    cls.name: cls for cls in Strategy.__subclasses__()
}
