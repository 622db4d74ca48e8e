from dataclasses import dataclass
from typing import override

from vector_race_simulator.ai.strategies import Strategy
from vector_race_simulator.core.agent import Agent, DecisionContext
from vector_race_simulator.core.geometry import Vector


@dataclass
class BotAgent(Agent):
    """A concrete agent that delegates every decision to its strategy."""

    strategy: Strategy

    @override
    def choose_acceleration(self, ctx: DecisionContext) -> Vector:
        return self.strategy.next_acceleration(ctx)
