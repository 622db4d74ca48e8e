from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, override

from vector_race_simulator.core.geometry import ZERO, Vector
from vector_race_simulator.core.types import is_acceleration

if TYPE_CHECKING:
    from collections.abc import Callable

    from vector_race_simulator.core.state import RacerState, RaceState
    from vector_race_simulator.engine.checkpoints import CheckpointTracker


@dataclass
class DecisionContext:
    """Read-only view handed to an agent when its racer is up."""

    state: RaceState
    racer: RacerState
    checkpoints: CheckpointTracker


class Agent(ABC):
    """Supplies one acceleration per turn; never moves the racer itself."""

    @abstractmethod
    def choose_acceleration(self, ctx: DecisionContext) -> Vector | None: ...


type InputSource = Callable[[DecisionContext], Vector | None]


class HumanAgent(Agent):
    """
    Acceleration comes from the UI; no pending selection means coasting.

    A UI either pushes a choice with ``select`` before the turn, or hands in an
    ``input_source`` that is asked when the turn starts without one.
    """

    def __init__(self, input_source: InputSource | None = None) -> None:
        self.pending: Vector | None = None
        self.input_source: InputSource | None = input_source

    def select(self, acceleration: Vector) -> None:
        if not is_acceleration(acceleration):
            raise ValueError(
                f"Acceleration components must be in {{-1, 0, 1}}, got {acceleration}",
            )
        self.pending = acceleration

    def reset_selection(self) -> None:
        self.pending = None

    @override
    def choose_acceleration(self, ctx: DecisionContext) -> Vector:
        if self.pending is None and self.input_source is not None:
            requested = self.input_source(ctx)
            if requested is not None:
                self.select(requested)
        chosen = self.pending if self.pending is not None else ZERO
        self.pending = None
        return chosen
