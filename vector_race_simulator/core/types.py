from enum import Enum
from typing import Literal

from vector_race_simulator.core.geometry import Vector

StrategyName = Literal["bfs", "astar"]

RacerKind = Literal["human", "bot"]

# Numeric strategy codes used by roster files; unknown codes fall back to BFS.
STRATEGY_CODES: dict[int, StrategyName] = {
    1: "bfs",
    2: "astar",
}


class CellKind(Enum):
    WALL = "#"
    ROAD = "."
    START = "S"
    FINISH = "*"
    CHECKPOINT = "@"

    @property
    def passable(self) -> bool:
        return self is not CellKind.WALL


class TurnPhase(Enum):
    AWAITING_MOVE = "awaiting_move"
    RESOLVING = "resolving"
    ADVANCING = "advancing"
    FINISHED = "finished"


# The nine accelerations, row by row from (-1, -1) to (1, 1).
ACCELERATIONS: tuple[Vector, ...] = tuple(
    Vector(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1)
)


def is_acceleration(vector: Vector) -> bool:
    return vector.speed <= 1
