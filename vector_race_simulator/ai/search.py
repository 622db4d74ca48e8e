"""Shared pieces of the two searches: nodes, neighbour expansion, path walk-back."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, override

from vector_race_simulator.core.geometry import ZERO, Position, Vector
from vector_race_simulator.core.types import ACCELERATIONS
from vector_race_simulator.engine.validation import is_wall_clear

if TYPE_CHECKING:
    from collections.abc import Iterator

    from vector_race_simulator.core.track import Track


@dataclass(eq=False, slots=True)
class SearchNode:
    position: Position
    velocity: Vector
    parent: SearchNode | None = None
    acceleration: Vector | None = None
    g: int = 0
    h: float = 0.0

    @property
    def key(self) -> tuple[Position, Vector]:
        return (self.position, self.velocity)

    @property
    def f(self) -> float:
        return self.g + self.h

    # Identity is the kinematic state only; path bookkeeping is ignored.
    @override
    def __eq__(self, other: object):
        if not isinstance(other, SearchNode):
            return NotImplemented
        return self.key == other.key

    @override
    def __hash__(self):
        return hash(self.key)


@dataclass(frozen=True, slots=True)
class SearchResult:
    acceleration: Vector
    found: bool
    turns: int = 0
    expansions: int = 0

    @classmethod
    def not_found(cls, expansions: int = 0) -> SearchResult:
        return cls(acceleration=ZERO, found=False, expansions=expansions)


def successors(
    track: Track,
    node: SearchNode,
    max_speed: int,
) -> Iterator[tuple[Vector, Position, Vector]]:
    """Yield ``(acceleration, position, velocity)`` for every wall-clear move."""
    for acc in ACCELERATIONS:
        velocity = node.velocity + acc
        if velocity.speed > max_speed:
            continue
        if not is_wall_clear(track, node.position, velocity):
            continue
        yield acc, node.position.move(velocity), velocity


def first_acceleration(goal: SearchNode) -> tuple[Vector, int]:
    """Walk parents back to the start; return the first move and the path length."""
    node = goal
    turns = 0
    while node.parent is not None and node.parent.parent is not None:
        node = node.parent
        turns += 1

    if node.parent is None:
        # goal is the start node
        return ZERO, 0

    assert node.acceleration is not None, "non-root node without an acceleration"
    return node.acceleration, turns + 1


class SearchEngine(ABC):
    name: str
    max_speed: int

    @abstractmethod
    def search(
        self,
        track: Track,
        start: Position,
        velocity: Vector,
        target: Position,
    ) -> SearchResult: ...
