"""
Heuristics for A*.

A heuristic receives the candidate node, its parent (``None`` for the root),
the target and the engine's speed cap, and estimates the turns still needed.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from vector_race_simulator.ai.search import SearchNode
    from vector_race_simulator.core.geometry import Position

RETREAT_PENALTY = 5.0
SPEED_WEIGHT = 0.5


class Heuristic(Protocol):
    def __call__(
        self,
        node: SearchNode,
        parent: SearchNode | None,
        target: Position,
        max_speed: int,
    ) -> float: ...


def chebyshev_turns(
    node: SearchNode,
    parent: SearchNode | None,
    target: Position,
    max_speed: int,
) -> float:
    """Lower bound on turns: one turn covers at most ``max_speed`` cells per axis."""
    _ = parent
    return math.ceil(node.position.chebyshev_to(target) / max_speed)


def smoothed_chebyshev(
    node: SearchNode,
    parent: SearchNode | None,
    target: Position,
    max_speed: int,
) -> float:
    """
    Raw Chebyshev distance plus penalties for moving away and for speed.

    Not admissible. Paths come out smoother but are not guaranteed shortest.
    """
    _ = max_speed
    distance = node.position.chebyshev_to(target)
    score = float(distance)
    if parent is not None and distance > parent.position.chebyshev_to(target):
        score += RETREAT_PENALTY
    score += SPEED_WEIGHT * (abs(node.velocity.dx) + abs(node.velocity.dy))
    return score
