from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, override

from vector_race_simulator.ai.search import (
    SearchEngine,
    SearchNode,
    SearchResult,
    first_acceleration,
    successors,
)

if TYPE_CHECKING:
    from vector_race_simulator.core.geometry import Position, Vector
    from vector_race_simulator.core.track import Track

logger = logging.getLogger("vector_race.ai")

DEFAULT_BFS_MAX_SPEED = 4


class BreadthFirstSearch(SearchEngine):
    """Fewest-turns search over (position, velocity) states."""

    name = "bfs"

    def __init__(self, max_speed: int = DEFAULT_BFS_MAX_SPEED) -> None:
        if max_speed < 1:
            raise ValueError(f"max_speed must be at least 1, got {max_speed}")
        self.max_speed: int = max_speed

    @override
    def search(
        self,
        track: Track,
        start: Position,
        velocity: Vector,
        target: Position,
    ) -> SearchResult:
        root = SearchNode(start, velocity)
        frontier: deque[SearchNode] = deque([root])
        visited = {root.key}
        expansions = 0

        while frontier:
            node = frontier.popleft()
            expansions += 1

            if node.position == target:
                acceleration, turns = first_acceleration(node)
                return SearchResult(acceleration, True, turns, expansions)

            for acc, position, new_velocity in successors(track, node, self.max_speed):
                key = (position, new_velocity)
                if key in visited:
                    continue
                visited.add(key)
                frontier.append(
                    SearchNode(position, new_velocity, parent=node, acceleration=acc, g=node.g + 1),
                )

        logger.debug("BFS exhausted %d states without reaching %s", expansions, target)
        return SearchResult.not_found(expansions)
