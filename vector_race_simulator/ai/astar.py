from __future__ import annotations

import heapq
import logging
from typing import TYPE_CHECKING, override

from vector_race_simulator.ai.evaluation import chebyshev_turns
from vector_race_simulator.ai.search import (
    SearchEngine,
    SearchNode,
    SearchResult,
    first_acceleration,
    successors,
)

if TYPE_CHECKING:
    from vector_race_simulator.ai.evaluation import Heuristic
    from vector_race_simulator.core.geometry import Position, Vector
    from vector_race_simulator.core.track import Track

logger = logging.getLogger("vector_race.ai")

DEFAULT_ASTAR_MAX_SPEED = 5
DEFAULT_MAX_EXPANSIONS = 200_000


class AStarSearch(SearchEngine):
    """
    Best-first search ordered by ``g + h``.

    Open-heap entries are ``(f, h, serial, node)``: lower estimated cost wins,
    then the node closer to the target, then the earlier insertion. A node is
    closed when popped, and a popped node that is already closed is skipped.
    ``best_g`` keeps worse duplicates out of the heap.
    """

    name = "astar"

    def __init__(
        self,
        max_speed: int = DEFAULT_ASTAR_MAX_SPEED,
        max_expansions: int = DEFAULT_MAX_EXPANSIONS,
        heuristic: Heuristic = chebyshev_turns,
    ) -> None:
        if max_speed < 1:
            raise ValueError(f"max_speed must be at least 1, got {max_speed}")
        if max_expansions < 1:
            raise ValueError(f"max_expansions must be at least 1, got {max_expansions}")
        self.max_speed: int = max_speed
        self.max_expansions: int = max_expansions
        self.heuristic: Heuristic = heuristic

    @override
    def search(
        self,
        track: Track,
        start: Position,
        velocity: Vector,
        target: Position,
    ) -> SearchResult:
        root = SearchNode(start, velocity)
        root.h = self.heuristic(root, None, target, self.max_speed)

        serial = 0
        open_heap: list[tuple[float, float, int, SearchNode]] = [(root.f, root.h, serial, root)]
        best_g = {root.key: 0}
        closed: set[tuple[Position, Vector]] = set()
        expansions = 0

        while open_heap:
            _, _, _, node = heapq.heappop(open_heap)
            if node.key in closed:
                continue

            expansions += 1
            if expansions > self.max_expansions:
                logger.debug(
                    "A* hit the expansion cap (%d) searching for %s",
                    self.max_expansions,
                    target,
                )
                return SearchResult.not_found(expansions - 1)

            if node.position == target:
                acceleration, turns = first_acceleration(node)
                return SearchResult(acceleration, True, turns, expansions)

            closed.add(node.key)

            for acc, position, new_velocity in successors(track, node, self.max_speed):
                key = (position, new_velocity)
                if key in closed:
                    continue
                g = node.g + 1
                if g >= best_g.get(key, g + 1):
                    continue
                best_g[key] = g

                child = SearchNode(position, new_velocity, parent=node, acceleration=acc, g=g)
                child.h = self.heuristic(child, node, target, self.max_speed)
                serial += 1
                heapq.heappush(open_heap, (child.f, child.h, serial, child))

        logger.debug("A* exhausted %d states without reaching %s", expansions, target)
        return SearchResult.not_found(expansions)
