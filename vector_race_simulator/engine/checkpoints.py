"""Checkpoint progression, per-racer target selection and reservations."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from vector_race_simulator.engine.raster import segment_cells

if TYPE_CHECKING:
    from collections.abc import Collection

    from vector_race_simulator.core.geometry import Position
    from vector_race_simulator.core.state import RacerState
    from vector_race_simulator.core.track import Track

logger = logging.getLogger("vector_race.checkpoints")


class CheckpointTracker:
    """
    Knows which checkpoint each racer should aim for and which it has passed.

    Racers are keyed by name. A chosen target is cached and stays stable for as
    long as it belongs to the racer's current checkpoint group (or to the finish
    cells once every group is done), which keeps bots from flip-flopping between
    equally distant cells.
    """

    def __init__(self, track: Track, *, alignment_penalty: float = 0.0) -> None:
        self.track: Track = track
        self.alignment_penalty: float = alignment_penalty
        self._passed: defaultdict[str, set[Position]] = defaultdict(set)
        self._targets: dict[str, Position] = {}
        self._reservations: dict[Position, str] = {}

    # ---------- Targets ----------

    def candidates(self, racer: RacerState) -> frozenset[Position]:
        number = racer.next_checkpoint
        if number <= self.track.max_checkpoint:
            group = self.track.checkpoints_in_group(number)
            if group:
                return group
        return frozenset(self.track.finish_positions)

    def find_target(self, racer: RacerState) -> Position | None:
        candidates = self.candidates(racer)
        cached = self._targets.get(racer.name)

        if cached is not None and cached in candidates:
            return cached
        if cached is not None:
            self.invalidate_target(racer)
        if not candidates:
            return None

        target = self._select(racer, candidates)
        self._targets[racer.name] = target
        # A fully claimed group is shared without taking over the claim
        if self.track.checkpoint_number(target) is not None and not self.is_reserved(
            target,
            racer.name,
        ):
            self.reserve(target, racer.name)
        logger.debug("%s targets %s", racer.repr, target)
        return target

    def cached_target(self, racer: RacerState) -> Position | None:
        return self._targets.get(racer.name)

    def invalidate_target(self, racer: RacerState) -> None:
        target = self._targets.pop(racer.name, None)
        if target is not None:
            self.release(target, racer.name)

    def _select(self, racer: RacerState, candidates: Collection[Position]) -> Position:
        wanted = [c for c in candidates if c not in racer.memory.avoid] or list(candidates)
        free = [c for c in wanted if not self.is_reserved(c, racer.name)]
        pool = free or wanted
        return min(pool, key=lambda c: (self._score(racer, c), c))

    def _score(self, racer: RacerState, candidate: Position) -> float:
        score = racer.position.distance_to(candidate)
        if self.alignment_penalty <= 0:
            return score

        heading = racer.velocity
        if heading.is_zero:
            if racer.memory.last_direction is None:
                return score
            heading = racer.memory.last_direction

        offset = racer.position.offset_to(candidate)
        if heading.dx * offset.dx + heading.dy * offset.dy < 0:
            score += self.alignment_penalty
        return score

    # ---------- Progress ----------

    def has_passed(self, racer_name: str, checkpoint: Position) -> bool:
        return checkpoint in self._passed.get(racer_name, ())

    def passed_checkpoints(self, racer_name: str) -> frozenset[Position]:
        return frozenset(self._passed.get(racer_name, ()))

    def mark_passed(self, racer: RacerState, checkpoint: Position) -> bool:
        """Record a pass and move the racer on to the next group. Repeats are ignored."""
        passed = self._passed[racer.name]
        if checkpoint in passed:
            return False

        passed.add(checkpoint)
        racer.advance_checkpoint()
        racer.memory.avoid.clear()
        self.track.mark_checkpoint_reached(checkpoint)
        self.release(checkpoint, racer.name)
        self.invalidate_target(racer)
        return True

    def record_crossings(
        self,
        racer: RacerState,
        start: Position,
        end: Position,
    ) -> list[Position]:
        """Mark every expected checkpoint on the travelled segment, in order."""
        crossed: list[Position] = []
        for cell in segment_cells(start, end):
            number = self.track.checkpoint_number(cell)
            if number is None or number != racer.next_checkpoint:
                continue
            if self.mark_passed(racer, cell):
                crossed.append(cell)
        return crossed

    # ---------- Reservations ----------

    def reserve(self, checkpoint: Position, racer_name: str) -> None:
        self._reservations[checkpoint] = racer_name

    def is_reserved(self, checkpoint: Position, racer_name: str) -> bool:
        """True when somebody other than ``racer_name`` holds the checkpoint."""
        holder = self._reservations.get(checkpoint)
        return holder is not None and holder != racer_name

    def release(self, checkpoint: Position, racer_name: str) -> None:
        if self._reservations.get(checkpoint) == racer_name:
            del self._reservations[checkpoint]
