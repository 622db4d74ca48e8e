from __future__ import annotations

import math
from dataclasses import dataclass
from typing import override


@dataclass(frozen=True, slots=True)
class Vector:
    """Integer displacement on the grid (velocities and accelerations)."""

    dx: int
    dy: int

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.dx + other.dx, self.dy + other.dy)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.dx - other.dx, self.dy - other.dy)

    @property
    def is_zero(self) -> bool:
        return self.dx == 0 and self.dy == 0

    @property
    def speed(self) -> int:
        """Largest absolute component."""
        return max(abs(self.dx), abs(self.dy))

    @override
    def __str__(self) -> str:
        return f"({self.dx}, {self.dy})"


ZERO = Vector(0, 0)


@dataclass(frozen=True, slots=True, order=True)
class Position:
    x: int
    y: int

    def move(self, velocity: Vector) -> Position:
        return Position(self.x + velocity.dx, self.y + velocity.dy)

    def offset_to(self, other: Position) -> Vector:
        return Vector(other.x - self.x, other.y - self.y)

    def distance_to(self, other: Position) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def chebyshev_to(self, other: Position) -> int:
        return max(abs(other.x - self.x), abs(other.y - self.y))

    @override
    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
