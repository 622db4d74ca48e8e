import math

from vector_race_simulator.core.geometry import ZERO, Position, Vector
from vector_race_simulator.core.types import ACCELERATIONS, is_acceleration


def test_vector_arithmetic():
    assert Vector(1, -2) + Vector(2, 3) == Vector(3, 1)
    assert Vector(1, -2) - Vector(2, 3) == Vector(-1, -5)
    assert ZERO.is_zero
    assert not Vector(0, 1).is_zero


def test_vector_speed_is_largest_component():
    assert Vector(3, -4).speed == 4
    assert Vector(-5, 2).speed == 5
    assert ZERO.speed == 0


def test_position_move_and_offset():
    start = Position(2, 3)
    assert start.move(Vector(1, -1)) == Position(3, 2)
    assert start.offset_to(Position(5, 1)) == Vector(3, -2)


def test_position_distances():
    a = Position(0, 0)
    b = Position(3, 4)
    assert a.distance_to(b) == 5.0
    assert a.chebyshev_to(b) == 4
    assert math.isclose(Position(1, 1).distance_to(Position(2, 2)), math.sqrt(2))


def test_positions_order_by_x_then_y():
    cells = [Position(2, 0), Position(1, 5), Position(1, 2)]
    assert sorted(cells) == [Position(1, 2), Position(1, 5), Position(2, 0)]


def test_string_forms():
    assert str(Vector(1, -1)) == "(1, -1)"
    assert str(Position(4, 0)) == "(4, 0)"


def test_acceleration_set():
    assert len(ACCELERATIONS) == 9
    assert len(set(ACCELERATIONS)) == 9
    assert ACCELERATIONS[0] == Vector(-1, -1)
    assert ACCELERATIONS[-1] == Vector(1, 1)
    assert all(is_acceleration(acc) for acc in ACCELERATIONS)
    assert not is_acceleration(Vector(2, 0))
