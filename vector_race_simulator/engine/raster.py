from vector_race_simulator.core.geometry import Position


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def rasterize(start: Position, end: Position) -> list[Position]:
    """
    Supercover walk from ``start`` to ``end``, both included.

    Every cell the segment passes through is listed once, in order. A segment
    that crosses exactly through a grid corner steps diagonally instead of
    touching either side cell.
    """
    dx = abs(end.x - start.x)
    dy = abs(end.y - start.y)
    step_x = _sign(end.x - start.x)
    step_y = _sign(end.y - start.y)

    x, y = start.x, start.y
    ix = iy = 0
    path = [start]

    while ix < dx or iy < dy:
        # Compare (ix + 0.5) / dx with (iy + 0.5) / dy in integers.
        if dy == 0:
            cmp = -1
        elif dx == 0:
            cmp = 1
        else:
            lhs = (2 * ix + 1) * dy
            rhs = (2 * iy + 1) * dx
            cmp = (lhs > rhs) - (lhs < rhs)

        if cmp < 0:
            ix += 1
            x += step_x
        elif cmp > 0:
            iy += 1
            y += step_y
        else:
            ix += 1
            iy += 1
            x += step_x
            y += step_y
        path.append(Position(x, y))

    return path


def segment_cells(start: Position, end: Position) -> list[Position]:
    """Cells visited when travelling from ``start`` to ``end``, start excluded."""
    return rasterize(start, end)[1:]
