import math

from invaders.protocol import NO_NEIGHBOR

DIRECTIONS = {
    'up': (-1, 0),
    'down': (1, 0),
    'left': (0, -1),
    'right': (0, 1),
}


class ConfigurationError(ValueError):
    pass


def grid_shape(worker_count, rows=None, cols=None):
    if worker_count < 1:
        raise ConfigurationError(f"Need at least one invader process (got {worker_count}).")
    if (rows is None) != (cols is None):
        raise ConfigurationError("Grid rows and columns must be given together.")
    if rows is None:
        return square_shape(worker_count)
    if rows <= 0 or cols <= 0 or rows * cols != worker_count:
        raise ConfigurationError(
            f"Grid {rows}x{cols} = {rows * cols} invaders, "
            f"but {worker_count} invader processes are running."
        )
    return rows, cols


# Most square factorization, larger dimension first.
def square_shape(worker_count):
    cols = int(math.isqrt(worker_count))
    while worker_count % cols != 0:
        cols -= 1
    return worker_count // cols, cols


def coords(worker_id, cols):
    return worker_id // cols, worker_id % cols


def index(row, col, cols):
    return row * cols + col


def in_bounds(row, col, rows, cols):
    return 0 <= row < rows and 0 <= col < cols


def neighbors(worker_id, rows, cols):
    i, j = coords(worker_id, cols)
    result = {}
    for direction, (di, dj) in DIRECTIONS.items():
        ni, nj = i + di, j + dj
        if in_bounds(ni, nj, rows, cols):
            result[direction] = index(ni, nj, cols)
        else:
            result[direction] = NO_NEIGHBOR
    return result
