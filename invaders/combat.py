from invaders.protocol import ACTIVE
from invaders.topology import index

DEFLECT_LEFT = "deflect_left"
DEFLECT_RIGHT = "deflect_right"
BLOCKED = "blocked"
DIRECT_HIT = "direct_hit"

# upper bound of each band for a draw in [0, 100)
SHOT_BANDS = [
    (20, DEFLECT_LEFT),
    (35, DEFLECT_RIGHT),
    (55, BLOCKED),
    (100, DIRECT_HIT),
]
DEFLECTION_OFFSETS = {
    DEFLECT_LEFT: -1,
    DEFLECT_RIGHT: 1,
}
FIRE_CHANCE = 10


def is_active(records, row, col, cols):
    return records[index(row, col, cols)].status == ACTIVE


def frontline_row(records, rows, cols, col):
    for row in range(rows - 1, -1, -1):
        if is_active(records, row, col, cols):
            return row
    return None


def choose_target(records, rows, cols, player_col):
    """Pick the invader the player should line up under.

    Columns are scanned left to right and only the bottom-most active
    invader of each column is a candidate. A lower row always wins; on
    equal rows the column nearer the player wins, and the leftmost column
    keeps a tie.
    """
    best = None
    for col in range(cols):
        row = frontline_row(records, rows, cols, col)
        if row is None:
            continue
        if best is None or row > best[0] or (
                row == best[0] and abs(col - player_col) < abs(best[1] - player_col)):
            best = (row, col)
    return best


def step_toward(player_col, target_col, cols):
    if target_col > player_col and player_col < cols - 1:
        return player_col + 1
    if target_col < player_col and player_col > 0:
        return player_col - 1
    return player_col


def resolve_shot(draw):
    if draw < 0:
        raise ValueError(f"draw {draw} is outside [0, 100)")
    for upper, outcome in SHOT_BANDS:
        if draw < upper:
            return outcome
    raise ValueError(f"draw {draw} is outside [0, 100)")


def should_fire(draw):
    return draw < FIRE_CHANCE
