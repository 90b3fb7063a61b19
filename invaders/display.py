from invaders.protocol import STATUS_LETTERS
from invaders.topology import index

RULE = "=" * 40


def banner(*lines):
    return "\n".join([RULE] + [f"  {line}" for line in lines] + [RULE])


#  visualize the invader grid and the player row underneath it
def render_grid(records, rows, cols, player_col):
    out = []
    for i in range(rows):
        cells = []
        for j in range(cols):
            record = records[index(i, j, cols)]
            letter = STATUS_LETTERS.get(record.status, "?")
            cells.append(f"({i},{j}){letter}:{record.value}")
        out.append("\t".join(cells))
    out.append("\t".join("^PLAYER^" if j == player_col else "________" for j in range(cols)))
    return "\n".join(out) + "\n"


def render_projectiles(player_pool, invader_pool):
    lines = []
    for _, shot in player_pool.active():
        lines.append(f"  ^ Player -> ({shot.target_row},{shot.column}) [{shot.ticks_remaining}s]")
    for _, shot in invader_pool.active():
        lines.append(f"  v Invader col {shot.column} [{shot.ticks_remaining}s]")
    if not lines:
        return ""
    return "Cannonballs in flight:\n" + "\n".join(lines)


def render_summary(result):
    stats = result.stats
    return "\n".join([
        f"Outcome: {result.outcome} after {result.tick} ticks",
        f"Player shots: {stats.player_shots} | Invader shots: {stats.invader_shots} | "
        f"Hits: {stats.hits}",
        f"Tick time: {stats.total_tick_time:.3f}s total, {stats.mean_tick_time:.3f}s mean",
    ])
