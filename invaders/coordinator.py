import logging
import random
import time
from dataclasses import dataclass, field

from invaders.combat import (BLOCKED, DEFLECTION_OFFSETS, choose_target, frontline_row,
                             is_active, resolve_shot, step_toward)
from invaders.display import banner, render_grid, render_projectiles, render_summary
from invaders.projectiles import ProjectilePool, travel_time
from invaders.protocol import (ACTIVE, DISABLED, TAG_DISABLE, TAG_FIRE, TAG_NAMES,
                               TAG_REPORT, TAG_TERMINATE, TERMINATED, tick_message,
                               worker_id, worker_rank)
from invaders.topology import index

logger = logging.getLogger(__name__)

VICTORY = "victory"
DEFEAT = "defeat"
STALEMATE = "stalemate"

ACK_POLL_INTERVAL = 0.01
KILL_SIGNAL = 1


class InvaderRecord:
    def __init__(self, status=ACTIVE, value=0):
        self.status = status
        self.value = value

    def __repr__(self):
        return f"InvaderRecord({self.status}, {self.value})"


@dataclass
class GameStats:
    ticks: int = 0
    player_shots: int = 0
    invader_shots: int = 0
    hits: int = 0
    total_tick_time: float = 0.0

    @property
    def mean_tick_time(self):
        return self.total_tick_time / self.ticks if self.ticks else 0.0


@dataclass
class GameResult:
    outcome: str
    tick: int
    player_col: int
    stats: GameStats
    grid: list = field(default_factory=list)
    clean_shutdown: bool = True


class Coordinator:
    """Owns the battlefield: invader grid, player, both projectile pools.

    Every tick broadcasts the clock, moves and fires for the player, takes
    at most one message from the invaders, resolves projectiles and
    decides whether the match goes on.
    """

    def __init__(self, channel, rows, cols, config, rng=None):
        self.channel = channel
        self.rows = rows
        self.cols = cols
        self.worker_count = rows * cols
        self.tick_seconds = config.tick_seconds
        self.shutdown_timeout = config.shutdown_timeout
        self.max_ticks = config.max_ticks
        self.quiet = config.quiet
        self.rng = rng if rng is not None else random.Random(config.process_seed(channel.rank))
        self.records = [InvaderRecord() for _ in range(self.worker_count)]
        self.player_col = 0
        self.tick = 0
        self.active_count = self.worker_count
        self.terminate_count = 0
        self.player_pool = ProjectilePool(config.pool_capacity)
        self.invader_pool = ProjectilePool(config.pool_capacity)
        self.stats = GameStats()

    def say(self, text):
        if not self.quiet:
            print(text, flush=True)

    def run(self):
        self.say(banner("SPACE INVADERS SIMULATION START"))
        self.say(f"Grid: {self.rows} rows x {self.cols} columns = {self.worker_count} invaders")
        self.say(f"Player starts at Column {self.player_col}\n")
        self.say(render_grid(self.records, self.rows, self.cols, self.player_col))
        while True:
            outcome = self.step()
            if outcome is not None:
                break
            self.show_state()
            time.sleep(self.tick_seconds)
        if outcome == VICTORY:
            self.show_state()
            self.say(banner("ALL INVADERS DESTROYED! YOU WIN!"))
        elif outcome == DEFEAT:
            self.say(banner("PLAYER HIT! GAME OVER - YOU LOSE!"))
        else:
            self.say(banner(f"NO RESULT AFTER {self.tick} TICKS"))
        clean = self.shutdown()
        self.say("\nFinal Grid State:")
        self.say(render_grid(self.records, self.rows, self.cols, self.player_col))
        result = self.result(outcome, clean)
        self.say(render_summary(result))
        self.say("Simulation Complete - All processes terminated")
        return result

    def step(self):
        started = time.perf_counter()
        self.tick += 1
        self.channel.sync(tick_message(self.tick))
        self.say(f"[Tick {self.tick}] " + self.move_player())
        self.player_fire()
        self.drain_one()
        self.resolve_player_shots()
        player_hit = self.resolve_invader_shots()
        self.stats.ticks += 1
        self.stats.total_tick_time += time.perf_counter() - started
        if player_hit:
            return DEFEAT
        if self.active_count == 0:
            return VICTORY
        if self.max_ticks is not None and self.tick >= self.max_ticks:
            return STALEMATE
        return None

    def move_player(self):
        target = choose_target(self.records, self.rows, self.cols, self.player_col)
        if target is None:
            return f"Player Col {self.player_col} | No targets"
        previous = self.player_col
        self.player_col = step_toward(previous, target[1], self.cols)
        if self.player_col > previous:
            return f"Player moves RIGHT -> Col {self.player_col}"
        if self.player_col < previous:
            return f"Player moves LEFT <- Col {self.player_col}"
        return f"Player stays at Col {self.player_col}"

    def player_fire(self):
        row = frontline_row(self.records, self.rows, self.cols, self.player_col)
        if row is None:
            return None
        ticks = travel_time(self.rows, row)
        self.say(f"          Fire -> Invader({row},{self.player_col}) [ETA: {ticks} sec]")
        slot = self.player_pool.allocate(self.player_col, ticks, self.channel.rank, target_row=row)
        if slot is not None:
            self.stats.player_shots += 1
        return slot

    def drain_one(self):
        envelope = self.channel.poll()
        if envelope is None:
            return False
        self.handle(envelope)
        return True

    def handle(self, envelope):
        wid = worker_id(envelope.source)
        if not 0 <= wid < self.worker_count:
            logger.warning("Message with tag %s from unknown rank %d discarded",
                           envelope.tag, envelope.source)
            return
        record = self.records[wid]
        if envelope.tag == TAG_REPORT:
            if record.status == ACTIVE:
                record.value = envelope.payload
        elif envelope.tag == TAG_DISABLE:
            record.status = DISABLED
            record.value = envelope.payload
        elif envelope.tag == TAG_FIRE:
            ticks, column = envelope.payload
            self.say(f"          !!! Invader at col {column} fires! ETA: {ticks} sec")
            if self.invader_pool.allocate(column, ticks, envelope.source) is not None:
                self.stats.invader_shots += 1
        elif envelope.tag == TAG_TERMINATE:
            record.status = TERMINATED
            self.terminate_count += 1
        else:
            logger.warning("Invalid tag %s received from invader %d",
                           TAG_NAMES.get(envelope.tag, envelope.tag), wid)

    def destroy(self, row, col):
        wid = index(row, col, self.cols)
        self.channel.send(KILL_SIGNAL, worker_rank(wid), TAG_DISABLE)
        self.records[wid].status = DISABLED
        self.active_count -= 1
        self.stats.hits += 1

    def resolve_player_shots(self):
        for shot in self.player_pool.advance():
            row, col = shot.target_row, shot.column
            if not is_active(self.records, row, col, self.cols):
                continue
            outcome = resolve_shot(self.rng.randrange(100))
            if outcome in DEFLECTION_OFFSETS:
                side = "LEFT" if DEFLECTION_OFFSETS[outcome] < 0 else "RIGHT"
                dcol = col + DEFLECTION_OFFSETS[outcome]
                if 0 <= dcol < self.cols and is_active(self.records, row, dcol, self.cols):
                    self.say(f"          DEFLECT {side}! Invader({row},{dcol}) destroyed!")
                    self.destroy(row, dcol)
                else:
                    self.say(f"          Deflected {side.lower()} (no target)")
            elif outcome == BLOCKED:
                self.say(f"          BLOCKED! Invader({row},{col}) shield holds!")
            else:
                self.say(f"          *** HIT! Invader({row},{col}) destroyed! ***")
                self.destroy(row, col)

    def resolve_invader_shots(self):
        player_hit = False
        for shot in self.invader_pool.advance():
            if shot.column == self.player_col:
                player_hit = True
            else:
                self.say(f"          Miss! Shot at col {shot.column} (player at {self.player_col})")
        return player_hit

    def show_state(self):
        self.say(render_grid(self.records, self.rows, self.cols, self.player_col))
        flying = render_projectiles(self.player_pool, self.invader_pool)
        if flying:
            self.say(flying)
        self.say(f"Invaders remaining: {self.active_count}\n")

    def shutdown(self):
        """Stop every invader and wait for each acknowledgement.

        The final broadcast releases workers from the tick barrier into a
        blocking wait for their terminate. Returns False when
        ``shutdown_timeout`` ran out first.
        """
        self.channel.sync(tick_message(self.tick + 1, final=True))
        for wid in range(self.worker_count):
            self.channel.send(TAG_TERMINATE, worker_rank(wid), TAG_TERMINATE)
        logger.info("Terminate sent to %d invaders, awaiting acknowledgements", self.worker_count)
        deadline = None
        if self.shutdown_timeout is not None:
            deadline = time.monotonic() + self.shutdown_timeout
        while self.terminate_count < self.worker_count:
            envelope = self.channel.poll(tag=TAG_TERMINATE)
            if envelope is not None:
                self.handle(envelope)
                continue
            if deadline is not None and time.monotonic() >= deadline:
                silent = [wid for wid, record in enumerate(self.records)
                          if record.status != TERMINATED]
                logger.warning("Shutdown timed out; no acknowledgement from invaders %s", silent)
                return False
            time.sleep(ACK_POLL_INTERVAL)
        logger.info("All %d invaders acknowledged termination", self.worker_count)
        return True

    def result(self, outcome, clean_shutdown=True):
        return GameResult(
            outcome=outcome,
            tick=self.tick,
            player_col=self.player_col,
            stats=self.stats,
            grid=[(record.status, record.value) for record in self.records],
            clean_shutdown=clean_shutdown,
        )
