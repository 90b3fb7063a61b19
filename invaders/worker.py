import logging
import random
import time

from invaders.combat import should_fire
from invaders.projectiles import travel_time
from invaders.protocol import (COORDINATOR_RANK, NO_NEIGHBOR, TAG_DISABLE, TAG_FIRE,
                               TAG_NEIGHBOR, TAG_REPORT, TAG_TERMINATE, worker_id,
                               worker_rank)
from invaders.topology import DIRECTIONS, coords, neighbors

logger = logging.getLogger(__name__)

REPORT_INTERVAL = 4
SENSOR_RANGE = 50
POLL_INTERVAL = 0.01


# Missing neighbors count as zero; the divisor is always four.
def sensor_average(received):
    return sum(received.get(direction, 0) for direction in DIRECTIONS) // len(DIRECTIONS)


class Worker:
    """One invader: a single grid cell running in its own process.

    The ``disabled`` flag only mirrors what the coordinator has decided;
    a worker never declares itself dead.
    """

    def __init__(self, channel, rows, cols, config, rng=None):
        self.channel = channel
        self.worker_id = worker_id(channel.rank)
        self.rows = rows
        self.cols = cols
        self.row, self.col = coords(self.worker_id, cols)
        self.neighbors = neighbors(self.worker_id, rows, cols)
        self.wait_seconds = config.tick_seconds
        self.rng = rng if rng is not None else random.Random(config.process_seed(channel.rank))
        self.tick = 0
        self.disabled = False
        self.terminated = False
        self.received = {}

    @property
    def frontline(self):
        return self.row == self.rows - 1

    def run(self):
        while not self.terminated:
            self.tick, final = self.channel.sync()
            self.check_commands(final)
            if self.terminated:
                break
            self.received = self.exchange_with_neighbors(self.rng.randrange(SENSOR_RANGE))
            if not self.disabled and self.tick % REPORT_INTERVAL == 0:
                self.report()
                self.maybe_fire()
        logger.debug("Invader %d (%d,%d) stopped at tick %d",
                     self.worker_id, self.row, self.col, self.tick)

    def check_commands(self, final=False):
        if final:
            # Game over: block for the terminate, acking any disable queued ahead of it.
            while not self.terminated:
                self.handle_command(self.channel.recv(source=COORDINATOR_RANK))
            return
        envelope = self.channel.poll(source=COORDINATOR_RANK, tag=TAG_DISABLE)
        if envelope is not None:
            self.handle_command(envelope)

    def handle_command(self, envelope):
        if envelope.tag == TAG_DISABLE:
            self.disabled = True
            self.channel.send(TAG_DISABLE, COORDINATOR_RANK, TAG_DISABLE)
        elif envelope.tag == TAG_TERMINATE:
            self.channel.send(TAG_TERMINATE, COORDINATOR_RANK, TAG_TERMINATE)
            self.terminated = True
        else:
            logger.warning("Invader %d: unrecognized tag %s from coordinator",
                           self.worker_id, envelope.tag)

    def exchange_with_neighbors(self, value):
        sends = []
        pending = {}
        for direction, neighbor in self.neighbors.items():
            if neighbor == NO_NEIGHBOR:
                continue
            rank = worker_rank(neighbor)
            sends.append(self.channel.isend(value, rank, TAG_NEIGHBOR))
            pending[direction] = self.channel.irecv(rank, TAG_NEIGHBOR)
        received = {}
        deadline = time.monotonic() + self.wait_seconds
        while True:
            for direction, request in list(pending.items()):
                done, payload = request.test()
                if done:
                    received[direction] = payload
                    del pending[direction]
            if not pending or time.monotonic() >= deadline:
                break
            time.sleep(POLL_INTERVAL)
        for direction, request in pending.items():
            request.cancel()
            logger.debug("Invader %d: cancelled %s exchange at tick %d",
                         self.worker_id, direction, self.tick)
        for request in sends:
            done, _ = request.test()
            if not done:
                request.cancel()
        return received

    def report(self):
        self.channel.send(sensor_average(self.received), COORDINATOR_RANK, TAG_REPORT)

    def maybe_fire(self):
        if not self.frontline:
            return False
        if not should_fire(self.rng.randrange(100)):
            return False
        self.channel.send((travel_time(self.rows, self.row), self.col), COORDINATOR_RANK, TAG_FIRE)
        return True
