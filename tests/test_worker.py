"""Tests for the invader worker loop and neighbor exchange."""

from conftest import FixedRandom

from invaders.config import SimulationConfig
from invaders.protocol import (NO_NEIGHBOR, TAG_DISABLE, TAG_FIRE, TAG_NEIGHBOR,
                               TAG_REPORT, TAG_TERMINATE, tick_message)
from invaders.transport import Envelope, LocalFabric
from invaders.worker import Worker, sensor_average


def test_corner_average_divides_by_four():
    """A corner invader hears two neighbors, but the mean is still over four."""
    assert sensor_average({"down": 10, "right": 20}) == 7
    assert sensor_average({}) == 0
    assert sensor_average({"up": 3, "down": 3, "left": 3, "right": 3}) == 3


def test_corner_worker_exchange_and_report():
    fabric = LocalFabric(10)
    config = SimulationConfig(tick_seconds=0.2, quiet=True, seed=1)
    worker = Worker(fabric.channel(1), 3, 3, config, rng=FixedRandom(0))
    assert (worker.row, worker.col) == (0, 0)
    assert worker.neighbors == {"up": NO_NEIGHBOR, "down": 3, "left": NO_NEIGHBOR, "right": 1}

    fabric.channel(2).send(20, dest=1, tag=TAG_NEIGHBOR)
    fabric.channel(4).send(10, dest=1, tag=TAG_NEIGHBOR)
    worker.received = worker.exchange_with_neighbors(5)
    assert worker.received == {"down": 10, "right": 20}
    assert fabric.pending(2) == [Envelope(1, TAG_NEIGHBOR, 5)]
    assert fabric.pending(4) == [Envelope(1, TAG_NEIGHBOR, 5)]

    worker.report()
    assert fabric.channel(0).poll() == Envelope(1, TAG_REPORT, 7)


def test_silent_neighbor_is_abandoned_after_wait():
    fabric = LocalFabric(5)
    config = SimulationConfig(tick_seconds=0.05, quiet=True, seed=1)
    worker = Worker(fabric.channel(1), 2, 2, config, rng=FixedRandom())
    fabric.channel(2).send(8, dest=1, tag=TAG_NEIGHBOR)
    assert worker.exchange_with_neighbors(1) == {"right": 8}
    # the late message is left for a later exchange
    fabric.channel(3).send(9, dest=1, tag=TAG_NEIGHBOR)
    assert worker.exchange_with_neighbors(1) == {"down": 9}


def test_frontline_worker_reports_and_fires_on_fourth_tick(config):
    fabric = LocalFabric(2)
    coordinator = fabric.channel(0)
    worker = Worker(fabric.channel(1), 1, 1, config, rng=FixedRandom(0))
    coordinator.sync(tick_message(4))
    coordinator.sync(tick_message(5, final=True))
    coordinator.send(TAG_TERMINATE, 1, TAG_TERMINATE)
    worker.run()
    assert worker.terminated
    assert fabric.pending(0) == [
        Envelope(1, TAG_REPORT, 0),
        Envelope(1, TAG_FIRE, (2, 0)),
        Envelope(1, TAG_TERMINATE, TAG_TERMINATE),
    ]


def test_worker_stays_quiet_off_the_reporting_cadence(config):
    fabric = LocalFabric(2)
    coordinator = fabric.channel(0)
    worker = Worker(fabric.channel(1), 1, 1, config, rng=FixedRandom(0))
    for tick in (1, 2, 3):
        coordinator.sync(tick_message(tick))
    coordinator.sync(tick_message(4, final=True))
    coordinator.send(TAG_TERMINATE, 1, TAG_TERMINATE)
    worker.run()
    assert fabric.pending(0) == [Envelope(1, TAG_TERMINATE, TAG_TERMINATE)]


def test_back_row_worker_reports_but_never_fires(config):
    fabric = LocalFabric(3)
    coordinator = fabric.channel(0)
    worker = Worker(fabric.channel(1), 2, 1, config, rng=FixedRandom(0))
    assert not worker.frontline
    coordinator.sync(tick_message(8))
    coordinator.sync(tick_message(9, final=True))
    coordinator.send(TAG_TERMINATE, 1, TAG_TERMINATE)
    worker.run()
    tags = [envelope.tag for envelope in fabric.pending(0)]
    assert tags == [TAG_REPORT, TAG_TERMINATE]


def test_disabled_worker_acknowledges_and_goes_silent(config):
    fabric = LocalFabric(2)
    coordinator = fabric.channel(0)
    worker = Worker(fabric.channel(1), 1, 1, config, rng=FixedRandom(0))
    coordinator.send(1, 1, TAG_DISABLE)
    coordinator.sync(tick_message(4))
    coordinator.sync(tick_message(5, final=True))
    coordinator.send(TAG_TERMINATE, 1, TAG_TERMINATE)
    worker.run()
    assert worker.disabled
    assert fabric.pending(0) == [
        Envelope(1, TAG_DISABLE, TAG_DISABLE),
        Envelope(1, TAG_TERMINATE, TAG_TERMINATE),
    ]


def test_final_tick_acks_queued_disable_before_terminate(config):
    fabric = LocalFabric(2)
    coordinator = fabric.channel(0)
    worker = Worker(fabric.channel(1), 1, 1, config, rng=FixedRandom())
    coordinator.sync(tick_message(1, final=True))
    coordinator.send(1, 1, TAG_DISABLE)
    coordinator.send(TAG_TERMINATE, 1, TAG_TERMINATE)
    worker.run()
    assert [envelope.tag for envelope in fabric.pending(0)] == [TAG_DISABLE, TAG_TERMINATE]
    assert worker.tick == 1


def test_terminate_is_not_taken_before_the_final_tick(config):
    fabric = LocalFabric(2)
    coordinator = fabric.channel(0)
    worker = Worker(fabric.channel(1), 1, 1, config, rng=FixedRandom())
    coordinator.send(TAG_TERMINATE, 1, TAG_TERMINATE)
    worker.check_commands()
    assert not worker.terminated
    worker.check_commands(final=True)
    assert worker.terminated


def test_unknown_command_is_logged(config, caplog):
    fabric = LocalFabric(2)
    worker = Worker(fabric.channel(1), 1, 1, config, rng=FixedRandom())
    worker.handle_command(Envelope(0, 77, None))
    assert "unrecognized tag 77" in caplog.text
    assert not worker.disabled and not worker.terminated
