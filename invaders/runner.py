import logging
import threading

from invaders.coordinator import Coordinator
from invaders.protocol import COORDINATOR_RANK
from invaders.topology import grid_shape
from invaders.transport import LocalFabric
from invaders.worker import Worker

logger = logging.getLogger(__name__)


def run_process(channel, config, rng=None):
    """Play this rank's part; only the coordinator returns a result."""
    rows, cols = grid_shape(channel.size - 1, config.rows, config.cols)
    if channel.rank == COORDINATOR_RANK:
        return Coordinator(channel, rows, cols, config, rng).run()
    Worker(channel, rows, cols, config, rng).run()
    return None


def run_local(config, workers, coordinator_rng=None, worker_rng=None):
    """Run the whole match in this interpreter, one thread per invader.

    ``worker_rng`` is called with each worker's rank and returns the
    random source that worker should use.
    """
    rows, cols = grid_shape(workers, config.rows, config.cols)
    fabric = LocalFabric(workers + 1)
    threads = []
    for channel in fabric.channels()[1:]:
        rng = worker_rng(channel.rank) if worker_rng is not None else None
        worker = Worker(channel, rows, cols, config, rng)
        thread = threading.Thread(target=worker.run, name=f"invader-{worker.worker_id}",
                                  daemon=True)
        thread.start()
        threads.append(thread)
    logger.info("Started %d invader threads on a %dx%d grid", workers, rows, cols)
    result = Coordinator(fabric.channel(COORDINATOR_RANK), rows, cols, config,
                         coordinator_rng).run()
    if result.clean_shutdown:
        for thread in threads:
            thread.join()
    return result
