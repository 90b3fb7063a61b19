import argparse
import logging
import sys

from invaders.config import SimulationConfig
from invaders.protocol import COORDINATOR_RANK
from invaders.runner import run_local, run_process
from invaders.topology import ConfigurationError
from invaders.transport import mpi_channel

DEFAULT_LOCAL_WORKERS = 9


def build_parser():
    parser = argparse.ArgumentParser(
        prog="invaders",
        description="Space invaders battle: one coordinator process, one process per invader.",
        epilog="Usage under MPI: mpiexec -n <P> python main.py [rows cols]",
    )
    parser.add_argument("shape", nargs="*", type=int, metavar="N",
                        help="grid rows and columns; omit both for a square grid")
    parser.add_argument("--backend", choices=["mpi", "local"], default="mpi",
                        help="mpi: one MPI rank per process; local: threads in this interpreter")
    parser.add_argument("--workers", type=int, default=DEFAULT_LOCAL_WORKERS,
                        help="number of invaders for the local backend")
    parser.add_argument("--tick-seconds", type=float, default=None)
    parser.add_argument("--shutdown-timeout", type=float, default=None,
                        help="give up waiting for terminate acknowledgements after this long")
    parser.add_argument("--max-ticks", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None,
                        help="base random seed; each process adds its rank")
    parser.add_argument("--quiet", action="store_true")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def config_from_args(args):
    if len(args.shape) not in (0, 2):
        raise ConfigurationError("Give both grid rows and columns, or neither.")
    rows, cols = args.shape if args.shape else (None, None)
    overrides = {}
    if args.tick_seconds is not None:
        overrides["tick_seconds"] = args.tick_seconds
    if args.shutdown_timeout is not None:
        overrides["shutdown_timeout"] = args.shutdown_timeout
    try:
        return SimulationConfig(rows=rows, cols=cols, max_ticks=args.max_ticks,
                                seed=args.seed, quiet=args.quiet, **overrides)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    channel = mpi_channel() if args.backend == "mpi" else None
    try:
        config = config_from_args(args)
        if channel is None:
            result = run_local(config, args.workers)
        else:
            result = run_process(channel, config)
    except ConfigurationError as exc:
        if channel is None or channel.rank == COORDINATOR_RANK:
            print(f"ERROR: {exc}")
        sys.exit(1)
    if result is not None and not result.clean_shutdown:
        sys.exit(2)
    return 0


if __name__ == "__main__":
    main()
