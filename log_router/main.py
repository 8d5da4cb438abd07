#!/usr/bin/env python3
"""Log Router: polls a log file and routes embedded JSON records by event type."""

import argparse
import logging
import signal
import sys
import threading

from log_router.applog import setup_logging
from log_router.config import ConfigError, RouterConfig, load_config
from log_router.pipeline import PollState, process_tick
from log_router.poller import Poller
from log_router.source import SourceLog

logger = logging.getLogger(__name__)


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="log-router",
        description="Route JSON records embedded in a log file into per-event-type files.",
    )
    parser.add_argument(
        "--config", required=True,
        help="Path to the JSON configuration file",
    )
    parser.add_argument(
        "--once", action="store_true",
        help="Run a single processing pass and exit",
    )
    return parser


class Router:
    """Holds the open source log and the state carried between passes."""

    def __init__(self, source: SourceLog, config: RouterConfig):
        self.source = source
        self.config = config
        self.state = PollState()

    def tick(self) -> None:
        self.state = process_tick(self.source, self.config, self.state)


def _fail(message: str) -> int:
    print(f"Error: {message}", file=sys.stderr)
    logger.error(message)
    return 1


def main(argv: list[str] | None = None) -> int:
    args = build_cli_parser().parse_args(argv)
    setup_logging()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        return _fail(f"loading configuration: {e}")

    try:
        interval = config.monitor_interval()
    except ConfigError as e:
        return _fail(f"invalid monitor period: {e}")

    logger.info("Started monitoring log file: %s", config.log_file_path)
    try:
        source = SourceLog(config.log_file_path)
    except OSError as e:
        return _fail(f"opening file: {e}")

    router = Router(source, config)
    try:
        if args.once:
            router.tick()
            return 0

        shutdown = threading.Event()

        def _signal_handler(sig, _frame):
            logger.info("Shutdown signal received (signal %d), stopping...", sig)
            shutdown.set()

        signal.signal(signal.SIGINT, _signal_handler)
        signal.signal(signal.SIGTERM, _signal_handler)

        logger.info("Polling %s every %.3gs", config.log_file_path, interval)
        Poller(interval, router.tick, shutdown).run()
        logger.info("Log Router stopped.")
        return 0
    finally:
        source.close()


if __name__ == "__main__":
    sys.exit(main())
