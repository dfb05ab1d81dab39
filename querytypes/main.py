import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from querytypes.core.config import settings
from querytypes.core.errors import ConfigError
from querytypes.core.logging import configure_logging
from querytypes.schemas.config import ParsedConfig, load_config
from querytypes.tasks.batch import run_batch
from querytypes.tasks.pool import CeleryWorkerPool, WorkerPool
from querytypes.tasks.watch import run_watch

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="querytypes", description="PostgreSQL type generator")
    parser.add_argument("-w", "--watch", action="store_true", help="Watch mode")
    parser.add_argument("-c", dest="config", help="Config file (required)")
    return parser


def create_pool(config: ParsedConfig):
    if settings.worker_backend == "celery":
        return CeleryWorkerPool(config, settings.pool_size)
    return WorkerPool(config, settings.pool_size)


async def main(config: ParsedConfig, is_watch_mode: bool, pool) -> int:
    if is_watch_mode:
        log.info("Watching %s", config.src_dir)
        return await run_watch(config, pool)
    return await run_batch(config, pool)


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if not args.config:
        print("Config file required. See help -h for details.\nExiting.")
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print("Failed to parse config file:", file=sys.stderr)
        print(str(e), file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    pool = create_pool(config)
    try:
        return asyncio.run(main(config, args.watch, pool))
    except KeyboardInterrupt:
        log.info("Interrupted, shutting down")
        return 130
    finally:
        pool.shutdown(cancel_pending=True)


if __name__ == "__main__":
    sys.exit(run())
