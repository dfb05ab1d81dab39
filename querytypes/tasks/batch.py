"""One-shot generation over every file matching the configured transforms."""
from __future__ import annotations

import glob
import logging
import os
from typing import List

from querytypes.core.workflow import TransformJob
from querytypes.schemas.config import ParsedConfig
from querytypes.tasks.processor import FileProcessor, Pool

log = logging.getLogger(__name__)


def discover_files(src_dir: str, include: str) -> List[str]:
    """Files matching ``<src_dir>/**/<include>``, sorted."""
    pattern = os.path.join(src_dir, "**", include)
    return sorted(p for p in glob.glob(pattern, recursive=True) if os.path.isfile(p))


async def run_batch(config: ParsedConfig, pool: Pool) -> int:
    """
    Submit all matching files as one job set and wait for all of them.

    Returns the process exit status: 1 only when failOnError stopped the run.
    """
    processor = FileProcessor(config, pool)
    for index, transform in enumerate(config.transforms):
        files = discover_files(config.src_dir, transform.include)
        log.debug("Found query files %s", files, extra={"transform": transform.include})
        processor.push(TransformJob(tuple(files), transform, index))
    await processor.settle()
    log.info(
        "Processed %d files, %d failed",
        len(processor.results) + len(processor.failures), len(processor.failures),
    )
    return processor.exit_code
