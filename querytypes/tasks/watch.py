"""Continuous generation driven by file-system events."""
from __future__ import annotations

import asyncio
import fnmatch
import logging
import os
from pathlib import PurePosixPath
from typing import List, Sequence

from watchfiles import Change, DefaultFilter, awatch

from querytypes.core.workflow import TransformJob
from querytypes.schemas.config import ParsedConfig, TransformConfig
from querytypes.tasks.batch import discover_files
from querytypes.tasks.processor import FileProcessor, Pool

log = logging.getLogger(__name__)


def _match_parts(parts: Sequence[str], patterns: Sequence[str]) -> bool:
    if not patterns:
        return not parts
    head, rest = patterns[0], patterns[1:]
    if head == "**":
        # zero or more directories, none of them hidden
        for consumed in range(len(parts) + 1):
            if _match_parts(parts[consumed:], rest):
                return True
            if consumed < len(parts) and parts[consumed].startswith("."):
                return False
        return False
    if not parts:
        return False
    name = parts[0]
    if name.startswith(".") and not head.startswith("."):
        return False
    return fnmatch.fnmatch(name, head) and _match_parts(parts[1:], rest)


def matches_include(relative_path: str, include: str) -> bool:
    """
    Whether a path below the source dir matches ``**/<include>``.

    Matches one path component at a time, like ``glob(recursive=True)``:
    ``*`` never crosses a ``/`` and hidden names need an explicit leading dot.
    """
    parts = PurePosixPath(relative_path.replace(os.sep, "/")).parts
    patterns: List[str] = ["**"]
    for component in include.split("/"):
        if component and not (component == "**" and patterns[-1] == "**"):
            patterns.append(component)
    return _match_parts(parts, patterns)


class TransformFilter(DefaultFilter):
    def __init__(self, src_dir: str, transforms: List[TransformConfig]):
        super().__init__()
        self.src_dir = os.path.abspath(src_dir)
        self.transforms = transforms

    def matching(self, path: str) -> List[int]:
        relative = os.path.relpath(os.path.abspath(path), self.src_dir)
        if relative.startswith(os.pardir):
            return []
        return [i for i, t in enumerate(self.transforms) if matches_include(relative, t.include)]

    def __call__(self, change: Change, path: str) -> bool:
        if change not in (Change.added, Change.modified):
            return False
        return super().__call__(change, path) and bool(self.matching(path))


class WatchController:
    """
    Queues a job for every added or changed file that a transform includes.

    Files already on disk are queued once at start-up. Runs until stop() is
    called or failOnError stops the processor.
    """

    def __init__(self, config: ParsedConfig, processor: FileProcessor):
        self.config = config
        self.processor = processor
        self.filter = TransformFilter(config.src_dir, list(config.transforms))
        self.stop_event = asyncio.Event()

    def stop(self) -> None:
        self.stop_event.set()

    def enqueue(self, path: str) -> None:
        for index in self.filter.matching(path):
            self.processor.push(TransformJob((path,), self.config.transforms[index], index))

    def queue_existing(self) -> None:
        for index, transform in enumerate(self.config.transforms):
            files = discover_files(self.config.src_dir, transform.include)
            self.processor.push(TransformJob(tuple(files), transform, index))

    async def _stop_on_abort(self) -> None:
        await self.processor.aborted.wait()
        self.stop_event.set()

    async def run(self) -> int:
        self.queue_existing()
        abort_watcher = asyncio.ensure_future(self._stop_on_abort())
        try:
            async for changes in awatch(self.config.src_dir, watch_filter=self.filter, stop_event=self.stop_event):
                for change, path in sorted(changes, key=lambda c: c[1]):
                    log.debug("File %s", change.name, extra={"file": path})
                    self.enqueue(path)
        finally:
            abort_watcher.cancel()
        await self.processor.settle()
        return self.processor.exit_code


async def run_watch(config: ParsedConfig, pool: Pool) -> int:
    return await WatchController(config, FileProcessor(config, pool)).run()
