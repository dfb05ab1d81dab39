"""Fans transform jobs out to the worker pool and applies the failure policy."""
from __future__ import annotations

import asyncio
import logging
import os
import traceback
from typing import List, Optional, Protocol

from querytypes.core.workflow import (
    FailureKind,
    JobTracker,
    TransformJob,
    WorkFailure,
    WorkOutcome,
    WorkResult,
)
from querytypes.schemas.config import ParsedConfig, TransformConfig

log = logging.getLogger(__name__)


class Pool(Protocol):
    def process_file(self, path: str, transform: TransformConfig) -> asyncio.Future:
        ...

    def shutdown(self, cancel_pending: bool = False) -> None:
        ...


class FileProcessor:
    """
    Submits every file of a job without waiting for any of them.

    Failures are logged and collected. With failOnError the first failure
    shuts the pool down (running jobs finish, queued ones are dropped) and
    sets ``aborted``.
    """

    def __init__(self, config: ParsedConfig, pool: Pool, tracker: Optional[JobTracker] = None):
        self.config = config
        self.pool = pool
        self.tracker = tracker or JobTracker()
        self.work_queue: List[asyncio.Future] = []
        self.results: List[WorkResult] = []
        self.failures: List[WorkFailure] = []
        self.aborted = asyncio.Event()

    @property
    def exit_code(self) -> int:
        return 1 if self.aborted.is_set() else 0

    def push(self, job: TransformJob) -> None:
        for file_name in job.files:
            path = os.path.abspath(file_name)
            if self.aborted.is_set():
                log.debug("Ignoring file after shutdown", extra={"transform": job.transform.include, "file": path})
                continue
            self.tracker.queued(job.transform_index, path)
            future = self.pool.process_file(path, job.transform)
            self.tracker.processing(job.transform_index, path)
            self.work_queue.append(asyncio.ensure_future(self._settle(job, path, future)))

    async def _settle(self, job: TransformJob, path: str, future: asyncio.Future) -> Optional[WorkOutcome]:
        extra = {"transform": job.transform.include, "file": path}
        try:
            outcome = await future
        except asyncio.CancelledError:
            if not self.aborted.is_set():
                raise
            log.debug("Job cancelled by shutdown", extra=extra)
            return None
        except Exception as e:
            # the pool itself failed (e.g. a worker process died)
            outcome = WorkFailure(path, FailureKind.INTERNAL, f"{type(e).__name__}: {e}", traceback.format_exc())
        finally:
            self.tracker.settled(job.transform_index, path)

        if isinstance(outcome, WorkResult):
            self.results.append(outcome)
            if outcome.written:
                log.info(
                    "Saved %d query types from %s to %s",
                    outcome.type_declaration_count, os.path.relpath(path), outcome.relative_path,
                    extra=extra,
                )
            else:
                log.debug("Output unchanged: %s", outcome.relative_path, extra=extra)
            return outcome

        self.failures.append(outcome)
        message = outcome.message
        if outcome.detail:
            message = f"{message}\n{outcome.detail}"
        log.error("Error processing file %s: %s", os.path.relpath(path), message, extra=extra)
        if self.config.fail_on_error and not self.aborted.is_set():
            await self.abort()
        return outcome

    async def abort(self) -> None:
        self.aborted.set()
        log.error("Stopping: a file failed and failOnError is set")
        await asyncio.to_thread(self.pool.shutdown, True)

    async def settle(self) -> None:
        """Wait until every pushed job, including ones pushed meanwhile, has settled."""
        while self.work_queue:
            pending, self.work_queue = self.work_queue, []
            await asyncio.gather(*pending)
