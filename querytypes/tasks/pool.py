"""Worker pools that run per-file jobs with per-key ordering."""
from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import Executor, ProcessPoolExecutor
from typing import Any, Callable, List, Optional

from querytypes.core.workflow import WorkOutcome, outcome_from_dict
from querytypes.schemas.config import ParsedConfig, TransformConfig
from querytypes.tasks.router import JobRouter, queue_name
from querytypes.tasks.worker import init_worker, process_file

log = logging.getLogger(__name__)

ExecutorFactory = Callable[[ParsedConfig], Executor]


def process_executor(config: ParsedConfig) -> Executor:
    return ProcessPoolExecutor(max_workers=1, initializer=init_worker, initargs=(config,))


def default_pool_size(size: Optional[int] = None) -> int:
    return size or os.cpu_count() or 1


class WorkerPool:
    """
    A fixed set of single-worker executors.

    Each executor runs its jobs one at a time in submission order, and the
    router sends every job for one key to the same executor, so same-key jobs
    serialize while different keys run in parallel.
    """

    def __init__(
        self,
        config: ParsedConfig,
        size: Optional[int] = None,
        executor_factory: ExecutorFactory = process_executor,
    ):
        self.size = default_pool_size(size)
        self.router = JobRouter(self.size)
        self._executors: List[Executor] = [executor_factory(config) for _ in range(self.size)]
        self.closed = False

    def submit(self, key: str, fn: Callable[..., Any], *args: Any) -> asyncio.Future:
        """Hand a job to the key's worker now; await the returned future for its result."""
        if self.closed:
            raise RuntimeError("Worker pool is shut down")
        executor = self._executors[self.router.worker_for(key)]
        return asyncio.get_running_loop().run_in_executor(executor, fn, *args)

    def process_file(self, path: str, transform: TransformConfig) -> asyncio.Future:
        return self.submit(path, process_file, path, transform)

    def shutdown(self, cancel_pending: bool = False) -> None:
        """Wait for running jobs; with cancel_pending, queued jobs never start."""
        self.closed = True
        for executor in self._executors:
            executor.shutdown(wait=True, cancel_futures=cancel_pending)


class CeleryWorkerPool:
    """
    Dispatches jobs as Celery tasks, one queue per router slot.

    Run one worker with concurrency 1 per queue to keep same-key ordering:
    ``celery -A querytypes.tasks.celery_app worker -Q querytypes.worker.0 -c 1``
    """

    def __init__(self, config: ParsedConfig, size: Optional[int] = None):
        self.config = config
        self.size = default_pool_size(size)
        self.router = JobRouter(self.size)
        self.closed = False
        self._pending: List[Any] = []

    def process_file(self, path: str, transform: TransformConfig) -> asyncio.Future:
        from querytypes.tasks.jobs import process_file_task

        if self.closed:
            raise RuntimeError("Worker pool is shut down")
        async_result = process_file_task.apply_async(
            args=[path, transform.model_dump(by_alias=True), self.config.model_dump(by_alias=True)],
            queue=queue_name(self.router.worker_for(path)),
        )
        self._pending.append(async_result)
        return asyncio.get_running_loop().run_in_executor(None, self._wait, async_result)

    def _wait(self, async_result) -> WorkOutcome:
        try:
            return outcome_from_dict(async_result.get())
        finally:
            if async_result in self._pending:
                self._pending.remove(async_result)

    def shutdown(self, cancel_pending: bool = False) -> None:
        self.closed = True
        if cancel_pending:
            for async_result in list(self._pending):
                log.info("Revoking task %s", async_result.id)
                async_result.revoke()
