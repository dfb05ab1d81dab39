"""Tests for the file processor's failure policy."""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from querytypes.core.workflow import FailureKind, FileState, JobTracker, TransformJob, WorkFailure, WorkResult
from querytypes.tasks.pool import WorkerPool
from querytypes.tasks.processor import FileProcessor


def fake_process_file(path, transform):
    if "bad" in path:
        return WorkFailure(path, FailureKind.UPSTREAM_RESOLUTION, "Query 'X' is invalid: boom")
    return WorkResult(path, path + ".ts", 2, True)


def exploding_process_file(path, transform):
    raise RuntimeError("worker died")


class FakeWorkerPool(WorkerPool):
    """Thread-backed pool that runs a stand-in for process_file."""

    def __init__(self, config, job=fake_process_file, size=2):
        super().__init__(config, size=size, executor_factory=lambda c: ThreadPoolExecutor(max_workers=1))
        self.job = job
        self.shutdown_calls = []

    def process_file(self, path, transform):
        return self.submit(path, self.job, path, transform)

    def shutdown(self, cancel_pending=False):
        self.shutdown_calls.append(cancel_pending)
        super().shutdown(cancel_pending)


def _run(config, files, job=fake_process_file):
    async def scenario():
        pool = FakeWorkerPool(config, job=job)
        processor = FileProcessor(config, pool)
        processor.push(TransformJob(tuple(files), config.transforms[0]))
        await processor.settle()
        return processor, pool

    return asyncio.run(scenario())


def test_failures_are_logged_and_siblings_complete(make_config, caplog):
    config = make_config(failOnError=False)
    files = [f"/src/file_{i}.json" for i in range(5)] + ["/src/bad.json"]
    with caplog.at_level(logging.INFO):
        processor, pool = _run(config, files)

    assert processor.exit_code == 0
    assert len(processor.results) == 5
    assert [f.path for f in processor.failures] == ["/src/bad.json"]
    assert pool.shutdown_calls == []
    assert "Error processing file" in caplog.text
    assert "Saved 2 query types from" in caplog.text


def test_fail_fast_stops_the_pool(make_config):
    config = make_config(failOnError=True)
    files = ["/src/bad.json"] + [f"/src/file_{i}.json" for i in range(20)]
    processor, pool = _run(config, files)

    assert processor.exit_code == 1
    assert processor.aborted.is_set()
    assert len(processor.failures) == 1
    assert pool.shutdown_calls == [True]
    assert pool.closed


def test_pool_errors_become_internal_failures(make_config):
    processor, _ = _run(make_config(), ["/src/a.json"], job=exploding_process_file)
    assert processor.failures[0].kind is FailureKind.INTERNAL
    assert "worker died" in processor.failures[0].message
    assert processor.exit_code == 0


def test_push_after_abort_is_ignored(make_config):
    config = make_config(failOnError=True)

    async def scenario():
        pool = FakeWorkerPool(config)
        processor = FileProcessor(config, pool)
        processor.push(TransformJob(("/src/bad.json",), config.transforms[0]))
        await processor.settle()
        processor.push(TransformJob(("/src/late.json",), config.transforms[0]))
        await processor.settle()
        return processor

    processor = asyncio.run(scenario())
    assert processor.results == []
    assert processor.tracker.state(0, "/src/late.json") is FileState.IDLE


def test_tracker_lifecycle():
    tracker = JobTracker()
    assert tracker.state(0, "a") is FileState.IDLE
    tracker.queued(0, "a")
    assert tracker.state(0, "a") is FileState.QUEUED
    tracker.processing(0, "a")
    tracker.queued(0, "a")
    # a new event for a path mid-processing waits behind the running job
    assert tracker.state(0, "a") is FileState.PROCESSING
    tracker.settled(0, "a")
    assert tracker.state(0, "a") is FileState.PROCESSING
    tracker.settled(0, "a")
    assert tracker.state(0, "a") is FileState.IDLE
    assert tracker.state(1, "a") is FileState.IDLE
