"""Deterministic key to worker assignment."""
import hashlib


def queue_name(worker_index: int) -> str:
    return f"querytypes.worker.{worker_index}"


class JobRouter:
    """
    Routes every job with the same key to the same worker.

    worker = sha256(key) mod pool_size. This gives per-key locality and
    ordering, not load balance: a few hot keys can land on one worker.
    """

    def __init__(self, pool_size: int):
        if pool_size < 1:
            raise ValueError("pool_size must be >= 1")
        self.pool_size = pool_size

    def worker_for(self, key: str) -> int:
        digest = hashlib.sha256(key.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "big") % self.pool_size
