"""
Parallel execution strategies for corpus-vocab.

Separates "what to run per file" from "how many files run at once".
The ingestion pipeline receives a strategy, so tests can swap the thread
pool for SequentialStrategy and get deterministic, single-threaded runs.

Usage:
    # Production (bounded parallel execution)
    strategy = ThreadPoolStrategy(max_workers=4)

    # Testing (deterministic, sequential execution)
    strategy = SequentialStrategy()

    # Both work identically:
    with strategy:
        futures = [strategy.submit(process_file, path) for path in paths]
        results = [future.result() for future in futures]
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, TypeVar
import threading

from corpus_vocab.config import PARALLEL_MAX_WORKERS

T = TypeVar('T')
R = TypeVar('R')


def resolve_worker_count(max_workers: int | None) -> int:
    """
    Normalize a requested worker count.

    Args:
        max_workers: Requested limit. None or a non-positive value means
                    "use host parallelism".

    Returns:
        A positive worker count.
    """
    if max_workers is None or max_workers <= 0:
        return PARALLEL_MAX_WORKERS
    return max_workers


class ExecutorStrategy(ABC):
    """
    Abstract strategy for parallel execution.

    Attributes:
        max_workers: Number of concurrent workers (1 for sequential).
    """

    max_workers: int

    @abstractmethod
    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """
        Submit a single task for execution.

        Args:
            fn: Function to execute.
            item: Argument to pass to the function.

        Returns:
            Future object that will contain the result.
        """

    @abstractmethod
    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the executor and release resources.

        Args:
            wait: If True, wait for running tasks to complete.
        """

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)
        return False


class ThreadPoolStrategy(ExecutorStrategy):
    """
    Thread-based execution with a counting admission gate.

    Work is I/O and decoder bound (file reads, zlib, pdfplumber), so
    threads give real overlap despite the GIL.

    submit() blocks while max_workers tasks are in flight, so at most
    max_workers files are open and decoding at any time and the caller
    never queues more work than it can run. The gate is released from the
    future's done-callback.

    Args:
        max_workers: Maximum concurrent tasks. None or non-positive
                    defaults to the host's CPU count.

    Example:
        with ThreadPoolStrategy(max_workers=2) as strategy:
            futures = [strategy.submit(process_file, p) for p in paths]
    """

    def __init__(self, max_workers: int | None = None):
        max_workers = resolve_worker_count(max_workers)

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="vocab-worker",
        )
        self._gate = threading.BoundedSemaphore(max_workers)
        self.max_workers = max_workers

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        """Wait for a free slot, then submit a single task to the pool."""
        self._gate.acquire()
        try:
            future = self._executor.submit(fn, item)
        except BaseException:
            self._gate.release()
            raise
        future.add_done_callback(lambda _: self._gate.release())
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)


class SequentialStrategy(ExecutorStrategy):
    """
    Sequential execution strategy for testing and debugging.

    The function runs immediately inside submit() and the outcome is
    wrapped in an already-completed Future, so callers cannot tell the
    difference from ThreadPoolStrategy apart from ordering.
    """

    def __init__(self):
        self.max_workers = 1

    def submit(self, fn: Callable[[T], R], item: T) -> Future:
        future: Future = Future()
        try:
            result = fn(item)
            future.set_result(result)
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True) -> None:
        """No-op for sequential strategy (no resources to release)."""
