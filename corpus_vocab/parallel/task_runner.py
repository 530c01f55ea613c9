"""
Task runner for per-file vocabulary work.

Submits one task per item through an ExecutorStrategy and waits for all
of them (the join barrier before the vocabulary is written). A task that
raises is recorded as a failed TaskResult; it never aborts the others.

Usage:
    runner = ParallelTaskRunner(strategy=ThreadPoolStrategy(max_workers=4))

    items = [("a.txt", "/corpus/a.txt"), ("b.pdf", "/corpus/b.pdf")]
    results = runner.run(process_file, items)

    for result in results:
        if not result.success:
            print(f"{result.task_id} failed: {result.error}")
"""

from concurrent.futures import as_completed
from dataclasses import dataclass
from typing import Any, Callable

from corpus_vocab.parallel.executor_strategy import ExecutorStrategy


@dataclass
class TaskResult:
    """
    Result of one task.

    Attributes:
        task_id: Identifier for the task (the file path for ingestion).
        success: True if the task function returned without raising.
        result: Return value from the task function (if success=True).
        error: Exception raised by the task (if success=False).
    """
    task_id: str
    success: bool
    result: Any = None
    error: Exception | None = None


class ParallelTaskRunner:
    """
    Runs tasks using a configurable ExecutorStrategy.

    - Submission goes through strategy.submit(), which may block on the
      strategy's admission gate.
    - run() returns only after every submitted task has finished.
    - Results come back in completion order.

    Args:
        strategy: ExecutorStrategy implementation to use for execution.
    """

    def __init__(self, strategy: ExecutorStrategy):
        self.strategy = strategy

    def run(
        self,
        fn: Callable[[Any], Any],
        items: list[tuple[str, Any]]
    ) -> list[TaskResult]:
        """
        Run fn over every payload and wait for all of them.

        Args:
            fn: Function taking a single payload argument.
            items: List of (task_id, payload) tuples.

        Returns:
            List of TaskResult objects in completion order.
        """
        if not items:
            return []

        futures = {}
        for task_id, payload in items:
            future = self.strategy.submit(fn, payload)
            futures[future] = task_id

        results = []
        for future in as_completed(futures):
            task_id = futures[future]
            try:
                result = future.result()
            except Exception as e:
                results.append(TaskResult(task_id=task_id, success=False, error=e))
                continue

            results.append(TaskResult(task_id=task_id, success=True, result=result))

        return results
