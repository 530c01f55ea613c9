"""
Parallel processing utilities for corpus-vocab.

Strategy-based bounded execution with progress reporting. The ingestion
pipeline runs one task per file; how many run at once is decided by the
strategy it is given.

Components:
    ExecutorStrategy - Abstract base class defining the execution interface
    ThreadPoolStrategy - Thread pool behind a counting admission gate
    SequentialStrategy - Sequential execution (testing/debugging)
    ParallelTaskRunner - Submits tasks and waits for all of them
    TaskResult - Dataclass for task execution results
    ProgressAggregator - Thread-safe completion counter with a progress line

Usage Example:
    from corpus_vocab.parallel import (
        ThreadPoolStrategy,
        ParallelTaskRunner,
        ProgressAggregator
    )

    aggregator = ProgressAggregator()
    aggregator.set_total(len(paths))

    def process(path):
        counts = builder.process_file(path)
        aggregator.complete(path)
        return counts

    with ThreadPoolStrategy(max_workers=4) as strategy:
        results = ParallelTaskRunner(strategy).run(process, [(p, p) for p in paths])
    aggregator.finish()
"""

from .executor_strategy import (
    ExecutorStrategy,
    SequentialStrategy,
    ThreadPoolStrategy,
    resolve_worker_count,
)
from .progress_aggregator import ProgressAggregator, ProgressState
from .task_runner import ParallelTaskRunner, TaskResult

__all__ = [
    # Strategies
    'ExecutorStrategy',
    'ThreadPoolStrategy',
    'SequentialStrategy',
    'resolve_worker_count',
    # Task runner
    'ParallelTaskRunner',
    'TaskResult',
    # Progress tracking
    'ProgressAggregator',
    'ProgressState',
]
