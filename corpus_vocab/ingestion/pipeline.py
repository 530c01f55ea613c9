"""
Vocabulary Ingestion Pipeline

Builds a token-frequency vocabulary from every file in a directory.

Flow for one run of VocabularyBuilder.build_vocabulary():
1. List the directory (non-recursive, subdirectories skipped). The file
   count at this point is the progress total.
2. Submit one task per file through the executor strategy. With
   ThreadPoolStrategy at most max_workers tasks run at once; submission
   blocks until a slot frees up.
3. Each task opens its file, resolves and runs the text extractor, scans
   the text line by line, tokenizes and normalizes every token into a
   Counter private to the task.
4. The task then merges its Counter into the shared vocabulary while
   holding the vocabulary lock, and bumps the progress counter.
5. Once every task has finished, the shared vocabulary is written out.

A task that fails at any step records the error in the quarantine (log
line plus a copy of the file) and stops; it never touches the shared
vocabulary and never fails the run. Only an unreadable directory or an
unwritable output file are fatal.

Usage:
    normalizer = TokenNormalizer(lowercase=True, filter_punct=True)
    with VocabularyBuilder(normalizer=normalizer) as builder:
        summary = builder.build_vocabulary(
            "corpus/", max_workers=4, output_path="vocab.txt", sort_order="freq"
        )
    print(f"{summary.succeeded}/{summary.total_files} files, {len(summary.vocabulary)} tokens")
"""

from collections import Counter
from dataclasses import dataclass, field
import os
from pathlib import Path
import threading
from typing import Callable, TextIO

from nltk.tokenize.api import TokenizerI

from corpus_vocab.config import DEBUG_MODE, DEFAULT_OUTPUT_FILE, MAX_LINE_BYTES, QUARANTINE_DIR_NAME
from corpus_vocab.errors import UnsupportedFormatError, VocabError, VocabIOError
from corpus_vocab.extraction import FileFormat, resolve_extractor, resolve_format
from corpus_vocab.ingestion.line_scanner import iter_lines
from corpus_vocab.ingestion.quarantine import ErrorQuarantine
from corpus_vocab.logging_config import Timer, debug_log, error, info, warning
from corpus_vocab.parallel import (
    ExecutorStrategy,
    ParallelTaskRunner,
    ProgressAggregator,
    ThreadPoolStrategy,
)
from corpus_vocab.vocabulary import SortOrder, TokenNormalizer, WordTokenizer, save_vocabulary


@dataclass
class FileTask:
    """
    Outcome of processing one file.

    Attributes:
        path: Source file.
        file_format: Content format, or None if the extension is unsupported.
        wrapped: True if the content was gzip-compressed.
        success: True if the file's tokens were merged into the vocabulary.
        distinct_tokens: Number of distinct tokens the file contributed.
        total_tokens: Number of token occurrences the file contributed.
        error: The error that stopped processing (if success=False).
    """
    path: Path
    file_format: FileFormat | None = None
    wrapped: bool = False
    success: bool = False
    distinct_tokens: int = 0
    total_tokens: int = 0
    error: Exception | None = None


@dataclass
class BuildSummary:
    """Result of one build_vocabulary() run."""
    vocabulary: Counter
    output_path: Path
    tasks: list[FileTask] = field(default_factory=list)

    @property
    def total_files(self) -> int:
        return len(self.tasks)

    @property
    def succeeded(self) -> int:
        return sum(1 for task in self.tasks if task.success)

    @property
    def failed(self) -> list[FileTask]:
        return [task for task in self.tasks if not task.success]


class VocabularyBuilder:
    """
    Builds vocabularies from directories of documents.

    The quarantine directory and its error log are created when the
    builder is constructed and the log is closed by close(); use the
    builder as a context manager.

    Args:
        normalizer: Case folding / punctuation filtering applied to tokens.
        tokenizer: nltk-compatible tokenizer (defaults to WordTokenizer).
        quarantine_dir: Where failed files and the error log go.
        max_line_bytes: Longest line accepted when scanning extracted text.
        progress_stream: Stream for the progress line (default stdout).
        strategy_factory: Builds the ExecutorStrategy for a run from the
                         worker limit. Defaults to ThreadPoolStrategy.

    Raises:
        VocabIOError: If the quarantine cannot be created.
    """

    def __init__(
        self,
        normalizer: TokenNormalizer | None = None,
        tokenizer: TokenizerI | None = None,
        quarantine_dir: str | Path = QUARANTINE_DIR_NAME,
        max_line_bytes: int = MAX_LINE_BYTES,
        progress_stream: TextIO | None = None,
        strategy_factory: Callable[[int | None], ExecutorStrategy] = ThreadPoolStrategy,
    ):
        self.normalizer = normalizer or TokenNormalizer()
        self.tokenizer = tokenizer or WordTokenizer()
        self.max_line_bytes = max_line_bytes
        self.strategy_factory = strategy_factory
        self.progress = ProgressAggregator(stream=progress_stream, unit="files processed")
        self.quarantine = ErrorQuarantine(quarantine_dir)

        self._vocabulary: Counter = Counter()
        self._vocabulary_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Run orchestration
    # ------------------------------------------------------------------

    def build_vocabulary(
        self,
        directory: str | Path,
        max_workers: int | None = None,
        output_path: str | Path = DEFAULT_OUTPUT_FILE,
        sort_order: "SortOrder | str | None" = SortOrder.NONE,
    ) -> BuildSummary:
        """
        Build a vocabulary from every file in directory and save it.

        Args:
            directory: Directory to read (not recursive).
            max_workers: Concurrent file limit; None or <= 0 means one per CPU.
            output_path: Where to write the vocabulary table.
            sort_order: Ordering of the written table.

        Returns:
            BuildSummary with the vocabulary and one FileTask per file.

        Raises:
            VocabIOError: If the directory cannot be listed or the output
                         file cannot be written.
            ValueError: If sort_order is unknown.
        """
        sort_order = SortOrder.parse(sort_order)
        files = self.list_files(directory)

        self._vocabulary = Counter()
        self.progress.set_total(len(files))

        with Timer(f"Building vocabulary from {directory}"):
            with self.strategy_factory(max_workers) as strategy:
                info(
                    f"[PIPELINE] Processing {len(files)} files from {directory} "
                    f"with max {strategy.max_workers} concurrent"
                )
                runner = ParallelTaskRunner(strategy=strategy)
                results = runner.run(self._run_task, [(str(path), path) for path in files])
            self.progress.finish()

        tasks = []
        for result in results:
            if result.success:
                tasks.append(result.result)
            else:
                # _run_task contains per-file errors; this is a bug in the task itself
                error(f"[PIPELINE] Task for {result.task_id} crashed: {result.error}")
                tasks.append(FileTask(path=Path(result.task_id), error=result.error))

        summary = BuildSummary(
            vocabulary=self._vocabulary,
            output_path=Path(output_path),
            tasks=tasks,
        )
        info(
            f"[PIPELINE] {summary.succeeded}/{summary.total_files} files merged, "
            f"{len(summary.failed)} quarantined, {len(summary.vocabulary)} distinct tokens"
        )

        save_vocabulary(self._vocabulary, output_path, sort_order)
        return summary

    def list_files(self, directory: str | Path) -> list[Path]:
        """
        List the files directly inside directory, skipping subdirectories.

        Raises:
            VocabIOError: If the directory cannot be read.
        """
        try:
            with os.scandir(directory) as entries:
                files = [Path(entry.path) for entry in entries if not entry.is_dir()]
        except OSError as e:
            raise VocabIOError(f"error reading directory {directory}: {e}") from e
        return sorted(files)

    # ------------------------------------------------------------------
    # Per-file work
    # ------------------------------------------------------------------

    def _run_task(self, path: Path) -> FileTask:
        """One unit of work: process a file, merge it, report progress."""
        task = FileTask(path=path)
        try:
            task.file_format, task.wrapped = resolve_format(path)
        except UnsupportedFormatError:
            pass  # reported by process_file below

        try:
            counts = self.process_file(path)
        except VocabError as e:
            task.error = e
        except Exception as e:
            # Third-party decoders can fail in ways the extractors don't anticipate
            error(f"[PIPELINE] Unexpected error processing {path}: {e}", exc_info=True)
            task.error = e

        if task.error is not None:
            warning(f"[PIPELINE] Skipping {path}: {task.error}")
            self.quarantine.record(path, task.error)
            return task

        self._merge(counts)
        task.success = True
        task.distinct_tokens = len(counts)
        task.total_tokens = sum(counts.values())
        self.progress.complete(str(path))
        return task

    def process_file(self, path: str | Path) -> Counter:
        """
        Extract, scan and tokenize one file into a private Counter.

        Args:
            path: File to read.

        Returns:
            Counter of normalized tokens in the file.

        Raises:
            VocabIOError: If the file cannot be opened.
            UnsupportedFormatError: If the file's format is not supported.
            DecodeError: If text extraction fails.
            ScanError: If a line is too long or the text cannot be read.
        """
        path = Path(path)
        try:
            source = open(path, 'rb')
        except OSError as e:
            raise VocabIOError(f"error opening file {path}: {e}") from e

        with source:
            extractor = resolve_extractor(path)
            with Timer(f"Extracting {path.name} ({extractor.name})", auto_log=DEBUG_MODE):
                stream = extractor.extract(source)
            try:
                counts = self._count_tokens(stream)
            finally:
                if stream is not source:
                    stream.close()

        debug_log(f"[PIPELINE] {path.name}: {len(counts)} distinct tokens")
        return counts

    def _count_tokens(self, stream) -> Counter:
        counts: Counter = Counter()
        normalize = self.normalizer.normalize
        for line in iter_lines(stream, self.max_line_bytes):
            keys = (normalize(token) for token in self.tokenizer.tokenize(line))
            counts.update(key for key in keys if key is not None)
        return counts

    def _merge(self, counts: Counter) -> None:
        """Add a task's counts to the shared vocabulary."""
        with self._vocabulary_lock:
            self._vocabulary.update(counts)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the quarantine error log."""
        self.quarantine.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
