"""
Error Quarantine

Files that fail at any stage of ingestion are recorded twice:

1. One line in the append-only error log inside the quarantine directory:
       [2026-10-18T14:32:01+02:00] File: corpus/broken.pdf, Error: failed to open PDF document: ...
2. A byte-for-byte copy of the file in the quarantine directory, under
   its base name. Files with the same base name from different source
   directories overwrite each other's copy.

The log is a logging.FileHandler opened when the quarantine is created and
closed by close(). Each record is a single emit under the handler's lock,
so concurrent workers never interleave partial lines. Problems writing the
log or copying the file are reported through the application logger and
otherwise ignored; they never fail the run.
"""

from datetime import datetime
import logging
import os
from pathlib import Path
import shutil
import threading

from corpus_vocab.config import ERROR_LOG_NAME, QUARANTINE_DIR_NAME
from corpus_vocab.errors import VocabIOError
from corpus_vocab.logging_config import debug_log, error


class _ErrorRecordFormatter(logging.Formatter):
    """Formats records as "[<RFC3339 time>] File: <path>, Error: <message>"."""

    def __init__(self):
        super().__init__("[%(asctime)s] File: %(file_path)s, Error: %(message)s")

    def formatTime(self, record, datefmt=None):
        created = datetime.fromtimestamp(record.created).astimezone()
        return created.isoformat(timespec='seconds')


class ErrorQuarantine:
    """
    Error log plus copies of the files that failed.

    Args:
        directory: Quarantine directory; created if absent.

    Raises:
        VocabIOError: If the directory or the log file cannot be created.

    Example:
        with ErrorQuarantine("vocab_errors") as quarantine:
            quarantine.record("corpus/broken.gz", DecodeError("bad gzip"))
    """

    def __init__(self, directory: str | Path = QUARANTINE_DIR_NAME):
        self.directory = Path(directory)
        self.log_path = self.directory / ERROR_LOG_NAME
        self._count = 0
        self._count_lock = threading.Lock()

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._handler = logging.FileHandler(self.log_path, mode='a', encoding='utf-8')
        except OSError as e:
            raise VocabIOError(f"failed to create quarantine in {self.directory}: {e}") from e

        self._handler.setFormatter(_ErrorRecordFormatter())
        debug_log(f"[QUARANTINE] Logging failures to {self.log_path}")

    @property
    def failure_count(self) -> int:
        """Number of failures recorded by this instance."""
        with self._count_lock:
            return self._count

    def record(self, path: str | os.PathLike, exc: BaseException) -> None:
        """
        Log a failure and copy the offending file into quarantine.

        Thread-safe: Can be called from multiple worker threads.

        Args:
            path: The source file that failed.
            exc: The error that made it fail.
        """
        with self._count_lock:
            self._count += 1

        # Keep each record on one line
        message = " ".join(str(exc).split()) or type(exc).__name__
        self._write_log(os.fspath(path), message)
        self._copy_file(Path(path))

    def _write_log(self, path: str, message: str) -> None:
        record = logging.makeLogRecord({
            'name': 'CorpusVocab.quarantine',
            'levelno': logging.ERROR,
            'levelname': 'ERROR',
            'msg': message,
            'file_path': path,
        })
        # Handler.handle() takes the handler lock; emit errors go to handleError()
        self._handler.handle(record)

    def _copy_file(self, path: Path) -> None:
        destination = self.directory / path.name
        try:
            shutil.copyfile(path, destination)
        except OSError as e:
            error(f"[QUARANTINE] Failed to copy {path} to {destination}: {e}")
            return
        debug_log(f"[QUARANTINE] Copied {path} to {destination}")

    def close(self) -> None:
        """Close the error log."""
        self._handler.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
