"""Exceptions raised while building and post-processing vocabularies.

Per-file errors (UnsupportedFormatError, DecodeError, ScanError and
VocabIOError raised for a source file) are contained by the ingestion
pipeline and end up in quarantine. VocabIOError raised for the input
directory or for an output file is fatal to the run.
"""


class VocabError(Exception):
    """Base exception for corpus-vocab failures."""


class UnsupportedFormatError(VocabError):
    """Raised when a file extension (outer or gzip-inner) is not recognized."""

    def __init__(self, extension: str, path: str | None = None):
        self.extension = extension
        self.path = path
        shown = extension or "<none>"
        super().__init__(f"unsupported file format: {shown}")


class DecodeError(VocabError):
    """Raised when decompression, parsing or text extraction fails for a file.

    The underlying library exception is kept on ``cause`` and is also chained
    as ``__cause__`` when raised with ``raise ... from``.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ScanError(VocabError):
    """Raised when a decoded stream cannot be split into lines."""


class VocabIOError(VocabError):
    """Raised when a file or directory cannot be opened, listed, read or written."""
