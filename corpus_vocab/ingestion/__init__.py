"""
Ingestion Package

Concurrent vocabulary building from a directory of documents, with
failed files quarantined for later inspection.
"""

from corpus_vocab.ingestion.line_scanner import iter_lines
from corpus_vocab.ingestion.pipeline import BuildSummary, FileTask, VocabularyBuilder
from corpus_vocab.ingestion.quarantine import ErrorQuarantine

__all__ = [
    'VocabularyBuilder',
    'BuildSummary',
    'FileTask',
    'ErrorQuarantine',
    'iter_lines',
]
