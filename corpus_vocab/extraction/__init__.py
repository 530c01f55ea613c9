"""
Extraction Package

Turns source files into scannable text:
- Format resolution from file extension (with one level of .gz wrapping)
- Text extractors for plain text/Markdown, PDF, DOCX and gzip wrappers
"""

from corpus_vocab.extraction.format_resolver import (
    FileFormat,
    create_extractor,
    resolve_extractor,
    resolve_format,
)
from corpus_vocab.extraction.text_extractors import (
    DocxExtractor,
    GzipExtractor,
    PdfExtractor,
    PlainTextExtractor,
    TextExtractor,
)

__all__ = [
    'FileFormat',
    'resolve_format',
    'resolve_extractor',
    'create_extractor',
    'TextExtractor',
    'PlainTextExtractor',
    'GzipExtractor',
    'PdfExtractor',
    'DocxExtractor',
]
