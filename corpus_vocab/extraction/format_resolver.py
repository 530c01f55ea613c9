"""
Format Resolver

Maps a file name to the extractor that can read it. Resolution looks at
the extension only (case-insensitive) and never opens the file.

A .gz extension is a wrapper: the extension underneath it picks the inner
extractor, one level deep. "notes.md.gz" is Markdown inside gzip;
"notes.md.gz.gz" is unsupported because .gz is not an inner format.

Usage:
    extractor = resolve_extractor("corpus/report.pdf.gz")
    # GzipExtractor(inner=PdfExtractor())
"""

from enum import Enum
import os

from corpus_vocab.config import (
    DOCX_EXTENSIONS,
    GZIP_EXTENSION,
    PDF_EXTENSIONS,
    TEXT_EXTENSIONS,
)
from corpus_vocab.errors import UnsupportedFormatError
from corpus_vocab.extraction.text_extractors import (
    DocxExtractor,
    GzipExtractor,
    PdfExtractor,
    PlainTextExtractor,
    TextExtractor,
)


class FileFormat(Enum):
    """Formats the pipeline can extract text from."""
    TEXT = "text"
    PDF = "pdf"
    DOCX = "docx"


FORMAT_BY_EXTENSION: dict[str, FileFormat] = {
    **{ext: FileFormat.TEXT for ext in TEXT_EXTENSIONS},
    **{ext: FileFormat.PDF for ext in PDF_EXTENSIONS},
    **{ext: FileFormat.DOCX for ext in DOCX_EXTENSIONS},
}

EXTRACTOR_BY_FORMAT: dict[FileFormat, type[TextExtractor]] = {
    FileFormat.TEXT: PlainTextExtractor,
    FileFormat.PDF: PdfExtractor,
    FileFormat.DOCX: DocxExtractor,
}


def _split_extension(name: str) -> tuple[str, str]:
    base, ext = os.path.splitext(name)
    return base, ext.lower()


def resolve_format(path: str | os.PathLike) -> tuple[FileFormat, bool]:
    """
    Determine the content format of a file from its name.

    Args:
        path: File path (not opened).

    Returns:
        (format, wrapped) where wrapped is True for gzip-compressed files and
        format is the format of the compressed content.

    Raises:
        UnsupportedFormatError: If the extension (or the inner extension of
                               a .gz file) is not recognized.
    """
    base, ext = _split_extension(os.path.basename(os.fspath(path)))

    wrapped = ext == GZIP_EXTENSION
    if wrapped:
        _, ext = _split_extension(base)

    file_format = FORMAT_BY_EXTENSION.get(ext)
    if file_format is None:
        raise UnsupportedFormatError(ext, path=os.fspath(path))
    return file_format, wrapped


def create_extractor(file_format: FileFormat, wrapped: bool = False) -> TextExtractor:
    """Build the extractor for a resolved format, wrapping it for gzip."""
    extractor = EXTRACTOR_BY_FORMAT[file_format]()
    if wrapped:
        return GzipExtractor(extractor)
    return extractor


def resolve_extractor(path: str | os.PathLike) -> TextExtractor:
    """
    Map a file path to a ready-to-use extractor.

    Raises:
        UnsupportedFormatError: If the file's format is not supported.
    """
    file_format, wrapped = resolve_format(path)
    return create_extractor(file_format, wrapped)
