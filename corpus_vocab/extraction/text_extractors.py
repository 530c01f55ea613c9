"""
Text Extractors

Each extractor turns a seekable byte source into a readable byte stream of
UTF-8 text that the pipeline can scan line by line:

- PlainTextExtractor: .txt / .md, the source is already line-oriented text
- GzipExtractor: decompresses into a seekable temporary file, then
  delegates to the extractor for the inner format
- PdfExtractor: page-by-page text via pdfplumber
- DocxExtractor: paragraph text via python-docx

Every failure is raised as DecodeError with the library exception as cause.
The caller owns (and must close) the returned stream.
"""

from abc import ABC, abstractmethod
import gzip
import io
import os
import shutil
import tempfile
from typing import BinaryIO
import zlib

import docx
import pdfplumber

from corpus_vocab.errors import DecodeError
from corpus_vocab.logging_config import debug


class TextExtractor(ABC):
    """Produces a stream of decoded text bytes from a seekable byte source."""

    name: str = "text"

    @abstractmethod
    def extract(self, source: BinaryIO) -> BinaryIO:
        """
        Extract text from source.

        Args:
            source: Seekable binary stream positioned at the start of the file.

        Returns:
            Readable binary stream of UTF-8 text.

        Raises:
            DecodeError: If the content cannot be decoded.
        """


class PlainTextExtractor(TextExtractor):
    """Identity extractor: plain text files are returned as-is."""

    name = "text"

    def extract(self, source: BinaryIO) -> BinaryIO:
        return source


class GzipExtractor(TextExtractor):
    """
    Decompress a .gz wrapper and hand the result to the inner extractor.

    The inner extractors need to seek to the start of their input, which a
    forward-only decompression stream can't do, so the whole payload is
    drained into an anonymous temporary file first. The temporary file is
    closed (and removed by the OS) as soon as the inner extractor is done
    with it; when the inner extractor returns it unchanged (plain text),
    it is removed when the caller closes the returned stream.
    """

    name = "gzip"

    def __init__(self, inner: TextExtractor):
        self.inner = inner

    def extract(self, source: BinaryIO) -> BinaryIO:
        buffer = tempfile.TemporaryFile()
        try:
            try:
                with gzip.GzipFile(fileobj=source, mode='rb') as compressed:
                    shutil.copyfileobj(compressed, buffer)
            except (OSError, EOFError, zlib.error) as e:
                raise DecodeError("failed to decompress gzip stream", e) from e

            size = buffer.tell()
            buffer.seek(0)
            debug(f"[EXTRACT] Decompressed {size} bytes for inner {self.inner.name} extractor")
            stream = self.inner.extract(buffer)
        except BaseException:
            buffer.close()
            raise

        if stream is not buffer:
            buffer.close()
        return stream


class PdfExtractor(TextExtractor):
    """
    Extract text from a PDF page by page using pdfplumber.

    Pages are read in order; each page's text is followed by a newline.
    A failure on any page fails the whole document.
    """

    name = "pdf"

    def extract(self, source: BinaryIO) -> BinaryIO:
        try:
            pdf = pdfplumber.open(source)
        except Exception as e:
            raise DecodeError("failed to open PDF document", e) from e

        with pdf:
            try:
                page_count = len(pdf.pages)
            except Exception as e:
                raise DecodeError("failed to read PDF page count", e) from e

            debug(f"[EXTRACT] PDF has {page_count} pages")

            text = io.StringIO()
            for number in range(1, page_count + 1):
                try:
                    page_text = pdf.pages[number - 1].extract_text()
                except Exception as e:
                    raise DecodeError(f"failed to extract text from page {number}", e) from e
                text.write((page_text or "") + "\n")

        return io.BytesIO(text.getvalue().encode('utf-8'))


class DocxExtractor(TextExtractor):
    """
    Extract paragraph text from a DOCX package using python-docx.

    The package is written to a named temporary file, opened from disk and
    the temporary file is removed whatever the outcome.
    """

    name = "docx"

    def extract(self, source: BinaryIO) -> BinaryIO:
        fd, tmp_path = tempfile.mkstemp(suffix='.docx')
        try:
            try:
                with os.fdopen(fd, 'wb') as tmp:
                    shutil.copyfileobj(source, tmp)
            except OSError as e:
                raise DecodeError("failed to stage DOCX package", e) from e

            try:
                document = docx.Document(tmp_path)
                text = "\n".join(paragraph.text for paragraph in document.paragraphs)
            except Exception as e:
                raise DecodeError("failed to read DOCX package", e) from e
        finally:
            os.remove(tmp_path)

        return io.BytesIO(text.encode('utf-8'))
