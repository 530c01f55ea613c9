"""
Unit tests for format resolution and text extractors.

Tests cover:
- Extension to extractor mapping, including one level of .gz wrapping
- Plain text, gzip, DOCX (real files) and PDF (pdfplumber mocked) extraction
- DecodeError on corrupt input and cleanup of temporary files
"""

import gzip
import io
import sys
import tempfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import docx
import pytest

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from corpus_vocab.errors import DecodeError, UnsupportedFormatError
from corpus_vocab.extraction import (
    DocxExtractor,
    FileFormat,
    GzipExtractor,
    PdfExtractor,
    PlainTextExtractor,
    resolve_extractor,
    resolve_format,
)


def _make_docx(path: Path, paragraphs: list[str]) -> Path:
    document = docx.Document()
    for text in paragraphs:
        document.add_paragraph(text)
    document.save(str(path))
    return path


class TestFormatResolver:
    """Tests for extension-based format resolution."""

    @pytest.mark.parametrize("name, expected", [
        ("notes.txt", FileFormat.TEXT),
        ("README.md", FileFormat.TEXT),
        ("paper.pdf", FileFormat.PDF),
        ("letter.docx", FileFormat.DOCX),
        ("SHOUTING.TXT", FileFormat.TEXT),
    ])
    def test_plain_formats(self, name, expected):
        assert resolve_format(name) == (expected, False)

    @pytest.mark.parametrize("name, expected", [
        ("notes.txt.gz", FileFormat.TEXT),
        ("paper.pdf.gz", FileFormat.PDF),
        ("letter.docx.gz", FileFormat.DOCX),
    ])
    def test_gzip_wrapped_formats(self, name, expected):
        assert resolve_format(name) == (expected, True)

    def test_resolve_extractor_wraps_inner(self):
        extractor = resolve_extractor("corpus/paper.pdf.gz")
        assert isinstance(extractor, GzipExtractor)
        assert isinstance(extractor.inner, PdfExtractor)

    def test_resolve_extractor_plain(self):
        assert isinstance(resolve_extractor("a.md"), PlainTextExtractor)
        assert isinstance(resolve_extractor("a.docx"), DocxExtractor)

    def test_unsupported_extension_carries_extension(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            resolve_extractor("slides.pptx")
        assert exc_info.value.extension == ".pptx"
        assert ".pptx" in str(exc_info.value)

    def test_unsupported_inner_extension(self):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            resolve_format("backup.tar.gz")
        assert exc_info.value.extension == ".tar"

    def test_double_gzip_is_unsupported(self):
        """Only one level of compression is resolved."""
        with pytest.raises(UnsupportedFormatError) as exc_info:
            resolve_format("notes.txt.gz.gz")
        assert exc_info.value.extension == ".gz"

    def test_no_extension(self):
        with pytest.raises(UnsupportedFormatError):
            resolve_format("Makefile")

    def test_resolution_does_not_touch_filesystem(self, tmp_path):
        """Resolving a path that doesn't exist still works."""
        missing = tmp_path / "missing.txt"
        assert resolve_format(missing) == (FileFormat.TEXT, False)
        assert not missing.exists()


class TestPlainTextExtractor:

    def test_returns_source_unchanged(self):
        source = io.BytesIO(b"hello\nworld\n")
        assert PlainTextExtractor().extract(source) is source


class TestGzipExtractor:
    """Tests for decompress-then-delegate extraction."""

    def test_text_inside_gzip(self):
        payload = gzip.compress("Hello, world!\nsecond line\n".encode('utf-8'))
        stream = GzipExtractor(PlainTextExtractor()).extract(io.BytesIO(payload))
        try:
            assert stream.read() == b"Hello, world!\nsecond line\n"
        finally:
            stream.close()

    def test_docx_inside_gzip(self, tmp_path):
        docx_path = _make_docx(tmp_path / "letter.docx", ["Dear reader", "Goodbye"])
        payload = gzip.compress(docx_path.read_bytes())

        stream = GzipExtractor(DocxExtractor()).extract(io.BytesIO(payload))
        assert stream.read().decode('utf-8') == "Dear reader\nGoodbye"

    def test_not_gzip_raises_decode_error(self):
        with pytest.raises(DecodeError) as exc_info:
            GzipExtractor(PlainTextExtractor()).extract(io.BytesIO(b"definitely not gzip"))
        assert exc_info.value.cause is not None

    def test_truncated_gzip_raises_decode_error(self):
        payload = gzip.compress(b"some text that will be cut short" * 100)
        with pytest.raises(DecodeError):
            GzipExtractor(PlainTextExtractor()).extract(io.BytesIO(payload[:40]))

    def test_inner_failure_closes_temporary_store(self):
        """The temporary store is released when the inner extractor fails."""
        seen = []

        class FailingExtractor(PlainTextExtractor):
            def extract(self, source):
                seen.append(source)
                raise DecodeError("inner failure")

        payload = gzip.compress(b"data")
        with pytest.raises(DecodeError, match="inner failure"):
            GzipExtractor(FailingExtractor()).extract(io.BytesIO(payload))
        assert seen and seen[0].closed


class TestDocxExtractor:
    """Tests for DOCX paragraph extraction."""

    def test_paragraphs_joined_by_newline(self, tmp_path):
        path = _make_docx(tmp_path / "doc.docx", ["First paragraph.", "Second one!"])
        with open(path, 'rb') as source:
            stream = DocxExtractor().extract(source)
        assert stream.read().decode('utf-8') == "First paragraph.\nSecond one!"

    def test_corrupt_docx_raises_decode_error(self):
        with pytest.raises(DecodeError):
            DocxExtractor().extract(io.BytesIO(b"PK\x03\x04 not really a zip"))

    def test_temporary_file_removed(self, tmp_path):
        """The staged .docx is deleted on success and on failure."""
        created = []
        real_mkstemp = tempfile.mkstemp

        def tracking_mkstemp(*args, **kwargs):
            fd, name = real_mkstemp(*args, **kwargs)
            created.append(Path(name))
            return fd, name

        good = _make_docx(tmp_path / "good.docx", ["ok"])
        with patch("corpus_vocab.extraction.text_extractors.tempfile.mkstemp", tracking_mkstemp):
            with open(good, 'rb') as source:
                DocxExtractor().extract(source)
            with pytest.raises(DecodeError):
                DocxExtractor().extract(io.BytesIO(b"garbage"))

        assert len(created) == 2
        assert not any(path.exists() for path in created)


class TestPdfExtractor:
    """Tests for page-by-page PDF extraction (pdfplumber mocked)."""

    @staticmethod
    def _fake_pdf(page_texts):
        pages = []
        for text in page_texts:
            page = MagicMock()
            if isinstance(text, Exception):
                page.extract_text.side_effect = text
            else:
                page.extract_text.return_value = text
            pages.append(page)
        pdf = MagicMock()
        pdf.pages = pages
        return pdf

    def test_pages_concatenated_in_order(self):
        pdf = self._fake_pdf(["page one", None, "page three"])
        with patch("corpus_vocab.extraction.text_extractors.pdfplumber") as plumber:
            plumber.open.return_value = pdf
            stream = PdfExtractor().extract(io.BytesIO(b"%PDF-1.4"))

        assert stream.read().decode('utf-8') == "page one\n\npage three\n"
        pdf.__exit__.assert_called_once()

    def test_page_failure_aborts_document(self):
        pdf = self._fake_pdf(["fine", RuntimeError("bad content stream"), "never read"])
        with patch("corpus_vocab.extraction.text_extractors.pdfplumber") as plumber:
            plumber.open.return_value = pdf
            with pytest.raises(DecodeError, match="page 2"):
                PdfExtractor().extract(io.BytesIO(b"%PDF-1.4"))

        pdf.pages[2].extract_text.assert_not_called()

    def test_open_failure_raises_decode_error(self):
        with patch("corpus_vocab.extraction.text_extractors.pdfplumber") as plumber:
            plumber.open.side_effect = ValueError("no xref")
            with pytest.raises(DecodeError) as exc_info:
                PdfExtractor().extract(io.BytesIO(b"junk"))
        assert isinstance(exc_info.value.cause, ValueError)

    def test_real_corrupt_pdf_raises_decode_error(self):
        with pytest.raises(DecodeError):
            PdfExtractor().extract(io.BytesIO(b"this is not a pdf at all"))
