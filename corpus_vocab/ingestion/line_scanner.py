"""Line-by-line scanning of extracted text streams."""

from typing import BinaryIO, Iterator

from corpus_vocab.config import MAX_LINE_BYTES
from corpus_vocab.errors import ScanError


def iter_lines(stream: BinaryIO, max_line_bytes: int = MAX_LINE_BYTES) -> Iterator[str]:
    """
    Yield decoded lines from a binary text stream.

    Line terminators (\\n, \\r\\n) are stripped. Bytes that are not valid
    UTF-8 are dropped.

    Args:
        stream: Readable binary stream.
        max_line_bytes: Longest accepted line, excluding the terminator.

    Raises:
        ScanError: If a line is longer than max_line_bytes or the stream
                  cannot be read.
    """
    number = 0
    while True:
        try:
            # One byte of headroom for the newline itself
            raw = stream.readline(max_line_bytes + 1)
        except (OSError, ValueError) as e:
            raise ScanError(f"error reading line {number + 1}: {e}") from e
        if not raw:
            return

        number += 1
        if len(raw) > max_line_bytes and not raw.endswith(b"\n"):
            raise ScanError(f"line {number} exceeds {max_line_bytes} bytes")

        yield raw.rstrip(b"\r\n").decode('utf-8', errors='ignore')
