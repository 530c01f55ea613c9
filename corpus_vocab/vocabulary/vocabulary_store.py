"""
Vocabulary Persistence

Loads, merges and saves vocabularies in the flat table format:

    <token> <count>\\n

one entry per line, UTF-8, token and count separated by a single space.
Tokens are not escaped, so a token that contains a space cannot be read
back unambiguously; such lines are skipped on load.

Loading is tolerant: a line that does not split into exactly two fields,
or whose token field is empty, is skipped without being reported, and a
count field without leading digits reads as 0. If a token appears more
than once in the same file, the last line wins.
"""

from collections import Counter
from enum import Enum
from pathlib import Path
import re
from typing import Iterable, TextIO

from corpus_vocab.errors import VocabIOError
from corpus_vocab.logging_config import Timer, debug_log, info
from corpus_vocab.parallel import ProgressAggregator

_COUNT_PREFIX = re.compile(r'\d+')


class SortOrder(Enum):
    """
    Output ordering for save_vocabulary.

    NONE: counter iteration order (first-seen order, not a stable contract)
    FREQ: descending by count; equal counts in ascending token order
    ALPHA: ascending by token code points
    """
    NONE = ""
    FREQ = "freq"
    ALPHA = "alpha"

    @classmethod
    def parse(cls, value: "str | SortOrder | None") -> "SortOrder":
        """
        Convert a CLI/settings value to a SortOrder.

        None and "" mean NONE.

        Raises:
            ValueError: For any other unknown value.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value or "")
        except ValueError:
            choices = ", ".join(repr(o.value) for o in cls if o.value)
            raise ValueError(f"Unknown sort order {value!r} (expected one of {choices})") from None


def parse_count(field: str) -> int:
    """Read the leading decimal digits of a count field; 0 if there are none."""
    match = _COUNT_PREFIX.match(field)
    return int(match.group()) if match else 0


def load_vocabulary(path: str | Path) -> Counter:
    """
    Read a vocabulary table from disk.

    Args:
        path: Vocabulary file to read.

    Returns:
        Counter mapping token to count.

    Raises:
        VocabIOError: If the file cannot be opened or read.
    """
    vocabulary: Counter = Counter()
    skipped = 0

    try:
        with open(path, encoding='utf-8', errors='replace', newline='') as f:
            for line in f:
                parts = line.rstrip('\r\n').split(' ')
                # Exactly "token count" with a non-empty token
                if len(parts) != 2 or not parts[0]:
                    skipped += 1
                    continue
                token, count = parts
                vocabulary[token] = parse_count(count)
    except OSError as e:
        raise VocabIOError(f"error reading vocabulary file {path}: {e}") from e

    debug_log(f"[VOCAB] Loaded {len(vocabulary)} tokens from {path} ({skipped} lines skipped)")
    return vocabulary


def merge_vocabularies(paths: Iterable[str | Path], progress_stream: TextIO | None = None) -> Counter:
    """
    Load several vocabulary files and sum their counts per token.

    Args:
        paths: Vocabulary files, read in the given order.
        progress_stream: Where to draw the progress line (default stdout).

    Returns:
        Counter with summed counts.

    Raises:
        VocabIOError: On the first file that cannot be read; nothing is
                     returned for the files merged before it.
    """
    paths = list(paths)
    merged: Counter = Counter()

    progress = ProgressAggregator(stream=progress_stream, unit="vocabularies merged")
    progress.set_total(len(paths))

    for path in paths:
        vocabulary = load_vocabulary(path)
        # update() rather than "+" so tokens with a zero count survive
        merged.update(vocabulary)
        progress.complete(str(path))

    progress.finish()
    info(f"Merged {len(paths)} vocabularies into {len(merged)} tokens")
    return merged


def sorted_entries(vocabulary: Counter, sort_order: SortOrder) -> list[tuple[str, int]]:
    """Return (token, count) pairs in the requested output order."""
    entries = list(vocabulary.items())
    if sort_order is SortOrder.FREQ:
        entries.sort(key=lambda entry: (-entry[1], entry[0]))
    elif sort_order is SortOrder.ALPHA:
        entries.sort(key=lambda entry: entry[0])
    return entries


def save_vocabulary(
    vocabulary: Counter,
    path: str | Path,
    sort_order: "SortOrder | str | None" = SortOrder.NONE
) -> None:
    """
    Write a vocabulary table, one "token count" line per entry.

    Args:
        vocabulary: Token counts to write.
        path: Destination file (created or truncated).
        sort_order: SortOrder or its string value ("", "freq", "alpha").

    Raises:
        VocabIOError: If the destination cannot be created or written.
        ValueError: If sort_order is not a known order.
    """
    sort_order = SortOrder.parse(sort_order)

    with Timer(f"Sorting vocabulary ({sort_order.name.lower()})"):
        entries = sorted_entries(vocabulary, sort_order)

    try:
        with Timer(f"Writing {len(entries)} tokens to {path}"):
            with open(path, 'w', encoding='utf-8', newline='\n') as f:
                for token, count in entries:
                    f.write(f"{token} {count}\n")
    except OSError as e:
        raise VocabIOError(f"error creating file {path}: {e}") from e

    info(f"Saved {len(entries)} tokens to {path}")
