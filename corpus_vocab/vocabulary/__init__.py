"""
Vocabulary Package

The token-frequency data model shared by ingestion and post-processing.
A vocabulary is a collections.Counter mapping token to occurrence count.

Main Components:
- WordTokenizer / TokenNormalizer: split lines, fold case, filter punctuation
- load_vocabulary / merge_vocabularies / save_vocabulary: the flat
  "token count" file format
- normalize_vocabulary: re-normalize an existing vocabulary

Usage:
    from corpus_vocab.vocabulary import (
        SortOrder, TokenNormalizer, merge_vocabularies,
        normalize_vocabulary, save_vocabulary,
    )

    vocabulary = merge_vocabularies(["va.txt", "vb.txt"])
    vocabulary = normalize_vocabulary(vocabulary, TokenNormalizer(lowercase=True))
    save_vocabulary(vocabulary, "merged.txt", SortOrder.ALPHA)
"""

from .post_processor import normalize_vocabulary
from .tokens import TokenNormalizer, WordTokenizer, is_punctuation
from .vocabulary_store import (
    SortOrder,
    load_vocabulary,
    merge_vocabularies,
    parse_count,
    save_vocabulary,
)

__all__ = [
    'TokenNormalizer',
    'WordTokenizer',
    'is_punctuation',
    'SortOrder',
    'load_vocabulary',
    'merge_vocabularies',
    'parse_count',
    'save_vocabulary',
    'normalize_vocabulary',
]
