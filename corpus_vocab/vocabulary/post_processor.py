"""
Vocabulary Post-Processing

Re-applies token normalization to an existing vocabulary. Tokens that
collapse to the same key after case folding have their counts summed;
punctuation-only tokens are removed when filtering is on.

Normalizing twice gives the same result as normalizing once.

Usage:
    vocabulary = merge_vocabularies(["va.txt", "vb.txt"])
    cleaned = normalize_vocabulary(vocabulary, TokenNormalizer(lowercase=True))
    save_vocabulary(cleaned, "vocab_processed.txt", SortOrder.FREQ)
"""

from collections import Counter

from corpus_vocab.logging_config import Timer, debug_log
from corpus_vocab.vocabulary.tokens import TokenNormalizer


def normalize_vocabulary(vocabulary: Counter, normalizer: TokenNormalizer) -> Counter:
    """
    Build a new vocabulary with every token normalized.

    Args:
        vocabulary: Source token counts (not modified).
        normalizer: Case folding / punctuation filtering settings.

    Returns:
        New Counter keyed by normalized tokens.
    """
    normalized: Counter = Counter()
    dropped = 0

    with Timer(f"Normalizing {len(vocabulary)} tokens"):
        for token, count in vocabulary.items():
            key = normalizer.normalize(token)
            if key is None:
                dropped += 1
                continue
            normalized[key] += count

    debug_log(
        f"[VOCAB] Normalized {len(vocabulary)} tokens into {len(normalized)} "
        f"({dropped} dropped, lowercase={normalizer.lowercase}, "
        f"filter_punct={normalizer.filter_punct})"
    )
    return normalized
