"""
Token Splitting and Normalization

WordTokenizer splits one line into word and punctuation tokens. It is an
nltk RegexpTokenizer, so any nltk tokenizer (anything with a
``tokenize(str) -> list[str]`` method) can be passed to the pipeline instead.

TokenNormalizer applies the two user toggles shared by ingestion and
vocabulary post-processing:
- lowercase: case-fold every token
- filter_punct: drop tokens made only of punctuation/symbol characters

Examples:
    >>> WordTokenizer().tokenize("Hello, world! Don't panic.")
    ['Hello', ',', 'world', '!', "Don't", 'panic', '.']
    >>> TokenNormalizer(lowercase=True, filter_punct=True).normalize("Don't")
    "don't"
    >>> TokenNormalizer(filter_punct=True).normalize("...")  # dropped
"""

from dataclasses import dataclass
import unicodedata

from nltk.tokenize import RegexpTokenizer

# Word runs may contain apostrophes and dots between word characters
# ("don't", "3.14", "e.g"); every other non-space character is its own token.
WORD_PATTERN = r"\w+(?:['’.]\w+)*|[^\w\s]"


class WordTokenizer(RegexpTokenizer):
    """Word/punctuation tokenizer used when no other tokenizer is supplied."""

    def __init__(self):
        super().__init__(WORD_PATTERN)


def is_punctuation(token: str) -> bool:
    """
    Check whether every character of a token is punctuation or a symbol.

    Punctuation means Unicode category P*, symbols S* (currency, math,
    modifier and other symbols). The empty string counts as punctuation.

    >>> is_punctuation("!?"), is_punctuation("$"), is_punctuation("don't")
    (True, True, False)
    """
    return all(unicodedata.category(char)[0] in ('P', 'S') for char in token)


@dataclass(frozen=True)
class TokenNormalizer:
    """Case folding and punctuation filtering applied to every token."""
    lowercase: bool = False
    filter_punct: bool = False

    def normalize(self, token: str) -> str | None:
        """
        Normalize a single token.

        Returns:
            The (possibly lowercased) token, or None if it must be dropped.
        """
        if self.lowercase:
            token = token.lower()
        if self.filter_punct and is_punctuation(token):
            return None
        return token
