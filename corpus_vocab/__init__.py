"""
corpus-vocab: token-frequency vocabularies from document collections.

Packages:
    extraction - file format resolution and text extractors
    ingestion - concurrent vocabulary building with error quarantine
    parallel - bounded execution strategies and progress reporting
    vocabulary - token normalization and the "token count" file format
"""

__version__ = "0.3.0"
