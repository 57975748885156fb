"""
Malarkey: Markov chain text generator.

    >>> from malarkey import build_chain, generate_text
    >>> chain = build_chain(open("speech.txt").read(), coherence=2)
    >>> generate_text(chain, max_sentences=3)
"""

from malarkey.services import (
    Chain,
    ChainBuilder,
    MarkovError,
    StopConditions,
    TextGenerator,
    build_chain,
    extract_tokens,
    generate_text,
)

__version__ = "1.0.0"

__all__ = [
    "Chain",
    "ChainBuilder",
    "MarkovError",
    "StopConditions",
    "TextGenerator",
    "build_chain",
    "extract_tokens",
    "generate_text",
]
