"""
Whitespace tokenizer for training text.

Splits raw text into word tokens. Line breaks become paragraph breaks,
represented in-band by the empty string sentinel.
"""
from __future__ import annotations

import re
from typing import List

PARAGRAPH_BREAK = ""

_NON_BREAKING_WHITESPACE = re.compile(r"[^\S\n\r]|\0")
_LINE_BREAKS = re.compile(r" *[\n\r]+ *")
_SPACE_RUNS = re.compile(r" +")
_TRAILING_LINE_BREAK = re.compile(r"[\n\r](?:[^\S\n\r]|\0)*$")


def _normalize(text: str) -> str:
    """Collapse whitespace so that "\\n" only ever marks a paragraph break."""
    # every whitespace character other than a line break counts as a space
    text = _NON_BREAKING_WHITESPACE.sub(" ", text)
    text = _LINE_BREAKS.sub("\n", text)
    text = _SPACE_RUNS.sub(" ", text)
    return text.strip()


def extract_tokens(text: str) -> List[str]:
    """
    Extract word tokens from text.

    Args:
        text: Raw source text

    Returns:
        Word tokens with "" between paragraphs. Never empty: text without
        any words yields [" "], or [""] when it was nothing but line breaks.
    """
    ends_with_break = bool(_TRAILING_LINE_BREAK.search(text))
    normalized = _normalize(text)

    if not normalized:
        return [PARAGRAPH_BREAK] if ends_with_break else [" "]

    tokens: List[str] = []
    for i, paragraph in enumerate(normalized.split("\n")):
        if i:
            tokens.append(PARAGRAPH_BREAK)
        tokens.extend(paragraph.split(" "))

    if ends_with_break:
        tokens.append(PARAGRAPH_BREAK)

    return tokens


def strip_paragraph_breaks(tokens: List[str]) -> List[str]:
    """Drop every paragraph break sentinel from a token list."""
    return [token for token in tokens if token != PARAGRAPH_BREAK]
