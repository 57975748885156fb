"""
Heuristic token predicates used while building a chain.
"""
from __future__ import annotations

import re

_END_OF_SENTENCE = re.compile(r"[.!?]['’\"”»)]*$")
_LOWER_CASE = re.compile(r"^[a-z]")


def is_end_of_sentence(token: str) -> bool:
    """True if the token ends in . ! or ?, ignoring closing quotes and brackets."""
    return bool(_END_OF_SENTENCE.search(token))


def is_word_lower_case(token: str) -> bool:
    """True if the token starts with an ASCII lowercase letter."""
    return bool(_LOWER_CASE.match(token))
