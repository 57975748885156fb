"""
Markov chain construction.

Builds a Chain from a token stream:
- Wraps the stream around so the last state leads back to the first
- Counts, for every window of `coherence` tokens, the token that follows it
- Marks sentence starts (first token, after a paragraph break, or a
  capitalized token after a sentence end) and sentence ends
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .chain import Chain, State, Word
from .classifiers import is_end_of_sentence, is_word_lower_case
from .errors import InvalidInput, ModelInvariantViolation
from .tokenizer import PARAGRAPH_BREAK, extract_tokens, strip_paragraph_breaks

logger = logging.getLogger(__name__)


@dataclass
class TokenStats:
    """Statistics for a training token stream."""
    paragraph_count: int = 0
    word_count: int = 0
    unique_tokens: int = 0


def token_stats(tokens: Sequence[str]) -> TokenStats:
    """Count paragraph breaks and words in a token stream."""
    paragraphs = sum(1 for token in tokens if token == PARAGRAPH_BREAK)
    return TokenStats(
        paragraph_count=paragraphs,
        word_count=len(tokens) - paragraphs,
        unique_tokens=len(set(tokens)),
    )


class ChainBuilder:
    """
    Builds Chain objects from token streams.

    Holds no state between calls, so one instance can serve any number of
    threads.
    """

    def build(self, tokens: Sequence[str], coherence: int = 2) -> Chain:
        """
        Build a chain.

        Args:
            tokens: Token stream; "" marks a paragraph break
            coherence: Number of tokens per state (>= 1)

        Returns:
            Immutable Chain

        Raises:
            InvalidInput: coherence < 1, no tokens, or fewer tokens than coherence
        """
        if coherence < 1:
            raise InvalidInput("Coherence cannot be less than 1")

        tokens = list(tokens)
        if not tokens:
            raise InvalidInput("Cannot build a chain from an empty token stream")

        if len(tokens) < coherence:
            raise InvalidInput(
                f"Coherence {coherence} exceeds the number of tokens ({len(tokens)})"
            )

        words = self.classify_tokens(tokens)

        # link the end of the stream back to its beginning
        extended = tokens + tokens[:coherence]

        transitions: Dict[State, Dict[str, int]] = {}
        starting_states: Dict[State, None] = {}

        for i in range(len(tokens)):
            state = tuple(extended[i:i + coherence])
            next_token = extended[i + coherence]

            frequencies = transitions.setdefault(state, {})
            frequencies[next_token] = frequencies.get(next_token, 0) + 1

            if words[state[0]].is_start_of_sentence:
                starting_states.setdefault(state)

        if not starting_states:
            raise ModelInvariantViolation("Chain has no starting state")

        chain = Chain(
            coherence=coherence,
            transitions=transitions,
            starting_states=list(starting_states),
            end_of_sentence_tokens=[w.value for w in words.values() if w.is_end_of_sentence],
        )

        logger.debug(
            f"[Markov] Built chain: {len(tokens)} tokens, {len(chain)} states, "
            f"{len(starting_states)} starting states, coherence {coherence}"
        )
        return chain

    def classify_tokens(self, tokens: Sequence[str]) -> Dict[str, Word]:
        """
        Resolve sentence metadata for every distinct token.

        A token starts a sentence if it is the first token, follows a
        paragraph break, or is not lowercase and follows a sentence end.
        Once true, it stays true. The last token ends a sentence if no
        other token does.
        """
        starts: Dict[str, bool] = {}
        ends: Dict[str, bool] = {}
        any_end = False
        previous = None

        for i, token in enumerate(tokens):
            if token not in ends:
                ends[token] = is_end_of_sentence(token)
                any_end = any_end or ends[token]

            if i == 0:
                is_start = True
            elif token == PARAGRAPH_BREAK:
                is_start = False
            elif previous == PARAGRAPH_BREAK:
                is_start = True
            else:
                is_start = ends[previous] and not is_word_lower_case(token)

            starts[token] = starts.get(token, False) or is_start
            previous = token

        if not any_end:
            ends[tokens[-1]] = True

        return {
            token: Word(token, starts[token], ends[token])
            for token in starts
        }


def prepare_tokens(text: str, ignore_line_breaks: bool = False) -> List[str]:
    """
    Tokenize training text.

    Guarantees at least one token. With line breaks kept, the stream always
    ends with a paragraph break.
    """
    tokens = extract_tokens(text)

    if ignore_line_breaks:
        return strip_paragraph_breaks(tokens) or [" "]

    if tokens[-1] != PARAGRAPH_BREAK:
        tokens.append(PARAGRAPH_BREAK)
    return tokens


def build_chain(text: str, coherence: int = 2, ignore_line_breaks: bool = False) -> Chain:
    """
    Convenience function: tokenize text and build a chain.

    Args:
        text: Source text
        coherence: Number of tokens per state
        ignore_line_breaks: Drop paragraph breaks before building

    Returns:
        Chain
    """
    return ChainBuilder().build(prepare_tokens(text, ignore_line_breaks), coherence)
