"""
Random text generation from a Markov chain.

Walks the chain from a random starting state, picking each next token with
probability proportional to its observed frequency, until one of the stop
conditions (paragraphs, sentences, words) is met.
"""
from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from functools import reduce
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .chain import Chain, State
from .errors import (
    BrokenChain,
    DegenerateState,
    EmptyModel,
    GenerationLimitExceeded,
    InvalidInput,
    StateNotFound,
)
from .tokenizer import PARAGRAPH_BREAK

logger = logging.getLogger(__name__)


@dataclass
class StopConditions:
    """When to stop generating. None means "no limit" for that counter."""
    max_paragraphs: Optional[int] = None
    max_sentences: Optional[int] = None
    max_words: Optional[int] = None

    def validate(self) -> "StopConditions":
        """
        Check the limits.

        Raises:
            InvalidInput: a limit is negative, or no limit is set
        """
        for name, value in (
            ("paragraphs", self.max_paragraphs),
            ("sentences", self.max_sentences),
            ("words", self.max_words),
        ):
            if value is not None and value < 0:
                raise InvalidInput(f"Maximum {name} must be None or greater than -1")

        if self.is_unbounded():
            raise InvalidInput("At least one of maximum paragraphs, sentences or words is required")

        return self

    def with_defaults(self) -> "StopConditions":
        """Default to one paragraph when nothing is set."""
        if self.is_unbounded():
            return StopConditions(max_paragraphs=1)
        return self

    def is_unbounded(self) -> bool:
        return self.max_paragraphs is None and self.max_sentences is None and self.max_words is None

    def is_vacuous(self) -> bool:
        return 0 in (self.max_paragraphs, self.max_sentences, self.max_words)


class _Counters:
    """Running paragraph/sentence/word counts for one generate() call."""

    def __init__(self, stop: StopConditions):
        self.stop = stop
        self.paragraphs = 0
        self.sentences = 0
        self.words = 0
        self._last_was_break = False

    def update(self, token: str, ends_sentence: bool):
        if token == PARAGRAPH_BREAK:
            self.paragraphs += 1
            if self._last_was_break:
                # nothing but line breaks: let the word budget run down
                self.words += 1
            self._last_was_break = True
        else:
            self.words += 1
            self._last_was_break = False

        if ends_sentence:
            self.sentences += 1

    def done(self) -> bool:
        stop = self.stop
        return (
            (stop.max_paragraphs is not None and self.paragraphs >= stop.max_paragraphs)
            or (stop.max_sentences is not None and self.sentences >= stop.max_sentences)
            or (stop.max_words is not None and self.words >= stop.max_words)
        )


class TextGenerator:
    """
    Generates text from a Chain.

    Each generate() call keeps its own caches, so one generator (and one
    chain) can be used from several threads as long as each thread passes
    its own random source.
    """

    def __init__(self, rng: Optional[Any] = None, max_iterations: Optional[int] = None):
        """
        Initialize generator.

        Args:
            rng: Random source with a choice() method (random.Random);
                defaults to the process-wide random module
            max_iterations: Hard cap on chain steps per call (None = no cap)
        """
        self.rng = rng if rng is not None else random
        self.max_iterations = max_iterations

    def generate(
        self,
        chain: Chain,
        stop: StopConditions,
        word_separator: str = " ",
        paragraph_separator: str = "\n\n",
    ) -> str:
        """
        Generate text.

        Args:
            chain: Markov chain to walk
            stop: Stop conditions; at least one must be set
            word_separator: Glue between words of a paragraph
            paragraph_separator: Glue between paragraphs

        Returns:
            Generated text ("" if any limit is 0)
        """
        stop.validate()

        if stop.is_vacuous():
            return ""

        counters = _Counters(stop)
        end_memo: Dict[str, bool] = {}

        def ends_sentence(token: str) -> bool:
            if token not in end_memo:
                end_memo[token] = chain.is_end_of_sentence(token)
            return end_memo[token]

        state = self._starting_state(chain)
        tokens: List[str] = []

        for token in state:
            tokens.append(token)
            counters.update(token, ends_sentence(token))
            if counters.done():
                return self.render(tokens, word_separator, paragraph_separator)

        weighted_memo: Dict[State, Tuple[str, ...]] = {}
        iterations = 0

        while True:
            if self.max_iterations is not None and iterations >= self.max_iterations:
                raise GenerationLimitExceeded(
                    f"Stopped after {iterations} steps without meeting a stop condition"
                )
            iterations += 1

            choices = weighted_memo.get(state)
            if choices is None:
                try:
                    frequencies = chain.lookup(state)
                except StateNotFound as e:
                    raise BrokenChain(
                        f"Cannot generate text; cannot find the next word in the chain: {e}"
                    ) from e
                choices = weighted_memo[state] = weighted_tokens(frequencies)

            next_token = choices[0] if len(choices) == 1 else self.rng.choice(choices)

            tokens.append(next_token)
            state = state[1:] + (next_token,)

            counters.update(next_token, ends_sentence(next_token))
            if counters.done():
                break

        logger.debug(
            f"[Markov] Generated {counters.words} words, {counters.sentences} sentences, "
            f"{counters.paragraphs} paragraphs in {iterations} steps"
        )
        return self.render(tokens, word_separator, paragraph_separator)

    def _starting_state(self, chain: Chain) -> State:
        """Pick a random starting state."""
        candidates = chain.starting_states()
        if not candidates:
            raise EmptyModel("Cannot generate text; Markov chain has no starting point")

        state = tuple(self.rng.choice(candidates))
        if not state:
            raise DegenerateState("Cannot generate text; starting words are empty")

        return state

    @staticmethod
    def render(tokens: List[str], word_separator: str = " ", paragraph_separator: str = "\n\n") -> str:
        """Join tokens into text; paragraph breaks are never rendered themselves."""
        paragraphs: List[List[str]] = []
        in_paragraph = False

        for token in tokens:
            if token == PARAGRAPH_BREAK:
                in_paragraph = False
            elif in_paragraph:
                paragraphs[-1].append(token)
            else:
                paragraphs.append([token])
                in_paragraph = True

        return paragraph_separator.join(word_separator.join(p) for p in paragraphs).strip()


def weighted_tokens(frequencies: Mapping[str, int]) -> Tuple[str, ...]:
    """
    Expand {token: count} into a flat tuple where each token appears in
    proportion to its count, for uniform selection.

    Counts are divided by their greatest common divisor first; this only
    shrinks the tuple and never changes the odds.

    Raises:
        BrokenChain: no token has a positive count
    """
    if len(frequencies) == 1:
        token, count = next(iter(frequencies.items()))
        if count > 0:
            return (token,)

    positive = {token: count for token, count in frequencies.items() if count > 0}
    if not positive:
        raise BrokenChain("Cannot generate text; cannot find the next word in the chain")

    if sum(positive.values()) == len(positive):
        return tuple(positive)

    divisor = reduce(math.gcd, positive.values())
    return tuple(
        token
        for token, count in positive.items()
        for _ in range(count // divisor)
    )


def generate_text(
    chain: Chain,
    max_paragraphs: Optional[int] = None,
    max_sentences: Optional[int] = None,
    max_words: Optional[int] = None,
    word_separator: str = " ",
    paragraph_separator: str = "\n\n",
    rng: Optional[Any] = None,
    max_iterations: Optional[int] = None,
) -> str:
    """
    Convenience function for text generation.

    With no limits given, generates one paragraph.

    Args:
        chain: Markov chain
        max_paragraphs: Stop after this many paragraphs
        max_sentences: Stop after this many sentences
        max_words: Stop after this many words
        word_separator: Glue between words
        paragraph_separator: Glue between paragraphs
        rng: Random source (random.Random)
        max_iterations: Hard cap on chain steps

    Returns:
        Generated text
    """
    stop = StopConditions(max_paragraphs, max_sentences, max_words).with_defaults()
    generator = TextGenerator(rng=rng, max_iterations=max_iterations)
    return generator.generate(chain, stop, word_separator, paragraph_separator)
