"""
Markov chain services: tokenizer, chain builder, chain model, text generator.
"""

from .chain import Chain, Word
from .chain_builder import ChainBuilder, TokenStats, build_chain, prepare_tokens, token_stats
from .classifiers import is_end_of_sentence, is_word_lower_case
from .errors import (
    BrokenChain,
    CorruptModel,
    DegenerateState,
    EmptyModel,
    GenerationLimitExceeded,
    InvalidInput,
    MarkovError,
    ModelInvariantViolation,
    StateNotFound,
)
from .text_generator import StopConditions, TextGenerator, generate_text
from .tokenizer import PARAGRAPH_BREAK, extract_tokens

__all__ = [
    "Chain",
    "Word",
    "ChainBuilder",
    "TokenStats",
    "build_chain",
    "prepare_tokens",
    "token_stats",
    "is_end_of_sentence",
    "is_word_lower_case",
    "BrokenChain",
    "CorruptModel",
    "DegenerateState",
    "EmptyModel",
    "GenerationLimitExceeded",
    "InvalidInput",
    "MarkovError",
    "ModelInvariantViolation",
    "StateNotFound",
    "StopConditions",
    "TextGenerator",
    "generate_text",
    "PARAGRAPH_BREAK",
    "extract_tokens",
]
