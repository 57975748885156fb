"""
Shared pytest fixtures for Markov chain tests.
"""
import random
from pathlib import Path
from typing import List

import pytest

from malarkey.services.chain import Chain
from malarkey.services.chain_builder import build_chain


DOLLAR_TEXT = "I'd buy that for a dollar! I'd buy this for two dollars! I'd buy that for a dollar!"

DOLLAR_SENTENCES = [
    "I'd buy that for a dollar!",
    "I'd buy this for two dollars!",
]

PARAGRAPH_TEXT = """Alpha beta.
Gamma delta.
"""


class NoRandom:
    """Random source that fails the test if it is ever consulted."""

    def choice(self, seq):
        raise AssertionError("random source should not be consulted")


@pytest.fixture
def dollar_text() -> str:
    """Three short sentences, one paragraph."""
    return DOLLAR_TEXT


@pytest.fixture
def dollar_chain() -> Chain:
    """Chain built from the dollar text with coherence 2."""
    return build_chain(DOLLAR_TEXT, 2)


@pytest.fixture
def paragraph_chain() -> Chain:
    """Chain with two single-sentence paragraphs, coherence 1."""
    return build_chain(PARAGRAPH_TEXT, 1)


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def no_random() -> NoRandom:
    return NoRandom()


@pytest.fixture
def sample_corpus() -> List[str]:
    """Sample multi-paragraph corpus."""
    return [
        "The universe is vast and full of mysteries. Stars, planets, and galaxies await exploration.",
        "Potatoes are wonderful vegetables! They can be baked, fried, or mashed into delicious dishes.",
        "Military training requires discipline and dedication. Safety protocols must be followed.",
        "Space exploration has led to amazing discoveries about our solar system and beyond.",
        "Is friendship one of the most important aspects of life? Friends support each other.",
    ]


@pytest.fixture
def corpus_file(sample_corpus, tmp_path) -> Path:
    """Write the sample corpus to a text file, one paragraph per line."""
    file_path = tmp_path / "corpus.txt"
    file_path.write_text("\n".join(sample_corpus) + "\n", encoding="utf-8")
    return file_path


@pytest.fixture
def dollar_file(tmp_path) -> Path:
    file_path = tmp_path / "dollar.txt"
    file_path.write_text(DOLLAR_TEXT, encoding="utf-8")
    return file_path
