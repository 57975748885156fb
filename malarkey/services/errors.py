"""
Error taxonomy for chain building, lookup, generation and persistence.

Everything derives from MarkovError so callers (HTTP router, CLI) can catch
the whole family in one place. Nothing here is retried internally.
"""
from __future__ import annotations


class MarkovError(Exception):
    """Base class for all Markov chain errors."""


class InvalidInput(MarkovError, ValueError):
    """Bad parameters: negative bounds, bad coherence, empty token stream."""


class StateNotFound(MarkovError, KeyError):
    """A state was never observed while the chain was trained."""

    def __init__(self, state):
        self.state = tuple(state)
        super().__init__(f'Word combination "{", ".join(self.state)}" not found in chain')

    def __str__(self) -> str:
        return self.args[0]


class BrokenChain(MarkovError, RuntimeError):
    """Generation cannot find the next token for the current state."""


class EmptyModel(MarkovError, RuntimeError):
    """The chain has no starting state to seed generation from."""


class DegenerateState(MarkovError, RuntimeError):
    """The chosen starting state has no tokens."""


class CorruptModel(MarkovError, ValueError):
    """A serialized chain is missing fields or has the wrong shape."""


class ModelInvariantViolation(MarkovError, RuntimeError):
    """The builder produced a chain that breaks its own invariants."""


class GenerationLimitExceeded(MarkovError, RuntimeError):
    """Generation hit the hard iteration cap before any stop condition."""
