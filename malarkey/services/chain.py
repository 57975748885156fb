"""
Markov chain model.

A Chain maps fixed-length word sequences ("states") to the frequencies of
the words observed right after them. It is built once (see chain_builder)
and is read-only afterwards, so it can be shared between generators.

Persistence: JSON document, validated with pydantic on the way back in.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, Iterable, List, Literal, Mapping, Sequence, Tuple, Union

from pydantic import BaseModel, StrictInt, StrictStr, ValidationError, model_validator

from .classifiers import is_end_of_sentence
from .errors import CorruptModel, InvalidInput, StateNotFound

State = Tuple[str, ...]

FORMAT_NAME = "malarkey.chain"
FORMAT_VERSION = 1


@dataclass(frozen=True)
class Word:
    """Sentence metadata for one distinct token value."""
    value: str
    is_start_of_sentence: bool = False
    is_end_of_sentence: bool = False

    def __str__(self) -> str:
        return self.value


class TransitionRow(BaseModel):
    """One state and the frequencies of the tokens that followed it."""
    words: List[StrictStr]
    frequencies: Dict[StrictStr, StrictInt]


class ChainPayload(BaseModel):
    """Serialized form of a Chain."""
    format: Literal["malarkey.chain"]
    version: Literal[1]
    coherence: StrictInt
    transitions: List[TransitionRow]
    starting_states: List[List[StrictStr]]
    end_of_sentence_tokens: List[StrictStr]

    @model_validator(mode="after")
    def check_shapes(self) -> "ChainPayload":
        if self.coherence < 1:
            raise ValueError("coherence must be at least 1")

        seen = set()
        for row in self.transitions:
            if len(row.words) != self.coherence:
                raise ValueError(
                    f"state {row.words!r} has {len(row.words)} word(s); expected {self.coherence}"
                )
            key = tuple(row.words)
            if key in seen:
                raise ValueError(f"state {row.words!r} appears more than once")
            seen.add(key)
            if not row.frequencies:
                raise ValueError(f"state {row.words!r} has no successors")
            if any(count < 1 for count in row.frequencies.values()):
                raise ValueError(f"state {row.words!r} has a count below 1")

        if not seen:
            raise ValueError("chain has no transitions")
        if not self.starting_states:
            raise ValueError("chain has no starting states")

        for state in self.starting_states:
            if len(state) != self.coherence:
                raise ValueError(
                    f"starting state {state!r} has {len(state)} word(s); expected {self.coherence}"
                )
            if tuple(state) not in seen:
                raise ValueError(f"starting state {state!r} is not in the transition table")

        return self


class Chain:
    """
    Immutable Markov chain.

    Holds the transition table, the states generation may start from and
    the set of tokens that end a sentence.
    """

    def __init__(
        self,
        coherence: int,
        transitions: Mapping[Sequence[str], Mapping[str, int]],
        starting_states: Iterable[Sequence[str]],
        end_of_sentence_tokens: Iterable[str],
    ):
        """
        Initialize chain. Inputs are copied; the chain never shares them.

        Args:
            coherence: Number of tokens in every state
            transitions: {state: {next_token: count}}
            starting_states: States eligible to seed generation, in order
            end_of_sentence_tokens: Tokens that complete a sentence
        """
        self._coherence = coherence
        self._transitions: Dict[State, Dict[str, int]] = {
            tuple(state): dict(frequencies) for state, frequencies in transitions.items()
        }
        self._starting_states: Tuple[State, ...] = tuple(tuple(s) for s in starting_states)
        self._end_of_sentence_tokens: FrozenSet[str] = frozenset(end_of_sentence_tokens)

    @property
    def coherence(self) -> int:
        return self._coherence

    @property
    def end_of_sentence_tokens(self) -> FrozenSet[str]:
        return self._end_of_sentence_tokens

    def starting_states(self) -> List[State]:
        """States eligible to seed generation, in first-occurrence order."""
        return list(self._starting_states)

    def states(self) -> List[State]:
        """All states in the transition table, in insertion order."""
        return list(self._transitions)

    def lookup(self, state: Sequence[str]) -> Mapping[str, int]:
        """
        Get the frequencies of the tokens that followed a state.

        Args:
            state: Exactly `coherence` tokens

        Returns:
            Read-only {token: count} mapping

        Raises:
            StateNotFound: state was never observed (no prefix fallback)
        """
        key = tuple(state)
        if len(key) != self._coherence:
            raise StateNotFound(key)
        try:
            return MappingProxyType(self._transitions[key])
        except KeyError:
            raise StateNotFound(key) from None

    def is_end_of_sentence(self, token: str) -> bool:
        return token in self._end_of_sentence_tokens

    def __len__(self) -> int:
        return len(self._transitions)

    def __contains__(self, state: Any) -> bool:
        try:
            return tuple(state) in self._transitions
        except TypeError:
            return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Chain):
            return NotImplemented
        return (
            self._coherence == other._coherence
            and self._transitions == other._transitions
            and self._starting_states == other._starting_states
            and self._end_of_sentence_tokens == other._end_of_sentence_tokens
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Chain(coherence={self._coherence}, states={len(self._transitions)}, "
            f"starting_states={len(self._starting_states)})"
        )

    def to_table(self) -> List[Dict[str, Any]]:
        """Tabular view: one row per state, in insertion order."""
        starting = set(self._starting_states)
        return [
            {
                "words": list(state),
                "frequencies": dict(frequencies),
                "starting_state": state in starting,
            }
            for state, frequencies in self._transitions.items()
        ]

    # --- persistence ---
    def to_payload(self) -> ChainPayload:
        return ChainPayload.model_construct(
            format=FORMAT_NAME,
            version=FORMAT_VERSION,
            coherence=self._coherence,
            transitions=[
                TransitionRow.model_construct(words=list(state), frequencies=dict(frequencies))
                for state, frequencies in self._transitions.items()
            ],
            starting_states=[list(state) for state in self._starting_states],
            end_of_sentence_tokens=sorted(self._end_of_sentence_tokens),
        )

    def serialize(self) -> bytes:
        """Serialize to UTF-8 JSON bytes."""
        return self.to_payload().model_dump_json().encode("utf-8")

    @classmethod
    def from_payload(cls, payload: ChainPayload) -> "Chain":
        return cls(
            coherence=payload.coherence,
            transitions={tuple(row.words): row.frequencies for row in payload.transitions},
            starting_states=payload.starting_states,
            end_of_sentence_tokens=payload.end_of_sentence_tokens,
        )

    @classmethod
    def deserialize(cls, data: Union[bytes, str]) -> "Chain":
        """
        Restore a chain produced by serialize().

        Raises:
            CorruptModel: payload is not JSON, or a field is missing or malformed
        """
        if not isinstance(data, (bytes, bytearray, str)):
            raise CorruptModel(f"expected bytes or str; got {type(data).__name__}")
        try:
            payload = ChainPayload.model_validate_json(data)
        except ValidationError as e:
            raise CorruptModel(f"Invalid serialized chain: {e.error_count()} error(s); {e.errors()[0]['msg']}") from e
        return cls.from_payload(payload)

    # --- construction-time helper ---
    @classmethod
    def from_links(
        cls,
        links: Iterable[Sequence[Any]],
    ) -> "Chain":
        """
        Assemble a chain from explicit (words, frequencies[, starting]) links.

        A link whose starting flag is None becomes a starting state only if no
        starting state has been added before it. End-of-sentence tokens are
        derived with the sentence-end heuristic.

        Raises:
            InvalidInput: no links, empty or mismatched words, empty
                frequencies, or a repeated state
        """
        coherence = 0
        transitions: Dict[State, Dict[str, int]] = {}
        starting_states: List[State] = []
        tokens = set()

        for link in links:
            words, frequencies = link[0], link[1]
            starting = link[2] if len(link) > 2 else None
            state = tuple(str(word) for word in words)

            if not state:
                raise InvalidInput("Link must have at least one word")
            if not coherence:
                coherence = len(state)
            elif len(state) != coherence:
                raise InvalidInput(f"Expected link to have {coherence} word(s); got {len(state)}")
            if not frequencies:
                raise InvalidInput("Link frequencies cannot be empty")
            if any(count < 1 for count in frequencies.values()):
                raise InvalidInput("Link frequencies must be at least 1")
            if state in transitions:
                raise InvalidInput(f'Link with word values "{", ".join(state)}" is not unique to the chain')

            if starting or (starting is None and not starting_states):
                starting_states.append(state)

            transitions[state] = dict(frequencies)
            tokens.update(state)
            tokens.update(frequencies)

        if not transitions:
            raise InvalidInput("Expected at least one link in the Markov chain")

        return cls(
            coherence=coherence,
            transitions=transitions,
            starting_states=starting_states,
            end_of_sentence_tokens=[t for t in tokens if is_end_of_sentence(t)],
        )
