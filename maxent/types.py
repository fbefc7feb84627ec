# C:\dev\maxent_tagger\maxent\types.py
"""Shared value types for the maximum-entropy tagger.

The classifier consumes evidence as `Context` objects: two windows of
relative offsets (words and tags) around the position being tagged. Training
data is a sequence of `Event` pairs, classification returns a `Decision`, and
persistence calls return an `Outcome` instead of raising past the call
boundary.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterator,
    Mapping,
    Optional,
    Protocol,
    Tuple,
    TypeVar,
    Union,
)

__all__ = [
    "Context",
    "Event",
    "Decided",
    "NoEvidence",
    "NO_EVIDENCE",
    "Decision",
    "Outcome",
    "ElementCodec",
    "StringCodec",
]

WORD_PREFIX = "word"
TAG_PREFIX = "tag"

T = TypeVar("T")


def _coerce_offset(offset: Any) -> int:
    if isinstance(offset, bool):
        raise TypeError(f"Window offset must be an integer, got {offset!r}.")
    if isinstance(offset, int):
        return offset
    if isinstance(offset, str):
        try:
            return int(offset)
        except ValueError:
            pass
    raise TypeError(f"Window offset must be an integer, got {offset!r}.")


def _freeze_window(window: Optional[Mapping[Any, Hashable]]) -> Mapping[int, Hashable]:
    if window is None:
        return MappingProxyType({})
    frozen = {_coerce_offset(k): v for k, v in window.items()}
    return MappingProxyType(dict(sorted(frozen.items())))


@dataclass(frozen=True)
class Context:
    """
    The evidence surrounding one classification target.

    Attributes:
        word_window: Relative offset -> word token. Offset 0 is the word
                     being tagged, negative offsets are to its left.
        tag_window: Relative offset -> tag label for the neighbouring words.
    """
    word_window: Mapping[int, Hashable] = field(default_factory=dict)
    tag_window: Mapping[int, Hashable] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "word_window", _freeze_window(self.word_window))
        object.__setattr__(self, "tag_window", _freeze_window(self.tag_window))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Context):
            return NotImplemented
        return (
            dict(self.word_window) == dict(other.word_window)
            and dict(self.tag_window) == dict(other.tag_window)
        )

    def __hash__(self) -> int:
        return hash(tuple(self.attributes()))

    def __repr__(self) -> str:
        return f"Context(word_window={dict(self.word_window)}, tag_window={dict(self.tag_window)})"

    def attributes(self) -> Iterator[Tuple[str, Hashable]]:
        """Yields the (attribute-key, value) pairs, e.g. ('word0', 'dog'), ('tag-1', 'DT')."""
        for offset, value in self.word_window.items():
            yield f"{WORD_PREFIX}{offset}", value
        for offset, value in self.tag_window.items():
            yield f"{TAG_PREFIX}{offset}", value

    def is_empty(self) -> bool:
        return not self.word_window and not self.tag_window

    def to_dict(self, codec: "ElementCodec") -> Dict[str, Dict[str, Any]]:
        return {
            "word_window": {str(k): codec.encode(v) for k, v in self.word_window.items()},
            "tag_window": {str(k): codec.encode(v) for k, v in self.tag_window.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], codec: "ElementCodec") -> "Context":
        """
        Rebuilds a context from its persisted form.

        Raises:
            TypeError: If `data` is not a mapping or either window is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"Context must be a mapping, got {type(data).__name__}.")
        windows = {}
        for name in ("word_window", "tag_window"):
            window = data.get(name, {})
            if not isinstance(window, Mapping):
                raise TypeError(f"Context field '{name}' must be a mapping.")
            windows[name] = {k: codec.decode(v) for k, v in window.items()}
        return cls(**windows)


@dataclass(frozen=True)
class Event:
    """A training observation: a context and the class observed in it."""
    context: Context
    label: str


@dataclass(frozen=True)
class Decided:
    """The classifier found evidence and picked `label`."""
    label: str
    probability: float

    @property
    def decided(self) -> bool:
        return True

    def label_or(self, fallback: Callable[[], str]) -> str:
        return self.label


@dataclass(frozen=True)
class NoEvidence:
    """No feature fired for the context; the caller must fall back."""

    @property
    def decided(self) -> bool:
        return False

    def label_or(self, fallback: Callable[[], str]) -> str:
        return fallback()


NO_EVIDENCE = NoEvidence()

Decision = Union[Decided, NoEvidence]


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """
    Result of a save or load call.

    Exactly one of `value` and `error` is meaningful: a successful outcome
    carries the saved or loaded object, a failed one carries the exception
    that stopped the operation.
    """
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value


class ElementCodec(Protocol):
    """Converts window elements to and from their JSON representation."""

    def encode(self, element: Any) -> Any:
        ...

    def decode(self, payload: Any) -> Hashable:
        ...


class StringCodec:
    """Codec for plain string tokens and tags."""

    def encode(self, element: Any) -> str:
        if not isinstance(element, str):
            raise TypeError(f"Expected a string element, got {type(element).__name__}: {element!r}")
        return element

    def decode(self, payload: Any) -> str:
        if not isinstance(payload, str):
            raise TypeError(f"Expected a string element, got {type(payload).__name__}: {payload!r}")
        return payload
