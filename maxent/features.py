# C:\dev\maxent_tagger\maxent\features.py
"""Binary indicator features and the indexed set that holds them.

A `Feature` is the indicator f(context, label) = 1 iff the context contains
the attribute `key` with value `value` and `label` equals the feature's
target label. The `FeatureSet` gives every feature a stable position (which
lines up with the classifier's weight vector) and keeps an index from
(key, value) to the positions of all features on that attribute, so scoring
a context only touches the features its attributes can activate.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Hashable, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .types import Context, ElementCodec

AttributeKey = Tuple[str, Hashable]


def candidates_in(index: Mapping[AttributeKey, Tuple[int, ...]], context: Context) -> Iterator[int]:
    """Yields the positions `index` lists for each attribute of `context`."""
    for attribute in context.attributes():
        yield from index.get(attribute, ())


@dataclass(frozen=True)
class Feature:
    key: str
    value: Hashable
    label: str

    def applies(self, context: Context, label: str) -> bool:
        if label != self.label:
            return False
        return any(k == self.key and v == self.value for k, v in context.attributes())

    def __str__(self) -> str:
        return f"{self.key}={self.value} => {self.label}"


class FeatureSet:
    """
    An ordered, deduplicated collection of features.

    Positions are assigned in insertion order and never change, so a weight
    vector saved next to the feature list lines up again after reloading.

    Attributes:
        labels: The target-label universe, in order of first appearance.
    """

    def __init__(self, features: Iterable[Feature] = ()):
        self._features: List[Feature] = []
        self._positions: Dict[Feature, int] = {}
        self._labels: List[str] = []
        self._label_set: set = set()
        self._index: Optional[Dict[AttributeKey, Tuple[int, ...]]] = None
        for feature in features:
            self.add(feature)

    def add(self, feature: Feature) -> int:
        """Adds `feature` if unseen and returns its position."""
        position = self._positions.get(feature)
        if position is not None:
            return position
        position = len(self._features)
        self._features.append(feature)
        self._positions[feature] = position
        if feature.label not in self._label_set:
            self._label_set.add(feature.label)
            self._labels.append(feature.label)
        self._index = None
        return position

    def size(self) -> int:
        return len(self._features)

    def __len__(self) -> int:
        return len(self._features)

    def __iter__(self) -> Iterator[Feature]:
        return iter(self._features)

    def __getitem__(self, position: int) -> Feature:
        return self._features[position]

    def __contains__(self, feature: object) -> bool:
        return feature in self._positions

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FeatureSet):
            return NotImplemented
        return self._features == other._features

    def index_of(self, feature: Feature) -> int:
        """Returns the position of `feature`, raising KeyError if it is not in the set."""
        return self._positions[feature]

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(self._labels)

    def finalize(self) -> "FeatureSet":
        """Builds the (key, value) -> positions activation index."""
        index: Dict[AttributeKey, List[int]] = {}
        for position, feature in enumerate(self._features):
            index.setdefault((feature.key, feature.value), []).append(position)
        self._index = {k: tuple(v) for k, v in index.items()}
        return self

    def activation_index(self) -> Mapping[AttributeKey, Tuple[int, ...]]:
        """
        Returns the current activation index as a read-only snapshot.

        `add` replaces the index instead of changing it, so the snapshot keeps
        describing exactly the features present when it was taken.
        """
        index = self._index
        if index is None:
            index = self.finalize()._index
        return MappingProxyType(index)

    def candidates(self, context: Context) -> Iterator[int]:
        """Yields the position of every feature activated by some attribute of `context`."""
        return candidates_in(self.activation_index(), context)

    def active_features(self, context: Context, label: str) -> List[int]:
        """Positions of the features that fire for `context` and `label`."""
        return [i for i in self.candidates(context) if self._features[i].label == label]

    def pretty_print(self) -> str:
        return "\n".join(f"{i}: {feature}" for i, feature in enumerate(self._features))

    def to_records(self, codec: ElementCodec) -> List[List[Any]]:
        return [[f.key, codec.encode(f.value), f.label] for f in self._features]

    @classmethod
    def from_records(cls, records: Sequence[Any], codec: ElementCodec) -> "FeatureSet":
        """
        Rebuilds a feature set from `[key, value, label]` triples.

        Raises:
            TypeError: If `records` is not a list or a record is not a triple.
            ValueError: If the records contain a duplicate feature, which would
                        shift every later position.
        """
        if not isinstance(records, list):
            raise TypeError("Expected a list of [key, value, label] feature records.")
        feature_set = cls()
        for i, record in enumerate(records):
            if not isinstance(record, (list, tuple)) or len(record) != 3:
                raise TypeError(f"Feature record at index {i} is not a [key, value, label] triple.")
            key, value, label = record
            feature = Feature(str(key), codec.decode(value), str(label))
            if feature_set.add(feature) != i:
                raise ValueError(f"Duplicate feature record at index {i}: {feature}")
        return feature_set.finalize()
