# C:\dev\maxent_tagger\maxent\sample.py
"""The training sample: an ordered list of (context, label) events.

Besides holding the events, the sample is where features come from. Feature
induction is closed-world: `generate_features` only creates features for
attribute/value/label combinations that were actually observed, so the
feature count is bounded by the diversity of the training data rather than by
the product of all attributes and labels.
"""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from .features import Feature, FeatureSet
from .io_utils import PathLike, guarded, read_document, write_document
from .types import Context, ElementCodec, Event, Outcome, StringCodec

SAMPLE_FORMAT = "maxent-sample"
SAMPLE_VERSION = 1


class Sample:
    """An ordered sequence of training events."""

    def __init__(self, events: Iterable[Event] = ()):
        self._events: List[Event] = list(events)

    def add(self, context: Context, label: str) -> Event:
        if not isinstance(label, str) or not label:
            raise ValueError(f"Event label must be a non-empty string, got {label!r}.")
        event = Event(context, label)
        self._events.append(event)
        return event

    def size(self) -> int:
        return len(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __getitem__(self, i: int) -> Event:
        return self._events[i]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sample):
            return NotImplemented
        return self._events == other._events

    def __repr__(self) -> str:
        return f"Sample(size={len(self._events)})"

    @property
    def labels(self) -> List[str]:
        return list(dict.fromkeys(e.label for e in self._events))

    def generate_features(self, feature_set: Optional[FeatureSet] = None) -> FeatureSet:
        """
        Adds one feature per observed (attribute, value, label) combination.

        Args:
            feature_set: The set to extend. A new one is created if omitted.

        Returns:
            The extended feature set, with its activation index rebuilt.
        """
        if feature_set is None:
            feature_set = FeatureSet()
        for event in self._events:
            for key, value in event.context.attributes():
                feature_set.add(Feature(key, value, event.label))
        return feature_set.finalize()

    def to_dict(self, codec: ElementCodec) -> dict:
        events = []
        for event in self._events:
            record = event.context.to_dict(codec)
            record["label"] = event.label
            events.append(record)
        return {"format": SAMPLE_FORMAT, "version": SAMPLE_VERSION, "events": events}

    @classmethod
    def from_dict(cls, data: dict, codec: ElementCodec) -> "Sample":
        """
        Rebuilds a sample from its persisted document.

        Raises:
            TypeError: If "events" is missing or not a list of objects.
            ValueError: If an event has no usable label.
        """
        items = data.get("events")
        if not isinstance(items, list):
            raise TypeError("Expected an 'events' key with a list of objects.")
        sample = cls()
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise TypeError(f"Event at index {i} is not an object.")
            label = item.get("label")
            if not isinstance(label, str) or not label:
                raise ValueError(f"Event at index {i} has no valid label: {label!r}")
            sample.add(Context.from_dict(item, codec), label)
        return sample

    def save(self, path: PathLike, codec: ElementCodec = StringCodec()) -> Outcome["Sample"]:
        """
        Writes the full event sequence to a JSON document.

        Returns:
            A successful `Outcome` holding this sample, or a failed one holding
            the I/O or encoding error. The target file is left untouched on failure.
        """
        def _save() -> "Sample":
            write_document(path, self.to_dict(codec))
            return self

        return guarded(_save)

    @classmethod
    def load(cls, path: PathLike, codec: ElementCodec = StringCodec()) -> Outcome["Sample"]:
        """
        Reads a sample written by `save`.

        Args:
            path: The JSON document to read.
            codec: Decodes the window elements; pass a domain codec when the
                   windows hold something other than plain strings.
        """
        return guarded(lambda: cls.from_dict(read_document(path, SAMPLE_FORMAT), codec))
