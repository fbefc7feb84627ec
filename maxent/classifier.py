# C:\dev\maxent_tagger\maxent\classifier.py
"""Core logic for training and applying the maximum-entropy classifier.

The model is log-linear: p(c | context) is proportional to
exp(sum_i w_i * f_i(context, c)), with one weight per feature of the
`FeatureSet`. Training uses Generalized Iterative Scaling (GIS):

1.  **Compilation**: The sample is turned once into sparse activation arrays.
    Every (event, label) pair gets a row; every feature that fires for that
    pair contributes one (row, feature) entry. The arrays can be split into
    shards so that each iteration's expectations are accumulated in parallel.
2.  **Expectations**: For the current weights, `shard_expectations` returns an
    `Expectations` accumulator holding the model's feature expectations and the
    conditional log-likelihood for one shard. Accumulators are merged only once
    every shard has finished, so an update always sees the complete iteration.
3.  **Update**: `gis_update` returns the next weight vector,
    w_i + (1/C) * ln(E_emp[f_i] / E_model[f_i]), where C is the largest number
    of features active for any (event, label) pair. Features with no empirical
    or model support keep their weight.

Training stops when the average conditional log-likelihood improves by less
than `min_improvement`, or after `max_iterations` updates.
"""
from __future__ import annotations

import hashlib
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from functools import partial, reduce
from typing import Dict, List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from .errors import (
    ChecksumMismatchError,
    EmptyFeatureSetError,
    EmptySampleError,
    FeatureSetMismatchError,
    NumericalInstabilityError,
)
from .features import FeatureSet, candidates_in
from .io_utils import PathLike, guarded, read_document, write_document
from .sample import Sample
from .types import NO_EVIDENCE, Context, Decided, Decision, ElementCodec, Outcome, StringCodec

CLASSIFIER_FORMAT = "maxent-classifier"
CLASSIFIER_VERSION = 1

# Expectations at or below this are treated as zero support.
EPSILON = 1e-12


class State(str, Enum):
    UNTRAINED = "untrained"
    TRAINING = "training"
    TRAINED = "trained"


@dataclass(frozen=True)
class Shard:
    """
    A slice of the compiled training sample.

    Attributes:
        rows: Row id of each activation, `event * n_labels + label`, local to the shard.
        cols: Feature position of each activation.
        observed: Label index observed for each event, -1 when the label is
                  outside the feature set's label universe.
        n_events: Number of events in the shard.
    """
    rows: np.ndarray
    cols: np.ndarray
    observed: np.ndarray
    n_events: int


@dataclass(frozen=True)
class Expectations:
    """Per-iteration accumulator: unnormalized model expectations and log-likelihood."""
    model: np.ndarray
    log_likelihood: float
    events: int

    def merge(self, other: "Expectations") -> "Expectations":
        return Expectations(
            model=self.model + other.model,
            log_likelihood=self.log_likelihood + other.log_likelihood,
            events=self.events + other.events,
        )


@dataclass
class TrainingReport:
    """
    Summary of a `Classifier.train` run.

    Attributes:
        iterations: Number of weight updates performed.
        converged: True when training stopped on the improvement threshold
                   rather than on the iteration limit.
        correction_constant: The GIS constant C used for the updates.
        log_likelihood: Average conditional log-likelihood of the sample before
                        the first update and after every update.
    """
    iterations: int = 0
    converged: bool = False
    correction_constant: float = 1.0
    log_likelihood: List[float] = field(default_factory=list)

    @property
    def improvements(self) -> List[float]:
        ll = self.log_likelihood
        return [b - a for a, b in zip(ll, ll[1:])]

    @property
    def final_log_likelihood(self) -> Optional[float]:
        return self.log_likelihood[-1] if self.log_likelihood else None


def compile_shards(
    sample: Sample, feature_set: FeatureSet, n_shards: int = 1
) -> Tuple[List[Shard], np.ndarray, float]:
    """
    Compiles the sample into sparse activation shards.

    Args:
        sample: The training events.
        feature_set: The features to activate; defines the label universe.
        n_shards: How many contiguous slices of events to produce.

    Returns:
        A tuple containing:
        - The non-empty shards, in sample order.
        - The empirical feature counts (they do not depend on the weights).
        - The GIS correction constant C (at least 1).
    """
    labels = feature_set.labels
    label_index = {label: k for k, label in enumerate(labels)}
    n_labels = len(labels)
    feature_labels = [label_index[f.label] for f in feature_set]
    events = list(sample)

    shards: List[Shard] = []
    empirical = np.zeros(len(feature_set), dtype=np.float64)
    correction = 0
    for chunk in np.array_split(np.arange(len(events)), max(1, n_shards)):
        if not len(chunk):
            continue
        rows: List[int] = []
        cols: List[int] = []
        observed: List[int] = []
        for local, e in enumerate(chunk):
            event = events[e]
            observed.append(label_index.get(event.label, -1))
            for position in feature_set.candidates(event.context):
                rows.append(local * n_labels + feature_labels[position])
                cols.append(position)
        shard = Shard(
            rows=np.asarray(rows, dtype=np.int64),
            cols=np.asarray(cols, dtype=np.int64),
            observed=np.asarray(observed, dtype=np.int64),
            n_events=len(chunk),
        )
        if shard.rows.size:
            hits = shard.observed[shard.rows // n_labels] == shard.rows % n_labels
            empirical += np.bincount(shard.cols[hits], minlength=len(feature_set))
            correction = max(correction, int(np.bincount(shard.rows).max()))
        shards.append(shard)
    return shards, empirical, float(max(correction, 1))


def shard_expectations(weights: np.ndarray, shard: Shard, n_labels: int) -> Expectations:
    """Computes one shard's model expectations under `weights`. Pure: nothing is mutated."""
    n_rows = shard.n_events * n_labels
    scores = np.bincount(shard.rows, weights=weights[shard.cols], minlength=n_rows)
    scores = scores.reshape(shard.n_events, n_labels)
    shifted = scores - scores.max(axis=1, keepdims=True)
    log_probs = shifted - np.log(np.exp(shifted).sum(axis=1, keepdims=True))
    probs = np.exp(log_probs)

    model = np.bincount(shard.cols, weights=probs.ravel()[shard.rows], minlength=weights.shape[0])
    known = shard.observed >= 0
    log_likelihood = float(log_probs[known, shard.observed[known]].sum())
    return Expectations(model=model, log_likelihood=log_likelihood, events=shard.n_events)


def gis_update(
    weights: np.ndarray, empirical: np.ndarray, model: np.ndarray, correction: float
) -> np.ndarray:
    """Returns the next weight vector; features without support keep their weight."""
    updated = weights.copy()
    usable = (empirical > EPSILON) & (model > EPSILON)
    updated[usable] += np.log(empirical[usable] / model[usable]) / correction
    return updated


class Classifier:
    """
    A maximum-entropy classifier over a fixed feature set.

    The classifier starts with all weights at zero and is changed only by
    `train`. Classification is read-only, so a trained classifier can serve
    concurrent `classify` calls.

    Attributes:
        feature_set: The features the weights are aligned with. Features added to
                     it after construction are ignored by `classify` and `save`.
        sample: The training sample, or None for a classifier loaded from disk.
        report: The `TrainingReport` of the last successful `train` call.
    """

    def __init__(self, feature_set: FeatureSet, sample: Optional[Sample] = None):
        self.feature_set = feature_set
        self._index = feature_set.activation_index()
        self.sample = sample
        self.report: Optional[TrainingReport] = None
        self._labels: Tuple[str, ...] = feature_set.labels
        label_index = {label: k for k, label in enumerate(self._labels)}
        self._feature_labels = np.asarray([label_index[f.label] for f in feature_set], dtype=np.int64)
        self._weights = np.zeros(len(feature_set), dtype=np.float64)
        self._sample_size = len(sample) if sample is not None else 0
        self._state = State.UNTRAINED

    def __repr__(self) -> str:
        return (
            f"Classifier(features={len(self._weights)}, labels={len(self._labels)}, "
            f"state={self._state.value})"
        )

    @property
    def state(self) -> State:
        return self._state

    @property
    def labels(self) -> Tuple[str, ...]:
        return self._labels

    @property
    def weights(self) -> np.ndarray:
        view = self._weights.view()
        view.flags.writeable = False
        return view

    @property
    def sample_size(self) -> int:
        return len(self.sample) if self.sample is not None else self._sample_size

    def train(
        self,
        max_iterations: int = 100,
        min_improvement: float = 1e-4,
        workers: Optional[int] = None,
        progress: bool = True,
    ) -> TrainingReport:
        """
        Estimates the weights with Generalized Iterative Scaling.

        Args:
            max_iterations: Upper bound on the number of weight updates.
            min_improvement: Training stops once an update raises the average
                             conditional log-likelihood by less than this.
            workers: Number of shards whose expectations are accumulated in
                     parallel threads. None or 1 runs single-threaded.
            progress: Show a tqdm progress bar over the iterations.

        Returns:
            The `TrainingReport` for this run.

        Raises:
            EmptySampleError: If the sample has no events.
            EmptyFeatureSetError: If the feature set has no features.
            FeatureSetMismatchError: If features were added after construction.
            NumericalInstabilityError: If an update produced non-finite weights.
            ValueError: If `max_iterations` is negative.
        """
        if self.sample is None or len(self.sample) == 0:
            raise EmptySampleError("Cannot train a classifier on an empty sample.")
        if len(self.feature_set) == 0:
            raise EmptyFeatureSetError("Cannot train a classifier without features.")
        if len(self.feature_set) != len(self._weights):
            raise FeatureSetMismatchError(
                "The feature set changed after the classifier was created.",
                features=len(self.feature_set),
                weights=len(self._weights),
            )
        if max_iterations < 0:
            raise ValueError(f"max_iterations must be non-negative, got {max_iterations}.")

        previous_state = self._state
        self._state = State.TRAINING
        try:
            weights, report = self._iterate(max_iterations, min_improvement, workers, progress)
        except BaseException:
            self._state = previous_state
            raise
        self._weights = weights
        self._sample_size = len(self.sample)
        self.report = report
        self._state = State.TRAINED
        return report

    def _iterate(
        self, max_iterations: int, min_improvement: float, workers: Optional[int], progress: bool
    ) -> Tuple[np.ndarray, TrainingReport]:
        n_shards = max(1, workers or 1)
        n_events = len(self.sample)
        n_labels = len(self._labels)
        shards, empirical, correction = compile_shards(self.sample, self.feature_set, n_shards)
        executor = ThreadPoolExecutor(max_workers=n_shards) if len(shards) > 1 else None

        def expectations_for(w: np.ndarray) -> Expectations:
            step = partial(shard_expectations, w, n_labels=n_labels)
            parts = list(executor.map(step, shards)) if executor else [step(s) for s in shards]
            return reduce(Expectations.merge, parts)

        weights = self._weights.copy()
        bar = tqdm(range(1, max_iterations + 1), desc="Training", disable=not progress)
        try:
            expectations = expectations_for(weights)
            report = TrainingReport(
                correction_constant=correction,
                log_likelihood=[expectations.log_likelihood / n_events],
            )
            for iteration in bar:
                candidate = gis_update(weights, empirical, expectations.model, correction)
                if not np.all(np.isfinite(candidate)):
                    raise NumericalInstabilityError(
                        f"Iteration {iteration} produced non-finite weights.", iteration=iteration
                    )
                weights = candidate
                expectations = expectations_for(weights)
                log_likelihood = expectations.log_likelihood / n_events
                improvement = log_likelihood - report.log_likelihood[-1]
                report.log_likelihood.append(log_likelihood)
                report.iterations = iteration
                bar.set_postfix(ll=f"{log_likelihood:.5f}", gain=f"{improvement:.2e}")
                if improvement < min_improvement:
                    report.converged = True
                    break
        finally:
            bar.close()
            if executor:
                executor.shutdown()
        return weights, report

    def _scores(self, context: Context) -> Tuple[np.ndarray, int]:
        scores = np.zeros(len(self._labels), dtype=np.float64)
        fired = 0
        for position in candidates_in(self._index, context):
            scores[self._feature_labels[position]] += self._weights[position]
            fired += 1
        return scores, fired

    @staticmethod
    def _normalize(scores: np.ndarray) -> np.ndarray:
        shifted = np.exp(scores - scores.max())
        return shifted / shifted.sum()

    def probabilities(self, context: Context) -> Dict[str, float]:
        """
        Computes p(label | context) for every label in the label universe.

        A context that activates no feature gets the uniform distribution.
        """
        if not self._labels:
            return {}
        scores, _ = self._scores(context)
        probs = self._normalize(scores)
        return {label: float(p) for label, p in zip(self._labels, probs)}

    def classify(self, context: Context) -> Decision:
        """
        Picks the most probable label for `context`.

        Returns:
            `Decided(label, probability)` for the arg-max label, ties going to
            the label seen first in training, or `NO_EVIDENCE` when no feature
            fires for the context. Callers fall back to a default tagger on
            `NO_EVIDENCE`.
        """
        scores, fired = self._scores(context)
        if not fired:
            return NO_EVIDENCE
        probs = self._normalize(scores)
        best = int(np.argmax(probs))
        return Decided(self._labels[best], float(probs[best]))

    def check_sum(self) -> str:
        """SHA-256 hex digest of the weight vector as little-endian float64."""
        data = np.ascontiguousarray(self._weights, dtype="<f8").tobytes()
        return hashlib.sha256(data).hexdigest()

    def to_dict(self, codec: ElementCodec) -> dict:
        return {
            "format": CLASSIFIER_FORMAT,
            "version": CLASSIFIER_VERSION,
            "state": self._state.value,
            "sample_size": self.sample_size,
            "checksum": self.check_sum(),
            "features": FeatureSet(self.feature_set[:len(self._weights)]).to_records(codec),
            "weights": [float(w) for w in self._weights],
        }

    @classmethod
    def from_dict(cls, data: dict, codec: ElementCodec) -> "Classifier":
        """
        Rebuilds a classifier from its persisted document.

        Raises:
            TypeError: If the feature or weight lists are malformed.
            ValueError: If a weight is not a finite number or the state is unknown.
            FeatureSetMismatchError: If there is not exactly one weight per feature.
            ChecksumMismatchError: If the weights do not reproduce the stored checksum.
        """
        feature_set = FeatureSet.from_records(data.get("features"), codec)
        raw_weights = data.get("weights")
        if not isinstance(raw_weights, list):
            raise TypeError("Expected a 'weights' key with a list of numbers.")
        if len(raw_weights) != len(feature_set):
            raise FeatureSetMismatchError(
                f"Classifier document has {len(feature_set)} features but {len(raw_weights)} weights.",
                features=len(feature_set),
                weights=len(raw_weights),
            )
        weights = np.asarray(raw_weights, dtype=np.float64)
        if not np.all(np.isfinite(weights)):
            raise ValueError("Classifier document contains non-finite weights.")

        classifier = cls(feature_set)
        classifier._weights = weights
        classifier._sample_size = int(data.get("sample_size", 0))
        state = data.get("state", State.TRAINED.value)
        if state not in (State.UNTRAINED.value, State.TRAINED.value):
            raise ValueError(f"Classifier document has an invalid state: {state!r}")
        classifier._state = State(state)

        expected = data.get("checksum")
        actual = classifier.check_sum()
        if expected is not None and expected != actual:
            raise ChecksumMismatchError(
                "Classifier weights do not match the stored checksum.", expected=expected, actual=actual
            )
        return classifier

    def save(self, path: PathLike, codec: ElementCodec = StringCodec()) -> Outcome["Classifier"]:
        """
        Writes the feature list, weights, checksum and sample size to JSON.

        Returns:
            A successful `Outcome` holding this classifier, or a failed one
            holding the error. An existing file is left untouched on failure.
        """
        def _save() -> "Classifier":
            write_document(path, self.to_dict(codec))
            return self

        return guarded(_save)

    @classmethod
    def load(cls, path: PathLike, codec: ElementCodec = StringCodec()) -> Outcome["Classifier"]:
        """Reads a classifier written by `save`; see `from_dict` for the rejection rules."""
        return guarded(lambda: cls.from_dict(read_document(path, CLASSIFIER_FORMAT), codec))
