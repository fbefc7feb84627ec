"""Exception hierarchy for the maximum-entropy tagger.

Input-shape problems raise immediately from the call that detects them.
Persistence calls do not raise these past their boundary; they return them
inside a failed `Outcome` instead.
"""


class MaxEntError(Exception):
    """Base exception for all errors raised by the `maxent` package."""
    pass


class EmptySampleError(MaxEntError, ValueError):
    """Raised when training is requested on a sample with no events."""
    pass


class EmptyFeatureSetError(MaxEntError, ValueError):
    """Raised when training is requested on a feature set with no features."""
    pass


class FeatureSetMismatchError(MaxEntError, ValueError):
    """Raised when a persisted classifier has a weight per feature mismatch.

    Attributes:
        features: Number of features found in the document.
        weights: Number of weights found in the document.
    """

    def __init__(self, message, features=None, weights=None):
        super().__init__(message)
        self.features = features
        self.weights = weights


class ChecksumMismatchError(MaxEntError, ValueError):
    """Raised when persisted weights do not reproduce the stored checksum."""

    def __init__(self, message, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class NumericalInstabilityError(MaxEntError, ArithmeticError):
    """Raised when an update step produces non-finite weights.

    Training on a well-formed, non-empty sample must never get here, so this
    signals a bug rather than bad input.
    """

    def __init__(self, message, iteration=None):
        super().__init__(message)
        self.iteration = iteration
