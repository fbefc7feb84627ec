# C:\dev\maxent_tagger\maxent\data_validation.py

from __future__ import annotations
from typing import Any, Dict, Optional

from .features import FeatureSet
from .sample import Sample


def validate_sample(sample: Sample, feature_set: Optional[FeatureSet] = None) -> Dict[str, Any]:
    """
    Performs a series of sanity checks on a training sample.

    This function looks for events that cannot contribute to training or that
    point at a mismatch between the sample and a feature set, such as:
    -   Events whose context has empty word and tag windows.
    -   Events with an empty label.
    -   Events whose label is not a target label of `feature_set`, which
        means the feature set was generated from a different sample.

    Args:
        sample: The sample to validate.
        feature_set: Optional feature set the sample will be trained against.

    Returns:
        A dictionary summarizing the validation results, containing the total
        `issue_count` and a list of `issues`, where each issue is a
        dictionary detailing the problem.
    """
    issues = []
    known_labels = set(feature_set.labels) if feature_set is not None else None

    for i, event in enumerate(sample):
        if event.context.is_empty():
            issues.append({
                "type": "empty_context_warning",
                "idx": i,
                "message": f"Event {i} has an empty context and activates no feature."
            })
        if not event.label:
            issues.append({
                "type": "empty_label_error",
                "idx": i,
                "message": f"Event {i} has an empty label."
            })
        elif known_labels is not None and event.label not in known_labels:
            issues.append({
                "type": "unknown_label_warning",
                "idx": i,
                "label": event.label,
                "message": f"Event {i} has label '{event.label}', which no feature targets."
            })

    return {"issue_count": len(issues), "issues": issues}
