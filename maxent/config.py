# C:\dev\maxent_tagger\maxent\config.py
"""Manages the loading and validation of application configuration.

This module defines the `Config` dataclass, which serves as a centralized,
type-safe container for the training and tagging settings, and the
`load_config` function, which reads them from a `config.yaml` file. Keys that
are missing from the YAML file fall back to the dataclass defaults, so a
partial file only needs to name the settings it changes.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

import yaml


@dataclass
class Config:
    """
    A typed configuration object that holds all settings for the tagger.

    Attributes:
        max_iterations: Upper bound on the number of iterative-scaling updates.
        min_improvement: Training stops once an update improves the average
                         conditional log-likelihood by less than this value.
        workers: Number of threads used to accumulate feature expectations.
        train_percentage: Percentage of corpus sentences used for training when
                          a corpus is split into train and test parts.
        split_seed: Seed for the train/test split, for reproducible runs.
        word_offsets: Relative positions placed in the word window of a context.
        tag_offsets: Relative positions placed in the tag window of a context.
        default_category: Tag given by the lexicon to unknown lower-case words.
        default_category_capitalized: Tag given by the lexicon to unknown
                                      capitalized words.
        paths: Output locations for the sample, classifier and lexicon files.
    """
    max_iterations: int = 100
    min_improvement: float = 1e-4
    workers: int = 1
    train_percentage: float = 80.0
    split_seed: int = 0
    word_offsets: Tuple[int, ...] = (-1, 0, 1)
    tag_offsets: Tuple[int, ...] = (-2, -1, 1, 2)
    default_category: str = "NN"
    default_category_capitalized: str = "NP"
    paths: Dict[str, str] = field(default_factory=lambda: {
        "sample": "sample.json",
        "classifier": "classifier.json",
        "lexicon": "lexicon.json",
    })


def _offsets(value: Any, name: str) -> Tuple[int, ...]:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"Configuration key '{name}' must be a list of integers.")
    return tuple(int(v) for v in value)


def load_config(path: str = "config.yaml") -> Config:
    """
    Loads and validates the configuration file into a single Config object.

    Args:
        path: The path to the `config.yaml` file.

    Returns:
        A fully populated `Config` object.

    Raises:
        FileNotFoundError: If the specified `config.yaml` file cannot be found.
        ValueError: If there is an error parsing the YAML file or a value is
                    out of range.
        TypeError: If the root of the YAML file is not a dictionary.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            y = yaml.safe_load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found at: {path}")
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML file at {path}: {e}")

    if y is None:
        y = {}
    if not isinstance(y, dict):
        raise TypeError(f"Configuration file {path} must be a dictionary.")

    defaults = Config()
    training = y.get("training", {}) or {}
    corpus = y.get("corpus", {}) or {}
    windows = y.get("context", {}) or {}
    lexicon = y.get("lexicon", {}) or {}

    cfg = Config(
        max_iterations=int(training.get("max_iterations", defaults.max_iterations)),
        min_improvement=float(training.get("min_improvement", defaults.min_improvement)),
        workers=int(training.get("workers", defaults.workers)),
        train_percentage=float(corpus.get("train_percentage", defaults.train_percentage)),
        split_seed=int(corpus.get("split_seed", defaults.split_seed)),
        word_offsets=_offsets(windows.get("word_offsets", defaults.word_offsets), "word_offsets"),
        tag_offsets=_offsets(windows.get("tag_offsets", defaults.tag_offsets), "tag_offsets"),
        default_category=str(lexicon.get("default_category", defaults.default_category)),
        default_category_capitalized=str(
            lexicon.get("default_category_capitalized", defaults.default_category_capitalized)
        ),
        paths={**defaults.paths, **dict(y.get("paths", {}) or {})},
    )

    if cfg.max_iterations < 0:
        raise ValueError(f"training.max_iterations must be non-negative in {path}.")
    if cfg.workers < 1:
        raise ValueError(f"training.workers must be at least 1 in {path}.")
    if not 0.0 <= cfg.train_percentage <= 100.0:
        raise ValueError(f"corpus.train_percentage must be between 0 and 100 in {path}.")
    return cfg
