# C:\dev\maxent_tagger\maxent\io_utils.py
"""Provides utility functions for loading and saving model documents.

Samples, classifiers and lexicons are all persisted as JSON documents with a
`format` marker and a `version`. `read_document` checks that marker so that,
for example, a sample file handed to the classifier loader is rejected with a
clear message. `write_document` writes to a temporary file next to the target
and only replaces the target once the write has completed, so a failing save
never leaves a truncated file behind. `guarded` turns the exceptions raised by
a persistence routine into an `Outcome`.
"""
from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, Dict, TypeVar, Union

from .errors import MaxEntError
from .types import Outcome

T = TypeVar("T")

PathLike = Union[str, "os.PathLike[str]"]

PERSISTENCE_ERRORS = (OSError, ValueError, TypeError, KeyError, MaxEntError)


def read_document(path: PathLike, expected_format: str) -> Dict[str, Any]:
    """
    Loads a JSON document and checks its format marker.

    Args:
        path: The path to the JSON file.
        expected_format: The value the document's "format" key must have.

    Returns:
        The parsed document as a dictionary.

    Raises:
        FileNotFoundError: If the file at the specified path does not exist.
        ValueError: If the file is not valid JSON or has the wrong format marker.
        TypeError: If the root of the document is not a JSON object.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Document not found at: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Error decoding JSON from {path}: {e}")

    if not isinstance(data, dict):
        raise TypeError(f"Expected a JSON object at the root of {path}")

    found = data.get("format")
    if found != expected_format:
        raise ValueError(f"Expected a '{expected_format}' document in {path}, found '{found}'.")
    return data


def write_document(path: PathLike, data: Dict[str, Any]) -> Path:
    """
    Saves a JSON document atomically.

    The document is written with indentation for readability into a temporary
    file in the destination directory, which then replaces `path`.

    Args:
        path: The destination path for the output JSON file.
        data: The JSON-serializable document.

    Returns:
        The destination path.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, target)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return target


def guarded(operation: Callable[[], T]) -> Outcome[T]:
    """Runs a persistence operation and wraps its result or failure in an Outcome."""
    try:
        return Outcome.success(operation())
    except PERSISTENCE_ERRORS as e:
        return Outcome.failure(e)
