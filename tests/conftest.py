"""Test configuration helpers for ensuring local imports resolve."""
from __future__ import annotations

import sys
from pathlib import Path


def _ensure_project_root_on_path() -> None:
    project_root = Path(__file__).resolve().parents[1]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


_ensure_project_root_on_path()

import pytest

from maxent.sample import Sample
from maxent.types import Context

BROWN_EXCERPT = """\
The/at dog/nn runs/vbz ./.
The/at cat/nn sleeps/vbz ./.
A/at dog/nn barks/vbz ./.
The/at old/jj dog/nn runs/vbz ./.
A/at cat/nn runs/vbz ./.
The/at young/jj cat/nn sleeps/vbz ./.
Dogs/nns run/vb ./.
The/at cats/nns run/vb ./.
"""


@pytest.fixture
def brown_text() -> str:
    return BROWN_EXCERPT


@pytest.fixture
def brown_file(tmp_path: Path) -> Path:
    path = tmp_path / "browntag_excerpt.txt"
    path.write_text(BROWN_EXCERPT, encoding="utf-8")
    return path


@pytest.fixture
def scenario_sample() -> Sample:
    """The three-event sample: 'the' -> DT, 'dog' after DT -> NN, 'runs' after NN -> VBZ."""
    sample = Sample()
    sample.add(Context({0: "the"}, {}), "DT")
    sample.add(Context({0: "dog"}, {-1: "DT"}), "NN")
    sample.add(Context({0: "runs"}, {-1: "NN"}), "VBZ")
    return sample
