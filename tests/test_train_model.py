"""End-to-end tests for the training, evaluation and tagging scripts."""
from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from maxent.classifier import Classifier
from maxent.lexicon import Lexicon
from maxent.sample import Sample
from scripts import evaluate_model, train_model


@pytest.fixture(autouse=True)
def restore_argv():
    original = sys.argv[:]
    try:
        yield
    finally:
        sys.argv = original


def _write_config(tmp_path: Path) -> Path:
    config = tmp_path / "config.yaml"
    config.write_text(
        """
training:
  max_iterations: 20
  min_improvement: 0.0001
corpus:
  train_percentage: 100
paths:
  sample: models/sample.json
  classifier: models/classifier.json
  lexicon: models/lexicon.json
""".strip(),
        encoding="utf-8",
    )
    return config


def test_train_model_writes_all_artifacts(tmp_path: Path, brown_file: Path, capsys) -> None:
    config = _write_config(tmp_path)
    sys.argv = ["train_model", "--corpus", str(brown_file), "--config", str(config), "--workers", "2"]

    train_model.main()

    models = tmp_path / "models"
    sample = Sample.load(models / "sample.json").unwrap()
    classifier = Classifier.load(models / "classifier.json").unwrap()
    lexicon = Lexicon.load(models / "lexicon.json").unwrap()
    assert sample.size() == 33
    assert classifier.sample_size == 33
    assert lexicon.tag_word_with_defaults("dog") == "NN"
    assert f"Checksum: {classifier.check_sum()}" in capsys.readouterr().out


def test_train_model_exits_on_missing_corpus(tmp_path: Path) -> None:
    config = _write_config(tmp_path)
    sys.argv = ["train_model", "--corpus", str(tmp_path / "missing.txt"), "--config", str(config)]

    with pytest.raises(SystemExit):
        train_model.main()


def test_evaluate_model_writes_disagreements(tmp_path: Path, brown_file: Path, capsys) -> None:
    config = _write_config(tmp_path)
    sys.argv = ["train_model", "--corpus", str(brown_file), "--config", str(config)]
    train_model.main()
    capsys.readouterr()

    out_csv = tmp_path / "reports" / "disagreements.csv"
    sys.argv = [
        "evaluate_model",
        "--corpus", str(brown_file),
        "--classifier", str(tmp_path / "models" / "classifier.json"),
        "--lexicon", str(tmp_path / "models" / "lexicon.json"),
        "--config", str(config),
        "--disagreements-out", str(out_csv),
    ]
    evaluate_model.main()

    out = capsys.readouterr().out
    summary = json.loads(out[out.index("{"): out.rindex("}") + 1])
    assert summary["total_words"] == 33
    assert out_csv.exists()


def test_main_tags_raw_text(tmp_path: Path, brown_file: Path) -> None:
    config = _write_config(tmp_path)
    sys.argv = ["train_model", "--corpus", str(brown_file), "--config", str(config)]
    train_model.main()

    text = tmp_path / "input.txt"
    text.write_text("The dog runs .\n\nA cat sleeps .\n", encoding="utf-8")
    output = tmp_path / "tagged.txt"
    sys.argv = ["main", "--input", str(text), "--output", str(output), "--config", str(config)]
    main_module = importlib.import_module("main")
    main_module.main()

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "The/AT dog/NN runs/VBZ ./."
    assert len(lines) == 2
