import json
from dataclasses import dataclass
from pathlib import Path

import pytest

from maxent.features import Feature, FeatureSet
from maxent.sample import Sample
from maxent.types import Context


def test_add_and_size(scenario_sample: Sample):
    assert scenario_sample.size() == 3
    assert len(scenario_sample) == 3
    assert scenario_sample.labels == ["DT", "NN", "VBZ"]

    scenario_sample.add(Context({0: "the"}, {}), "DT")
    assert scenario_sample.size() == 4


def test_add_rejects_empty_label():
    with pytest.raises(ValueError):
        Sample().add(Context({0: "x"}, {}), "")


def test_generate_features_scenario(scenario_sample: Sample):
    fs = scenario_sample.generate_features(FeatureSet())

    assert list(fs) == [
        Feature("word0", "the", "DT"),
        Feature("word0", "dog", "NN"),
        Feature("tag-1", "DT", "NN"),
        Feature("word0", "runs", "VBZ"),
        Feature("tag-1", "NN", "VBZ"),
    ]


def test_generate_features_is_closed_world(scenario_sample: Sample):
    fs = scenario_sample.generate_features()
    observed = {
        (key, value, event.label)
        for event in scenario_sample
        for key, value in event.context.attributes()
    }

    assert {(f.key, f.value, f.label) for f in fs} == observed
    assert Feature("word0", "cat", "NN") not in fs


def test_save_and_load_round_trip(tmp_path: Path, scenario_sample: Sample):
    path = tmp_path / "sample.json"

    saved = scenario_sample.save(path)
    loaded = Sample.load(path)

    assert saved.ok and saved.value is scenario_sample
    assert loaded.ok
    assert loaded.value.size() == scenario_sample.size()
    assert list(loaded.value) == list(scenario_sample)


def test_saved_document_shape(tmp_path: Path, scenario_sample: Sample):
    path = tmp_path / "sample.json"
    scenario_sample.save(path)

    data = json.loads(path.read_text(encoding="utf-8"))

    assert data["format"] == "maxent-sample"
    assert data["events"][1] == {"word_window": {"0": "dog"}, "tag_window": {"-1": "DT"}, "label": "NN"}


@dataclass(frozen=True)
class Morph:
    lemma: str
    suffix: str


class MorphCodec:
    def encode(self, element):
        return {"lemma": element.lemma, "suffix": element.suffix}

    def decode(self, payload):
        return Morph(payload["lemma"], payload["suffix"])


class PassThroughCodec:
    def encode(self, element):
        return element

    def decode(self, payload):
        return payload


def test_load_uses_caller_codec(tmp_path: Path):
    path = tmp_path / "sample.json"
    sample = Sample()
    sample.add(Context({0: Morph("run", "s")}, {}), "VBZ")
    codec = MorphCodec()

    assert sample.save(path, codec).ok
    loaded = Sample.load(path, codec).unwrap()

    assert loaded == sample
    assert list(loaded.generate_features()) == [Feature("word0", Morph("run", "s"), "VBZ")]


def test_load_reports_failures_without_raising(tmp_path: Path):
    missing = Sample.load(tmp_path / "missing.json")
    assert not missing.ok
    assert isinstance(missing.error, FileNotFoundError)

    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    assert isinstance(Sample.load(corrupt).error, ValueError)

    wrong = tmp_path / "wrong.json"
    wrong.write_text(json.dumps({"format": "maxent-sample", "events": {}}), encoding="utf-8")
    assert isinstance(Sample.load(wrong).error, TypeError)


def test_failed_save_keeps_previous_file(tmp_path: Path, scenario_sample: Sample):
    path = tmp_path / "sample.json"
    assert scenario_sample.save(path).ok
    before = path.read_text(encoding="utf-8")

    broken = Sample()
    broken.add(Context({0: object()}, {}), "NN")
    outcome = broken.save(path, PassThroughCodec())

    assert not outcome.ok
    assert path.read_text(encoding="utf-8") == before
    assert list(tmp_path.iterdir()) == [path]


def test_default_codec_refuses_to_save_non_string_elements(tmp_path: Path):
    sample = Sample()
    sample.add(Context({0: 5}, {}), "CD")
    path = tmp_path / "sample.json"

    outcome = sample.save(path)

    assert not outcome.ok
    assert isinstance(outcome.error, TypeError)
    assert list(tmp_path.iterdir()) == []
