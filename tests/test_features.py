import pytest

from maxent.features import Feature, FeatureSet
from maxent.types import Context, StringCodec


def _feature_set() -> FeatureSet:
    return FeatureSet([
        Feature("word0", "dog", "NN"),
        Feature("tag-1", "DT", "NN"),
        Feature("word0", "dog", "VB"),
        Feature("word0", "runs", "VBZ"),
    ])


def test_add_deduplicates_and_keeps_positions():
    fs = _feature_set()

    assert fs.add(Feature("word0", "dog", "VB")) == 2
    assert fs.add(Feature("word0", "cat", "NN")) == 4
    assert fs.size() == 5
    assert fs.labels == ("NN", "VB", "VBZ")


def test_feature_indicator():
    feature = Feature("tag-1", "DT", "NN")
    context = Context({0: "dog"}, {-1: "DT"})

    assert feature.applies(context, "NN")
    assert not feature.applies(context, "VB")
    assert not feature.applies(Context({0: "dog"}, {-2: "DT"}), "NN")


def test_candidates_use_attribute_index():
    fs = _feature_set()
    context = Context({0: "dog"}, {-1: "DT"})

    assert sorted(fs.candidates(context)) == [0, 1, 2]
    assert fs.active_features(context, "NN") == [0, 1]
    assert fs.active_features(context, "VBZ") == []
    assert list(fs.candidates(Context({0: "unseen"}, {}))) == []


def test_active_features_match_indicator_scan():
    fs = _feature_set()
    context = Context({0: "dog", 1: "runs"}, {-1: "DT"})

    for label in fs.labels:
        expected = [i for i, f in enumerate(fs) if f.applies(context, label)]
        assert sorted(fs.active_features(context, label)) == expected


def test_index_is_rebuilt_after_add():
    fs = _feature_set().finalize()
    fs.add(Feature("word0", "cat", "NN"))

    assert list(fs.candidates(Context({0: "cat"}, {}))) == [4]


def test_pretty_print_lists_every_feature():
    text = _feature_set().pretty_print()

    assert text.splitlines()[0] == "0: word0=dog => NN"
    assert len(text.splitlines()) == 4


def test_records_round_trip_keeps_positions():
    codec = StringCodec()
    fs = _feature_set()

    restored = FeatureSet.from_records(fs.to_records(codec), codec)

    assert restored == fs
    assert [restored.index_of(f) for f in fs] == [0, 1, 2, 3]


def test_from_records_rejects_duplicates_and_bad_shapes():
    codec = StringCodec()
    with pytest.raises(ValueError):
        FeatureSet.from_records([["word0", "a", "NN"], ["word0", "a", "NN"]], codec)
    with pytest.raises(TypeError):
        FeatureSet.from_records([["word0", "a"]], codec)
    with pytest.raises(TypeError):
        FeatureSet.from_records({"word0": "a"}, codec)
