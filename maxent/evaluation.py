# C:\dev\maxent_tagger\maxent\evaluation.py
"""Tagging sentences with the classifier and measuring it against gold tags.

Tagging a sentence is a two-pass affair. The lexicon tagger first assigns
every word its most frequent tag; those tags fill the tag windows of the
contexts the classifier sees. The classifier then decides each word, and
whenever it reports `NO_EVIDENCE` the lexicon's default tag is used instead.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import pandas as pd

from .classifier import Classifier
from .corpus import Corpus, context_at
from .lexicon import LexiconTagger


@dataclass(frozen=True)
class TaggedDecision:
    """
    The tagging outcome for one word.

    Attributes:
        word: The word.
        lexicon_tag: The tag the lexicon tagger assigned.
        tag: The final tag.
        fallback: True when the classifier had no evidence and the lexicon's
                  default tag was used.
    """
    word: str
    lexicon_tag: str
    tag: str
    fallback: bool


def tag_sentence(
    words: Sequence[str],
    tagger: LexiconTagger,
    classifier: Classifier,
    word_offsets: Iterable[int] = (-1, 0, 1),
    tag_offsets: Iterable[int] = (-2, -1, 1, 2),
) -> List[TaggedDecision]:
    word_offsets = tuple(word_offsets)
    tag_offsets = tuple(tag_offsets)
    lexicon_tags = [tag for _, tag in tagger.tag_with_lexicon(words)]
    out = []
    for i, word in enumerate(words):
        context = context_at(words, lexicon_tags, i, word_offsets, tag_offsets)
        decision = classifier.classify(context)
        tag = decision.label_or(lambda: tagger.lexicon.tag_word_with_defaults(word))
        out.append(TaggedDecision(word, lexicon_tags[i], tag, not decision.decided))
    return out


@dataclass
class EvaluationReport:
    """
    Per-word results of tagging a test corpus.

    Attributes:
        results: One row per word with columns `sentence`, `index`, `word`,
                 `gold`, `lexicon`, `maxent` and `fallback`.
    """
    results: pd.DataFrame

    @property
    def total_words(self) -> int:
        return len(self.results)

    def _rate(self, mask: pd.Series) -> float:
        return float(mask.mean()) if len(mask) else 0.0

    @property
    def lexicon_accuracy(self) -> float:
        return self._rate(self.results["lexicon"] == self.results["gold"])

    @property
    def maxent_accuracy(self) -> float:
        return self._rate(self.results["maxent"] == self.results["gold"])

    @property
    def fallback_rate(self) -> float:
        return self._rate(self.results["fallback"])

    def disagreements(self) -> pd.DataFrame:
        """Rows where the final tag differs from the gold tag."""
        return self.results[self.results["maxent"] != self.results["gold"]].reset_index(drop=True)

    def summary(self) -> dict:
        return {
            "total_words": self.total_words,
            "lexicon_accuracy": self.lexicon_accuracy,
            "maxent_accuracy": self.maxent_accuracy,
            "fallback_rate": self.fallback_rate,
        }


def evaluate(
    test_corpus: Corpus,
    tagger: LexiconTagger,
    classifier: Classifier,
    word_offsets: Iterable[int] = (-1, 0, 1),
    tag_offsets: Iterable[int] = (-2, -1, 1, 2),
) -> EvaluationReport:
    """
    Tags every sentence of `test_corpus` and compares the result to the gold tags.

    Args:
        test_corpus: The held-out sentences.
        tagger: The lexicon tagger used for the tag windows and as fallback.
        classifier: The trained classifier.
        word_offsets: Word-window offsets, as used when generating the sample.
        tag_offsets: Tag-window offsets, as used when generating the sample.

    Returns:
        An `EvaluationReport` with the per-word results.
    """
    rows = []
    for s_idx, sentence in enumerate(test_corpus):
        decisions = tag_sentence(sentence.words, tagger, classifier, word_offsets, tag_offsets)
        for i, (decision, gold) in enumerate(zip(decisions, sentence.tags)):
            rows.append({
                "sentence": s_idx,
                "index": i,
                "word": decision.word,
                "gold": gold,
                "lexicon": decision.lexicon_tag,
                "maxent": decision.tag,
                "fallback": decision.fallback,
            })
    columns = ["sentence", "index", "word", "gold", "lexicon", "maxent", "fallback"]
    return EvaluationReport(pd.DataFrame(rows, columns=columns))
