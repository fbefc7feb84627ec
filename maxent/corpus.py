# C:\dev\maxent_tagger\maxent\corpus.py
"""Reading tagged corpora and turning them into training samples.

The corpus format is the Brown corpus layout: one sentence per line, each
token written as `word/tag`. The tag is the text after the last slash, so
words that themselves contain a slash (such as `1/2/cd`) survive parsing.

This module also owns the window templates: `context_at` decides which
neighbouring words and tags go into a `Context`. The classifier itself is
agnostic to these choices.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from tqdm import tqdm

from .lexicon import Lexicon
from .sample import Sample
from .types import Context


@dataclass(frozen=True)
class TaggedWord:
    token: str
    tag: str


@dataclass
class Sentence:
    tagged_words: List[TaggedWord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tagged_words)

    @property
    def words(self) -> List[str]:
        return [t.token for t in self.tagged_words]

    @property
    def tags(self) -> List[str]:
        return [t.tag for t in self.tagged_words]


def parse_brown_line(line: str, line_number: int = 0) -> Sentence:
    """
    Parses one Brown-format line into a sentence.

    Raises:
        ValueError: If a token has no `/tag` part.
    """
    words = []
    for item in line.split():
        token, sep, tag = item.rpartition("/")
        if not sep or not token or not tag:
            raise ValueError(f"Malformed token '{item}' on line {line_number}: expected word/tag.")
        words.append(TaggedWord(token, tag.upper()))
    return Sentence(words)


def context_at(
    words: Sequence[str],
    tags: Sequence[str],
    index: int,
    word_offsets: Iterable[int],
    tag_offsets: Iterable[int],
) -> Context:
    """
    Builds the context of position `index` in a sentence.

    Offsets that fall outside the sentence are left out of the windows. Tag
    offset 0 is always left out, since that tag is what is being predicted.
    """
    word_window = {}
    for offset in word_offsets:
        j = index + offset
        if 0 <= j < len(words):
            word_window[offset] = words[j]
    tag_window = {}
    for offset in tag_offsets:
        j = index + offset
        if offset != 0 and 0 <= j < len(tags):
            tag_window[offset] = tags[j]
    return Context(word_window, tag_window)


class Corpus:
    """An ordered collection of tagged sentences."""

    def __init__(self, sentences: Iterable[Sentence] = ()):
        self.sentences: List[Sentence] = list(sentences)

    def __len__(self) -> int:
        return len(self.sentences)

    def __iter__(self):
        return iter(self.sentences)

    @classmethod
    def from_brown(cls, text: str) -> "Corpus":
        sentences = []
        for number, line in enumerate(text.splitlines(), start=1):
            if line.strip():
                sentences.append(parse_brown_line(line, number))
        return cls(sentences)

    @classmethod
    def load(cls, path: str) -> "Corpus":
        """
        Reads a Brown-format corpus file.

        Raises:
            FileNotFoundError: If the corpus file does not exist.
            ValueError: If a line contains a malformed token.
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            raise FileNotFoundError(f"Corpus file not found at: {path}")
        return cls.from_brown(text)

    def word_count(self) -> int:
        return sum(len(s) for s in self.sentences)

    def split_in_train_and_test(
        self, percentage: float, seed: Optional[int] = None
    ) -> Tuple["Corpus", "Corpus"]:
        """
        Randomly assigns each sentence to a train or a test corpus.

        Args:
            percentage: Chance (0-100) that a sentence goes to the train corpus.
            seed: Seed for the random generator; the same seed gives the same split.

        Returns:
            The `(train, test)` pair. Sentence order is preserved in both.
        """
        if not 0 <= percentage <= 100:
            raise ValueError(f"Train percentage must be between 0 and 100, got {percentage}.")
        rng = np.random.default_rng(seed)
        draws = rng.random(len(self.sentences))
        train, test = [], []
        for sentence, draw in zip(self.sentences, draws):
            (train if draw < percentage / 100.0 else test).append(sentence)
        return Corpus(train), Corpus(test)

    def generate_sample(
        self,
        word_offsets: Iterable[int] = (-1, 0, 1),
        tag_offsets: Iterable[int] = (-2, -1, 1, 2),
        progress: bool = False,
    ) -> Sample:
        """Creates one event per token, with contexts built from the gold tags."""
        word_offsets = tuple(word_offsets)
        tag_offsets = tuple(tag_offsets)
        sample = Sample()
        for sentence in tqdm(self.sentences, desc="Generating Sample", disable=not progress):
            words, tags = sentence.words, sentence.tags
            for i, tag in enumerate(tags):
                sample.add(context_at(words, tags, i, word_offsets, tag_offsets), tag)
        return sample

    def analyse(self) -> pd.DataFrame:
        """
        Counts how often each word occurs with each tag.

        Returns:
            A DataFrame with columns `word`, `tag` and `count`, sorted by word
            and then by decreasing count.
        """
        rows = [(t.token, t.tag) for s in self.sentences for t in s.tagged_words]
        df = pd.DataFrame(rows, columns=["word", "tag"])
        if df.empty:
            return pd.DataFrame(columns=["word", "tag", "count"])
        counts = df.groupby(["word", "tag"]).size().reset_index(name="count")
        return counts.sort_values(["word", "count", "tag"], ascending=[True, False, True]).reset_index(drop=True)

    def build_lexicon(
        self, default_category: str = "NN", default_category_capitalized: str = "NP"
    ) -> Lexicon:
        """Builds a lexicon listing each word's tags by decreasing corpus frequency."""
        lexicon = Lexicon(
            default_category=default_category,
            default_category_capitalized=default_category_capitalized,
        )
        for word, group in self.analyse().groupby("word", sort=False):
            lexicon.add(word, group["tag"].tolist())
        return lexicon
