# C:\dev\maxent_tagger\maxent\lexicon.py
"""Word -> tag lexicon and the lexicon-based baseline tagger.

The lexicon plays two roles next to the classifier. At test time it tags a
sentence first so that the classifier has tag windows to look at, and it is
the fallback whenever the classifier reports `NO_EVIDENCE` for a word.
"""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .io_utils import PathLike, guarded, read_document, write_document
from .types import Outcome

LEXICON_FORMAT = "maxent-lexicon"
LEXICON_VERSION = 1


class Lexicon:
    """
    Maps words to their known tags, most frequent tag first.

    Attributes:
        default_category: Tag for unknown words.
        default_category_capitalized: Tag for unknown words that start with
                                      an upper-case letter.
    """

    def __init__(
        self,
        entries: Optional[Dict[str, Sequence[str]]] = None,
        default_category: str = "NN",
        default_category_capitalized: str = "NP",
    ):
        self._entries: Dict[str, List[str]] = {}
        self.default_category = default_category
        self.default_category_capitalized = default_category_capitalized
        for word, tags in (entries or {}).items():
            self.add(word, tags)

    def add(self, word: str, tags: Iterable[str]) -> None:
        """Appends `tags` to the entry for `word`, keeping the existing order."""
        known = self._entries.setdefault(word, [])
        for tag in tags:
            if tag not in known:
                known.append(tag)

    def tags_for(self, word: str) -> List[str]:
        tags = self._entries.get(word)
        if tags is None:
            tags = self._entries.get(word.lower(), [])
        return list(tags)

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, word: object) -> bool:
        return word in self._entries

    def set_default_categories(self, default: str, capitalized: str) -> None:
        self.default_category = default
        self.default_category_capitalized = capitalized

    def tag_word_with_defaults(self, word: str) -> str:
        """
        Returns the most frequent known tag of `word`, or a default category.

        Unknown words get `default_category_capitalized` when they start with
        an upper-case letter and `default_category` otherwise.
        """
        tags = self.tags_for(word)
        if tags:
            return tags[0]
        if word[:1].isupper():
            return self.default_category_capitalized
        return self.default_category

    def to_dict(self) -> dict:
        return {
            "format": LEXICON_FORMAT,
            "version": LEXICON_VERSION,
            "default_category": self.default_category,
            "default_category_capitalized": self.default_category_capitalized,
            "entries": self._entries,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Lexicon":
        entries = data.get("entries")
        if not isinstance(entries, dict):
            raise TypeError("Expected an 'entries' key with an object of word -> tags.")
        for word, tags in entries.items():
            if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
                raise TypeError(f"Lexicon entry for '{word}' is not a list of tags.")
        return cls(
            entries,
            default_category=str(data.get("default_category", "NN")),
            default_category_capitalized=str(data.get("default_category_capitalized", "NP")),
        )

    def save(self, path: PathLike) -> Outcome["Lexicon"]:
        def _save() -> "Lexicon":
            write_document(path, self.to_dict())
            return self

        return guarded(_save)

    @classmethod
    def load(cls, path: PathLike) -> Outcome["Lexicon"]:
        return guarded(lambda: cls.from_dict(read_document(path, LEXICON_FORMAT)))


class LexiconTagger:
    """Baseline tagger: every word gets its most frequent lexicon tag."""

    def __init__(self, lexicon: Lexicon):
        self.lexicon = lexicon

    def tag_with_lexicon(self, words: Sequence[str]) -> List[Tuple[str, str]]:
        return [(word, self.lexicon.tag_word_with_defaults(word)) for word in words]
