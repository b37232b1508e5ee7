from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Half-open character range ``[start, end)`` into a text snapshot."""

    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def shifted(self, delta: int) -> TextSpan:
        return TextSpan(self.start + delta, self.end + delta)


@dataclass(frozen=True, slots=True)
class Word:
    """A maximal run of letters and its position among all words of a scan."""

    span: TextSpan
    index: int


@dataclass(frozen=True, slots=True)
class FixationRange:
    """One fixation group inside a word stem."""

    span: TextSpan
    strength: int


@dataclass(frozen=True, slots=True)
class WordAnnotation:
    """Bold/edge split and fixation groups computed for a single word."""

    word: Word
    bold: TextSpan | None
    edge: TextSpan | None
    fixations: tuple[FixationRange, ...] = ()

    @property
    def skipped(self) -> bool:
        return self.bold is None


class RangeRole(str, Enum):
    BOLD = "bold"
    EDGE = "edge"
    FIXATION = "fixation"


@dataclass(frozen=True, slots=True)
class TaggedRange:
    """A flattened annotation range handed to materializers."""

    span: TextSpan
    role: RangeRole
    strength: int = 0


@dataclass(slots=True)
class Document:
    """Represents an input document."""

    doc_id: str
    text: str
