"""
Drive segmentation and annotation over a whole buffer.

The resulting :class:`AnnotationStream` is tied to the text snapshot and the
configuration it was computed from; offsets are meaningless for any other
snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Sequence

from .annotator import annotate_word
from .config import FixationConfig, validate_config
from .models import RangeRole, TaggedRange, Word, WordAnnotation
from .segmentation import segment


def iter_annotations(text: str, config: FixationConfig) -> Iterator[WordAnnotation]:
    """Lazily annotate every word of ``text`` in buffer order."""
    for word in segment(text):
        yield annotate_word(word, config)


def flatten_annotation(annotation: WordAnnotation) -> Iterator[TaggedRange]:
    """Yield a word's ranges: bold, its nested fixations, then the edge."""
    if annotation.bold is not None:
        yield TaggedRange(span=annotation.bold, role=RangeRole.BOLD)
        for fixation in annotation.fixations:
            yield TaggedRange(
                span=fixation.span, role=RangeRole.FIXATION, strength=fixation.strength
            )
    if annotation.edge is not None:
        yield TaggedRange(span=annotation.edge, role=RangeRole.EDGE)


@dataclass(frozen=True, slots=True)
class AnnotationStream(Sequence[WordAnnotation]):
    """Ordered word annotations for one text snapshot."""

    text: str
    config: FixationConfig
    annotations: tuple[WordAnnotation, ...] = ()

    def __getitem__(self, index: Any) -> Any:
        return self.annotations[index]

    def __len__(self) -> int:
        return len(self.annotations)

    def __iter__(self) -> Iterator[WordAnnotation]:
        return iter(self.annotations)

    def words(self) -> list[Word]:
        return [annotation.word for annotation in self.annotations]

    def ranges(self) -> Iterator[TaggedRange]:
        for annotation in self.annotations:
            yield from flatten_annotation(annotation)


def build_stream(text: str, config: FixationConfig) -> AnnotationStream:
    """Annotate ``text`` from scratch.

    Pure function of its inputs: calling it twice with the same text and
    configuration yields equal streams.
    """
    validate_config(config)
    return AnnotationStream(
        text=text, config=config, annotations=tuple(iter_annotations(text, config))
    )


def stream_from_annotations(
    text: str, config: FixationConfig, annotations: Iterable[WordAnnotation]
) -> AnnotationStream:
    return AnnotationStream(text=text, config=config, annotations=tuple(annotations))
