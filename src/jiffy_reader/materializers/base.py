from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator, Tuple

from ..models import WordAnnotation
from ..stream import AnnotationStream


class RangeMaterializer(ABC):
    """Overlay an annotation stream onto a text surface.

    Implementations must keep every character of the source text; removing
    the inserted markers yields the original buffer.
    """

    name: str = ""

    @abstractmethod
    def render(self, stream: AnnotationStream) -> str:
        """Return the annotated rendering of ``stream.text``."""
        raise NotImplementedError


def iter_pieces(stream: AnnotationStream) -> Iterator[Tuple[str, WordAnnotation | None]]:
    """Yield ``(text, annotation)`` pairs covering the whole buffer in order.

    Runs between words come back with ``annotation=None``.
    """
    text = stream.text
    position = 0
    for annotation in stream:
        span = annotation.word.span
        if span.start > position:
            yield text[position : span.start], None
        yield text[span.start : span.end], annotation
        position = span.end
    if position < len(text):
        yield text[position:], None
