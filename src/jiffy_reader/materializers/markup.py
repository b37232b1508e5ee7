from __future__ import annotations

from html import escape
from typing import List

from ..models import WordAnnotation
from ..stream import AnnotationStream
from .base import RangeMaterializer, iter_pieces

WRAPPER_TAG = "br-span"
BOLD_TAG = "br-bold"
EDGE_TAG = "br-edge"
FIXATION_TAG = "br-fixation"
STRENGTH_ATTR = "fixation-strength"


class MarkupMaterializer(RangeMaterializer):
    """Inline ``<br-bold>``/``<br-fixation>``/``<br-edge>`` markup."""

    name = "markup"

    def render(self, stream: AnnotationStream) -> str:
        chunks: List[str] = []
        for piece, annotation in iter_pieces(stream):
            if annotation is None:
                chunks.append(escape(piece, quote=False))
            else:
                chunks.append(self.render_word(stream.text, annotation))
        return "".join(chunks)

    def render_word(self, text: str, annotation: WordAnnotation) -> str:
        parts: List[str] = []
        if annotation.bold is not None:
            parts.append(f"<{BOLD_TAG}>")
            for fixation in annotation.fixations:
                content = escape(text[fixation.span.start : fixation.span.end])
                parts.append(
                    f'<{FIXATION_TAG} {STRENGTH_ATTR}="{fixation.strength}">'
                    f"{content}</{FIXATION_TAG}>"
                )
            parts.append(f"</{BOLD_TAG}>")
        if annotation.edge is not None:
            content = escape(text[annotation.edge.start : annotation.edge.end])
            parts.append(f"<{EDGE_TAG}>{content}</{EDGE_TAG}>")
        return "".join(parts)
