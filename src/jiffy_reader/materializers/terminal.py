from __future__ import annotations

from typing import List

import typer

from ..models import WordAnnotation
from ..stream import AnnotationStream
from .base import RangeMaterializer, iter_pieces


def emphasized_strengths(annotation: WordAnnotation, fixation_strength: int) -> set[int]:
    """Strengths of the fixations drawn with full weight.

    The strongest ``fixation_strength`` groups of a word are emphasized; with
    a single group the whole stem is.
    """
    strengths = sorted(f.strength for f in annotation.fixations)
    return set(strengths[-fixation_strength:])


class AnsiMaterializer(RangeMaterializer):
    """Bold/dim ANSI escapes for terminal output."""

    name = "ansi"

    def render(self, stream: AnnotationStream) -> str:
        chunks: List[str] = []
        strength = stream.config.fixation_strength
        for piece, annotation in iter_pieces(stream):
            if annotation is None:
                chunks.append(piece)
                continue
            text = stream.text
            strong = emphasized_strengths(annotation, strength)
            for fixation in annotation.fixations:
                segment = text[fixation.span.start : fixation.span.end]
                chunks.append(
                    typer.style(segment, bold=True)
                    if fixation.strength in strong
                    else segment
                )
            if annotation.edge is not None:
                chunks.append(
                    typer.style(text[annotation.edge.start : annotation.edge.end], dim=True)
                )
        return "".join(chunks)
