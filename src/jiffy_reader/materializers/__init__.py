from __future__ import annotations

from .base import RangeMaterializer, iter_pieces
from .html import HtmlTreeWalker
from .markup import MarkupMaterializer
from .terminal import AnsiMaterializer

__all__ = [
    "RangeMaterializer",
    "MarkupMaterializer",
    "AnsiMaterializer",
    "HtmlTreeWalker",
    "iter_pieces",
    "create_materializer",
]


def create_materializer(name: str) -> RangeMaterializer:
    """Factory for building text materializers by name."""
    normalized = name.lower().strip()
    if normalized in {"markup", "html-inline"}:
        return MarkupMaterializer()
    if normalized in {"ansi", "terminal"}:
        return AnsiMaterializer()
    raise ValueError(f"Unknown materializer '{name}'.")
