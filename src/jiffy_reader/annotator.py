from __future__ import annotations

import math
from typing import List

from .config import FixationConfig
from .models import FixationRange, TextSpan, Word, WordAnnotation

SHORT_WORD_LENGTH = 3


def is_saccade_skipped(index: int, config: FixationConfig) -> bool:
    """Return True when the word at ``index`` gets no emphasis this pass."""
    return index % config.saccade_period != 0


def stem_width(length: int, word_stem_percentage: float) -> int:
    """Number of leading characters of a word that belong to its stem.

    Words of three letters or fewer are never truncated. Rounding is half-up
    so ``2.5`` becomes ``3`` rather than Python's banker's ``2``.
    """
    if length <= SHORT_WORD_LENGTH:
        return length
    width = math.floor(length * word_stem_percentage + 0.5)
    return max(1, min(length, width))


def split_fixations(bold: TextSpan, config: FixationConfig) -> tuple[FixationRange, ...]:
    """Partition a stem into fixation groups of increasing strength."""
    stem_len = len(bold)
    parts = min(config.max_fixation_parts, stem_len)
    if parts <= 0:
        return ()

    fixation_width = math.ceil(stem_len / parts)
    if fixation_width == config.fixation_lower_bound or fixation_width == 0:
        return (FixationRange(span=bold, strength=1),)

    fixations: List[FixationRange] = []
    for i in range(parts):
        start = bold.start + i * fixation_width
        end = min(start + fixation_width, bold.end)
        if start >= end:
            continue
        fixations.append(FixationRange(span=TextSpan(start, end), strength=i + 1))
    return tuple(fixations)


def annotate_word(word: Word, config: FixationConfig) -> WordAnnotation:
    """Decide the bold, edge and fixation ranges for a single word."""
    if is_saccade_skipped(word.index, config):
        return WordAnnotation(word=word, bold=None, edge=word.span)

    length = len(word.span)
    width = stem_width(length, config.word_stem_percentage)
    bold = TextSpan(word.span.start, word.span.start + width)
    edge = None if width == length else TextSpan(bold.end, word.span.end)
    return WordAnnotation(
        word=word, bold=bold, edge=edge, fixations=split_fixations(bold, config)
    )
