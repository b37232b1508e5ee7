from __future__ import annotations

from itertools import groupby
from typing import Iterator

from .models import TextSpan, Word


def segment(text: str, offset: int = 0, start_index: int = 0) -> Iterator[Word]:
    """Yield every maximal run of Unicode letters in ``text``.

    ``offset`` and ``start_index`` are added to the reported positions and
    indices, so a slice of a larger buffer can be scanned in place.
    """
    position = offset
    index = start_index
    for is_letter, run in groupby(text, key=str.isalpha):
        length = sum(1 for _ in run)
        if is_letter:
            yield Word(span=TextSpan(position, position + length), index=index)
            index += 1
        position += length
