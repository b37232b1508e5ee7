"""
Keep an annotation stream in sync with a live-edited text buffer.

Two policies are provided. ``FullRecomputePolicy`` rebuilds the whole stream
on every change. ``LineIncrementalPolicy`` only rescans the lines touched by
an edit and produces exactly the stream a full rebuild would.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import List

from .annotator import annotate_word
from .config import FixationConfig, validate_config
from .models import FixationRange, Word, WordAnnotation
from .segmentation import segment
from .stream import AnnotationStream, build_stream, stream_from_annotations

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ChangeDescription:
    """Replacement of ``old[from_a:to_a]`` with ``inserted``."""

    from_a: int
    to_a: int
    inserted: str = ""

    def __post_init__(self) -> None:
        if self.from_a < 0 or self.to_a < self.from_a:
            raise ValueError(
                f"Invalid change range [{self.from_a}, {self.to_a}) for buffer edit."
            )

    @property
    def from_b(self) -> int:
        return self.from_a

    @property
    def to_b(self) -> int:
        return self.from_a + len(self.inserted)

    @property
    def delta(self) -> int:
        return self.to_b - self.to_a

    def apply(self, old_text: str) -> str:
        """Return the buffer contents after this change."""
        if self.to_a > len(old_text):
            raise ValueError(
                f"Change ends at {self.to_a} but the buffer has {len(old_text)} characters."
            )
        return old_text[: self.from_a] + self.inserted + old_text[self.to_a :]


class RecomputationPolicy(ABC):
    """Decides how to derive the stream for a changed buffer."""

    @abstractmethod
    def on_buffer_change(
        self,
        previous: AnnotationStream | None,
        change: ChangeDescription | None,
        new_text: str,
        config: FixationConfig,
    ) -> AnnotationStream:
        """Return the annotation stream for ``new_text``."""
        raise NotImplementedError


class FullRecomputePolicy(RecomputationPolicy):
    """Discards the previous stream and annotates the new buffer from scratch."""

    def on_buffer_change(
        self,
        previous: AnnotationStream | None,
        change: ChangeDescription | None,
        new_text: str,
        config: FixationConfig,
    ) -> AnnotationStream:
        return build_stream(new_text, config)


class LineIncrementalPolicy(RecomputationPolicy):
    """Rescans only the lines bracketed by the edited range.

    Words that end before the first edited line keep their annotations.
    Words after the last edited line are shifted by the change delta; they
    are re-annotated when the number of words before them changed by an
    amount that moves them to a different saccade phase.
    """

    def __init__(self, fallback: RecomputationPolicy | None = None) -> None:
        self._fallback = fallback or FullRecomputePolicy()

    def on_buffer_change(
        self,
        previous: AnnotationStream | None,
        change: ChangeDescription | None,
        new_text: str,
        config: FixationConfig,
    ) -> AnnotationStream:
        validate_config(config)
        reason = _fallback_reason(previous, change, new_text, config)
        if reason is not None:
            logger.debug("Full recompute: %s", reason)
            return self._fallback.on_buffer_change(previous, change, new_text, config)
        assert previous is not None and change is not None

        old_text = previous.text
        line_start = old_text.rfind("\n", 0, change.from_a) + 1
        new_line_end = new_text.find("\n", change.to_b)
        if new_line_end == -1:
            new_line_end = len(new_text)
        old_line_end = new_line_end - change.delta

        prefix: List[WordAnnotation] = []
        for annotation in previous:
            if annotation.word.span.end > line_start:
                break
            prefix.append(annotation)

        middle = [
            annotate_word(word, config)
            for word in segment(
                new_text[line_start:new_line_end],
                offset=line_start,
                start_index=len(prefix),
            )
        ]

        old_suffix = [a for a in previous if a.word.span.start >= old_line_end]
        index_shift = (len(prefix) + len(middle)) - (len(previous) - len(old_suffix))
        if index_shift % config.saccade_period == 0:
            suffix = [_shift(a, change.delta, index_shift) for a in old_suffix]
        else:
            suffix = [
                annotate_word(
                    Word(a.word.span.shifted(change.delta), a.word.index + index_shift),
                    config,
                )
                for a in old_suffix
            ]

        logger.debug(
            "Incremental recompute: reused=%d rescanned=%d shifted=%d",
            len(prefix),
            len(middle),
            len(suffix),
        )
        return stream_from_annotations(new_text, config, [*prefix, *middle, *suffix])


class AnnotationSession:
    """Holds the current buffer snapshot, its configuration and its stream."""

    def __init__(
        self,
        config: FixationConfig,
        policy: RecomputationPolicy | None = None,
        text: str = "",
    ) -> None:
        self._config = validate_config(config)
        self._policy = policy or FullRecomputePolicy()
        self._stream = build_stream(text, self._config)

    @property
    def config(self) -> FixationConfig:
        return self._config

    @property
    def stream(self) -> AnnotationStream:
        return self._stream

    @property
    def text(self) -> str:
        return self._stream.text

    def load(self, text: str) -> AnnotationStream:
        """Replace the whole buffer."""
        self._stream = build_stream(text, self._config)
        return self._stream

    def apply_change(self, change: ChangeDescription) -> AnnotationStream:
        """Apply a buffer edit and bring the stream up to date."""
        new_text = change.apply(self._stream.text)
        self._stream = self._policy.on_buffer_change(
            self._stream, change, new_text, self._config
        )
        return self._stream

    def reconfigure(self, config: FixationConfig) -> AnnotationStream:
        self._config = validate_config(config)
        self._stream = build_stream(self._stream.text, self._config)
        return self._stream


def _fallback_reason(
    previous: AnnotationStream | None,
    change: ChangeDescription | None,
    new_text: str,
    config: FixationConfig,
) -> str | None:
    if previous is None:
        return "no previous stream"
    if change is None:
        return "no change description"
    if previous.config != config:
        return "configuration changed"
    try:
        expected = change.apply(previous.text)
    except ValueError as exc:
        return str(exc)
    if expected != new_text:
        return "change does not match the previous snapshot"
    return None


def _shift(annotation: WordAnnotation, delta: int, index_shift: int) -> WordAnnotation:
    if delta == 0 and index_shift == 0:
        return annotation
    word = annotation.word
    return replace(
        annotation,
        word=Word(word.span.shifted(delta), word.index + index_shift),
        bold=annotation.bold.shifted(delta) if annotation.bold else None,
        edge=annotation.edge.shifted(delta) if annotation.edge else None,
        fixations=tuple(
            FixationRange(f.span.shifted(delta), f.strength) for f in annotation.fixations
        ),
    )
