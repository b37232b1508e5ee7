import pytest

from jiffy_reader.annotator import annotate_word, split_fixations, stem_width
from jiffy_reader.config import FixationConfig
from jiffy_reader.models import FixationRange, TextSpan, Word


def _word(start: int, end: int, index: int = 0) -> Word:
    return Word(span=TextSpan(start, end), index=index)


def _fixations(annotation) -> list[tuple[int, int, int]]:
    return [(f.span.start, f.span.end, f.strength) for f in annotation.fixations]


def test_annotate_seven_letter_word():
    """'reading' keeps five letters bold and splits them into three fixations."""
    config = FixationConfig(word_stem_percentage=0.7, max_fixation_parts=4)
    annotation = annotate_word(_word(0, 7), config)

    assert annotation.bold == TextSpan(0, 5)
    assert annotation.edge == TextSpan(5, 7)
    assert _fixations(annotation) == [(0, 2, 1), (2, 4, 2), (4, 5, 3)]
    assert not annotation.skipped


def test_annotate_single_letter_word():
    annotation = annotate_word(_word(4, 5), FixationConfig())

    assert annotation.bold == TextSpan(4, 5)
    assert annotation.edge is None
    assert _fixations(annotation) == [(4, 5, 1)]


def test_short_words_are_fully_bold():
    annotation = annotate_word(_word(0, 3), FixationConfig(word_stem_percentage=0.1))

    assert annotation.bold == TextSpan(0, 3)
    assert annotation.edge is None
    assert _fixations(annotation) == [(0, 1, 1), (1, 2, 2), (2, 3, 3)]


def test_stem_width_rounds_half_up():
    assert stem_width(10, 0.25) == 3
    assert stem_width(7, 0.7) == 5
    assert stem_width(4, 1.0) == 4


def test_stem_width_keeps_at_least_one_letter():
    assert stem_width(4, 0.1) == 1


def test_saccade_skipped_word_is_all_edge():
    config = FixationConfig(saccades_interval=1)
    annotation = annotate_word(_word(4, 7, index=1), config)

    assert annotation.skipped
    assert annotation.bold is None
    assert annotation.edge == TextSpan(4, 7)
    assert annotation.fixations == ()


def test_fixation_width_matching_lower_bound_yields_single_fixation():
    config = FixationConfig(max_fixation_parts=4, fixation_lower_bound=2)
    fixations = split_fixations(TextSpan(0, 5), config)

    assert fixations == (FixationRange(span=TextSpan(0, 5), strength=1),)


def test_single_fixation_part_covers_whole_stem():
    config = FixationConfig(max_fixation_parts=1)
    annotation = annotate_word(_word(0, 7), config)

    assert _fixations(annotation) == [(0, 5, 1)]


def test_empty_stem_has_no_fixations():
    assert split_fixations(TextSpan(3, 3), FixationConfig()) == ()


@pytest.mark.parametrize("length", range(1, 25))
@pytest.mark.parametrize(
    "config",
    [
        FixationConfig(),
        FixationConfig(word_stem_percentage=0.5, max_fixation_parts=3),
        FixationConfig(word_stem_percentage=1.0, max_fixation_parts=1),
        FixationConfig(word_stem_percentage=0.3, max_fixation_parts=6),
        FixationConfig(word_stem_percentage=0.9, max_fixation_parts=5, fixation_lower_bound=1),
    ],
)
def test_annotation_partitions_word(length: int, config: FixationConfig):
    word = _word(10, 10 + length)
    annotation = annotate_word(word, config)
    bold = annotation.bold

    assert bold is not None
    assert bold.start == word.span.start
    if length <= 3:
        assert bold.end == word.span.end
        assert annotation.edge is None
    else:
        assert len(bold) == stem_width(length, config.word_stem_percentage)
    if annotation.edge is not None:
        assert annotation.edge == TextSpan(bold.end, word.span.end)
    else:
        assert bold.end == word.span.end

    fixations = annotation.fixations
    assert 1 <= len(fixations) <= config.max_fixation_parts
    assert fixations[0].span.start == bold.start
    assert fixations[-1].span.end == bold.end
    for left, right in zip(fixations, fixations[1:]):
        assert left.span.end == right.span.start
    assert [f.strength for f in fixations] == list(range(1, len(fixations) + 1))
    assert all(len(f.span) > 0 for f in fixations)
