from __future__ import annotations

import pytest

from jiffy_reader.config import FixationConfig, InvalidConfigurationError
from jiffy_reader.recompute import (
    AnnotationSession,
    ChangeDescription,
    FullRecomputePolicy,
    LineIncrementalPolicy,
)
from jiffy_reader.stream import build_stream

TEXT = (
    "Bionic reading guides the eye.\n"
    "Each word gets a bold stem.\n"
    "\n"
    "Fixations grow stronger toward the end.\n"
    "Saccades skip words on a cadence."
)

EDITS = [
    ChangeDescription(31, 31, "Really "),
    ChangeDescription(30, 31, " "),
    ChangeDescription(0, 6, "Fast"),
    ChangeDescription(len(TEXT), len(TEXT), " More words here"),
    ChangeDescription(60, 60, "\nA brand new line\n"),
    ChangeDescription(35, 40, ""),
    ChangeDescription(10, 10, "x"),
    ChangeDescription(0, len(TEXT), ""),
    ChangeDescription(58, 59, ""),
]


@pytest.mark.parametrize("interval", [0, 1, 2])
@pytest.mark.parametrize("change", EDITS)
def test_incremental_matches_full_recompute(change: ChangeDescription, interval: int):
    config = FixationConfig(saccades_interval=interval)
    previous = build_stream(TEXT, config)
    new_text = change.apply(TEXT)

    incremental = LineIncrementalPolicy().on_buffer_change(
        previous, change, new_text, config
    )

    assert incremental == build_stream(new_text, config)


@pytest.mark.parametrize("interval", [0, 1, 3])
def test_incremental_session_tracks_many_edits(interval: int):
    config = FixationConfig(saccades_interval=interval, max_fixation_parts=3)
    session = AnnotationSession(config, policy=LineIncrementalPolicy(), text="")
    edits = [
        ChangeDescription(0, 0, "hello world"),
        ChangeDescription(5, 5, " big"),
        ChangeDescription(15, 15, "\nsecond line of text"),
        ChangeDescription(0, 0, "first\n"),
        ChangeDescription(6, 11, "howdy"),
        ChangeDescription(10, 12, ""),
        ChangeDescription(0, 6, ""),
        ChangeDescription(3, 3, " 42 and more"),
    ]
    for change in edits:
        session.apply_change(change)
        assert session.stream == build_stream(session.text, config)


def test_incremental_reuses_annotations_before_edited_line():
    config = FixationConfig()
    previous = build_stream(TEXT, config)
    offset = TEXT.index("Saccades")
    change = ChangeDescription(offset, offset, "Quick ")

    result = LineIncrementalPolicy().on_buffer_change(
        previous, change, change.apply(TEXT), config
    )

    untouched = [a for a in previous if a.word.span.end < offset]
    assert untouched
    for old, new in zip(untouched, result):
        assert old is new


def test_incremental_falls_back_when_config_changes():
    old_config = FixationConfig()
    new_config = FixationConfig(saccades_interval=1)
    previous = build_stream(TEXT, old_config)
    change = ChangeDescription(0, 0, "So ")
    new_text = change.apply(TEXT)

    result = LineIncrementalPolicy().on_buffer_change(
        previous, change, new_text, new_config
    )

    assert result == build_stream(new_text, new_config)


def test_incremental_falls_back_on_inconsistent_change():
    config = FixationConfig()
    previous = build_stream(TEXT, config)
    change = ChangeDescription(0, 0, "So ")

    result = LineIncrementalPolicy().on_buffer_change(
        previous, change, "entirely different text", config
    )

    assert result == build_stream("entirely different text", config)


def test_incremental_without_previous_stream():
    config = FixationConfig()
    result = LineIncrementalPolicy().on_buffer_change(None, None, "fresh text", config)

    assert result == build_stream("fresh text", config)


def test_full_policy_ignores_previous_stream():
    config = FixationConfig()
    previous = build_stream("stale", config)

    result = FullRecomputePolicy().on_buffer_change(
        previous, ChangeDescription(0, 5, "new words"), "new words", config
    )

    assert result == build_stream("new words", config)


def test_policies_validate_configuration():
    with pytest.raises(InvalidConfigurationError):
        LineIncrementalPolicy().on_buffer_change(
            None, None, "text", FixationConfig(max_fixation_parts=0)
        )


def test_session_reconfigure_rebuilds_stream():
    session = AnnotationSession(FixationConfig(), text="one two three")
    assert not any(a.skipped for a in session.stream)

    session.reconfigure(FixationConfig(saccades_interval=1))

    assert [a.skipped for a in session.stream] == [False, True, False]
    assert session.config.saccades_interval == 1


def test_session_load_replaces_buffer():
    session = AnnotationSession(FixationConfig(), text="one")
    stream = session.load("two words")

    assert session.text == "two words"
    assert len(stream) == 2


def test_change_description_positions():
    change = ChangeDescription(2, 5, "abcd")

    assert change.from_b == 2
    assert change.to_b == 6
    assert change.delta == 1
    assert change.apply("0123456") == "01abcd56"


def test_change_description_rejects_bad_ranges():
    with pytest.raises(ValueError):
        ChangeDescription(5, 2)
    with pytest.raises(ValueError):
        ChangeDescription(0, 10).apply("short")
