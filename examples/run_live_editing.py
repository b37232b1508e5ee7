"""
Tiny helper script that replays a few buffer edits through an incremental
annotation session and prints the terminal rendering after each one.
"""

from __future__ import annotations

from jiffy_reader import AnnotationSession, ChangeDescription, FixationConfig
from jiffy_reader.materializers import AnsiMaterializer


def main() -> None:
    config = FixationConfig(saccades_interval=1, fixation_strength=2)
    session = AnnotationSession(
        config,
        text="Bionic reading guides the eye.\nEach word gets a bold stem.",
    )
    materializer = AnsiMaterializer()
    edits = [
        ChangeDescription(0, 0, "Fast "),
        ChangeDescription(36, 36, "Really "),
        ChangeDescription(0, 5, ""),
    ]

    print(materializer.render(session.stream))
    for change in edits:
        session.apply_change(change)
        print("-" * 40)
        print(materializer.render(session.stream))


if __name__ == "__main__":
    main()
