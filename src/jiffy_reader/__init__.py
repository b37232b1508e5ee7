"""
jiffy_reader package exports convenience helpers for library consumers.
"""

from __future__ import annotations

from .annotator import annotate_word
from .config import (
    FixationConfig,
    InvalidConfigurationError,
    ReaderConfig,
    config_from_dict,
    config_from_yaml,
    load_config,
    validate_config,
)
from .recompute import (
    AnnotationSession,
    ChangeDescription,
    FullRecomputePolicy,
    LineIncrementalPolicy,
)
from .segmentation import segment
from .stream import AnnotationStream, build_stream, iter_annotations

__all__ = [
    "FixationConfig",
    "ReaderConfig",
    "InvalidConfigurationError",
    "config_from_dict",
    "config_from_yaml",
    "load_config",
    "validate_config",
    "segment",
    "annotate_word",
    "AnnotationStream",
    "build_stream",
    "iter_annotations",
    "AnnotationSession",
    "ChangeDescription",
    "FullRecomputePolicy",
    "LineIncrementalPolicy",
]

__version__ = "0.1.0"
