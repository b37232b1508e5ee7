from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, MutableMapping

import yaml

DEFAULT_OPAQUE_TAGS = [
    "head",
    "title",
    "math",
    "mjx-container",
    "script",
    "style",
    "svg",
    "code",
    "pre",
    "textarea",
]

# Setting names used by the Obsidian plugin's data.json.
_PLUGIN_KEY_ALIASES: Dict[str, str] = {
    "brWordStemPercentage": "word_stem_percentage",
    "maxFixationParts": "max_fixation_parts",
    "fixationLowerBound": "fixation_lower_bound",
    "fixationStrength": "fixation_strength",
    "saccadesInterval": "saccades_interval",
}


class InvalidConfigurationError(ValueError):
    """Raised when fixation settings fall outside their supported ranges."""


@dataclass(frozen=True, slots=True)
class FixationConfig:
    """Settings consumed by the annotation core.

    Instances are immutable so a stream can remember the exact settings it
    was computed from.
    """

    word_stem_percentage: float = 0.7
    max_fixation_parts: int = 4
    fixation_lower_bound: int = 0
    fixation_strength: int = 2
    saccades_interval: int = 0

    @property
    def saccade_period(self) -> int:
        return self.saccades_interval + 1


@dataclass(slots=True)
class ReaderConfig:
    """Host-level configuration: on/off switch plus the fixation settings."""

    enable: bool = True
    fixation: FixationConfig = field(default_factory=FixationConfig)
    opaque_tags: List[str] = field(default_factory=lambda: list(DEFAULT_OPAQUE_TAGS))

    def to_dict(self) -> dict[str, Any]:
        """Return a mutable dictionary representation of the configuration."""
        return dict(asdict(self))


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_config(config: FixationConfig) -> FixationConfig:
    """Return ``config`` unchanged or raise InvalidConfigurationError."""
    problems: list[str] = []
    pct = config.word_stem_percentage
    if isinstance(pct, bool) or not isinstance(pct, (int, float)) or not 0 < pct <= 1:
        problems.append(f"word_stem_percentage must be in (0, 1], got {pct!r}")
    if not _is_int(config.max_fixation_parts) or config.max_fixation_parts < 1:
        problems.append(
            f"max_fixation_parts must be an integer >= 1, got {config.max_fixation_parts!r}"
        )
    if not _is_int(config.fixation_lower_bound) or config.fixation_lower_bound < 0:
        problems.append(
            f"fixation_lower_bound must be an integer >= 0, got {config.fixation_lower_bound!r}"
        )
    if not _is_int(config.fixation_strength) or config.fixation_strength < 1:
        problems.append(
            f"fixation_strength must be an integer >= 1, got {config.fixation_strength!r}"
        )
    if not _is_int(config.saccades_interval) or config.saccades_interval < 0:
        problems.append(
            f"saccades_interval must be an integer >= 0, got {config.saccades_interval!r}"
        )
    if problems:
        raise InvalidConfigurationError("; ".join(problems))
    return config


def _build_fixation_config(data: Mapping[str, Any]) -> FixationConfig:
    allowed = {f.name for f in fields(FixationConfig)}
    kwargs: dict[str, Any] = {}
    for key, value in data.items():
        name = _PLUGIN_KEY_ALIASES.get(key, key)
        if name in allowed:
            kwargs[name] = value
    return FixationConfig(**kwargs)


def config_from_dict(data: Mapping[str, Any] | None) -> ReaderConfig:
    """Build a ReaderConfig from a dictionary-like input.

    Fixation settings may be nested under ``fixation`` or given flat using
    the plugin's camelCase names; nested values win.
    """
    if data is None:
        return ReaderConfig()
    flat = {k: v for k, v in data.items() if k in _PLUGIN_KEY_ALIASES}
    nested = data.get("fixation")
    if isinstance(nested, FixationConfig):
        fixation = nested
    else:
        merged: dict[str, Any] = dict(flat)
        if isinstance(nested, Mapping):
            merged.update(nested)
        fixation = _build_fixation_config(merged)
    kwargs: dict[str, Any] = {"fixation": fixation}
    if "enable" in data:
        kwargs["enable"] = bool(data["enable"])
    if "opaque_tags" in data and data["opaque_tags"] is not None:
        kwargs["opaque_tags"] = [str(tag).lower() for tag in data["opaque_tags"]]
    return ReaderConfig(**kwargs)


def config_from_yaml(path: str | Path) -> ReaderConfig:
    """Load configuration from a YAML file."""
    contents = Path(path).read_text(encoding="utf-8")
    parsed = yaml.safe_load(contents) or {}
    if not isinstance(parsed, MutableMapping):
        raise ValueError("Configuration YAML must define a mapping.")
    return config_from_dict(parsed)


def load_config(path: str | Path | None = None) -> ReaderConfig:
    """Load configuration from YAML when provided, otherwise return defaults."""
    if path is None:
        return ReaderConfig()
    return config_from_yaml(path)
