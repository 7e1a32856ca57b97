"""
Configuration dataclass for the listening pipeline.

The tunable surface of every estimator (smoothing factors, silence
thresholds, minimum sample counts, chord-match threshold, debounce hold,
buffer sizes and fragment-match limits) lives in one immutable object. A
session reads it once at construction; nothing in the algorithms hard-codes
these values.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from chordsense.music_theory.types import ChordQuality


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Tuning parameters for one listening session.

    Attributes:
        fast_alpha: EMA weight of each new frame in the fast (chord) vector.
            Defaults to 0.35, which settles on a held chord in well under a second.
        slow_alpha: EMA weight of each new frame in the slow (key) vector.
            Defaults to 0.05, i.e. a multi-second memory.
        key_silence_threshold: Minimum total energy of the slow vector before
            a key is estimated.
        chord_silence_threshold: Minimum total energy of the fast vector before
            a chord is estimated.
        key_min_samples: Accumulator updates required before key estimation.
        chord_min_samples: Accumulator updates required before chord estimation.
        key_alternate_min_confidence: The second-best key is reported only
            above this confidence.
        chord_match_threshold: Minimum cosine similarity for a chord candidate.
        max_chord_alternatives: Number of runner-up chords reported.
        chord_templates: Optional per-quality 12-element weight overrides.
            None uses the built-in templates.
        chord_interval: Run chord estimation every N updates.
        key_interval: Run key estimation every N updates.
        min_chord_hold_ms: How long a new chord must persist before it is
            accepted as a change.
        history_size: Maximum number of chord history entries kept.
        match_window: Number of recent chords sent to the fragment matcher.
        match_min_score: Catalogue entries scoring below this are discarded.
        match_max_results: Number of song matches returned.
        max_predictions: Number of next-chord predictions returned.

    Example:
        >>> config = AnalysisConfig(min_chord_hold_ms=400, match_window=8)
        >>> session = ListeningSession(config=config)
    """

    fast_alpha: float = 0.35
    slow_alpha: float = 0.05
    key_silence_threshold: float = 0.01
    chord_silence_threshold: float = 0.05
    key_min_samples: int = 12
    chord_min_samples: int = 8
    key_alternate_min_confidence: float = 0.3
    chord_match_threshold: float = 0.4
    max_chord_alternatives: int = 3
    chord_templates: Mapping[ChordQuality, tuple[float, ...]] | None = field(
        default=None, hash=False
    )
    chord_interval: int = 1
    key_interval: int = 1
    min_chord_hold_ms: float = 300.0
    history_size: int = 20
    match_window: int = 10
    match_min_score: float = 0.3
    match_max_results: int = 5
    max_predictions: int = 3

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.chord_templates is not None:
            # Read-only copy; not part of the hash
            object.__setattr__(
                self,
                "chord_templates",
                MappingProxyType(
                    {
                        ChordQuality(quality): tuple(float(w) for w in weights)
                        for quality, weights in self.chord_templates.items()
                    }
                ),
            )
        for name in ("fast_alpha", "slow_alpha"):
            value = getattr(self, name)
            if not (0.0 < value <= 1.0):
                raise ValueError(f"{name} must be in (0, 1], got {value}")
        for name in ("key_silence_threshold", "chord_silence_threshold", "min_chord_hold_ms"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        for name in ("key_min_samples", "chord_min_samples", "max_chord_alternatives"):
            value = getattr(self, name)
            if value < 0:
                raise ValueError(f"{name} must be non-negative, got {value}")
        for name in (
            "chord_interval",
            "key_interval",
            "history_size",
            "match_max_results",
            "max_predictions",
        ):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")
        if self.match_window < 2:
            raise ValueError(f"match_window must be at least 2, got {self.match_window}")
        for name in ("key_alternate_min_confidence", "chord_match_threshold", "match_min_score"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be in [0, 1], got {value}")

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> AnalysisConfig:
        """Build a config from a plain mapping, e.g. parsed YAML.

        Keys missing from ``data`` keep their defaults. ``chord_templates``
        may be keyed by quality name ("minor7") and is converted to
        ChordQuality keys.

        Raises:
            ValueError: On unknown keys or invalid values.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys {unknown}, valid options: {sorted(known)}")

        return cls(**data)

    def with_overrides(self, **overrides: Any) -> AnalysisConfig:
        """Return a copy with the given fields replaced (validated again)."""
        return dataclasses.replace(self, **overrides)


def load_config(path: str | Path) -> AnalysisConfig:
    """Read an AnalysisConfig from a YAML file.

    An empty file yields DEFAULT_CONFIG.

    Raises:
        ValueError: If the document is not a mapping or holds invalid values.
    """
    with Path(path).open() as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return DEFAULT_CONFIG
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return AnalysisConfig.from_mapping(data)


# Pre-defined configurations for common use cases

DEFAULT_CONFIG = AnalysisConfig()
"""Default configuration: fast 0.35 / slow 0.05 smoothing, 300 ms chord hold."""

RESPONSIVE_CONFIG = AnalysisConfig(
    fast_alpha=0.5,
    slow_alpha=0.08,
    chord_min_samples=4,
    key_min_samples=8,
    min_chord_hold_ms=200.0,
)
"""Quicker chord changes for confident players on a clean signal."""

STABLE_CONFIG = AnalysisConfig(
    fast_alpha=0.25,
    slow_alpha=0.03,
    chord_min_samples=12,
    key_min_samples=30,
    chord_match_threshold=0.5,
    min_chord_hold_ms=450.0,
)
"""Heavier smoothing and a longer hold for noisy rooms and hesitant playing."""
