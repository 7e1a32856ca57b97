"""
chordsense/audio/types.py — Frozen data types for chroma analysis results.

All types are frozen dataclasses — immutable value objects that can be
safely handed from the analysis pass to display and notification layers.

Design principles:
    - No I/O, no state, no side effects.
    - Vectors are stored as tuples of floats, never as live numpy arrays,
      so a snapshot cannot change after it is handed off.
    - `label` / `root_name` are computed properties to avoid duplicate storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from chordsense.music_theory.scales import NOTE_NAMES
from chordsense.music_theory.types import ChordQuality, Mode


@dataclass(frozen=True)
class ChromaSnapshot:
    """State of the chroma accumulator after one update.

    Invariants:
        len(fast) == len(slow) == 12
        sample counts >= 0
    """

    fast: tuple[float, ...]
    """Fast-smoothed chroma used for chord estimation."""

    slow: tuple[float, ...]
    """Slow-smoothed chroma used for key estimation."""

    fast_sample_count: int
    """Updates folded into the fast vector since the last reset."""

    slow_sample_count: int
    """Updates folded into the slow vector since the last reset."""


@dataclass(frozen=True)
class KeyEstimate:
    """Musical key detected via Krumhansl-Schmuckler correlation.

    Invariants:
        0 <= root <= 11
        mode in {"major", "minor"}
        0.0 <= confidence <= 1.0
    """

    root: int
    """Root pitch class, 0 = C … 11 = B."""

    mode: Mode
    """Major or minor."""

    confidence: float
    """Pearson correlation mapped linearly from [-1, 1] onto [0, 1]."""

    alternate: KeyEstimate | None = None
    """Second-best key, present only when its confidence clears the floor."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", Mode(self.mode))
        if not (0 <= self.root <= 11):
            raise ValueError(f"KeyEstimate.root must be in [0, 11], got {self.root}")
        if not (0.0 <= self.confidence <= 1.0):
            raise ValueError(f"KeyEstimate.confidence must be in [0, 1], got {self.confidence}")

    @property
    def root_name(self) -> str:
        """Root note name in sharp spelling, e.g. 'F#'."""
        return NOTE_NAMES[self.root]

    @property
    def label(self) -> str:
        """Human-readable key label, e.g. 'A minor', 'C# major'."""
        return f"{self.root_name} {self.mode.value}"


@dataclass(frozen=True)
class ChordEstimate:
    """A chord candidate scored against the fast chroma vector."""

    root: int
    """Root pitch class (0–11)."""

    quality: ChordQuality

    confidence: float
    """Cosine similarity between the chroma and the rotated template."""

    label: str
    """Formatted chord name, e.g. 'Am7'."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "quality", ChordQuality(self.quality))
        if not (0 <= self.root <= 11):
            raise ValueError(f"ChordEstimate.root must be in [0, 11], got {self.root}")
        if not self.label:
            raise ValueError("ChordEstimate.label must not be empty")


@dataclass(frozen=True)
class ChordResult:
    """Output of one chord estimation: the best chord plus ranked runners-up."""

    best: ChordEstimate | None = None
    alternatives: tuple[ChordEstimate, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        """True when no candidate cleared the match threshold (or input was silent)."""
        return self.best is None


EMPTY_CHORD_RESULT = ChordResult()


@dataclass(frozen=True)
class ChordHistoryEntry:
    """A chord that was held long enough to count as a real change.

    Invariants:
        held_duration_ms >= 0
    """

    chord: ChordEstimate
    observed_at_ms: float
    """Session clock time at which the chord was first detected."""

    held_duration_ms: float
    """How long the chord sounded before the next accepted change."""

    def __post_init__(self) -> None:
        if self.held_duration_ms < 0:
            raise ValueError(
                f"ChordHistoryEntry.held_duration_ms must be >= 0, got {self.held_duration_ms}"
            )
