"""Song catalogue and fragment-match value objects.

Provides ``SongEntry`` (a read-only catalogue record), ``SongMatch`` (one
scored candidate) and ``MatchResult`` (the full answer of a matching pass,
always carrying something the caller can show).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from chordsense.music_theory.scales import note_to_pitch_class
from chordsense.music_theory.types import Mode


class Difficulty(str, Enum):
    """Catalogue difficulty tiers, easiest first."""

    BEGINNER = "beginner"
    EASY = "easy"
    INTERMEDIATE = "intermediate"

    @property
    def rank(self) -> int:
        """0 for the easiest tier; used to sort suggestions easiest-first."""
        return list(Difficulty).index(self)


class ConfidenceTier(str, Enum):
    """Coarse bucketing of a continuous match score."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class SongEntry:
    """A reference song: its simplified chord progression and key.

    Attributes
    ----------
    id:
        Machine-readable slug (e.g. "let-it-be").
    title:
        Display title.
    artist:
        Performer or "Traditional".
    chord_progression:
        Ordered chord labels of the main progression.
    key:
        Key root spelling as commonly written (e.g. "Bb").
    mode:
        Major or minor.
    difficulty:
        Learning tier.
    tags:
        Free-form categories ("nursery", "pop", ...).
    tempo:
        Optional "slow" | "medium" | "fast".
    fun_fact:
        Optional coaching hook shown alongside a match.
    """

    id: str
    title: str
    artist: str
    chord_progression: tuple[str, ...]
    key: str
    mode: Mode
    difficulty: Difficulty
    tags: tuple[str, ...] = field(default_factory=tuple)
    tempo: str | None = None
    fun_fact: str | None = None

    def __post_init__(self) -> None:
        """Coerce enum fields and validate identifiers."""
        object.__setattr__(self, "mode", Mode(self.mode))
        object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        object.__setattr__(self, "chord_progression", tuple(self.chord_progression))
        object.__setattr__(self, "tags", tuple(self.tags))
        if not self.id.strip():
            raise ValueError("id must be a non-empty string")
        if not self.title.strip():
            raise ValueError("title must be a non-empty string")
        note_to_pitch_class(self.key)  # raises ValueError on an unknown key root

    @property
    def key_pitch_class(self) -> int:
        """Pitch class of the key root, spelling-independent."""
        return note_to_pitch_class(self.key)

    @property
    def key_label(self) -> str:
        """Human-readable key, e.g. 'A minor'."""
        return f"{self.key} {self.mode.value}"


@dataclass(frozen=True)
class SongMatch:
    """One catalogue entry scored against the detected chord window."""

    song: SongEntry
    score: float
    """Combined sequence/overlap score in [0, 1]."""

    matched_chord_count: int
    """Best positional match count over all alignments."""

    total_chord_count: int
    """Length of the entry's progression."""

    confidence_tier: ConfidenceTier
    reason: str
    """Human-readable explanation, e.g. 'Strong chord progression match (4/4 chords)'."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence_tier", ConfidenceTier(self.confidence_tier))
        if not (0.0 <= self.score <= 1.0):
            raise ValueError(f"score must be in [0, 1], got {self.score}")


@dataclass(frozen=True)
class MatchResult:
    """Answer of one matching pass.

    Exactly one of ``matches`` / ``suggestions`` is normally populated; the
    ``message`` is always set so the caller has something to display.
    """

    matches: tuple[SongMatch, ...] = field(default_factory=tuple)
    suggestions: tuple[SongEntry, ...] = field(default_factory=tuple)
    message: str = ""

    @property
    def top_match(self) -> SongMatch | None:
        """Highest-scoring match, or None."""
        return self.matches[0] if self.matches else None
