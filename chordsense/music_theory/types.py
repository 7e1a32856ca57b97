"""
chordsense/music_theory/types.py — Enumerations and value objects for the theory layer.

All value types are immutable frozen dataclasses — safe to hash, cache, and
use as dict keys. No I/O, no side effects, no external dependencies beyond stdlib.

Types:
    Mode           — "major" | "minor"
    ChordQuality   — closed set of chord qualities the estimator can detect
    DiatonicChord  — a triad at a scale degree of a key
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Mode
# ---------------------------------------------------------------------------


class Mode(str, Enum):
    """Key mode. Values compare equal to their plain-string spelling."""

    MAJOR = "major"
    MINOR = "minor"


# ---------------------------------------------------------------------------
# ChordQuality
# ---------------------------------------------------------------------------


class ChordQuality(str, Enum):
    """Chord qualities, declared in template-table order.

    Declaration order is significant: the chord estimator enumerates
    qualities in this order, so it decides ties between equal scores.
    """

    MAJOR = "major"
    MINOR = "minor"
    DOMINANT7 = "dominant7"
    MAJOR7 = "major7"
    MINOR7 = "minor7"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"
    SUS2 = "sus2"
    SUS4 = "sus4"

    @property
    def suffix(self) -> str:
        """Label suffix appended to the root name, e.g. 'm7' for MINOR7."""
        return _QUALITY_SUFFIX[self]

    @property
    def intervals(self) -> tuple[int, ...]:
        """Chord-tone semitone intervals from the root."""
        return _QUALITY_INTERVALS[self]

    @classmethod
    def from_suffix(cls, suffix: str) -> ChordQuality:
        """Look up a quality by its label suffix.

        Raises:
            ValueError: If the suffix is not a known chord suffix.
        """
        try:
            return _SUFFIX_QUALITY[suffix]
        except KeyError:
            raise ValueError(
                f"Unknown chord suffix {suffix!r}. Valid: {sorted(_SUFFIX_QUALITY)}"
            ) from None


_QUALITY_SUFFIX: dict[ChordQuality, str] = {
    ChordQuality.MAJOR: "",
    ChordQuality.MINOR: "m",
    ChordQuality.DOMINANT7: "7",
    ChordQuality.MAJOR7: "maj7",
    ChordQuality.MINOR7: "m7",
    ChordQuality.DIMINISHED: "dim",
    ChordQuality.AUGMENTED: "aug",
    ChordQuality.SUS2: "sus2",
    ChordQuality.SUS4: "sus4",
}

_QUALITY_INTERVALS: dict[ChordQuality, tuple[int, ...]] = {
    ChordQuality.MAJOR: (0, 4, 7),
    ChordQuality.MINOR: (0, 3, 7),
    ChordQuality.DOMINANT7: (0, 4, 7, 10),
    ChordQuality.MAJOR7: (0, 4, 7, 11),
    ChordQuality.MINOR7: (0, 3, 7, 10),
    ChordQuality.DIMINISHED: (0, 3, 6),
    ChordQuality.AUGMENTED: (0, 4, 8),
    ChordQuality.SUS2: (0, 2, 7),
    ChordQuality.SUS4: (0, 5, 7),
}

# Accepted spellings when parsing labels. The canonical suffix comes first.
_SUFFIX_QUALITY: dict[str, ChordQuality] = {
    **{suffix: quality for quality, suffix in _QUALITY_SUFFIX.items()},
    "maj": ChordQuality.MAJOR,
    "min": ChordQuality.MINOR,
    "min7": ChordQuality.MINOR7,
    "dom7": ChordQuality.DOMINANT7,
    "M7": ChordQuality.MAJOR7,
    "°": ChordQuality.DIMINISHED,
    "+": ChordQuality.AUGMENTED,
    "sus": ChordQuality.SUS4,
}


# ---------------------------------------------------------------------------
# DiatonicChord
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DiatonicChord:
    """A triad built on one degree of a key.

    Attributes:
        root:    Root note name in sharp spelling, e.g. "A", "C#"
        quality: Triad quality (major, minor or diminished)
        name:    Chord label, e.g. "Am", "Bdim"
        roman:   Roman numeral label, e.g. "i", "IV", "vii°"
        degree:  0-based scale degree (0=I/i, 6=VII/vii)
    """

    root: str
    quality: ChordQuality
    name: str
    roman: str
    degree: int

    def __post_init__(self) -> None:
        if not self.root:
            raise ValueError("DiatonicChord.root must not be empty")
        if not self.name:
            raise ValueError("DiatonicChord.name must not be empty")
        if not (0 <= self.degree <= 6):
            raise ValueError(f"DiatonicChord.degree must be in [0, 6], got {self.degree}")
