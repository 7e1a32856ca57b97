"""
chordsense/music_theory/labels.py — Chord label parsing, formatting and simplification.

A chord label is a root spelling followed by a quality suffix, e.g. "C",
"F#m", "Bbmaj7", "Dm7/A". Labels produced by this package always use sharp
spellings and the canonical suffixes of ChordQuality.

Exports:
    parse_chord_label(label) → tuple[int, str]
    format_chord_label(root, quality) → str
    chord_label_quality(label) → ChordQuality
    simplify_chord_label(label) → str
"""

from __future__ import annotations

import re

from chordsense.music_theory.scales import NOTE_NAMES, note_to_pitch_class
from chordsense.music_theory.types import ChordQuality

_LABEL_RE = re.compile(r"^\s*([A-Ga-g])([#b]?)(.*?)\s*$")

# Suffix spellings that collapse onto a triad after extensions are stripped
_TRIAD_ALIASES: dict[str, str] = {
    "maj": "",
    "M": "",
    "min": "m",
    "-": "m",
}


def parse_chord_label(label: str) -> tuple[int, str]:
    """Split a chord label into (root pitch class, suffix).

    A slash-bass ("C/G") is discarded.

    Args:
        label: Chord label, e.g. "Bbm7", "F#", "C/G"

    Returns:
        (root pitch class 0–11, raw suffix string)

    Raises:
        ValueError: If the label does not start with a note name

    Examples:
        >>> parse_chord_label("Bbm7")
        (10, 'm7')
    """
    match = _LABEL_RE.match(label or "")
    if match is None:
        raise ValueError(f"Cannot parse chord label {label!r}")
    letter, accidental, suffix = match.groups()
    root = note_to_pitch_class(letter.upper() + accidental)
    suffix = suffix.split("/", 1)[0]
    return root, suffix


def format_chord_label(root: int, quality: ChordQuality) -> str:
    """Build a chord label in sharp spelling, e.g. (9, MINOR7) → 'Am7'."""
    return f"{NOTE_NAMES[root % 12]}{quality.suffix}"


def chord_label_quality(label: str) -> ChordQuality:
    """Return the ChordQuality a label denotes.

    Raises:
        ValueError: If the label or its suffix is not recognized
    """
    _, suffix = parse_chord_label(label)
    return ChordQuality.from_suffix(suffix)


def simplify_chord_label(label: str) -> str:
    """Reduce a chord label to its bare triad in sharp spelling.

    Flats become sharps and extensions are stripped: maj7 → "", 7 → "",
    m7 → "m", dim7 → "dim", sus2/sus4 → "". Two labels that simplify to the
    same string are treated as the same harmonic function.

    Raises:
        ValueError: If the label cannot be parsed

    Examples:
        >>> simplify_chord_label("Cmaj7")
        'C'
        >>> simplify_chord_label("Dbm7")
        'C#m'
    """
    root, suffix = parse_chord_label(label)
    if suffix.endswith("maj7"):
        suffix = suffix[: -len("maj7")]
    elif suffix.endswith("7"):
        suffix = suffix[:-1]
    if suffix.endswith(("sus2", "sus4")):
        suffix = suffix[: -len("sus4")]
    suffix = _TRIAD_ALIASES.get(suffix, suffix)
    return f"{NOTE_NAMES[root]}{suffix}"
