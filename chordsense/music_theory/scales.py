"""
chordsense/music_theory/scales.py — Pure note, scale and diatonic chord functions.

Exports:
    NOTE_NAMES              12-element tuple of chromatic note names (sharps)
    ENHARMONIC              sharp → preferred flat spelling
    FLAT_TO_SHARP           flat → sharp input normalisation
    SCALE_FORMULAS          semitone intervals for each mode
    DIATONIC_QUALITIES      triad quality per scale degree, per mode
    ROMAN_NUMERALS          roman numeral labels per degree, per mode

    normalize_note(note) → str
    note_to_pitch_class(note) → int
    pitch_class_to_note(pc) → str
    get_scale_notes(root, mode) → tuple[str, ...]
    get_pitch_classes(root, mode) → frozenset[int]
    get_diatonic_chords(root, mode) → tuple[DiatonicChord, ...]
"""

from __future__ import annotations

from chordsense.music_theory.types import ChordQuality, DiatonicChord, Mode

# ---------------------------------------------------------------------------
# Chromatic pitch classes
# ---------------------------------------------------------------------------

NOTE_NAMES: tuple[str, ...] = (
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
)

# Preferred flat spellings for display
ENHARMONIC: dict[str, str] = {
    "C#": "Db",
    "D#": "Eb",
    "F#": "Gb",
    "G#": "Ab",
    "A#": "Bb",
}

# Input normalisation: flat → sharp
FLAT_TO_SHARP: dict[str, str] = {v: k for k, v in ENHARMONIC.items()}

# Spellings that land on a natural note
_WHITE_KEY_SPELLINGS: dict[str, str] = {
    "Cb": "B",
    "Fb": "E",
    "E#": "F",
    "B#": "C",
}

# ---------------------------------------------------------------------------
# Scale formulas (semitone intervals from root)
# ---------------------------------------------------------------------------

SCALE_FORMULAS: dict[str, tuple[int, ...]] = {
    "major": (0, 2, 4, 5, 7, 9, 11),
    "minor": (0, 2, 3, 5, 7, 8, 10),
}

# ---------------------------------------------------------------------------
# Diatonic triad qualities per scale degree (0-indexed)
# ---------------------------------------------------------------------------

DIATONIC_QUALITIES: dict[str, tuple[ChordQuality, ...]] = {
    "major": (
        ChordQuality.MAJOR,
        ChordQuality.MINOR,
        ChordQuality.MINOR,
        ChordQuality.MAJOR,
        ChordQuality.MAJOR,
        ChordQuality.MINOR,
        ChordQuality.DIMINISHED,
    ),
    "minor": (
        ChordQuality.MINOR,
        ChordQuality.DIMINISHED,
        ChordQuality.MAJOR,
        ChordQuality.MINOR,
        ChordQuality.MINOR,
        ChordQuality.MAJOR,
        ChordQuality.MAJOR,
    ),
}

ROMAN_NUMERALS: dict[str, tuple[str, ...]] = {
    "major": ("I", "ii", "iii", "IV", "V", "vi", "vii°"),
    "minor": ("i", "ii°", "III", "iv", "v", "VI", "VII"),
}


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def _mode_key(mode: str | Mode) -> str:
    value = mode.value if isinstance(mode, Mode) else str(mode).strip().lower()
    if value not in SCALE_FORMULAS:
        raise ValueError(f"Unknown mode {mode!r}. Valid: {sorted(SCALE_FORMULAS)}")
    return value


def normalize_note(note: str) -> str:
    """Normalize a note name to sharp notation.

    Args:
        note: Note name, e.g. "Bb", "C#", "g"

    Returns:
        Canonical sharp-notation name, e.g. "A#", "C#", "G"

    Raises:
        ValueError: If note is not a recognized pitch class
    """
    note = note.strip().capitalize()
    if note in FLAT_TO_SHARP:
        note = FLAT_TO_SHARP[note]
    note = _WHITE_KEY_SPELLINGS.get(note, note)
    if note not in NOTE_NAMES:
        raise ValueError(f"Unknown note {note!r}. Valid: {list(NOTE_NAMES)}")
    return note


def note_to_pitch_class(note: str) -> int:
    """Return the pitch class (0–11) of a note name.

    Raises:
        ValueError: If note is unrecognized
    """
    return NOTE_NAMES.index(normalize_note(note))


def pitch_class_to_note(pc: int) -> str:
    """Return the canonical (sharp) note name for a pitch class.

    Raises:
        ValueError: If pc is out of range
    """
    if not (0 <= pc <= 11):
        raise ValueError(f"Pitch class must be in [0, 11], got {pc}")
    return NOTE_NAMES[pc]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_scale_notes(root: str | int, mode: str | Mode = "major") -> tuple[str, ...]:
    """Return ordered note names for a diatonic scale.

    Args:
        root: Root note name ("A", "Bb") or pitch class (0–11)
        mode: "major" or "minor" (natural minor)

    Returns:
        Tuple of 7 note name strings

    Raises:
        ValueError: If root or mode is unrecognized

    Examples:
        >>> get_scale_notes("A", "minor")
        ('A', 'B', 'C', 'D', 'E', 'F', 'G')
        >>> get_scale_notes(0, "major")
        ('C', 'D', 'E', 'F', 'G', 'A', 'B')
    """
    root_idx = root if isinstance(root, int) else note_to_pitch_class(root)
    pitch_class_to_note(root_idx)  # range check
    formula = SCALE_FORMULAS[_mode_key(mode)]
    return tuple(NOTE_NAMES[(root_idx + interval) % 12] for interval in formula)


def get_pitch_classes(root: str | int, mode: str | Mode = "major") -> frozenset[int]:
    """Return the set of pitch classes (0–11) in a scale.

    Examples:
        >>> get_pitch_classes("C", "major")
        frozenset({0, 2, 4, 5, 7, 9, 11})
    """
    return frozenset(NOTE_NAMES.index(n) for n in get_scale_notes(root, mode))


def get_diatonic_chords(root: str | int, mode: str | Mode = "major") -> tuple[DiatonicChord, ...]:
    """Return all 7 diatonic triads for a key.

    Args:
        root: Root note of the key, e.g. "A", "C#", or a pitch class
        mode: "major" or "minor"

    Returns:
        Tuple of 7 DiatonicChord objects, one per scale degree

    Raises:
        ValueError: If root or mode is unrecognized

    Examples:
        >>> [c.name for c in get_diatonic_chords("A", "minor")]
        ['Am', 'Bdim', 'C', 'Dm', 'Em', 'F', 'G']
    """
    mode_key = _mode_key(mode)
    scale_notes = get_scale_notes(root, mode_key)
    qualities = DIATONIC_QUALITIES[mode_key]
    romans = ROMAN_NUMERALS[mode_key]

    return tuple(
        DiatonicChord(
            root=note,
            quality=quality,
            name=f"{note}{quality.suffix}",
            roman=romans[degree],
            degree=degree,
        )
        for degree, (note, quality) in enumerate(zip(scale_notes, qualities, strict=True))
    )
