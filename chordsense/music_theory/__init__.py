"""
chordsense/music_theory/ — Pure music theory layer.

Exports:
    Types:        ChordQuality, Mode, DiatonicChord
    Scales:       NOTE_NAMES, get_scale_notes, get_diatonic_chords, get_pitch_classes,
                  note_to_pitch_class, pitch_class_to_note, normalize_note
    Labels:       parse_chord_label, format_chord_label, simplify_chord_label
    Progressions: ProgressionPredictor, resolve_numeral
"""

from chordsense.music_theory.labels import (
    chord_label_quality,
    format_chord_label,
    parse_chord_label,
    simplify_chord_label,
)
from chordsense.music_theory.progressions import (
    PROGRESSIONS,
    ProgressionPredictor,
    resolve_numeral,
)
from chordsense.music_theory.scales import (
    NOTE_NAMES,
    get_diatonic_chords,
    get_pitch_classes,
    get_scale_notes,
    normalize_note,
    note_to_pitch_class,
    pitch_class_to_note,
)
from chordsense.music_theory.types import ChordQuality, DiatonicChord, Mode

__all__ = [
    # Types
    "ChordQuality",
    "DiatonicChord",
    "Mode",
    # Scales
    "NOTE_NAMES",
    "get_diatonic_chords",
    "get_pitch_classes",
    "get_scale_notes",
    "normalize_note",
    "note_to_pitch_class",
    "pitch_class_to_note",
    # Labels
    "chord_label_quality",
    "format_chord_label",
    "parse_chord_label",
    "simplify_chord_label",
    # Progressions
    "PROGRESSIONS",
    "ProgressionPredictor",
    "resolve_numeral",
]
