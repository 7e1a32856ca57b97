"""
chordsense/music_theory/progressions.py — "What comes next" chord prediction.

ProgressionPredictor.predict_next() is the main algorithm:
    1. Resolve every roman-numeral progression of the key's mode to concrete
       chord labels (cached per key)
    2. Find each position where the current chord occurs, comparing
       simplified labels so "Am7" matches "Am" and "Bb" matches "A#"
    3. Collect the chord that follows each occurrence
    4. Deduplicate in first-seen order and return the first few

Design decisions:
    - The progression tables are built once at import time as tuples indexed
      by Mode and never rebuilt per call.
    - Numeral case encodes triad quality (upper = major, lower = minor,
      trailing ° = diminished), so a minor-key "V" resolves to the major
      dominant of harmonic practice.
    - An unknown chord is an expected outcome ("no prediction available"),
      so it returns an empty tuple instead of raising.
"""

from __future__ import annotations

import functools

from chordsense.music_theory.labels import format_chord_label, simplify_chord_label
from chordsense.music_theory.scales import SCALE_FORMULAS, get_diatonic_chords
from chordsense.music_theory.types import ChordQuality, Mode

# ---------------------------------------------------------------------------
# Canonical progressions per mode
# ---------------------------------------------------------------------------

PROGRESSIONS: dict[Mode, tuple[tuple[str, ...], ...]] = {
    Mode.MAJOR: (
        ("I", "IV", "V", "I"),  # classic cadence
        ("I", "V", "vi", "IV"),  # pop
        ("I", "vi", "IV", "V"),  # 50s
        ("ii", "V", "I"),  # jazz turnaround
        ("I", "IV", "I", "V"),  # blues-ish
    ),
    Mode.MINOR: (
        ("i", "iv", "V", "i"),
        ("i", "VI", "III", "VII"),
        ("i", "iv", "VII", "III"),
    ),
}

_NUMERAL_DEGREES: dict[str, int] = {
    "I": 0,
    "II": 1,
    "III": 2,
    "IV": 3,
    "V": 4,
    "VI": 5,
    "VII": 6,
}

DEFAULT_MAX_PREDICTIONS: int = 3


# ---------------------------------------------------------------------------
# Numeral resolution
# ---------------------------------------------------------------------------


def _as_mode(mode: str | Mode) -> Mode:
    try:
        return Mode(mode.value if isinstance(mode, Mode) else str(mode).strip().lower())
    except ValueError:
        raise ValueError(f"Unknown mode {mode!r}. Valid: {[m.value for m in Mode]}") from None


def resolve_numeral(numeral: str, key_root: int, key_mode: str | Mode) -> str:
    """Resolve a roman numeral to a chord label in a key.

    Args:
        numeral:  Roman numeral, e.g. "IV", "vi", "vii°"
        key_root: Key root pitch class (0–11)
        key_mode: "major" or "minor"

    Returns:
        Chord label in sharp spelling, e.g. "F", "Am", "Bdim"

    Raises:
        ValueError: If the numeral or mode is not recognized

    Examples:
        >>> resolve_numeral("vi", 0, "major")
        'Am'
        >>> resolve_numeral("V", 9, "minor")
        'E'
    """
    mode = _as_mode(key_mode)
    diminished = numeral.endswith("°")
    body = numeral.rstrip("°")
    degree = _NUMERAL_DEGREES.get(body.upper())
    if degree is None or not body:
        raise ValueError(f"Unknown roman numeral {numeral!r}")

    if diminished:
        quality = ChordQuality.DIMINISHED
    elif body.isupper():
        quality = ChordQuality.MAJOR
    else:
        quality = ChordQuality.MINOR

    interval = SCALE_FORMULAS[mode.value][degree]
    return format_chord_label(key_root + interval, quality)


@functools.cache
def _resolved_progressions(key_root: int, mode: Mode) -> tuple[tuple[str, ...], ...]:
    """Concrete, simplified chord labels of every progression in a key (cached)."""
    return tuple(
        tuple(resolve_numeral(numeral, key_root, mode) for numeral in progression)
        for progression in PROGRESSIONS[mode]
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class ProgressionPredictor:
    """Predicts likely next chords from canonical progressions of the key.

    Args:
        max_predictions: Upper bound on returned labels (default 3).

    Example::

        predictor = ProgressionPredictor()
        predictor.predict_next("C", 0, "major")
        # ('F', 'G', 'Am')
    """

    def __init__(self, max_predictions: int = DEFAULT_MAX_PREDICTIONS) -> None:
        if max_predictions <= 0:
            raise ValueError(f"max_predictions must be > 0, got {max_predictions}")
        self.max_predictions = max_predictions

    def predict_next(
        self,
        current_chord_label: str,
        key_root: int,
        key_mode: str | Mode,
    ) -> tuple[str, ...]:
        """Return up to ``max_predictions`` chords likely to follow the current one.

        Args:
            current_chord_label: Label of the sounding chord, e.g. "Am7"
            key_root:            Key root pitch class (0–11)
            key_mode:            "major" or "minor"

        Returns:
            Tuple of chord labels in first-seen order. Empty when the chord
            does not occur in any progression of the key, or cannot be parsed.
        """
        mode = _as_mode(key_mode)
        try:
            current = simplify_chord_label(current_chord_label)
        except ValueError:
            return ()

        predictions: list[str] = []
        for progression in _resolved_progressions(key_root % 12, mode):
            for position, label in enumerate(progression[:-1]):
                if label != current:
                    continue
                following = progression[position + 1]
                if following not in predictions:
                    predictions.append(following)

        return tuple(predictions[: self.max_predictions])

    @staticmethod
    def suggested_chords(key_root: int, key_mode: str | Mode) -> tuple[str, ...]:
        """Return the diatonic triad labels of a key, tonic first.

        Examples:
            >>> ProgressionPredictor.suggested_chords(9, "minor")
            ('Am', 'Bdim', 'C', 'Dm', 'Em', 'F', 'G')
        """
        mode = _as_mode(key_mode)
        return tuple(chord.name for chord in get_diatonic_chords(key_root % 12, mode))
