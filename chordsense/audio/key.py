"""
chordsense/audio/key.py — Key estimation from slow-smoothed chroma.

Pure numpy. Takes an accumulated chroma vector and runs Krumhansl-Schmuckler.

Krumhansl-Schmuckler profiles (1990):
    Psychoacoustic salience weights for each of 12 pitch classes
    relative to a tonal centre. Pearson correlation against all 24
    key templates (12 major + 12 minor, each rotated to a different
    root) selects the best match.

Because the slow vector averages over several seconds, this is the most
robust detector in the pipeline and the fallback when chord or song
detection has nothing to say.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from chordsense.audio.chroma import as_chroma, normalize, rotate, total_energy
from chordsense.audio.types import KeyEstimate
from chordsense.config import DEFAULT_CONFIG
from chordsense.music_theory.types import Mode

# ---------------------------------------------------------------------------
# Krumhansl-Schmuckler profiles (1990)
# Starting from C, 12-element salience weights
# ---------------------------------------------------------------------------

MAJOR_PROFILE: tuple[float, ...] = (
    6.35,
    2.23,
    3.48,
    2.33,
    4.38,
    4.09,
    2.52,
    5.19,
    2.39,
    3.66,
    2.29,
    2.88,
)
MINOR_PROFILE: tuple[float, ...] = (
    6.33,
    2.68,
    3.52,
    5.38,
    2.60,
    3.53,
    2.54,
    4.75,
    3.98,
    2.69,
    3.34,
    3.17,
)

_PROFILES: dict[Mode, tuple[float, ...]] = {
    Mode.MAJOR: MAJOR_PROFILE,
    Mode.MINOR: MINOR_PROFILE,
}

# Candidate order: major roots 0–11, then minor roots 0–11.
# Earlier candidates win ties.
KEY_CANDIDATES: tuple[tuple[int, Mode], ...] = tuple(
    (root, mode) for mode in (Mode.MAJOR, Mode.MINOR) for root in range(12)
)

# Rotated profiles, built once: shape (24, 12), row i ↔ KEY_CANDIDATES[i]
_CANDIDATE_PROFILES: np.ndarray = np.stack(
    [rotate(_PROFILES[mode], root) for root, mode in KEY_CANDIDATES]
)


def _pearson(x: np.ndarray, y: np.ndarray) -> float:
    """Pearson r between two vectors; 0.0 when either has zero variance."""
    # errstate suppresses RuntimeWarning for flat input (NaN → nan_to_num → 0.0)
    with np.errstate(invalid="ignore", divide="ignore"):
        return float(np.nan_to_num(np.corrcoef(x, y)[0, 1]))


def _confidence(correlation: float) -> float:
    """Map a correlation in [-1, 1] linearly onto [0, 1]."""
    return max(0.0, min(1.0, (correlation + 1.0) / 2.0))


class KeyEstimator:
    """Krumhansl-Schmuckler key estimator.

    Args:
        silence_threshold: Minimum total energy of the input (default 0.01).
        min_samples: Minimum accumulator updates before estimating (default 12).
        alternate_min_confidence: Report the runner-up key only above this
            confidence (default 0.3).
    """

    def __init__(
        self,
        silence_threshold: float = DEFAULT_CONFIG.key_silence_threshold,
        min_samples: int = DEFAULT_CONFIG.key_min_samples,
        alternate_min_confidence: float = DEFAULT_CONFIG.key_alternate_min_confidence,
    ) -> None:
        self.silence_threshold = silence_threshold
        self.min_samples = min_samples
        self.alternate_min_confidence = alternate_min_confidence

    def correlations(self, chroma: Sequence[float] | np.ndarray) -> np.ndarray:
        """Pearson r of the normalized chroma against all 24 candidates.

        Returns:
            np.ndarray of shape (24,), ordered like KEY_CANDIDATES.

        Raises:
            ValueError: If chroma is not shape (12,).
        """
        normalized = normalize(chroma)
        return np.array([_pearson(normalized, profile) for profile in _CANDIDATE_PROFILES])

    def estimate(
        self,
        slow_chroma: Sequence[float] | np.ndarray,
        *,
        sample_count: int | None = None,
    ) -> KeyEstimate | None:
        """Estimate the key of a slow-smoothed chroma vector.

        Args:
            slow_chroma:  12-element accumulated chroma (unnormalized).
            sample_count: Accumulator updates behind the vector. When given,
                          estimates below ``min_samples`` return None.

        Returns:
            KeyEstimate with the best key and, if confident enough, the
            runner-up as ``alternate``. None for silent or immature input —
            "keep waiting", not an error.

        Raises:
            ValueError: If slow_chroma is not shape (12,).
        """
        chroma = as_chroma(slow_chroma)
        if sample_count is not None and sample_count < self.min_samples:
            return None
        if total_energy(chroma) < self.silence_threshold:
            return None

        scores = self.correlations(chroma)
        # Stable sort keeps candidate order for equal scores (first-seen wins)
        ranked = np.argsort(-scores, kind="stable")
        best_idx, second_idx = int(ranked[0]), int(ranked[1])

        alternate: KeyEstimate | None = None
        second_confidence = _confidence(float(scores[second_idx]))
        if second_confidence > self.alternate_min_confidence:
            root, mode = KEY_CANDIDATES[second_idx]
            alternate = KeyEstimate(root=root, mode=mode, confidence=second_confidence)

        root, mode = KEY_CANDIDATES[best_idx]
        return KeyEstimate(
            root=root,
            mode=mode,
            confidence=_confidence(float(scores[best_idx])),
            alternate=alternate,
        )
