"""
chordsense/audio/chords.py — Chord estimation by template matching.

Each ChordQuality has a 12-element weight template expressing the expected
relative energy at each interval above the root. The estimator rotates every
template to every root (12 × 9 candidates), scores each with cosine
similarity against the normalized chroma, keeps candidates above the match
threshold and ranks them.

Templates and threshold are constructor parameters: they are the main lever
for real-world accuracy and are never read from inside the scoring loop as
literals.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import MappingProxyType

import numpy as np

from chordsense.audio.chroma import N_PITCH_CLASSES, as_chroma, normalize, rotate, total_energy
from chordsense.audio.types import EMPTY_CHORD_RESULT, ChordEstimate, ChordResult
from chordsense.config import DEFAULT_CONFIG
from chordsense.music_theory.labels import format_chord_label
from chordsense.music_theory.types import ChordQuality

# ---------------------------------------------------------------------------
# Default templates: root weighted highest, then fifth, third, extensions
# ---------------------------------------------------------------------------

DEFAULT_CHORD_TEMPLATES: Mapping[ChordQuality, tuple[float, ...]] = MappingProxyType(
    {
        #                        C    C#   D    D#   E    F    F#   G    G#   A    A#   B
        ChordQuality.MAJOR: (1.0, 0.0, 0.0, 0.0, 0.8, 0.0, 0.0, 0.9, 0.0, 0.0, 0.0, 0.0),
        ChordQuality.MINOR: (1.0, 0.0, 0.0, 0.8, 0.0, 0.0, 0.0, 0.9, 0.0, 0.0, 0.0, 0.0),
        ChordQuality.DOMINANT7: (1.0, 0.0, 0.0, 0.0, 0.7, 0.0, 0.0, 0.8, 0.0, 0.0, 0.6, 0.0),
        ChordQuality.MAJOR7: (1.0, 0.0, 0.0, 0.0, 0.7, 0.0, 0.0, 0.8, 0.0, 0.0, 0.0, 0.6),
        ChordQuality.MINOR7: (1.0, 0.0, 0.0, 0.7, 0.0, 0.0, 0.0, 0.8, 0.0, 0.0, 0.6, 0.0),
        ChordQuality.DIMINISHED: (1.0, 0.0, 0.0, 0.8, 0.0, 0.0, 0.8, 0.0, 0.0, 0.0, 0.0, 0.0),
        ChordQuality.AUGMENTED: (1.0, 0.0, 0.0, 0.0, 0.8, 0.0, 0.0, 0.0, 0.8, 0.0, 0.0, 0.0),
        ChordQuality.SUS2: (1.0, 0.0, 0.8, 0.0, 0.0, 0.0, 0.0, 0.9, 0.0, 0.0, 0.0, 0.0),
        ChordQuality.SUS4: (1.0, 0.0, 0.0, 0.0, 0.0, 0.8, 0.0, 0.9, 0.0, 0.0, 0.0, 0.0),
    }
)


def chord_template(quality: ChordQuality, root: int = 0) -> np.ndarray:
    """Default template for a quality, transposed to ``root``.

    Handy for building synthetic frames: ``chord_template(ChordQuality.MINOR, 9)``
    is an ideal A minor chroma.
    """
    return rotate(DEFAULT_CHORD_TEMPLATES[ChordQuality(quality)], root)


def _cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Normalized dot product; 0.0 if either vector is all zeros."""
    magnitude = float(np.linalg.norm(a) * np.linalg.norm(b))
    if magnitude == 0.0:
        return 0.0
    return float(np.dot(a, b) / magnitude)


def _validate_templates(
    templates: Mapping[ChordQuality, Sequence[float]],
) -> dict[ChordQuality, np.ndarray]:
    """Check and convert a template table, preserving ChordQuality order.

    Raises:
        ValueError: On an empty table or a template that is not 12
            non-negative weights with at least one positive weight.
    """
    if not templates:
        raise ValueError("chord templates must not be empty")
    converted: dict[ChordQuality, np.ndarray] = {}
    by_quality = {ChordQuality(q): w for q, w in templates.items()}
    for quality in ChordQuality:
        if quality not in by_quality:
            continue
        weights = np.asarray(by_quality[quality], dtype=np.float64)
        if weights.shape != (N_PITCH_CLASSES,):
            raise ValueError(
                f"template for {quality.value} must have {N_PITCH_CLASSES} weights, "
                f"got shape {weights.shape}"
            )
        if np.any(weights < 0) or not np.any(weights > 0):
            raise ValueError(
                f"template for {quality.value} must be non-negative with a positive weight"
            )
        converted[quality] = weights
    return converted


class ChordEstimator:
    """Template-matching chord estimator.

    Args:
        match_threshold: Minimum cosine similarity for a candidate (default 0.4).
        silence_threshold: Minimum total energy of the input (default 0.05).
        min_samples: Minimum accumulator updates before estimating (default 8).
        max_alternatives: Number of runner-up chords returned (default 3).
        templates: Per-quality weight templates rooted on C. Defaults to
            DEFAULT_CHORD_TEMPLATES. Qualities missing from the mapping are
            not considered.
    """

    def __init__(
        self,
        match_threshold: float = DEFAULT_CONFIG.chord_match_threshold,
        silence_threshold: float = DEFAULT_CONFIG.chord_silence_threshold,
        min_samples: int = DEFAULT_CONFIG.chord_min_samples,
        max_alternatives: int = DEFAULT_CONFIG.max_chord_alternatives,
        templates: Mapping[ChordQuality, Sequence[float]] | None = None,
    ) -> None:
        self.match_threshold = match_threshold
        self.silence_threshold = silence_threshold
        self.min_samples = min_samples
        self.max_alternatives = max_alternatives
        self._templates = _validate_templates(
            DEFAULT_CHORD_TEMPLATES if templates is None else templates
        )
        # (root, quality, rotated template) in enumeration order: roots outer,
        # qualities inner in table order. Built once.
        self._candidates: tuple[tuple[int, ChordQuality, np.ndarray], ...] = tuple(
            (root, quality, rotate(weights, root))
            for root in range(N_PITCH_CLASSES)
            for quality, weights in self._templates.items()
        )

    @property
    def qualities(self) -> tuple[ChordQuality, ...]:
        """Qualities this estimator considers, in enumeration order."""
        return tuple(self._templates)

    def score_all(self, chroma: Sequence[float] | np.ndarray) -> list[ChordEstimate]:
        """Score every (root, quality) candidate, unfiltered, in enumeration order.

        Raises:
            ValueError: If chroma is not shape (12,).
        """
        normalized = normalize(chroma)
        return [
            ChordEstimate(
                root=root,
                quality=quality,
                confidence=_cosine_similarity(normalized, template),
                label=format_chord_label(root, quality),
            )
            for root, quality, template in self._candidates
        ]

    def estimate(
        self,
        fast_chroma: Sequence[float] | np.ndarray,
        *,
        sample_count: int | None = None,
    ) -> ChordResult:
        """Estimate the sounding chord of a fast-smoothed chroma vector.

        Args:
            fast_chroma:  12-element smoothed chroma (unnormalized).
            sample_count: Accumulator updates behind the vector. When given,
                          estimates below ``min_samples`` return an empty result.

        Returns:
            ChordResult with the best candidate and up to ``max_alternatives``
            runners-up, all ranked by descending similarity. Empty when the
            input is silent or nothing clears the threshold.

        Raises:
            ValueError: If fast_chroma is not shape (12,).
        """
        chroma = as_chroma(fast_chroma)
        if sample_count is not None and sample_count < self.min_samples:
            return EMPTY_CHORD_RESULT
        if total_energy(chroma) < self.silence_threshold:
            return EMPTY_CHORD_RESULT

        candidates = [c for c in self.score_all(chroma) if c.confidence > self.match_threshold]
        if not candidates:
            return EMPTY_CHORD_RESULT

        # sorted() is stable: equal scores keep enumeration order
        candidates.sort(key=lambda c: c.confidence, reverse=True)
        return ChordResult(
            best=candidates[0],
            alternatives=tuple(candidates[1 : 1 + self.max_alternatives]),
        )
