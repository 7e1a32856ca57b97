"""
Tests for chordsense/audio/chords.py — template-matching chord estimation.

Validates:
    - Ideal templates are recognized in every root
    - Scale invariance, silence and sample-count gating
    - Threshold filtering, ranking and the alternatives limit
    - Tie-breaking by enumeration order (roots outer, qualities inner)
    - Custom template tables and their validation
"""

from __future__ import annotations

import numpy as np
import pytest

from chordsense.audio.chords import DEFAULT_CHORD_TEMPLATES, ChordEstimator, chord_template
from chordsense.audio.chroma import rotate
from chordsense.audio.types import EMPTY_CHORD_RESULT, ChordEstimate
from chordsense.music_theory.types import ChordQuality

# ---------------------------------------------------------------------------
# Recognition
# ---------------------------------------------------------------------------


class TestChordRecognition:
    def test_c_major_template(self):
        result = ChordEstimator().estimate(chord_template(ChordQuality.MAJOR, 0))
        assert result.best is not None
        assert result.best.label == "C"
        assert result.best.root == 0
        assert result.best.quality is ChordQuality.MAJOR
        assert result.best.confidence >= 0.9

    def test_rotating_by_seven_gives_g(self):
        result = ChordEstimator().estimate(rotate(chord_template(ChordQuality.MAJOR), 7))
        assert result.best is not None
        assert result.best.label == "G"

    @pytest.mark.parametrize("quality", list(ChordQuality))
    @pytest.mark.parametrize("root", [0, 4, 9])
    def test_every_quality_recognized(self, quality: ChordQuality, root: int):
        result = ChordEstimator().estimate(chord_template(quality, root))
        assert result.best is not None
        assert (result.best.root, result.best.quality) == (root, quality)
        assert result.best.confidence == pytest.approx(1.0)

    def test_a_minor_label(self):
        result = ChordEstimator().estimate(chord_template(ChordQuality.MINOR, 9))
        assert result.best is not None
        assert result.best.label == "Am"

    def test_scale_invariant(self):
        frame = chord_template(ChordQuality.MINOR7, 2)
        loud = ChordEstimator().estimate(frame * 5.0)
        quiet = ChordEstimator().estimate(frame * 0.2)
        assert loud.best is not None and quiet.best is not None
        assert loud.best.label == quiet.best.label == "Dm7"


# ---------------------------------------------------------------------------
# Gating and ranking
# ---------------------------------------------------------------------------


class TestChordGating:
    def test_silence_is_empty(self):
        assert ChordEstimator().estimate(np.zeros(12)) is EMPTY_CHORD_RESULT

    def test_below_energy_threshold_is_empty(self):
        frame = chord_template(ChordQuality.MAJOR) * 0.01
        assert ChordEstimator(silence_threshold=0.05).estimate(frame).is_empty

    def test_too_few_samples_is_empty(self):
        frame = chord_template(ChordQuality.MAJOR)
        assert ChordEstimator(min_samples=8).estimate(frame, sample_count=7).is_empty
        assert not ChordEstimator(min_samples=8).estimate(frame, sample_count=8).is_empty

    def test_nothing_above_threshold_is_empty(self):
        # Flat input scores below 0.6 against every default template
        assert ChordEstimator(match_threshold=0.6).estimate(np.ones(12)).is_empty

    def test_wrong_shape_raises(self):
        with pytest.raises(ValueError):
            ChordEstimator().estimate([1.0, 2.0])


class TestChordRanking:
    def test_alternatives_limited_and_sorted(self):
        result = ChordEstimator(max_alternatives=3).estimate(chord_template(ChordQuality.MAJOR))
        assert len(result.alternatives) == 3
        scores = [result.best.confidence] + [c.confidence for c in result.alternatives]
        assert scores == sorted(scores, reverse=True)

    def test_alternatives_exclude_best(self):
        result = ChordEstimator().estimate(chord_template(ChordQuality.MAJOR))
        assert result.best not in result.alternatives

    def test_all_candidates_above_threshold(self):
        estimator = ChordEstimator(match_threshold=0.4)
        result = estimator.estimate(chord_template(ChordQuality.SUS4, 5))
        for candidate in (result.best, *result.alternatives):
            assert candidate.confidence > 0.4

    def test_zero_alternatives(self):
        result = ChordEstimator(max_alternatives=0).estimate(chord_template(ChordQuality.MAJOR))
        assert result.best is not None
        assert result.alternatives == ()

    def test_score_all_enumerates_every_candidate(self):
        scores = ChordEstimator().score_all(chord_template(ChordQuality.MAJOR))
        assert len(scores) == 12 * len(ChordQuality)
        assert all(isinstance(s, ChordEstimate) for s in scores)
        assert [s.label for s in scores[:3]] == ["C", "Cm", "C7"]

    def test_ties_keep_enumeration_order(self):
        # Single-note templates: equal energy on C and D scores both roots equally
        estimator = ChordEstimator(templates={ChordQuality.MAJOR: [1.0] + [0.0] * 11})
        frame = np.zeros(12)
        frame[0] = frame[2] = 1.0
        result = estimator.estimate(frame)
        assert result.best is not None
        assert result.best.label == "C"
        assert result.alternatives[0].label == "D"
        assert result.best.confidence == pytest.approx(result.alternatives[0].confidence)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TestChordTemplates:
    def test_default_table_covers_every_quality(self):
        assert list(DEFAULT_CHORD_TEMPLATES) == list(ChordQuality)
        for weights in DEFAULT_CHORD_TEMPLATES.values():
            assert len(weights) == 12
            assert weights[0] == 1.0

    def test_default_table_is_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CHORD_TEMPLATES[ChordQuality.MAJOR] = (0.0,) * 12  # type: ignore[index]

    def test_custom_subset(self):
        minor = DEFAULT_CHORD_TEMPLATES[ChordQuality.MINOR]
        estimator = ChordEstimator(templates={ChordQuality.MINOR: minor})
        assert estimator.qualities == (ChordQuality.MINOR,)
        result = estimator.estimate(chord_template(ChordQuality.MINOR, 4))
        assert result.best is not None
        assert result.best.label == "Em"

    def test_string_keys_accepted(self):
        estimator = ChordEstimator(templates={"major": DEFAULT_CHORD_TEMPLATES[ChordQuality.MAJOR]})
        assert estimator.qualities == (ChordQuality.MAJOR,)

    def test_quality_order_follows_enum(self):
        templates = {
            ChordQuality.SUS4: DEFAULT_CHORD_TEMPLATES[ChordQuality.SUS4],
            ChordQuality.MAJOR: DEFAULT_CHORD_TEMPLATES[ChordQuality.MAJOR],
        }
        assert ChordEstimator(templates=templates).qualities == (
            ChordQuality.MAJOR,
            ChordQuality.SUS4,
        )

    @pytest.mark.parametrize(
        ("weights", "match"),
        [
            ([1.0] * 11, "must have 12 weights"),
            ([-1.0] + [1.0] * 11, "non-negative"),
            ([0.0] * 12, "non-negative"),
        ],
    )
    def test_invalid_template_raises(self, weights, match):
        with pytest.raises(ValueError, match=match):
            ChordEstimator(templates={ChordQuality.MAJOR: weights})

    def test_empty_table_raises(self):
        with pytest.raises(ValueError, match="must not be empty"):
            ChordEstimator(templates={})
