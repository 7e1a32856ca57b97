"""
Tests for chordsense.config module.

Validates:
    - AnalysisConfig defaults and field validation
    - Immutability and with_overrides
    - from_mapping: unknown keys, chord template conversion
    - load_config: YAML files, empty files, non-mapping documents
    - Predefined presets
"""

from __future__ import annotations

import dataclasses

import pytest

from chordsense.config import (
    DEFAULT_CONFIG,
    RESPONSIVE_CONFIG,
    STABLE_CONFIG,
    AnalysisConfig,
    load_config,
)
from chordsense.music_theory.types import ChordQuality

# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestAnalysisConfigValidation:
    """Test AnalysisConfig parameter validation."""

    def test_default_values(self) -> None:
        config = AnalysisConfig()
        assert config.fast_alpha == 0.35
        assert config.slow_alpha == 0.05
        assert config.key_silence_threshold == 0.01
        assert config.chord_silence_threshold == 0.05
        assert config.chord_min_samples == 8
        assert config.chord_match_threshold == 0.4
        assert config.max_chord_alternatives == 3
        assert config.min_chord_hold_ms == 300.0
        assert config.history_size == 20
        assert config.match_window == 10
        assert config.match_min_score == 0.3
        assert config.match_max_results == 5
        assert config.max_predictions == 3
        assert config.chord_templates is None

    @pytest.mark.parametrize("alpha", [0.0, -0.1, 1.5])
    def test_fast_alpha_out_of_range_raises(self, alpha: float) -> None:
        with pytest.raises(ValueError, match="fast_alpha must be in"):
            AnalysisConfig(fast_alpha=alpha)

    def test_alpha_of_one_is_valid(self) -> None:
        assert AnalysisConfig(slow_alpha=1.0).slow_alpha == 1.0

    def test_negative_silence_threshold_raises(self) -> None:
        with pytest.raises(ValueError, match="chord_silence_threshold must be non-negative"):
            AnalysisConfig(chord_silence_threshold=-0.01)

    def test_negative_hold_raises(self) -> None:
        with pytest.raises(ValueError, match="min_chord_hold_ms must be non-negative"):
            AnalysisConfig(min_chord_hold_ms=-1)

    def test_zero_hold_is_valid(self) -> None:
        assert AnalysisConfig(min_chord_hold_ms=0).min_chord_hold_ms == 0

    @pytest.mark.parametrize("name", ["chord_interval", "key_interval", "history_size"])
    def test_zero_counts_raise(self, name: str) -> None:
        with pytest.raises(ValueError, match=f"{name} must be positive"):
            AnalysisConfig(**{name: 0})

    def test_match_window_below_two_raises(self) -> None:
        with pytest.raises(ValueError, match="match_window must be at least 2"):
            AnalysisConfig(match_window=1)

    def test_threshold_above_one_raises(self) -> None:
        with pytest.raises(ValueError, match="chord_match_threshold must be in"):
            AnalysisConfig(chord_match_threshold=1.2)


class TestAnalysisConfigImmutability:
    """Test that AnalysisConfig is frozen."""

    def test_cannot_assign(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.fast_alpha = 0.9  # type: ignore[misc]

    def test_with_overrides_returns_copy(self) -> None:
        tuned = DEFAULT_CONFIG.with_overrides(min_chord_hold_ms=500.0)
        assert tuned.min_chord_hold_ms == 500.0
        assert DEFAULT_CONFIG.min_chord_hold_ms == 300.0

    def test_with_overrides_validates(self) -> None:
        with pytest.raises(ValueError):
            DEFAULT_CONFIG.with_overrides(history_size=0)

    def test_hashable_with_custom_templates(self) -> None:
        weights = [1, 0, 0, 0, 1, 0, 0, 1, 0, 0, 0, 0]
        a = AnalysisConfig.from_mapping({"chord_templates": {"major": weights}})
        b = AnalysisConfig(chord_templates={ChordQuality.MAJOR: tuple(weights)})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b, DEFAULT_CONFIG}) == 2

    def test_templates_read_only(self) -> None:
        source = {ChordQuality.MAJOR: [1.0] + [0.0] * 11}
        config = AnalysisConfig(chord_templates=source)
        with pytest.raises(TypeError):
            config.chord_templates[ChordQuality.MINOR] = (1.0,) * 12  # type: ignore[index]
        source[ChordQuality.MINOR] = [1.0] * 12
        assert list(config.chord_templates) == [ChordQuality.MAJOR]
        assert config.chord_templates[ChordQuality.MAJOR] == (1.0,) + (0.0,) * 11


# ---------------------------------------------------------------------------
# from_mapping / load_config
# ---------------------------------------------------------------------------


class TestFromMapping:
    def test_partial_mapping_keeps_defaults(self) -> None:
        config = AnalysisConfig.from_mapping({"match_window": 6})
        assert config.match_window == 6
        assert config.fast_alpha == DEFAULT_CONFIG.fast_alpha

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown config keys"):
            AnalysisConfig.from_mapping({"window_size": 6})

    def test_templates_converted_to_quality_keys(self) -> None:
        config = AnalysisConfig.from_mapping(
            {"chord_templates": {"major": [1, 0, 0, 0, 1, 0, 0, 1, 0, 0, 0, 0]}}
        )
        assert config.chord_templates is not None
        assert list(config.chord_templates) == [ChordQuality.MAJOR]
        assert config.chord_templates[ChordQuality.MAJOR][4] == 1.0

    def test_unknown_template_quality_raises(self) -> None:
        with pytest.raises(ValueError):
            AnalysisConfig.from_mapping({"chord_templates": {"power": [1] * 12}})


class TestLoadConfig:
    def test_loads_yaml_file(self, tmp_path) -> None:
        path = tmp_path / "tuning.yaml"
        path.write_text("min_chord_hold_ms: 450\nchord_interval: 2\n")
        config = load_config(path)
        assert config.min_chord_hold_ms == 450
        assert config.chord_interval == 2

    def test_empty_file_gives_defaults(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(path) == DEFAULT_CONFIG

    def test_list_document_raises(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_config(path)

    def test_invalid_value_raises(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("fast_alpha: 2.0\n")
        with pytest.raises(ValueError, match="fast_alpha"):
            load_config(path)


# ---------------------------------------------------------------------------
# Presets
# ---------------------------------------------------------------------------


class TestPresets:
    def test_responsive_is_faster_than_default(self) -> None:
        assert RESPONSIVE_CONFIG.fast_alpha > DEFAULT_CONFIG.fast_alpha
        assert RESPONSIVE_CONFIG.min_chord_hold_ms < DEFAULT_CONFIG.min_chord_hold_ms

    def test_stable_is_slower_than_default(self) -> None:
        assert STABLE_CONFIG.fast_alpha < DEFAULT_CONFIG.fast_alpha
        assert STABLE_CONFIG.min_chord_hold_ms > DEFAULT_CONFIG.min_chord_hold_ms
        assert STABLE_CONFIG.chord_match_threshold > DEFAULT_CONFIG.chord_match_threshold
