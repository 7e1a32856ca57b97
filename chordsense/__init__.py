"""
chordsense — Real-time key, chord and song recognition from chroma frames.

Feed 12-bin pitch-class energy frames into a ListeningSession and read back
the estimated key, the debounced chord, likely next chords and the closest
songs from a beginner catalogue.

Public API:
    Session:    ListeningSession, AnalysisSnapshot
    Config:     AnalysisConfig, DEFAULT_CONFIG, RESPONSIVE_CONFIG, STABLE_CONFIG, load_config
    Audio:      ChromaAccumulator, KeyEstimator, ChordEstimator, KeyEstimate, ChordEstimate
    Theory:     ProgressionPredictor, ChordQuality, Mode
    Songs:      FragmentMatcher, SongEntry, SongMatch, MatchResult, load_catalogue
"""

from chordsense.audio import (
    ChordEstimate,
    ChordEstimator,
    ChordHistoryEntry,
    ChordResult,
    ChromaAccumulator,
    ChromaSnapshot,
    KeyEstimate,
    KeyEstimator,
)
from chordsense.config import (
    DEFAULT_CONFIG,
    RESPONSIVE_CONFIG,
    STABLE_CONFIG,
    AnalysisConfig,
    load_config,
)
from chordsense.music_theory import ChordQuality, Mode, ProgressionPredictor
from chordsense.session import AnalysisSnapshot, ListeningSession
from chordsense.songs import (
    ConfidenceTier,
    Difficulty,
    FragmentMatcher,
    MatchResult,
    SongEntry,
    SongMatch,
    load_catalogue,
)

__version__ = "0.1.0"

__all__ = [
    # Session
    "AnalysisSnapshot",
    "ListeningSession",
    # Config
    "AnalysisConfig",
    "DEFAULT_CONFIG",
    "RESPONSIVE_CONFIG",
    "STABLE_CONFIG",
    "load_config",
    # Audio
    "ChordEstimate",
    "ChordEstimator",
    "ChordHistoryEntry",
    "ChordResult",
    "ChromaAccumulator",
    "ChromaSnapshot",
    "KeyEstimate",
    "KeyEstimator",
    # Theory
    "ChordQuality",
    "Mode",
    "ProgressionPredictor",
    # Songs
    "ConfidenceTier",
    "Difficulty",
    "FragmentMatcher",
    "MatchResult",
    "SongEntry",
    "SongMatch",
    "load_catalogue",
]
