"""
chordsense/audio — Pure chroma analysis.

Turns smoothed 12-bin chroma vectors into key and chord estimates. No FFT,
no capture: frames arrive from an external feature extractor.

Public API:
    Types:      ChromaSnapshot, KeyEstimate, ChordEstimate, ChordResult, ChordHistoryEntry
    Chroma:     ChromaAccumulator, rotate, normalize, total_energy
    Key:        KeyEstimator, MAJOR_PROFILE, MINOR_PROFILE
    Chords:     ChordEstimator, DEFAULT_CHORD_TEMPLATES, chord_template
"""

from chordsense.audio.chords import DEFAULT_CHORD_TEMPLATES, ChordEstimator, chord_template
from chordsense.audio.chroma import ChromaAccumulator, normalize, rotate, total_energy
from chordsense.audio.key import MAJOR_PROFILE, MINOR_PROFILE, KeyEstimator
from chordsense.audio.types import (
    ChordEstimate,
    ChordHistoryEntry,
    ChordResult,
    ChromaSnapshot,
    KeyEstimate,
)

__all__ = [
    "ChordEstimate",
    "ChordHistoryEntry",
    "ChordResult",
    "ChromaSnapshot",
    "KeyEstimate",
    "ChromaAccumulator",
    "normalize",
    "rotate",
    "total_energy",
    "KeyEstimator",
    "MAJOR_PROFILE",
    "MINOR_PROFILE",
    "ChordEstimator",
    "DEFAULT_CHORD_TEMPLATES",
    "chord_template",
]
