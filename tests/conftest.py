"""
Shared fixtures for the test suite.

Centralizes a small deterministic catalogue so individual test files don't
need to rebuild it.
"""

from __future__ import annotations

import pytest

from chordsense.songs.types import SongEntry


def _song(song_id: str, chords: list[str], key: str, mode: str, difficulty: str, **kw) -> SongEntry:
    return SongEntry(
        id=song_id,
        title=kw.pop("title", song_id.replace("-", " ").title()),
        artist=kw.pop("artist", "Test Artist"),
        chord_progression=tuple(chords),
        key=key,
        mode=mode,
        difficulty=difficulty,
        **kw,
    )


@pytest.fixture
def small_catalogue() -> tuple[SongEntry, ...]:
    """Five songs with distinct progressions, keys and tiers."""
    return (
        _song("pop-four", ["C", "G", "Am", "F"], "C", "major", "easy", title="Pop Four"),
        _song("three-chord", ["C", "F", "G", "C"], "C", "major", "beginner"),
        _song("minor-drift", ["Am", "F", "C", "G"], "A", "minor", "intermediate"),
        _song("g-campfire", ["G", "D", "Em", "C"], "G", "major", "beginner", tags=("campfire",)),
        _song("flat-side", ["Bb", "Eb", "F", "Bb"], "Bb", "major", "easy"),
    )
