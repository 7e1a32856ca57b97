"""
chordsense/songs/ — Reference song catalogue and fragment matching.

Public API:
    Types:      SongEntry, SongMatch, MatchResult, Difficulty, ConfidenceTier
    Catalogue:  load_catalogue, get_song, songs_by_difficulty, songs_by_key,
                songs_by_tag, search_songs
    Matching:   FragmentMatcher
"""

from chordsense.songs.catalogue import (
    get_song,
    load_catalogue,
    search_songs,
    songs_by_difficulty,
    songs_by_key,
    songs_by_tag,
)
from chordsense.songs.matcher import FragmentMatcher
from chordsense.songs.types import (
    ConfidenceTier,
    Difficulty,
    MatchResult,
    SongEntry,
    SongMatch,
)

__all__ = [
    "ConfidenceTier",
    "Difficulty",
    "MatchResult",
    "SongEntry",
    "SongMatch",
    "get_song",
    "load_catalogue",
    "search_songs",
    "songs_by_difficulty",
    "songs_by_key",
    "songs_by_tag",
    "FragmentMatcher",
]
