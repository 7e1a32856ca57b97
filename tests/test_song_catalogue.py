"""
Tests for chordsense/songs/catalogue.py and types.py — catalogue loading and queries.

Validates:
    - Bundled catalogue: size, unique ids, field mapping, caching
    - Custom YAML files: malformed records skipped with a warning, duplicates
    - Query helpers: by difficulty, key (enharmonic), tag, free-text search
    - SongEntry / SongMatch validation
"""

from __future__ import annotations

import logging

import pytest

from chordsense.music_theory.types import Mode
from chordsense.songs.catalogue import (
    get_song,
    load_catalogue,
    parse_catalogue,
    search_songs,
    songs_by_difficulty,
    songs_by_key,
    songs_by_tag,
)
from chordsense.songs.types import ConfidenceTier, Difficulty, SongEntry, SongMatch

# ---------------------------------------------------------------------------
# Bundled catalogue
# ---------------------------------------------------------------------------


class TestBundledCatalogue:
    def test_loads_all_songs(self):
        assert len(load_catalogue()) == 28

    def test_ids_unique(self):
        ids = [s.id for s in load_catalogue()]
        assert len(ids) == len(set(ids))

    def test_cached(self):
        assert load_catalogue() is load_catalogue()

    def test_entry_fields(self):
        song = get_song(load_catalogue(), "let-it-be")
        assert song is not None
        assert song.title == "Let It Be"
        assert song.artist == "The Beatles"
        assert song.chord_progression == ("C", "G", "Am", "F", "C", "G", "F", "C")
        assert song.key == "C"
        assert song.mode is Mode.MAJOR
        assert song.difficulty is Difficulty.EASY
        assert song.tempo == "slow"
        assert "beatles" in song.tags

    def test_quoted_fun_fact(self):
        song = get_song(load_catalogue(), "hey-jude")
        assert song is not None
        assert '"Hey Jules"' in song.fun_fact

    def test_missing_fun_fact_is_none(self):
        song = get_song(load_catalogue(), "london-bridge")
        assert song is not None
        assert song.fun_fact is None

    def test_every_progression_nonempty(self):
        assert all(s.chord_progression for s in load_catalogue())


# ---------------------------------------------------------------------------
# Custom files
# ---------------------------------------------------------------------------


_VALID_RECORD = """
  - id: ok-song
    title: OK Song
    artist: Someone
    difficulty: easy
    chords: [C, G]
    key: C
    mode: major
"""


class TestLoadCustomCatalogue:
    def test_loads_file(self, tmp_path):
        path = tmp_path / "songs.yaml"
        path.write_text("songs:" + _VALID_RECORD)
        songs = load_catalogue(path)
        assert [s.id for s in songs] == ["ok-song"]
        assert songs[0].tags == ()
        assert songs[0].tempo is None

    def test_bare_list_document(self, tmp_path):
        path = tmp_path / "songs.yaml"
        path.write_text(_VALID_RECORD)
        assert len(load_catalogue(path)) == 1

    def test_chord_progression_key_accepted(self, tmp_path):
        path = tmp_path / "songs.yaml"
        path.write_text(
            "songs:\n"
            "  - {id: a, title: A, difficulty: easy, chord_progression: [Am, E], key: A, mode: minor}\n"
        )
        assert load_catalogue(path)[0].chord_progression == ("Am", "E")

    def test_malformed_records_skipped(self, tmp_path, caplog):
        path = tmp_path / "songs.yaml"
        path.write_text(
            "songs:"
            + _VALID_RECORD
            + "  - just a string\n"
            + "  - {id: no-chords, title: X, difficulty: easy, key: C, mode: major}\n"
            + "  - {id: bad-mode, title: X, difficulty: easy, chords: [C], key: C, mode: dorian}\n"
            + "  - {id: bad-key, title: X, difficulty: easy, chords: [C], key: H, mode: major}\n"
            + "  - {id: bad-tier, title: X, difficulty: expert, chords: [C], key: C, mode: major}\n"
            + "  - {title: No Id, difficulty: easy, chords: [C], key: C, mode: major}\n"
        )
        with caplog.at_level(logging.WARNING, logger="chordsense.songs.catalogue"):
            songs = load_catalogue(path)
        assert [s.id for s in songs] == ["ok-song"]
        assert sum("Skipping catalogue record" in r.message for r in caplog.records) == 6

    def test_duplicate_ids_keep_first(self, tmp_path, caplog):
        path = tmp_path / "songs.yaml"
        path.write_text("songs:" + _VALID_RECORD + _VALID_RECORD.replace("OK Song", "Copy"))
        with caplog.at_level(logging.WARNING, logger="chordsense.songs.catalogue"):
            songs = load_catalogue(path)
        assert len(songs) == 1
        assert songs[0].title == "OK Song"
        assert "duplicate" in caplog.text

    def test_document_without_song_list_raises(self):
        with pytest.raises(ValueError, match="'songs' list"):
            parse_catalogue({"version": 1})

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalogue(tmp_path / "nope.yaml")


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestQueries:
    def test_get_song_unknown(self):
        assert get_song(load_catalogue(), "no-such-song") is None

    def test_by_difficulty(self):
        beginner = songs_by_difficulty(load_catalogue(), "beginner")
        assert len(beginner) == 9
        assert all(s.difficulty is Difficulty.BEGINNER for s in beginner)

    def test_by_key_minor(self):
        ids = {s.id for s in songs_by_key(load_catalogue(), "A", "minor")}
        assert ids == {"house-of-the-rising-sun", "fur-elise", "let-it-go", "counting-stars"}

    def test_by_key_is_enharmonic(self, small_catalogue):
        assert [s.id for s in songs_by_key(small_catalogue, "A#", Mode.MAJOR)] == ["flat-side"]
        assert [s.id for s in songs_by_key(small_catalogue, 10, "major")] == ["flat-side"]

    def test_by_key_mode_must_match(self, small_catalogue):
        assert songs_by_key(small_catalogue, "A", "major") == ()

    def test_by_tag_case_insensitive(self):
        ids = [s.id for s in songs_by_tag(load_catalogue(), "Campfire")]
        assert ids == ["leaving-on-a-jet-plane", "country-roads", "wagon-wheel"]

    def test_search_title_artist_and_tags(self):
        ids = {s.id for s in search_songs(load_catalogue(), "beatles")}
        assert {"let-it-be", "hey-jude", "love-me-do"} <= ids

    def test_search_title(self):
        assert [s.id for s in search_songs(load_catalogue(), "wonderwall")] == ["wonderwall"]

    def test_empty_search(self):
        assert search_songs(load_catalogue(), "   ") == ()


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


class TestSongTypes:
    def test_key_pitch_class(self, small_catalogue):
        flat_side = get_song(small_catalogue, "flat-side")
        assert flat_side is not None
        assert flat_side.key_pitch_class == 10
        assert flat_side.key_label == "Bb major"

    def test_blank_id_raises(self):
        with pytest.raises(ValueError, match="id must be"):
            SongEntry(
                id=" ",
                title="T",
                artist="A",
                chord_progression=("C",),
                key="C",
                mode="major",
                difficulty="easy",
            )

    def test_unknown_key_raises(self):
        with pytest.raises(ValueError, match="Unknown note"):
            SongEntry(
                id="x",
                title="T",
                artist="A",
                chord_progression=("C",),
                key="H",
                mode="major",
                difficulty="easy",
            )

    def test_difficulty_rank_order(self):
        assert Difficulty.BEGINNER.rank < Difficulty.EASY.rank < Difficulty.INTERMEDIATE.rank

    def test_match_score_validated(self, small_catalogue):
        with pytest.raises(ValueError, match="score must be in"):
            SongMatch(
                song=small_catalogue[0],
                score=1.2,
                matched_chord_count=4,
                total_chord_count=4,
                confidence_tier=ConfidenceTier.HIGH,
                reason="",
            )
