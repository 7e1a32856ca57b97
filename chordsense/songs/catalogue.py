"""
chordsense/songs/catalogue.py — Reference song catalogue loader and queries.

The bundled catalogue lives in ``chordsense/songs/data/catalogue.yaml`` and is
loaded once per process. Custom catalogues can be loaded from any YAML file
with the same layout:

    songs:
      - id: let-it-be
        title: Let It Be
        artist: The Beatles
        difficulty: easy
        chords: [C, G, Am, F, C, G, F, C]
        key: C
        mode: major
        tempo: slow            # optional
        tags: [beatles, pop]   # optional
        fun_fact: ...          # optional

Records that cannot be turned into a SongEntry are skipped with a warning;
one bad row never hides the rest of the catalogue.
"""

from __future__ import annotations

import functools
import importlib.resources
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from chordsense.music_theory.scales import note_to_pitch_class
from chordsense.music_theory.types import Mode
from chordsense.songs.types import Difficulty, SongEntry

logger = logging.getLogger(__name__)

_DATA_PACKAGE = "chordsense.songs"
_DATA_FILE = "data/catalogue.yaml"

# Accepted spellings of the progression field
_PROGRESSION_KEYS: tuple[str, ...] = ("chords", "chord_progression")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _entry_from_record(record: Any) -> SongEntry:
    """Build a SongEntry from one parsed YAML record.

    Raises:
        ValueError: If a required field is missing or invalid
    """
    if not isinstance(record, dict):
        raise ValueError(f"expected a mapping, got {type(record).__name__}")

    progression = next((record[k] for k in _PROGRESSION_KEYS if k in record), None)
    if not isinstance(progression, list):
        raise ValueError("missing chord list")

    missing = [k for k in ("id", "title", "key", "mode", "difficulty") if k not in record]
    if missing:
        raise ValueError(f"missing fields: {missing}")

    return SongEntry(
        id=str(record["id"]),
        title=str(record["title"]),
        artist=str(record.get("artist", "")),
        chord_progression=tuple(str(c) for c in progression),
        key=str(record["key"]),
        mode=record["mode"],
        difficulty=record["difficulty"],
        tags=tuple(str(t) for t in record.get("tags") or ()),
        tempo=record.get("tempo"),
        fun_fact=record.get("fun_fact"),
    )


def parse_catalogue(data: Any, *, source: str = "<memory>") -> tuple[SongEntry, ...]:
    """Convert a parsed catalogue document into SongEntry objects.

    Args:
        data:   Result of ``yaml.safe_load`` — a mapping with a ``songs`` list,
                or the list itself.
        source: Name used in log messages.

    Returns:
        Valid entries in file order. Duplicated ids keep the first record.

    Raises:
        ValueError: If the document has no song list at all
    """
    records = data.get("songs") if isinstance(data, dict) else data
    if not isinstance(records, list):
        raise ValueError(f"{source}: catalogue must contain a 'songs' list")

    entries: list[SongEntry] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        try:
            entry = _entry_from_record(record)
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping catalogue record %d in %s: %s", index, source, exc)
            continue
        if entry.id in seen:
            logger.warning("Skipping duplicate song id %r in %s", entry.id, source)
            continue
        seen.add(entry.id)
        entries.append(entry)
    return tuple(entries)


@functools.cache
def _load_default_catalogue() -> tuple[SongEntry, ...]:
    resource = importlib.resources.files(_DATA_PACKAGE).joinpath(_DATA_FILE)
    text = resource.read_text(encoding="utf-8")
    entries = parse_catalogue(yaml.safe_load(text), source=_DATA_FILE)
    logger.info("Loaded %d songs from bundled catalogue", len(entries))
    return entries


def load_catalogue(path: str | Path | None = None) -> tuple[SongEntry, ...]:
    """Load a song catalogue.

    Args:
        path: YAML file to read. None loads the bundled catalogue, which is
              parsed once and cached for the life of the process.

    Returns:
        Tuple of SongEntry in file order.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the file has no song list
    """
    if path is None:
        return _load_default_catalogue()

    path = Path(path)
    with path.open(encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    entries = parse_catalogue(data, source=str(path))
    logger.info("Loaded %d songs from %s", len(entries), path)
    return entries


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def get_song(catalogue: Iterable[SongEntry], song_id: str) -> SongEntry | None:
    """Return the entry with ``song_id``, or None."""
    return next((s for s in catalogue if s.id == song_id), None)


def songs_by_difficulty(
    catalogue: Iterable[SongEntry], difficulty: Difficulty | str
) -> tuple[SongEntry, ...]:
    """Entries of exactly one difficulty tier, in catalogue order."""
    tier = Difficulty(difficulty)
    return tuple(s for s in catalogue if s.difficulty is tier)


def songs_by_key(
    catalogue: Iterable[SongEntry], root: str | int, mode: Mode | str
) -> tuple[SongEntry, ...]:
    """Entries in the given key, comparing roots by pitch class.

    Args:
        root: Note name ("Bb", "A#") or pitch class 0–11
        mode: "major" / "minor"
    """
    pc = note_to_pitch_class(root) if isinstance(root, str) else root % 12
    wanted = Mode(mode)
    return tuple(s for s in catalogue if s.key_pitch_class == pc and s.mode is wanted)


def songs_by_tag(catalogue: Iterable[SongEntry], tag: str) -> tuple[SongEntry, ...]:
    """Entries carrying ``tag`` (case-insensitive)."""
    wanted = tag.strip().lower()
    return tuple(s for s in catalogue if wanted in (t.lower() for t in s.tags))


def search_songs(catalogue: Iterable[SongEntry], query: str) -> tuple[SongEntry, ...]:
    """Case-insensitive substring search over title, artist and tags.

    An empty query returns nothing.
    """
    needle = query.strip().lower()
    if not needle:
        return ()
    return tuple(
        s
        for s in catalogue
        if needle in s.title.lower()
        or needle in s.artist.lower()
        or any(needle in t.lower() for t in s.tags)
    )
