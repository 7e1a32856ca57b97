"""
chordsense/songs/matcher.py — Fuzzy song identification from chord fragments.

Beginners play wrong notes, drift onto the relative chord and start in the
middle of a song, so matching is tolerant:

    1. Normalize every label to a bare triad in sharp spelling
       ("Bbmaj7" → "A#", "Dm7" → "Dm").
    2. Treat the seven common relative major/minor pairs as equal.
    3. Score each catalogue entry as
           0.7 × sequence score  (best positional match over all offsets)
         + 0.3 × overlap score   (share of the entry's chords heard at all)
    4. Keep entries at or above ``min_score``, best first.

When nothing matches, the result falls back to songs in the detected key, and
without a key to beginner songs, so the caller always has something to show.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from chordsense.audio.types import KeyEstimate
from chordsense.config import DEFAULT_CONFIG
from chordsense.music_theory.labels import simplify_chord_label
from chordsense.music_theory.scales import note_to_pitch_class, pitch_class_to_note
from chordsense.music_theory.types import Mode
from chordsense.songs.types import (
    ConfidenceTier,
    Difficulty,
    MatchResult,
    SongEntry,
    SongMatch,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Scoring constants
# ---------------------------------------------------------------------------

SEQUENCE_WEIGHT: float = 0.7
OVERLAP_WEIGHT: float = 0.3

HIGH_CONFIDENCE_SCORE: float = 0.7
MEDIUM_CONFIDENCE_SCORE: float = 0.5

SAME_KEY_BONUS: float = 0.1
SAME_MODE_BONUS: float = 0.05

MIN_WINDOW_CHORDS: int = 2
MAX_FALLBACK_SUGGESTIONS: int = 5

# Relative major/minor pairs accepted as interchangeable, spelled as written
_RELATIVE_PAIR_LABELS: tuple[tuple[str, str], ...] = (
    ("C", "Am"),
    ("G", "Em"),
    ("D", "Bm"),
    ("A", "F#m"),
    ("E", "C#m"),
    ("F", "Dm"),
    ("Bb", "Gm"),
)

# Same pairs after normalization, so "Bb" is stored as "A#"
RELATIVE_PAIRS: frozenset[frozenset[str]] = frozenset(
    frozenset((simplify_chord_label(major), simplify_chord_label(minor)))
    for major, minor in _RELATIVE_PAIR_LABELS
)

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

KEEP_PLAYING_MESSAGE = "Keep playing! Play a few more chords so I can listen for a song."
POSSIBLE_MATCHES_MESSAGE = "Could be one of these songs..."
BEGINNER_FALLBACK_MESSAGE = "Keep playing! Here are some beginner songs to try:"


# ---------------------------------------------------------------------------
# Pure scoring helpers
# ---------------------------------------------------------------------------


def chords_match(a: str, b: str) -> bool:
    """True if two normalized labels are equal or a relative major/minor pair."""
    return a == b or frozenset((a, b)) in RELATIVE_PAIRS


def _score_normalized(detected: Sequence[str], song: Sequence[str]) -> tuple[float, int]:
    """Combined score of a normalized window against a normalized progression."""
    if not detected or not song:
        return 0.0, 0

    best_count = 0
    for offset in range(len(song) - len(detected) + 1):
        count = sum(1 for d, s in zip(detected, song[offset:]) if chords_match(d, s))
        best_count = max(best_count, count)

    unique_song = list(dict.fromkeys(song))
    unique_detected = list(dict.fromkeys(detected))
    overlap = sum(1 for s in unique_song if any(chords_match(d, s) for d in unique_detected))

    sequence_score = best_count / len(detected)
    overlap_score = overlap / len(unique_song)
    score = SEQUENCE_WEIGHT * sequence_score + OVERLAP_WEIGHT * overlap_score
    return max(0.0, min(1.0, score)), best_count


def _exact_alignment(detected: Sequence[str], song: Sequence[str]) -> int:
    """Best positional count of identical labels, relative pairs not counted."""
    best = 0
    for offset in range(len(song) - len(detected) + 1):
        best = max(best, sum(1 for d, s in zip(detected, song[offset:]) if d == s))
    return best


def _normalize_window(labels: Sequence[str]) -> list[str]:
    window = []
    for label in labels:
        try:
            window.append(simplify_chord_label(label))
        except ValueError:
            logger.debug("Ignoring unparseable chord label %r", label)
    return window


def _tier_for(score: float) -> ConfidenceTier:
    if score >= HIGH_CONFIDENCE_SCORE:
        return ConfidenceTier.HIGH
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return ConfidenceTier.MEDIUM
    return ConfidenceTier.LOW


def _reason_for(tier: ConfidenceTier, song: SongEntry, matched: int, window_size: int) -> str:
    if tier is ConfidenceTier.HIGH:
        return f"Strong chord progression match ({matched}/{window_size} chords)"
    if tier is ConfidenceTier.MEDIUM:
        return f"Good chord overlap with {song.title}"
    return "Partial match - similar chords detected"


def _key_compatible(song: SongEntry, key: tuple[int, Mode] | None) -> bool:
    """Key agreement never excludes a candidate; reserved for tie-breaking."""
    return True


def _coerce_key(
    detected_key: KeyEstimate | tuple[int | str, Mode | str] | None,
) -> tuple[int, Mode] | None:
    """Return (root pitch class, Mode) or None."""
    if detected_key is None:
        return None
    if isinstance(detected_key, KeyEstimate):
        return detected_key.root, detected_key.mode
    root, mode = detected_key
    pc = note_to_pitch_class(root) if isinstance(root, str) else int(root) % 12
    return pc, Mode(mode)


# ---------------------------------------------------------------------------
# Matcher
# ---------------------------------------------------------------------------


class FragmentMatcher:
    """Score short chord windows against a song catalogue.

    Catalogue progressions are normalized once at construction. Entries whose
    progression is empty or contains a label that cannot be parsed are logged
    and left out of every query.

    Args:
        catalogue:   Songs to match against, in priority order for ties.
        min_score:   Minimum combined score for a match (default 0.3).
        max_results: Maximum matches returned (default 5).

    Example:
        >>> matcher = FragmentMatcher(load_catalogue())
        >>> matcher.match(["C", "G", "Am", "F"]).message
        'This sounds like "Let It Be"!'
    """

    def __init__(
        self,
        catalogue: Iterable[SongEntry],
        *,
        min_score: float = DEFAULT_CONFIG.match_min_score,
        max_results: int = DEFAULT_CONFIG.match_max_results,
    ) -> None:
        if not (0.0 <= min_score <= 1.0):
            raise ValueError(f"min_score must be in [0, 1], got {min_score}")
        if max_results < 1:
            raise ValueError(f"max_results must be >= 1, got {max_results}")
        self.min_score = min_score
        self.max_results = max_results

        entries: list[tuple[SongEntry, tuple[str, ...]]] = []
        for song in catalogue:
            if not song.chord_progression:
                logger.warning("Skipping song %r: empty chord progression", song.id)
                continue
            try:
                normalized = tuple(simplify_chord_label(c) for c in song.chord_progression)
            except ValueError as exc:
                logger.warning("Skipping song %r: %s", song.id, exc)
                continue
            entries.append((song, normalized))
        self._entries: tuple[tuple[SongEntry, tuple[str, ...]], ...] = tuple(entries)

    @property
    def songs(self) -> tuple[SongEntry, ...]:
        """Usable catalogue entries, in catalogue order."""
        return tuple(song for song, _ in self._entries)

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def score_progression(
        self, window: Sequence[str], progression: Sequence[str]
    ) -> tuple[float, int]:
        """Score a detected chord window against one progression.

        Args:
            window:      Detected chord labels, oldest first.
            progression: Reference chord labels.

        Returns:
            (combined score in [0, 1], best positional match count).
            The sequence part is 0 when the progression is shorter than the
            window.

        Raises:
            ValueError: If any label cannot be parsed.
        """
        return _score_normalized(
            [simplify_chord_label(c) for c in window],
            [simplify_chord_label(c) for c in progression],
        )

    def find_matches(
        self,
        recent_chord_labels: Sequence[str],
        *,
        difficulty: Difficulty | str | None = None,
    ) -> tuple[SongMatch, ...]:
        """Scored matches only, without any fallback.

        Unparseable labels in the window are dropped before scoring. Equal
        scores are ordered by the number of identically spelled positional
        matches, so an exact progression beats one that only lines up through
        relative major/minor substitutions; remaining ties keep catalogue
        order.
        """
        window = _normalize_window(recent_chord_labels)
        if len(window) < MIN_WINDOW_CHORDS:
            return ()

        tier_filter = Difficulty(difficulty) if difficulty is not None else None
        ranked: list[tuple[float, int, SongMatch]] = []
        for song, progression in self._entries:
            if tier_filter is not None and song.difficulty is not tier_filter:
                continue
            score, matched = _score_normalized(window, progression)
            if score < self.min_score:
                continue
            tier = _tier_for(score)
            match = SongMatch(
                song=song,
                score=score,
                matched_chord_count=matched,
                total_chord_count=len(song.chord_progression),
                confidence_tier=tier,
                reason=_reason_for(tier, song, matched, len(window)),
            )
            ranked.append((score, _exact_alignment(window, progression), match))

        ranked.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return tuple(match for _, _, match in ranked[: self.max_results])

    # ------------------------------------------------------------------
    # Public queries
    # ------------------------------------------------------------------

    def match(
        self,
        recent_chord_labels: Sequence[str],
        detected_key: KeyEstimate | tuple[int | str, Mode | str] | None = None,
        *,
        difficulty: Difficulty | str | None = None,
    ) -> MatchResult:
        """Identify the song behind a chord window, with fallbacks.

        Args:
            recent_chord_labels: Detected chords, oldest first.
            detected_key:        KeyEstimate or (root, mode) from key
                                 detection, if any. Used for the fallback.
            difficulty:          Only consider entries of this tier.

        Returns:
            MatchResult. ``matches`` is populated when something clears
            ``min_score``; otherwise ``suggestions`` lists songs in the
            detected key, or beginner songs when there is no key.
        """
        window = _normalize_window(recent_chord_labels)
        if len(window) < MIN_WINDOW_CHORDS:
            return MatchResult(message=KEEP_PLAYING_MESSAGE)

        key = _coerce_key(detected_key)
        matches = tuple(
            m for m in self.find_matches(window, difficulty=difficulty)
            if _key_compatible(m.song, key)
        )
        logger.debug("Matched %d songs against %d chords", len(matches), len(window))

        if matches:
            top = matches[0]
            if top.confidence_tier is ConfidenceTier.HIGH:
                return MatchResult(matches=matches, message=f'This sounds like "{top.song.title}"!')
            return MatchResult(matches=matches, message=POSSIBLE_MATCHES_MESSAGE)

        if key is not None:
            root, mode = key
            return MatchResult(
                suggestions=self.songs_in_key(root, mode, difficulty=difficulty),
                message=(
                    f"Playing in {pitch_class_to_note(root)} {mode.value}. "
                    "Try one of these songs:"
                ),
            )

        return MatchResult(
            suggestions=self.beginner_songs(),
            message=BEGINNER_FALLBACK_MESSAGE,
        )

    def songs_in_key(
        self,
        root: int | str,
        mode: Mode | str,
        *,
        difficulty: Difficulty | str | None = None,
        max_results: int = MAX_FALLBACK_SUGGESTIONS,
    ) -> tuple[SongEntry, ...]:
        """Entries in exactly this key and mode, easiest first.

        Roots compare by pitch class, so "Bb" and "A#" are the same key.
        """
        pc = note_to_pitch_class(root) if isinstance(root, str) else root % 12
        wanted_mode = Mode(mode)
        tier_filter = Difficulty(difficulty) if difficulty is not None else None
        songs = [
            song
            for song in self.songs
            if song.key_pitch_class == pc
            and song.mode is wanted_mode
            and (tier_filter is None or song.difficulty is tier_filter)
        ]
        songs.sort(key=lambda s: s.difficulty.rank)
        return tuple(songs[:max_results])

    def beginner_songs(self, max_results: int = MAX_FALLBACK_SUGGESTIONS) -> tuple[SongEntry, ...]:
        """First beginner-tier entries in catalogue order."""
        return tuple(s for s in self.songs if s.difficulty is Difficulty.BEGINNER)[:max_results]

    def similar_to(
        self, song_id: str, *, max_results: int = MAX_FALLBACK_SUGGESTIONS
    ) -> tuple[SongEntry, ...]:
        """Recommend entries whose progression resembles ``song_id``'s.

        Every other entry is scored against the target's progression with the
        match formula, plus a bonus for sharing the key root (+0.1) and the
        mode (+0.05). Unknown ids return an empty tuple.
        """
        target = next(((s, p) for s, p in self._entries if s.id == song_id), None)
        if target is None:
            return ()
        target_song, target_progression = target

        scored: list[tuple[float, SongEntry]] = []
        for song, progression in self._entries:
            if song.id == song_id:
                continue
            score, _ = _score_normalized(target_progression, progression)
            if song.key_pitch_class == target_song.key_pitch_class:
                score += SAME_KEY_BONUS
            if song.mode is target_song.mode:
                score += SAME_MODE_BONUS
            scored.append((score, song))

        scored.sort(key=lambda item: item[0], reverse=True)
        return tuple(song for _, song in scored[:max_results])
