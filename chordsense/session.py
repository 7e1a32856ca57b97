"""
chordsense/session.py — Per-listener analysis pipeline.

A ListeningSession owns all transient state for one listener: the chroma
accumulator, the last key and chord estimates, the debounced chord history
and the cached predictions and song matches. Each ``process()`` call runs one
synchronous pass:

    frame ─► ChromaAccumulator ─┬─► ChordEstimator (fast) ─► debounce ─► history
                                └─► KeyEstimator (slow)
    committed chord + key ─► ProgressionPredictor
    history window + key  ─► FragmentMatcher

Debounce
--------
A newly detected label is *pending* until it has been the best chord for
``min_chord_hold_ms``; only then is it committed. Reverting to the committed
chord, or silence, drops the pending label without touching history. When a
chord is committed over another one, the outgoing chord is appended to the
history with the time it was held.

Sessions share nothing mutable; run one per concurrent listener.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from chordsense.audio.chords import ChordEstimator
from chordsense.audio.chroma import ChromaAccumulator
from chordsense.audio.key import KeyEstimator
from chordsense.audio.types import (
    EMPTY_CHORD_RESULT,
    ChordEstimate,
    ChordHistoryEntry,
    ChordResult,
    ChromaSnapshot,
    KeyEstimate,
)
from chordsense.config import DEFAULT_CONFIG, AnalysisConfig
from chordsense.music_theory.progressions import ProgressionPredictor
from chordsense.songs.catalogue import load_catalogue
from chordsense.songs.matcher import FragmentMatcher
from chordsense.songs.types import MatchResult, SongEntry

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Everything the host layer needs after one processed frame."""

    timestamp_ms: float
    chroma: ChromaSnapshot
    key: KeyEstimate | None
    chord: ChordResult
    """Raw (undebounced) result of the latest chord estimation."""

    current_chord: ChordEstimate | None
    """Debounced, committed chord."""

    history: tuple[ChordHistoryEntry, ...] = field(default_factory=tuple)
    predictions: tuple[str, ...] = field(default_factory=tuple)
    match: MatchResult | None = None
    chord_changed: bool = False


class ListeningSession:
    """Stateful analysis of one listener's chroma stream.

    Args:
        config:    Tuning parameters (default DEFAULT_CONFIG).
        catalogue: Songs for fragment matching. None loads the bundled
                   catalogue.
        clock:     Millisecond clock used when ``process()`` gets no
                   timestamp. Defaults to ``time.monotonic``.

    Example:
        >>> session = ListeningSession()
        >>> snapshot = session.process([0.0] * 12, now_ms=0.0)
        >>> snapshot.current_chord is None
        True
    """

    def __init__(
        self,
        config: AnalysisConfig = DEFAULT_CONFIG,
        catalogue: Iterable[SongEntry] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.config = config
        self._clock = clock or _monotonic_ms

        self._accumulator = ChromaAccumulator(
            fast_alpha=config.fast_alpha,
            slow_alpha=config.slow_alpha,
        )
        self._key_estimator = KeyEstimator(
            silence_threshold=config.key_silence_threshold,
            min_samples=config.key_min_samples,
            alternate_min_confidence=config.key_alternate_min_confidence,
        )
        self._chord_estimator = ChordEstimator(
            match_threshold=config.chord_match_threshold,
            silence_threshold=config.chord_silence_threshold,
            min_samples=config.chord_min_samples,
            max_alternatives=config.max_chord_alternatives,
            templates=config.chord_templates,
        )
        self._predictor = ProgressionPredictor(max_predictions=config.max_predictions)
        self._matcher = FragmentMatcher(
            load_catalogue() if catalogue is None else catalogue,
            min_score=config.match_min_score,
            max_results=config.match_max_results,
        )

        self._history: deque[ChordHistoryEntry] = deque(maxlen=config.history_size)
        self._clear_state()
        logger.info(
            "ListeningSession created (%d songs, hold=%.0fms)",
            len(self._matcher.songs),
            config.min_chord_hold_ms,
        )

    def _clear_state(self) -> None:
        self._key: KeyEstimate | None = None
        self._chord_result: ChordResult = EMPTY_CHORD_RESULT
        self._current: ChordEstimate | None = None
        self._current_since_ms: float = 0.0
        self._pending: ChordEstimate | None = None
        self._pending_since_ms: float = 0.0
        self._history.clear()
        self._predictions: tuple[str, ...] = ()
        self._prediction_basis: tuple[str, str] | None = None
        self._match: MatchResult | None = None
        self._match_basis: tuple[tuple[str, ...], str | None] | None = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def matcher(self) -> FragmentMatcher:
        return self._matcher

    @property
    def key(self) -> KeyEstimate | None:
        return self._key

    @property
    def current_chord(self) -> ChordEstimate | None:
        return self._current

    @property
    def history(self) -> tuple[ChordHistoryEntry, ...]:
        """Committed chord changes, oldest first."""
        return tuple(self._history)

    def chord_window(self) -> tuple[str, ...]:
        """The last ``match_window`` history labels plus the committed chord."""
        labels = [entry.chord.label for entry in self._history]
        labels = labels[-self.config.match_window :]
        if self._current is not None:
            labels.append(self._current.label)
        return tuple(labels)

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def process(
        self,
        raw_frame: Sequence[float] | np.ndarray,
        now_ms: float | None = None,
    ) -> AnalysisSnapshot:
        """Run one analysis pass on a 12-bin chroma frame.

        Args:
            raw_frame: Non-negative pitch-class energies, index 0 = C.
            now_ms:    Frame timestamp in milliseconds. Defaults to the
                       session clock.

        Returns:
            AnalysisSnapshot of the session after this frame.

        Raises:
            ValueError: If raw_frame is not shape (12,).
        """
        if now_ms is None:
            now_ms = self._clock()

        chroma = self._accumulator.update(raw_frame)
        updates = chroma.fast_sample_count

        if updates % self.config.chord_interval == 0:
            self._chord_result = self._chord_estimator.estimate(
                chroma.fast, sample_count=chroma.fast_sample_count
            )
        if updates % self.config.key_interval == 0:
            self._update_key(
                self._key_estimator.estimate(chroma.slow, sample_count=chroma.slow_sample_count)
            )

        chord_changed = self._debounce(self._chord_result.best, now_ms)
        self._refresh_predictions()
        self._refresh_match()

        return AnalysisSnapshot(
            timestamp_ms=now_ms,
            chroma=chroma,
            key=self._key,
            chord=self._chord_result,
            current_chord=self._current,
            history=self.history,
            predictions=self._predictions,
            match=self._match,
            chord_changed=chord_changed,
        )

    def reset(self) -> None:
        """Discard all accumulated state, as if the session were new."""
        self._accumulator.reset()
        self._clear_state()
        logger.info("ListeningSession reset")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _update_key(self, estimate: KeyEstimate | None) -> None:
        previous = self._key.label if self._key is not None else None
        current = estimate.label if estimate is not None else None
        if previous != current:
            logger.debug("Key changed: %s → %s", previous, current)
        self._key = estimate

    def _debounce(self, best: ChordEstimate | None, now_ms: float) -> bool:
        """Apply the hold rule; return True when a chord was committed."""
        if best is None:
            self._pending = None
            return False

        if self._current is not None and best.label == self._current.label:
            self._current = best
            self._pending = None
            return False

        if self._pending is None or self._pending.label != best.label:
            self._pending = best
            self._pending_since_ms = now_ms
        else:
            self._pending = best

        if now_ms - self._pending_since_ms < self.config.min_chord_hold_ms:
            return False

        if self._current is not None:
            self._history.append(
                ChordHistoryEntry(
                    chord=self._current,
                    observed_at_ms=self._current_since_ms,
                    held_duration_ms=max(0.0, self._pending_since_ms - self._current_since_ms),
                )
            )
        logger.debug(
            "Chord committed: %s (confidence=%.2f)",
            self._pending.label,
            self._pending.confidence,
        )
        self._current = self._pending
        self._current_since_ms = self._pending_since_ms
        self._pending = None
        return True

    def _refresh_predictions(self) -> None:
        if self._current is None or self._key is None:
            self._predictions = ()
            self._prediction_basis = None
            return
        basis = (self._current.label, self._key.label)
        if basis == self._prediction_basis:
            return
        self._prediction_basis = basis
        self._predictions = self._predictor.predict_next(
            self._current.label, self._key.root, self._key.mode
        )

    def _refresh_match(self) -> None:
        window = self.chord_window()
        basis = (window, self._key.label if self._key is not None else None)
        if basis == self._match_basis:
            return
        self._match_basis = basis
        self._match = self._matcher.match(window, self._key)
