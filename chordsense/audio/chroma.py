"""
chordsense/audio/chroma.py — Chroma vector primitives and the smoothing accumulator.

`rotate()` is the one rotation primitive in the package: both the key
profiles and the chord templates are transposed to a candidate root with it.

ChromaAccumulator keeps two exponential moving averages of the incoming
frames:

    fast = fast * (1 - fast_alpha) + frame * fast_alpha     (chords)
    slow = slow * (1 - slow_alpha) + frame * slow_alpha     (key)

Both start at the zero vector. The accumulator never decides anything; the
sample counters let downstream estimators gate "not enough data yet".
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from chordsense.audio.types import ChromaSnapshot
from chordsense.config import DEFAULT_CONFIG

N_PITCH_CLASSES: int = 12


def as_chroma(values: Sequence[float] | np.ndarray) -> np.ndarray:
    """Convert a 12-element sequence to a float64 array.

    Raises:
        ValueError: If the input is not shape (12,).
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.shape != (N_PITCH_CLASSES,):
        raise ValueError(f"chroma must have shape ({N_PITCH_CLASSES},), got {arr.shape}")
    return arr


def rotate(values: Sequence[float] | np.ndarray, steps: int) -> np.ndarray:
    """Transpose a pitch-class vector up by ``steps`` semitones.

    ``rotate(v, n)[(i + n) % len(v)] == v[i]`` for every integer ``n``;
    negative steps transpose down and steps beyond the length wrap.

    Examples:
        >>> rotate([1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0], 7).tolist().index(1)
        7
        >>> rotate([1, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0], -1).tolist().index(1)
        11
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim != 1 or arr.size == 0:
        raise ValueError(f"rotate expects a non-empty 1-D vector, got shape {arr.shape}")
    return np.roll(arr, int(steps) % arr.size)


def total_energy(chroma: Sequence[float] | np.ndarray) -> float:
    """Sum of all pitch-class energies."""
    return float(np.sum(chroma))


def normalize(chroma: Sequence[float] | np.ndarray) -> np.ndarray:
    """Scale a chroma vector to sum 1. A zero-energy vector is returned as zeros."""
    arr = as_chroma(chroma)
    energy = float(arr.sum())
    if energy <= 0.0:
        return np.zeros(N_PITCH_CLASSES)
    return arr / energy


class ChromaAccumulator:
    """Two-speed exponential smoothing of raw chroma frames.

    Args:
        fast_alpha: Weight of each new frame in the fast vector (default 0.35).
        slow_alpha: Weight of each new frame in the slow vector (default 0.05).

    Example::

        acc = ChromaAccumulator()
        snapshot = acc.update(frame)
        snapshot.fast, snapshot.slow_sample_count
    """

    def __init__(
        self,
        fast_alpha: float = DEFAULT_CONFIG.fast_alpha,
        slow_alpha: float = DEFAULT_CONFIG.slow_alpha,
    ) -> None:
        for name, alpha in (("fast_alpha", fast_alpha), ("slow_alpha", slow_alpha)):
            if not (0.0 < alpha <= 1.0):
                raise ValueError(f"{name} must be in (0, 1], got {alpha}")
        self.fast_alpha = fast_alpha
        self.slow_alpha = slow_alpha
        self._fast = np.zeros(N_PITCH_CLASSES)
        self._slow = np.zeros(N_PITCH_CLASSES)
        self._fast_count = 0
        self._slow_count = 0

    @property
    def fast(self) -> np.ndarray:
        """Copy of the fast-smoothed vector."""
        return self._fast.copy()

    @property
    def slow(self) -> np.ndarray:
        """Copy of the slow-smoothed vector."""
        return self._slow.copy()

    @property
    def fast_sample_count(self) -> int:
        return self._fast_count

    @property
    def slow_sample_count(self) -> int:
        return self._slow_count

    def update(self, raw_frame: Sequence[float] | np.ndarray) -> ChromaSnapshot:
        """Fold one raw frame into both averages.

        Args:
            raw_frame: 12 non-negative energies, index 0 = C.

        Returns:
            ChromaSnapshot of both vectors and counters after the update.

        Raises:
            ValueError: If raw_frame is not shape (12,).
        """
        frame = as_chroma(raw_frame)
        self._fast = self._fast * (1.0 - self.fast_alpha) + frame * self.fast_alpha
        self._slow = self._slow * (1.0 - self.slow_alpha) + frame * self.slow_alpha
        self._fast_count += 1
        self._slow_count += 1
        return self.snapshot()

    def snapshot(self) -> ChromaSnapshot:
        """Immutable view of the current state."""
        return ChromaSnapshot(
            fast=tuple(float(v) for v in self._fast),
            slow=tuple(float(v) for v in self._slow),
            fast_sample_count=self._fast_count,
            slow_sample_count=self._slow_count,
        )

    def reset(self) -> None:
        """Return to the zero vectors and zero counters."""
        self._fast = np.zeros(N_PITCH_CLASSES)
        self._slow = np.zeros(N_PITCH_CLASSES)
        self._fast_count = 0
        self._slow_count = 0
