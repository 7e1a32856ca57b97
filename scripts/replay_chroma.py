#!/usr/bin/env python
"""Replay recorded chroma frames through a ListeningSession.

Reads a JSON-lines file with one frame per line, either

    {"t_ms": 1250.0, "chroma": [0.9, 0.0, 0.1, ...]}

or a bare 12-element list (timestamps are then spaced ``--frame-ms`` apart),
and logs every committed chord change, key change and song match.

Usage
-----
    python scripts/replay_chroma.py recording.jsonl
    python scripts/replay_chroma.py recording.jsonl --preset responsive
    python scripts/replay_chroma.py recording.jsonl --config tuning.yaml --verbose

Exit codes
----------
    0  — success
    2  — unreadable input or configuration
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Iterator
from pathlib import Path

from chordsense.config import (
    DEFAULT_CONFIG,
    RESPONSIVE_CONFIG,
    STABLE_CONFIG,
    AnalysisConfig,
    load_config,
)
from chordsense.session import AnalysisSnapshot, ListeningSession
from chordsense.songs.catalogue import load_catalogue

logger = logging.getLogger("replay_chroma")

PRESETS: dict[str, AnalysisConfig] = {
    "default": DEFAULT_CONFIG,
    "responsive": RESPONSIVE_CONFIG,
    "stable": STABLE_CONFIG,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Replay chroma frames through the analysis pipeline")
    p.add_argument("frames", type=Path, help="JSON-lines file of chroma frames")
    p.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="default",
        help="Built-in tuning preset (ignored when --config is given)",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with AnalysisConfig fields",
    )
    p.add_argument(
        "--catalogue",
        type=Path,
        default=None,
        help="YAML song catalogue (default: bundled catalogue)",
    )
    p.add_argument(
        "--frame-ms",
        type=float,
        default=50.0,
        help="Spacing of frames without a t_ms field (default: 50)",
    )
    p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def read_frames(path: Path, frame_ms: float) -> Iterator[tuple[float, list[float]]]:
    """Yield (timestamp_ms, chroma) pairs from a JSON-lines file.

    Blank lines are skipped.

    Raises:
        ValueError: On a line that is neither a frame object nor a list
    """
    with path.open(encoding="utf-8") as fh:
        index = 0
        for line_no, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            record = json.loads(line)
            if isinstance(record, dict):
                chroma = record.get("chroma")
                t_ms = record.get("t_ms", index * frame_ms)
            else:
                chroma = record
                t_ms = index * frame_ms
            if not isinstance(chroma, list):
                raise ValueError(f"line {line_no}: expected a chroma list")
            try:
                frame = float(t_ms), [float(v) for v in chroma]
            except TypeError as exc:
                raise ValueError(f"line {line_no}: non-numeric value ({exc})") from exc
            yield frame
            index += 1


def _report(snapshot: AnalysisSnapshot, previous: AnalysisSnapshot | None) -> None:
    prev_key = previous.key.label if previous and previous.key else None
    key = snapshot.key.label if snapshot.key else None
    if key != prev_key and key is not None:
        logger.info("[%8.0fms] key: %s (%.2f)", snapshot.timestamp_ms, key, snapshot.key.confidence)

    if snapshot.chord_changed and snapshot.current_chord is not None:
        logger.info(
            "[%8.0fms] chord: %-5s next: %s",
            snapshot.timestamp_ms,
            snapshot.current_chord.label,
            ", ".join(snapshot.predictions) or "-",
        )

    if snapshot.match is not None and (previous is None or snapshot.match != previous.match):
        top = snapshot.match.top_match
        if top is not None:
            logger.info(
                "[%8.0fms] %s (%s, score=%.2f)",
                snapshot.timestamp_ms,
                snapshot.match.message,
                top.song.title,
                top.score,
            )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_config(args.config) if args.config else PRESETS[args.preset]
        catalogue = load_catalogue(args.catalogue)
    except (OSError, ValueError) as exc:
        logger.error("Cannot load configuration: %s", exc)
        return 2

    session = ListeningSession(config=config, catalogue=catalogue)
    previous: AnalysisSnapshot | None = None
    frames = 0
    try:
        for t_ms, chroma in read_frames(args.frames, args.frame_ms):
            snapshot = session.process(chroma, now_ms=t_ms)
            _report(snapshot, previous)
            previous = snapshot
            frames += 1
    except (OSError, ValueError) as exc:
        logger.error("Cannot read %s: %s", args.frames, exc)
        return 2

    logger.info("Processed %d frames", frames)
    if previous is not None:
        history = " ".join(entry.chord.label for entry in previous.history)
        logger.info("Chord history: %s", history or "-")
        if previous.match is not None:
            logger.info("Final: %s", previous.match.message)
    return 0


if __name__ == "__main__":
    sys.exit(main())
