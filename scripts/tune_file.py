"""CLI script: run the tuner over an audio file and print one line per block.

Usage:
    # Default settings (sensitivity 50, 2048-sample blocks, first 30 s):
    python scripts/tune_file.py recordings/a440.wav

    # More sensitive gate, longer blocks for the bottom octave:
    python scripts/tune_file.py recordings/a0.wav --sensitivity 90 --block-size 4096

    # Only the summary:
    python scripts/tune_file.py recordings/c4.flac --summary-only

Output:
    One line per block: time, note, frequency, cents, needle bar, status.
    A summary with outcome counts and the dominant note follows.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing the package.
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.tuner.config import DEFAULT_CONFIG, MAX_SENSITIVITY, MIN_SENSITIVITY  # noqa: E402
from core.tuner.display import MAX_DETUNE_CENTS, render_reading  # noqa: E402
from core.tuner.session import TunerSession  # noqa: E402
from core.tuner.types import TunerReading  # noqa: E402
from ingestion.tuner_engine import FileTuningReport, TunerEngine  # noqa: E402

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

_BAR_WIDTH = 25


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Block-by-block tuner readout for an audio file.")
    parser.add_argument("path", type=str, help="Audio file (wav, flac, mp3, ...).")
    parser.add_argument(
        "--sensitivity",
        type=float,
        default=DEFAULT_CONFIG.default_sensitivity,
        metavar="N",
        help=f"Gate sensitivity {MIN_SENSITIVITY}-{MAX_SENSITIVITY} (higher = quieter notes pass).",
    )
    parser.add_argument(
        "--block-size",
        type=int,
        default=DEFAULT_CONFIG.block_size,
        metavar="N",
        help="Samples per analysis block.",
    )
    parser.add_argument(
        "--hop",
        type=int,
        default=None,
        metavar="N",
        help="Samples between block starts (default: block size).",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=30.0,
        metavar="SEC",
        help="Maximum seconds of audio to analyse.",
    )
    parser.add_argument(
        "--summary-only",
        action="store_true",
        default=False,
        help="Skip per-block lines.",
    )
    return parser.parse_args(argv)


def needle_bar(cents: float, width: int = _BAR_WIDTH) -> str:
    """ASCII needle: '|' marks 0 cents, '^' the current deviation."""
    clamped = max(-MAX_DETUNE_CENTS, min(MAX_DETUNE_CENTS, cents))
    center = width // 2
    caret = center + int(round(clamped / MAX_DETUNE_CENTS * center))
    cells = ["-"] * width
    cells[center] = "|"
    cells[max(0, min(width - 1, caret))] = "^"
    return "[" + "".join(cells) + "]"


def format_reading_line(seconds: float, reading: TunerReading) -> str:
    display = render_reading(reading)
    if reading.has_note and reading.note is not None:
        bar = needle_bar(reading.note.cents)
    else:
        bar = " " * (_BAR_WIDTH + 2)
    return (
        f"{seconds:7.2f}s  {display.note_label:>4}  {display.frequency_text:>7} Hz  "
        f"{display.cents_text:>6} c  {bar}  {display.status}"
    )


def format_summary(report: FileTuningReport) -> str:
    lines = [
        f"File: {report.path}",
        f"Blocks: {report.block_count} x {report.block_size} @ {report.sample_rate} Hz",
    ]
    for outcome, count in report.outcome_counts().items():
        lines.append(f"  {outcome:<13} {count}")
    if report.dominant_note is not None:
        lines.append(
            f"Dominant note: {report.dominant_note}  "
            f"median {report.median_frequency:.2f} Hz, {report.median_cents:+.1f} cents"
        )
    else:
        lines.append("Dominant note: none detected")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        session = TunerSession(sensitivity=args.sensitivity)
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    engine = TunerEngine(session)
    try:
        report = engine.analyze_file(
            args.path,
            block_size=args.block_size,
            hop=args.hop,
            duration=args.duration,
        )
    except (FileNotFoundError, ValueError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 1

    if not args.summary_only:
        for i, reading in enumerate(report.readings):
            print(format_reading_line(report.block_time(i), reading))
        print()
    print(format_summary(report))
    return 0


if __name__ == "__main__":
    sys.exit(main())
