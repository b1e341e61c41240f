"""CLI for single-clip edits.

Usage:
    clipstitch trim          source.mp4 --end 12.5 --output short.mp4
    clipstitch crop          source.mp4 --region 0,0,640,360 --output cropped.mp4
    clipstitch delogo        source.mp4 --region 10,10,120,40 --output clean.mp4 [--test 5]
    clipstitch letterbox     source.mp4 --style cinema --size 8 --color "#000000" --output bars.mp4
    clipstitch extract-audio source.mp4 --output audio.mp3
"""

import argparse
import logging
from pathlib import Path

from .common import parse_region
from .edit import (
    SILHOUETTE_STYLES,
    apply_silhouette,
    crop_video,
    extract_audio,
    remove_watermark,
    trim_video,
)
from .engine import FFmpegEngine
from .probe import describe_clip


def _region(text):
    try:
        return parse_region(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def _add_common(sub):
    sub.add_argument("source", help="Path to source video")
    sub.add_argument("--output", required=True, help="Output file path")
    sub.add_argument("--verbose", action="store_true", help="Show debug logging")


def _print_progress(ratio):
    print(f"\r  {ratio * 100:5.1f}%", end="", flush=True)


def main(args=None):
    parser = argparse.ArgumentParser(description="Single-clip edits.")
    subparsers = parser.add_subparsers(dest="edit", required=True)

    trim = subparsers.add_parser("trim", help="Keep the first N seconds (stream copy)")
    _add_common(trim)
    trim.add_argument("--end", type=float, required=True, help="End time in seconds")

    crop = subparsers.add_parser("crop", help="Crop to a region")
    _add_common(crop)
    crop.add_argument("--region", type=_region, required=True, help="x,y,w,h")

    delogo = subparsers.add_parser("delogo", help="Mask a watermark region")
    _add_common(delogo)
    delogo.add_argument("--region", type=_region, required=True, help="x,y,w,h")
    delogo.add_argument(
        "--test", type=float, default=None,
        help="Only render this many seconds (quick check)",
    )

    letterbox = subparsers.add_parser("letterbox", help="Border or cinema bars")
    _add_common(letterbox)
    letterbox.add_argument("--style", choices=sorted(SILHOUETTE_STYLES), default="cinema")
    letterbox.add_argument("--size", type=int, default=8, help="Bar size (x5 pixels)")
    letterbox.add_argument("--color", default="#000000", help="Bar color '#RRGGBB'")

    audio = subparsers.add_parser("extract-audio", help="Extract audio as mp3")
    _add_common(audio)

    parsed = parser.parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not Path(parsed.source).exists():
        raise FileNotFoundError(f"Source video not found: {parsed.source}")

    # Source duration drives the progress ratio for full-length renders.
    duration = describe_clip(parsed.source).duration or None

    print(f"{parsed.edit}: {parsed.source}")
    with FFmpegEngine() as engine:
        if parsed.edit == "trim":
            data = trim_video(engine, parsed.source, parsed.end, on_progress=_print_progress)
        elif parsed.edit == "crop":
            data = crop_video(
                engine, parsed.source, parsed.region,
                on_progress=_print_progress, duration=duration,
            )
        elif parsed.edit == "delogo":
            data = remove_watermark(
                engine, parsed.source, parsed.region,
                duration=parsed.test, on_progress=_print_progress,
            )
        elif parsed.edit == "letterbox":
            data = apply_silhouette(
                engine, parsed.source, parsed.style, parsed.size, parsed.color,
                on_progress=_print_progress, duration=duration,
            )
        else:
            data = extract_audio(
                engine, parsed.source,
                on_progress=_print_progress, duration=duration,
            )

    Path(parsed.output).parent.mkdir(parents=True, exist_ok=True)
    Path(parsed.output).write_bytes(data)
    print(f"\nDone: {parsed.output}")


if __name__ == "__main__":
    main()
