"""Subcommand dispatcher for clipstitch.

Usage:
    clipstitch stitch        --manifest stitch.yaml --output joined.mp4
    clipstitch preview       source.mp4 --time 3 --mode mask --region 10,10,120,40 --output frame.jpg
    clipstitch trim          source.mp4 --end 12.5 --output short.mp4
    clipstitch crop          source.mp4 --region 0,0,640,360 --output cropped.mp4
    clipstitch delogo        source.mp4 --region 10,10,120,40 --output clean.mp4
    clipstitch letterbox     source.mp4 --style cinema --size 8 --output bars.mp4
    clipstitch extract-audio source.mp4 --output audio.mp3
"""

import argparse
import sys

EDIT_COMMANDS = ("trim", "crop", "delogo", "letterbox", "extract-audio")


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="clipstitch",
        description="Stitch clips with transitions, preview frames, and edit single clips.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("stitch", help="Join clips from a YAML stitch manifest")
    subparsers.add_parser("preview", help="Extract one masked or cropped preview frame")
    subparsers.add_parser("trim", help="Keep the first N seconds of a clip")
    subparsers.add_parser("crop", help="Crop a clip to a region")
    subparsers.add_parser("delogo", help="Mask a watermark region")
    subparsers.add_parser("letterbox", help="Draw a border or cinema bars")
    subparsers.add_parser("extract-audio", help="Extract the audio track as mp3")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    parsed, remaining = parser.parse_known_args(args)

    if parsed.command is None:
        parser.print_help()
        sys.exit(1)

    if parsed.command == "stitch":
        from .stitch_cli import main as stitch_main
        stitch_main(remaining)
    elif parsed.command == "preview":
        from .preview_cli import main as preview_main
        preview_main(remaining)
    elif parsed.command in EDIT_COMMANDS:
        from .edit_cli import main as edit_main
        edit_main([parsed.command, *remaining])
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
