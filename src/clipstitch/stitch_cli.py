"""CLI for stitching — join clips described by a YAML manifest.

Probes every clip (size, duration, format), decides between stream-copy
concat and a re-encoding filter graph, and runs ffmpeg in a scratch
workspace.

Usage:
    clipstitch stitch --manifest stitch.yaml --output joined.mp4
    clipstitch stitch --manifest stitch.yaml --validate
    clipstitch stitch --manifest stitch.yaml --output joined.mp4 --dry-run
"""

import argparse
import logging
from pathlib import Path

from .clips import CompositionJob
from .command import EncodeSettings, assemble
from .engine import FFmpegEngine
from .graph import build_graph
from .probe import describe_clip
from .stitch import stitch_videos
from .stitch_manifest import load_stitch_manifest, validate_stitch_paths
from .strategy import EncodeStrategy, select_strategy


def build_job(config: dict) -> CompositionJob:
    """Probe the manifest's clips into a CompositionJob."""
    clips = []
    print(f"Probing {len(config['clips'])} clips...")
    for i, entry in enumerate(config["clips"]):
        clip = describe_clip(entry["path"], transition=entry["transition"])
        print(
            f"  [{i}] {clip.width}x{clip.height}  {clip.duration:.1f}s  "
            f"{clip.mime_type}  {entry['path']}"
        )
        clips.append(clip)
    return CompositionJob(clips=clips, background_audio=config["background_audio"])


def _print_progress(ratio):
    print(f"\r  {ratio * 100:5.1f}%", end="", flush=True)


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Stitch CLI — join clips with transitions into one video.",
    )
    parser.add_argument(
        "--manifest", required=True,
        help="Path to YAML stitch manifest",
    )
    parser.add_argument(
        "--output",
        help="Output video path (required unless --validate)",
    )
    parser.add_argument(
        "--validate", action="store_true",
        help="Validate manifest only — check paths, don't render",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Print the ffmpeg command instead of running it",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Show ffmpeg log output",
    )
    parsed = parser.parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG)

    config = load_stitch_manifest(parsed.manifest)
    validate_stitch_paths(config)

    if parsed.validate:
        print(f"Stitch manifest valid: {len(config['clips'])} clips")
        for i, c in enumerate(config["clips"]):
            t = c["transition"]
            print(f"  {i}: {c['path']} -> {t.kind.value} ({t.duration}s)")
        if config["background_audio"]:
            print(f"  audio: {config['background_audio']}")
        print("All paths verified.")
        return

    if not parsed.output:
        parser.error("--output is required (unless using --validate)")

    job = build_job(config)
    preset = config["video"].get("preset")
    settings = EncodeSettings(preset=preset) if preset else EncodeSettings()

    if parsed.dry_run:
        strategy = select_strategy(job)
        plan = build_graph(job) if strategy is EncodeStrategy.FILTER_GRAPH else None
        print(f"Strategy: {strategy.value}")
        print("ffmpeg " + " ".join(assemble(strategy, plan, job, settings)))
        return

    print(f"\nStitching {len(job.clips)} clips...")
    with FFmpegEngine() as engine:
        result = stitch_videos(
            engine, job,
            on_progress=_print_progress,
            on_log=print if parsed.verbose else None,
            settings=settings,
        )

    Path(parsed.output).parent.mkdir(parents=True, exist_ok=True)
    Path(parsed.output).write_bytes(result.data)
    print(f"\nDone ({result.strategy.value}): {parsed.output}")


if __name__ == "__main__":
    main()
