#!/usr/bin/env python3
"""Generate synthetic clips and a stitch manifest for the clipstitch demo.

Creates 4 clips in examples/demo-clips/ with different colors, durations
and one odd resolution (so the filter graph has something to normalize),
each with a sine tone so the audio cross-fades are audible. Writes
examples/demo-stitch.yaml pointing at them.

Usage:
    python examples/generate_demo_clips.py
    # Then render:
    clipstitch stitch --manifest examples/demo-stitch.yaml --output examples/demo.mp4
"""

import subprocess
from pathlib import Path

import imageio_ffmpeg
import yaml

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()

EXAMPLES_DIR = Path(__file__).resolve().parent
OUTPUT_DIR = EXAMPLES_DIR / "demo-clips"
FPS = 30

# (name, color, size, duration, tone Hz, outgoing transition, seconds)
CLIPS = [
    ("clip-01", "0xB43C3C", "320x240", 3.0, 330, "fade",      1.0),
    ("clip-02", "0x3C3CB4", "320x240", 2.5, 440, "slidelt",   0.5),
    ("clip-03", "0x3CA03C", "160x160", 2.0, 550, "none",      0.0),  # letterboxed
    ("clip-04", "0xC88228", "320x240", 3.5, 660, "circlecrop", 1.0),
]


def make_clip(name, color, size, duration, tone):
    out = OUTPUT_DIR / f"{name}.mp4"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", f"color=c={color}:s={size}:d={duration}:r={FPS}",
            "-f", "lavfi", "-i", f"sine=frequency={tone}:duration={duration}",
            "-shortest",
            "-c:v", "libx264", "-crf", "23", "-pix_fmt", "yuv420p",
            "-c:a", "aac", "-b:a", "64k",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    clips = []
    for name, color, size, duration, tone, transition, seconds in CLIPS:
        make_clip(name, color, size, duration, tone)
        print(f"  {name}.mp4  {size}  {duration:.1f}s  -> {transition}")
        clips.append({
            "path": f"${{clips}}/{name}.mp4",
            "transition": transition,
            "transition_duration": seconds,
        })

    manifest = {
        "video": {"transition": "none", "transition_duration": 1.0, "preset": "ultrafast"},
        "paths": {"clips": str(OUTPUT_DIR)},
        "clips": clips,
    }
    manifest_path = EXAMPLES_DIR / "demo-stitch.yaml"
    with open(manifest_path, "w") as f:
        yaml.safe_dump(manifest, f, sort_keys=False)

    print(f"\nWrote {len(CLIPS)} clips to {OUTPUT_DIR}")
    print(f"Manifest: {manifest_path}")


if __name__ == "__main__":
    main()
