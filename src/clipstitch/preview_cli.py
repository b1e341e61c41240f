"""CLI for preview frames — one masked or cropped JPEG at a timestamp.

Usage:
    clipstitch preview source.mp4 --time 3.5 --mode mask --region 10,10,120,40 --output frame.jpg
    clipstitch preview source.mp4 --time 3.5 --mode crop --region 0,0,640,360 --output frame.jpg
"""

import argparse
import io
import logging
from pathlib import Path

from PIL import Image

from .common import parse_region
from .engine import FFmpegEngine
from .preview import PreviewMode, PreviewRequest, extract_preview_frame


def frame_size(data: bytes) -> tuple[int, int]:
    """Decode JPEG bytes just far enough to report (width, height)."""
    with Image.open(io.BytesIO(data)) as img:
        return img.size


def main(args=None):
    parser = argparse.ArgumentParser(
        description="Extract one preview frame with a mask or crop applied.",
    )
    parser.add_argument("source", help="Path to source video")
    parser.add_argument("--time", type=float, default=0.0, help="Timestamp in seconds")
    parser.add_argument(
        "--mode", choices=[m.value for m in PreviewMode], default="mask",
        help="mask = delogo the region, crop = keep only the region",
    )
    parser.add_argument("--region", required=True, help="x,y,w,h")
    parser.add_argument("--output", required=True, help="Output JPEG path")
    parser.add_argument("--verbose", action="store_true", help="Show debug logging")
    parsed = parser.parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        region = parse_region(parsed.region)
    except ValueError as exc:
        parser.error(str(exc))

    if not Path(parsed.source).exists():
        raise FileNotFoundError(f"Source video not found: {parsed.source}")

    mode = PreviewMode(parsed.mode)
    request = PreviewRequest(
        source=parsed.source,
        timestamp=parsed.time,
        mask_region=region if mode is PreviewMode.MASK else None,
        crop_region=region if mode is PreviewMode.CROP else None,
    )

    with FFmpegEngine() as engine:
        data = extract_preview_frame(engine, request, mode)

    Path(parsed.output).parent.mkdir(parents=True, exist_ok=True)
    Path(parsed.output).write_bytes(data)
    w, h = frame_size(data)
    print(f"Preview frame {w}x{h} at {parsed.time:.3f}s: {parsed.output}")


if __name__ == "__main__":
    main()
