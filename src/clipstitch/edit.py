"""Single-clip edits — trim, crop, delogo, letterbox, audio extraction.

Each edit has a pure command builder (`*_command`) and a wrapper that
runs it on an engine and returns the output bytes. Inputs and outputs
use fixed per-operation workspace names and are always deleted again.
"""

import logging

from .clips import Region
from .common import ffmpeg_color, format_seconds
from .engine import Engine, cleanup
from .errors import EngineExecutionFailed, EngineReadFailed
from .preview import crop_filter, delogo_filter

logger = logging.getLogger(__name__)

SILHOUETTE_STYLES = {"rect", "cinema"}

# Pixels of border/bar per unit of silhouette size.
SILHOUETTE_SCALE = 5


# ── Command builders ───────────────────────────────────────────────

def trim_command(input_name: str, output_name: str, end_time: float) -> list[str]:
    """Keep the first `end_time` seconds, stream-copied (keyframe-aligned)."""
    if end_time <= 0:
        raise ValueError(f"Trim end time must be > 0, got {end_time}")
    return [
        "-y", "-i", input_name,
        "-t", format_seconds(end_time),
        "-c", "copy",
        output_name,
    ]


def crop_command(input_name: str, output_name: str, region: Region) -> list[str]:
    return [
        "-y", "-i", input_name,
        "-vf", crop_filter(region),
        "-c:a", "copy",
        output_name,
    ]


def delogo_command(
    input_name: str,
    output_name: str,
    region: Region,
    duration: float | None = None,
) -> list[str]:
    """Mask a region with delogo; `duration` limits output for a test run."""
    cmd = [
        "-y", "-i", input_name,
        "-vf", delogo_filter(region),
        "-c:a", "copy",
    ]
    if duration:
        cmd += ["-t", format_seconds(duration)]
    cmd.append(output_name)
    return cmd


def silhouette_filter(style: str, size: int, color: str) -> str:
    """drawbox chain for a frame border ("rect") or letterbox bars ("cinema")."""
    if style not in SILHOUETTE_STYLES:
        raise ValueError(
            f"Unknown silhouette style '{style}'. Valid: {sorted(SILHOUETTE_STYLES)}"
        )
    if size <= 0:
        raise ValueError(f"Silhouette size must be > 0, got {size}")

    c = ffmpeg_color(color)
    px = size * SILHOUETTE_SCALE
    if style == "rect":
        return f"drawbox=x=0:y=0:w=iw:h=ih:color={c}:t={px}"
    return (
        f"drawbox=y=0:w=iw:h={px}:color={c}:t=fill,"
        f"drawbox=y=ih-{px}:w=iw:h={px}:color={c}:t=fill"
    )


def silhouette_command(
    input_name: str, output_name: str, style: str, size: int, color: str,
) -> list[str]:
    return [
        "-y", "-i", input_name,
        "-vf", silhouette_filter(style, size, color),
        "-c:a", "copy",
        output_name,
    ]


def extract_audio_command(input_name: str, output_name: str) -> list[str]:
    return [
        "-y", "-i", input_name,
        "-vn",
        "-acodec", "libmp3lame",
        output_name,
    ]


# ── Engine runners ─────────────────────────────────────────────────

def _run(
    engine: Engine,
    operation: str,
    source,
    input_name: str,
    output_name: str,
    argv: list[str],
    on_progress=None,
    duration=None,
) -> bytes:
    """Write source, execute argv, read output; always clean up."""
    if on_progress:
        engine.on("progress", on_progress)
    written = []
    try:
        engine.write_input(input_name, source)
        written += [input_name, output_name]
        try:
            code = engine.exec(argv, duration=duration)
        except Exception as exc:
            raise EngineExecutionFailed(f"{operation} failed.") from exc
        if code != 0:
            raise EngineExecutionFailed(f"{operation} failed.", exit_code=code)
        try:
            data = engine.read_output(output_name)
        except Exception as exc:
            raise EngineReadFailed(f"{operation} produced no readable output.") from exc
        if not isinstance(data, (bytes, bytearray)):
            raise EngineReadFailed(
                f"Engine returned {type(data).__name__} instead of binary data"
            )
        logger.info("%s done (%d bytes)", operation, len(data))
        return bytes(data)
    finally:
        cleanup(engine, written)
        if on_progress:
            engine.off("progress", on_progress)


def trim_video(engine: Engine, source, end_time: float, on_progress=None) -> bytes:
    names = ("trim_input.mp4", "trim_output.mp4")
    return _run(
        engine, "Trim", source, *names,
        trim_command(*names, end_time),
        on_progress=on_progress, duration=end_time,
    )


def crop_video(engine: Engine, source, region: Region, on_progress=None, duration=None) -> bytes:
    names = ("crop_input.mp4", "crop_output.mp4")
    logger.info(
        "Starting crop at x=%d, y=%d, w=%d, h=%d",
        region.x, region.y, region.width, region.height,
    )
    return _run(
        engine, "Crop", source, *names,
        crop_command(*names, region),
        on_progress=on_progress, duration=duration,
    )


def remove_watermark(
    engine: Engine,
    source,
    region: Region,
    duration: float | None = None,
    on_progress=None,
) -> bytes:
    """Delogo a region. With `duration`, only that many seconds are rendered."""
    names = ("watermark_input.mp4", "watermark_output.mp4")
    logger.info(
        "Starting watermark removal at x=%d, y=%d, w=%d, h=%d%s",
        region.x, region.y, region.width, region.height,
        f" (test: {duration}s)" if duration else "",
    )
    return _run(
        engine, "Watermark removal", source, *names,
        delogo_command(*names, region, duration),
        on_progress=on_progress, duration=duration,
    )


def apply_silhouette(
    engine: Engine,
    source,
    style: str,
    size: int,
    color: str = "#000000",
    on_progress=None,
    duration=None,
) -> bytes:
    names = ("silhouette_input.mp4", "silhouette_output.mp4")
    return _run(
        engine, "Silhouette application", source, *names,
        silhouette_command(*names, style, size, color),
        on_progress=on_progress, duration=duration,
    )


def extract_audio(engine: Engine, source, on_progress=None, duration=None) -> bytes:
    names = ("audio_input.mp4", "extracted_audio.mp3")
    return _run(
        engine, "Audio extraction", source, *names,
        extract_audio_command(*names),
        on_progress=on_progress, duration=duration,
    )
