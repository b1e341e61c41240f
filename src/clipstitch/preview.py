"""Preview frames for interactive mask/crop positioning.

Extracts one JPEG frame at a timestamp with the delogo (mask) or crop
filter applied. ffmpeg's delogo occasionally fails on some encodings
with "Buffer reallocation failed"; when that signature shows up the
frame is extracted once more without the filter, since an unfiltered
preview is more useful than none. Any other failure, or a failed retry,
ends in PreviewGenerationFailed.

Only previews get this fallback. Full edits (edit.py) surface errors.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from .clips import Region
from .common import source_suffix
from .engine import Engine, cleanup
from .errors import PreviewGenerationFailed

logger = logging.getLogger(__name__)

BUFFER_REALLOCATION_SIGNATURE = "Buffer reallocation failed"

PREVIEW_INPUT_STEM = "preview_input"
PREVIEW_OUTPUT_NAME = "preview_frame.jpg"


class PreviewMode(Enum):
    MASK = "mask"
    CROP = "crop"


@dataclass(frozen=True)
class PreviewRequest:
    source: object
    timestamp: float
    mask_region: Region | None = None
    crop_region: Region | None = None

    def __post_init__(self):
        if self.timestamp < 0:
            raise ValueError(f"Preview timestamp must be >= 0, got {self.timestamp}")


class _AttemptFailed(Exception):
    def __init__(self, reason: str, reallocation: bool = False):
        super().__init__(reason)
        self.reallocation = reallocation


def delogo_filter(region: Region) -> str:
    return f"delogo=x={region.x}:y={region.y}:w={region.width}:h={region.height}:show=0"


def crop_filter(region: Region) -> str:
    return f"crop={region.width}:{region.height}:{region.x}:{region.y}"


def preview_filter(request: PreviewRequest, mode: PreviewMode) -> str:
    """Video filter for the requested mode. Raises ValueError without a region."""
    if mode is PreviewMode.MASK:
        if request.mask_region is None:
            raise ValueError("Mask preview requires a mask_region")
        return delogo_filter(request.mask_region)
    if request.crop_region is None:
        raise ValueError("Crop preview requires a crop_region")
    return crop_filter(request.crop_region)


def preview_command(input_name: str, timestamp: float, video_filter: str | None) -> list[str]:
    """One-frame extraction argv; `video_filter=None` extracts unfiltered."""
    argv = ["-y", "-ss", f"{timestamp:.3f}", "-i", input_name]
    if video_filter:
        argv += ["-vf", video_filter]
    argv += ["-frames:v", "1", "-q:v", "2", PREVIEW_OUTPUT_NAME]
    return argv


def _attempt(engine: Engine, argv: list[str]) -> bytes:
    """Run one extraction. Raises _AttemptFailed, flagged on the signature."""
    seen = []

    def watch(message):
        if BUFFER_REALLOCATION_SIGNATURE in message:
            seen.append(message)

    engine.on("log", watch)
    try:
        try:
            code = engine.exec(argv)
        except Exception as exc:
            raise _AttemptFailed(
                f"ffmpeg raised: {exc}",
                reallocation=bool(seen) or BUFFER_REALLOCATION_SIGNATURE in str(exc),
            ) from exc
    finally:
        engine.off("log", watch)

    # The signature means the frame is suspect even when ffmpeg exits 0.
    if seen:
        raise _AttemptFailed("buffer reallocation failed", reallocation=True)
    if code != 0:
        raise _AttemptFailed(f"FFmpeg exited with code {code}")

    try:
        data = engine.read_output(PREVIEW_OUTPUT_NAME)
    except Exception as exc:
        raise _AttemptFailed(f"could not read preview frame: {exc}") from exc
    if not isinstance(data, (bytes, bytearray)):
        raise _AttemptFailed("engine returned non-binary preview data")
    return bytes(data)


def extract_preview_frame(engine: Engine, request: PreviewRequest, mode: PreviewMode) -> bytes:
    """Extract one JPEG frame at request.timestamp with the mode's filter.

    Returns:
        JPEG bytes, filtered if possible, unfiltered after a
        buffer-reallocation failure.

    Raises:
        ValueError: No region for the requested mode.
        PreviewGenerationFailed: Extraction failed (after at most one retry).
    """
    video_filter = preview_filter(request, mode)
    input_name = f"{PREVIEW_INPUT_STEM}.{source_suffix(request.source)}"
    written = []

    try:
        try:
            engine.write_input(input_name, request.source)
            written.append(input_name)
            written.append(PREVIEW_OUTPUT_NAME)
        except Exception as exc:
            raise PreviewGenerationFailed(f"Could not load preview source: {exc}") from exc

        try:
            return _attempt(engine, preview_command(input_name, request.timestamp, video_filter))
        except _AttemptFailed as exc:
            if not exc.reallocation:
                raise PreviewGenerationFailed(f"Preview generation failed: {exc}") from exc
            logger.warning("Buffer reallocation error in preview; retrying without %s", mode.value)

        cleanup(engine, [PREVIEW_OUTPUT_NAME])
        try:
            return _attempt(engine, preview_command(input_name, request.timestamp, None))
        except _AttemptFailed as exc:
            raise PreviewGenerationFailed(
                "Preview generation failed due to video format limitations. "
                "Try a different video or time position."
            ) from exc
    finally:
        cleanup(engine, written)
