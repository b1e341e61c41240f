"""Clip probing — build ClipDescriptors from files on disk.

Uses moviepy for size and duration (imageio_ffmpeg does NOT bundle
ffprobe). Files that cannot be read still produce a descriptor, with
zero geometry and duration; the planner then re-encodes and turns any
transition on that clip into a plain cut.
"""

import logging
import mimetypes
from pathlib import Path

from moviepy import VideoFileClip

from .clips import ClipDescriptor, Transition
from .common import source_suffix

logger = logging.getLogger(__name__)


def guess_mime_type(path: str | Path) -> str:
    mime, _ = mimetypes.guess_type(str(path))
    if mime is None or not mime.startswith("video/"):
        return "video/mp4"
    return mime


def describe_clip(path: str | Path, transition: Transition | None = None) -> ClipDescriptor:
    """Probe a video file into a ClipDescriptor.

    Args:
        path: Path to the clip.
        transition: Outgoing transition to attach.

    Raises:
        FileNotFoundError: If the file does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Clip not found: {path}")

    width = height = 0
    duration = 0.0
    try:
        with VideoFileClip(str(path), audio=False) as clip:
            width, height = (int(v) for v in clip.size)
            duration = float(clip.duration or 0.0)
    except (OSError, IndexError, KeyError, ValueError) as exc:
        logger.warning("Could not probe %s, using unknown geometry/duration: %s", path, exc)

    return ClipDescriptor(
        source=str(path),
        width=width,
        height=height,
        duration=duration,
        container_ext=source_suffix(path),
        mime_type=guess_mime_type(path),
        transition_to_next=transition,
    )
