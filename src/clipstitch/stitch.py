"""Stitch workflow — plan a composition job and run it on an engine.

Steps:
  1. Write every clip (and the background track) into the workspace.
  2. Select the strategy; build the filter graph on the robust path,
     or write the concat list on the fast path.
  3. Execute the assembled command.
  4. Read the output back and delete everything that was written.

Cleanup runs on success and failure alike; a failed delete is logged
and never masks the real result or error.
"""

import logging
from dataclasses import dataclass
from typing import Callable

from .clips import CompositionJob
from .command import (
    CONCAT_LIST_NAME,
    EncodeSettings,
    assemble,
    background_audio_name,
    concat_list,
    input_names,
    output_name,
)
from .engine import Engine, cleanup
from .errors import EngineExecutionFailed, EngineReadFailed
from .graph import build_graph
from .strategy import EncodeStrategy, select_strategy

logger = logging.getLogger(__name__)

REENCODE_FAILED = (
    "Stitching failed during re-encoding. "
    "Some videos might lack audio or have incompatible streams."
)
COPY_FAILED = (
    "FFmpeg execution failed. "
    "Please ensure all videos have the same format and encoding."
)
READ_FAILED = (
    "Failed to read the output video from memory. "
    "It might be too large or the process failed."
)


@dataclass(frozen=True)
class StitchResult:
    data: bytes
    mime_type: str
    output_name: str
    strategy: EncodeStrategy


def stitch_videos(
    engine: Engine,
    job: CompositionJob,
    on_progress: Callable[[float], None] | None = None,
    on_log: Callable[[str], None] | None = None,
    settings: EncodeSettings | None = None,
) -> StitchResult:
    """Join the job's clips into one video on `engine`.

    Args:
        engine: Engine to run on. Must not be executing anything else.
        job: Clips (>= 2) and optional background audio.
        on_progress: Called with ratios in 0..1 while ffmpeg runs.
        on_log: Called with ffmpeg log lines and workflow messages.
        settings: Re-encode parameters for the filter graph path.

    Returns:
        StitchResult with the output bytes and the first clip's MIME type.

    Raises:
        EngineExecutionFailed: ffmpeg failed; `reencode` tells which path.
        EngineReadFailed: ffmpeg succeeded but the output was unreadable.
    """
    strategy = select_strategy(job)
    reencode = strategy is EncodeStrategy.FILTER_GRAPH

    def log(message):
        logger.info(message)
        if on_log:
            on_log(message)

    names = input_names(job)
    audio_name = background_audio_name(job)
    out_name = output_name(job)
    written = []

    if on_log:
        engine.on("log", on_log)
    if on_progress:
        engine.on("progress", on_progress)

    try:
        # ── Step 1: inputs ───────────────────────────────────────
        for name, clip in zip(names, job.clips):
            engine.write_input(name, clip.source)
            written.append(name)
        if audio_name:
            engine.write_input(audio_name, job.background_audio)
            written.append(audio_name)
        log(f"Prepared {len(names)} inputs. Re-encode: {str(reencode).lower()}")

        # ── Step 2: plan ─────────────────────────────────────────
        if reencode:
            plan = build_graph(job)
            expected = plan.duration
            argv = assemble(strategy, plan, job, settings)
            log("Starting merge with transitions and re-encoding")
        else:
            engine.write_input(CONCAT_LIST_NAME, concat_list(names).encode())
            written.append(CONCAT_LIST_NAME)
            expected = sum(c.duration for c in job.clips)
            argv = assemble(strategy, None, job, settings)
            log("Starting concat with stream copy (fast)")

        # ── Step 3: execute ──────────────────────────────────────
        message = REENCODE_FAILED if reencode else COPY_FAILED
        context = dict(strategy=strategy, clip_count=len(job.clips), reencode=reencode)
        # A failed run may leave a partial output behind.
        written.append(out_name)
        try:
            code = engine.exec(argv, duration=expected or None)
        except Exception as exc:
            raise EngineExecutionFailed(message, **context) from exc
        if code != 0:
            raise EngineExecutionFailed(message, exit_code=code, **context)

        # ── Step 4: read ─────────────────────────────────────────
        log("Stitching complete. Reading result file...")
        try:
            data = engine.read_output(out_name)
        except Exception as exc:
            raise EngineReadFailed(READ_FAILED) from exc
        if not isinstance(data, (bytes, bytearray)):
            raise EngineReadFailed(
                f"Engine returned {type(data).__name__} instead of binary data"
            )
        log(f"Result read successfully ({len(data) / (1024 * 1024):.1f} MB). Cleaning up...")
    finally:
        cleanup(engine, written)
        if on_log:
            engine.off("log", on_log)
        if on_progress:
            engine.off("progress", on_progress)

    return StitchResult(
        data=bytes(data),
        mime_type=job.first.mime_type or "video/mp4",
        output_name=out_name,
        strategy=strategy,
    )
