"""Command assembly — turn a strategy (+ plan) into an ffmpeg argv.

The argv omits the ffmpeg executable itself; the engine prepends it.
File names refer to the engine's scratch workspace and are fixed so
they can never collide with caller-supplied paths:

  input0.<ext>, input1.<ext>, ...   clips (first clip's extension)
  background_audio.<ext>            replacement audio track
  filelist.txt                      concat demuxer list (stream copy)
  output.<ext>                      stitched result
"""

from dataclasses import dataclass

from .clips import CompositionJob
from .common import format_seconds, source_suffix
from .errors import InvalidPlanState
from .graph import Filter, FilterGraphPlan, FilterStage
from .strategy import EncodeStrategy


CONCAT_LIST_NAME = "filelist.txt"
OUTPUT_STEM = "output"
INPUT_STEM = "input"
BACKGROUND_AUDIO_STEM = "background_audio"


@dataclass(frozen=True)
class EncodeSettings:
    """Re-encode parameters for the filter graph path."""

    video_codec: str = "libx264"
    preset: str = "ultrafast"
    audio_codec: str = "aac"
    pixel_format: str = "yuv420p"


# ── Naming ─────────────────────────────────────────────────────────

def output_ext(job: CompositionJob) -> str:
    return (job.first.container_ext or "mp4").lower()


def input_names(job: CompositionJob) -> list[str]:
    """Workspace names for the clips, indexed by position."""
    ext = output_ext(job)
    return [f"{INPUT_STEM}{i}.{ext}" for i in range(len(job.clips))]


def background_audio_name(job: CompositionJob) -> str | None:
    if not job.replaces_audio:
        return None
    return f"{BACKGROUND_AUDIO_STEM}.{source_suffix(job.background_audio, 'mp3')}"


def output_name(job: CompositionJob) -> str:
    return f"{OUTPUT_STEM}.{output_ext(job)}"


def concat_list(names: list[str]) -> str:
    """Render a concat demuxer list file."""
    return "".join(f"file '{name}'\n" for name in names)


# ── Filter graph serialization ─────────────────────────────────────

def _format_value(value) -> str:
    if isinstance(value, float):
        return format_seconds(value)
    return str(value)


def render_filter(f: Filter) -> str:
    """'scale=1920:1080:force_original_aspect_ratio=decrease', or just 'null'."""
    parts = [_format_value(a) for a in f.args]
    parts += [f"{key}={_format_value(value)}" for key, value in f.options]
    if not parts:
        return f.name
    return f"{f.name}={':'.join(parts)}"


def render_stage(stage: FilterStage) -> str:
    inputs = "".join(f"[{label}]" for label in stage.inputs)
    chain = ",".join(render_filter(f) for f in stage.filters)
    return f"{inputs}{chain}[{stage.output}]"


def serialize_plan(plan: FilterGraphPlan) -> str:
    """Semicolon-joined filter_complex expression."""
    return ";".join(render_stage(stage) for stage in plan.stages)


# ── Assembly ───────────────────────────────────────────────────────

def assemble(
    strategy: EncodeStrategy,
    plan: FilterGraphPlan | None,
    job: CompositionJob,
    settings: EncodeSettings | None = None,
) -> list[str]:
    """Build the ffmpeg argv for a stitch job.

    Args:
        strategy: Result of select_strategy(job).
        plan: Result of build_graph(job); required for FILTER_GRAPH,
              ignored for STREAM_COPY.
        job: The composition job (used for naming and input count).
        settings: Re-encode parameters. Defaults to EncodeSettings().

    Returns:
        ffmpeg arguments, without the executable.

    Raises:
        InvalidPlanState: FILTER_GRAPH requested without a plan.
    """
    if strategy is EncodeStrategy.STREAM_COPY:
        return [
            "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", CONCAT_LIST_NAME,
            "-c", "copy",
            output_name(job),
        ]

    if plan is None:
        raise InvalidPlanState(
            "Filter graph strategy requires a plan; call build_graph(job) first"
        )

    settings = settings or EncodeSettings()

    inputs = []
    for name in input_names(job):
        inputs.extend(["-i", name])
    audio_name = background_audio_name(job)
    if audio_name:
        inputs.extend(["-i", audio_name])

    return [
        "-y",
        *inputs,
        "-filter_complex", serialize_plan(plan),
        "-map", f"[{plan.video_out}]",
        "-map", f"[{plan.audio_out}]",
        "-c:v", settings.video_codec,
        "-preset", settings.preset,
        "-c:a", settings.audio_codec,
        "-pix_fmt", settings.pixel_format,
        # End with the shorter of video and (background) audio.
        "-shortest",
        output_name(job),
    ]
