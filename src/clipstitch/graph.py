"""Filter graph synthesis for the re-encoding stitch path.

Builds a structured plan (stages of filters between bracketed buffer
labels) that the command assembler serializes for `-filter_complex`.

Algorithm:
  1. Normalize every clip to the first clip's geometry: scale to fit
     keeping aspect ratio, pad centered, square pixels, yuv420p.
  2. Join the normalized clips:
     - no effective transition anywhere: one n-way concat for video
       (and the clips' audio unless it is being replaced);
     - otherwise walk junctions left to right with a running offset.
       Cuts become a 2-input concat and advance the offset by the
       outgoing clip's duration. Transitions become xfade (+ acrossfade)
       at `offset + duration - transition`, and the offset moves to the
       start of that overlap.
  3. Map either the chained audio or the background track to [a].

The transition duration is clamped to both neighbours' durations so an
overlap never starts before the running offset. A junction whose clamped
duration is 0 (e.g. an unprobed clip) silently degrades to a cut.
"""

from dataclasses import dataclass

from .clips import ClipDescriptor, CompositionJob, TransitionKind


VIDEO_OUT = "v"
AUDIO_OUT = "a"
PIXEL_FORMAT = "yuv420p"


@dataclass(frozen=True)
class Filter:
    """One ffmpeg filter: name, positional args, then key=value options.

    Float option values are seconds and get formatted on serialization.
    """

    name: str
    args: tuple[str, ...] = ()
    options: tuple[tuple[str, object], ...] = ()


@dataclass(frozen=True)
class FilterStage:
    """A filter chain reading `inputs` and writing one `output` label.

    Labels are stored without brackets: "0:v", "v1", "vtemp0".
    """

    inputs: tuple[str, ...]
    filters: tuple[Filter, ...]
    output: str


@dataclass(frozen=True)
class Junction:
    """How clip `index` hands off to clip `index + 1`.

    For "xfade", `offset` is where the overlap starts on the output
    timeline. For "concat", it is the cut point.
    """

    index: int
    kind: str
    offset: float
    duration: float = 0.0


@dataclass(frozen=True)
class FilterGraphPlan:
    stages: tuple[FilterStage, ...]
    junctions: tuple[Junction, ...]
    duration: float
    video_out: str = VIDEO_OUT
    audio_out: str = AUDIO_OUT

    def stage_for(self, output: str) -> FilterStage:
        """Return the stage producing `output`. Raises KeyError if none does."""
        for stage in self.stages:
            if stage.output == output:
                return stage
        raise KeyError(output)


def effective_transition(clip: ClipDescriptor, nxt: ClipDescriptor) -> tuple[TransitionKind, float]:
    """Return (kind, clamped duration) for the junction clip -> nxt.

    Missing transitions and NONE give (NONE, 0). Otherwise the duration
    is clamped to both clips' durations.
    """
    trans = clip.transition_to_next
    if trans is None or trans.kind is TransitionKind.NONE:
        return TransitionKind.NONE, 0.0
    duration = min(trans.duration, clip.duration, nxt.duration)
    return trans.kind, max(0.0, duration)


def normalize_stage(index: int, width: int, height: int) -> FilterStage:
    """Scale-to-fit + centered pad onto a width x height canvas."""
    w, h = str(width), str(height)
    return FilterStage(
        inputs=(f"{index}:v",),
        filters=(
            Filter("scale", (w, h), (("force_original_aspect_ratio", "decrease"),)),
            Filter("pad", (w, h, "(ow-iw)/2", "(oh-ih)/2")),
            Filter("setsar", ("1",)),
            Filter("format", (PIXEL_FORMAT,)),
        ),
        output=f"v{index}",
    )


def _concat(inputs, video: bool, output: str) -> FilterStage:
    v, a = ("1", "0") if video else ("0", "1")
    return FilterStage(
        inputs=tuple(inputs),
        filters=(Filter("concat", options=(("n", str(len(inputs))), ("v", v), ("a", a))),),
        output=output,
    )


def build_graph(job: CompositionJob) -> FilterGraphPlan:
    """Build the filter graph plan for a FILTER_GRAPH job.

    Input numbering follows the command assembler: clip i is input i,
    and the background track (if any) is input len(clips).
    """
    clips = job.clips
    n = len(clips)
    replace_audio = job.replaces_audio
    target_w, target_h = job.first.width, job.first.height

    # ── Step 1: normalize geometry ───────────────────────────────
    stages = [normalize_stage(i, target_w, target_h) for i in range(n)]

    effective = [effective_transition(clip, nxt) for _, clip, nxt in job.junctions()]
    junctions = []

    # ── Step 2a: plain concat when nothing overlaps ──────────────
    if all(d <= 0 for _, d in effective):
        stages.append(_concat([f"v{i}" for i in range(n)], True, VIDEO_OUT))
        if not replace_audio:
            stages.append(_concat([f"{i}:a" for i in range(n)], False, AUDIO_OUT))

        cut = 0.0
        for i, clip, _ in job.junctions():
            cut += clip.duration
            junctions.append(Junction(i, "concat", cut))
        total = sum(c.duration for c in clips)

    # ── Step 2b: junction chain with running offset ──────────────
    else:
        current_v = "v0"
        current_a = "0:a"
        current_offset = 0.0

        for (i, clip, _), (kind, d) in zip(job.junctions(), effective):
            out_v = f"vtemp{i}"
            out_a = f"atemp{i}"

            if d <= 0:
                stages.append(_concat([current_v, f"v{i + 1}"], True, out_v))
                if not replace_audio:
                    stages.append(_concat([current_a, f"{i + 1}:a"], False, out_a))
                current_offset += clip.duration
                junctions.append(Junction(i, "concat", current_offset))
            else:
                offset = current_offset + clip.duration - d
                stages.append(FilterStage(
                    inputs=(current_v, f"v{i + 1}"),
                    filters=(Filter("xfade", options=(
                        ("transition", kind.engine_name),
                        ("duration", d),
                        ("offset", offset),
                    )),),
                    output=out_v,
                ))
                if not replace_audio:
                    stages.append(FilterStage(
                        inputs=(current_a, f"{i + 1}:a"),
                        filters=(Filter("acrossfade", options=(("d", d),)),),
                        output=out_a,
                    ))
                junctions.append(Junction(i, "xfade", offset, d))
                current_offset = offset

            current_v = out_v
            if not replace_audio:
                current_a = out_a

        stages.append(FilterStage((current_v,), (Filter("null"),), VIDEO_OUT))
        if not replace_audio:
            stages.append(FilterStage((current_a,), (Filter("anull"),), AUDIO_OUT))
        total = sum(c.duration for c in clips) - sum(d for _, d in effective)

    # ── Step 3: background audio replaces every clip's audio ─────
    if replace_audio:
        stages.append(FilterStage((f"{n}:a",), (Filter("anull"),), AUDIO_OUT))

    return FilterGraphPlan(
        stages=tuple(stages),
        junctions=tuple(junctions),
        duration=total,
    )
