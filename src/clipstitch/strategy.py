"""Strategy selection — stream copy vs. filter graph re-encode.

Stream copy (concat demuxer, `-c copy`) is lossless and fast but needs
identical stream parameters across inputs and cannot express
cross-fades or audio replacement. Anything else goes through a filter
graph and a full re-encode.
"""

from enum import Enum

from .clips import CompositionJob, TransitionKind


class EncodeStrategy(Enum):
    STREAM_COPY = "stream_copy"
    FILTER_GRAPH = "filter_graph"


def has_mismatch(job: CompositionJob) -> bool:
    """True if any clip's geometry or MIME type differs from the first clip's."""
    first = job.first
    key = (first.width, first.height, first.mime_type)
    return any((c.width, c.height, c.mime_type) != key for c in job.clips[1:])


def has_transitions(job: CompositionJob) -> bool:
    """True if any junction asks for a transition other than NONE.

    The last clip's transition has no junction and is never consulted.
    """
    return any(
        clip.transition_to_next is not None
        and clip.transition_to_next.kind is not TransitionKind.NONE
        for _, clip, _ in job.junctions()
    )


def select_strategy(job: CompositionJob) -> EncodeStrategy:
    """Classify a job. First matching rule wins:

      1. geometry/format mismatch  -> FILTER_GRAPH
      2. any real transition       -> FILTER_GRAPH
      3. background audio          -> FILTER_GRAPH
      4. otherwise                 -> STREAM_COPY
    """
    if has_mismatch(job):
        return EncodeStrategy.FILTER_GRAPH
    if has_transitions(job):
        return EncodeStrategy.FILTER_GRAPH
    if job.replaces_audio:
        return EncodeStrategy.FILTER_GRAPH
    return EncodeStrategy.STREAM_COPY
