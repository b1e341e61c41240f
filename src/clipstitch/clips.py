"""Clip model — normalized descriptors for the composition planner.

A ClipDescriptor holds the metadata the planner needs (geometry,
duration, format) plus an opaque `source` handle that only the engine
ever reads. Descriptors for clips that could not be probed are legal:
zero width/height/duration simply steer the planner to the re-encoding
path and degrade transitions to plain cuts.

The transition field on each clip controls the *outgoing* junction
(how this clip hands off to the next one). The last clip's transition
is ignored.
"""

from dataclasses import dataclass
from enum import Enum


class TransitionKind(Enum):
    """Named transition effects. NONE is an explicit hard cut."""

    NONE = "none"
    FADE = "fade"
    WIPELEFT = "wipeleft"
    WIPERIGHT = "wiperight"
    WIPEUP = "wipeup"
    WIPEDOWN = "wipedown"
    SLIDELT = "slidelt"
    SLIDERT = "slidert"
    SLIDEUP = "slideup"
    SLIDEDOWN = "slidedown"
    CIRCLECROP = "circlecrop"
    RECTCROP = "rectcrop"
    DISSOLVE = "dissolve"
    PIXELIZE = "pixelize"
    HLSLICE = "hlslice"
    HRSLICE = "hrslice"
    VUSLICE = "vuslice"
    VDSLICE = "vdslice"
    HBLUR = "hblur"
    SQUEEZEH = "squeezeh"
    SQUEEZEV = "squeezev"
    DIAGTL = "diagtl"
    DIAGTR = "diagtr"
    DIAGBL = "diagbl"
    DIAGBR = "diagbr"

    @property
    def engine_name(self) -> str:
        """Name ffmpeg's xfade filter knows this transition by."""
        return _ENGINE_NAMES.get(self, self.value)

    @classmethod
    def parse(cls, text: str) -> "TransitionKind":
        """Parse a transition name, accepting ffmpeg spellings too."""
        key = str(text).strip().lower()
        for kind in cls:
            if key in (kind.value, kind.engine_name):
                return kind
        raise ValueError(
            f"Unknown transition '{text}'. "
            f"Valid: {sorted(k.value for k in cls)}"
        )


# Only two names differ between our spelling and xfade's.
_ENGINE_NAMES = {
    TransitionKind.SLIDELT: "slideleft",
    TransitionKind.SLIDERT: "slideright",
}


@dataclass(frozen=True)
class Transition:
    kind: TransitionKind
    duration: float = 1.0

    def __post_init__(self):
        if self.duration < 0:
            raise ValueError(f"Transition duration must be >= 0, got {self.duration}")


@dataclass(frozen=True)
class Region:
    """Pixel rectangle used by crop, delogo and preview filters."""

    x: int
    y: int
    width: int
    height: int

    def __post_init__(self):
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Region origin must be >= 0, got ({self.x}, {self.y})")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(
                f"Region size must be > 0, got {self.width}x{self.height}"
            )


@dataclass(frozen=True)
class ClipDescriptor:
    """One input clip.

    Attributes:
        source: Path or raw bytes of the clip. Never inspected by the planner.
        width, height: Pixel dimensions, 0 when unknown.
        duration: Seconds, 0 when unknown.
        container_ext: Original extension without the dot, e.g. "mp4".
        mime_type: Original MIME type, e.g. "video/mp4".
        transition_to_next: Outgoing transition, or None for a hard cut.
    """

    source: object
    width: int = 0
    height: int = 0
    duration: float = 0.0
    container_ext: str = "mp4"
    mime_type: str = "video/mp4"
    transition_to_next: Transition | None = None

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Clip dimensions must be >= 0, got {self.width}x{self.height}"
            )
        if self.duration < 0:
            raise ValueError(f"Clip duration must be >= 0, got {self.duration}")


@dataclass(frozen=True)
class CompositionJob:
    """Ordered clips plus optional replacement audio.

    `use_background_audio` defaults to True whenever a background track
    is given; set it False to keep the clips' own audio.
    """

    clips: tuple[ClipDescriptor, ...]
    background_audio: object = None
    use_background_audio: bool | None = None

    def __post_init__(self):
        # Normalize lists to tuples so the job stays immutable.
        object.__setattr__(self, "clips", tuple(self.clips))
        if len(self.clips) < 2:
            raise ValueError(
                f"A stitch job needs at least 2 clips, got {len(self.clips)}"
            )
        if self.use_background_audio is None:
            object.__setattr__(
                self, "use_background_audio", self.background_audio is not None,
            )

    @property
    def replaces_audio(self) -> bool:
        return self.background_audio is not None and bool(self.use_background_audio)

    @property
    def first(self) -> ClipDescriptor:
        return self.clips[0]

    def junctions(self):
        """Yield (index, outgoing clip, incoming clip) for each junction."""
        for i in range(len(self.clips) - 1):
            yield i, self.clips[i], self.clips[i + 1]
