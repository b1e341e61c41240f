"""Error taxonomy for planning and running ffmpeg jobs.

Input mismatches between clips are never errors: the strategy selector
absorbs them by choosing the re-encoding path.
"""


class ClipStitchError(Exception):
    """Base class for all clipstitch errors."""


class InvalidPlanState(ClipStitchError):
    """The command assembler was called without a plan the strategy needs."""


class EngineExecutionFailed(ClipStitchError):
    """ffmpeg exited non-zero or raised while executing a command.

    Carries which path was attempted so callers can tell a format
    mismatch (stream copy) apart from missing streams (re-encode).
    """

    def __init__(
        self,
        message: str,
        strategy=None,
        clip_count: int | None = None,
        reencode: bool | None = None,
        exit_code: int | None = None,
    ):
        super().__init__(message)
        self.strategy = strategy
        self.clip_count = clip_count
        self.reencode = reencode
        self.exit_code = exit_code


class EngineReadFailed(ClipStitchError):
    """ffmpeg reported success but the output file could not be read."""


class PreviewGenerationFailed(ClipStitchError):
    """The preview frame could not be produced, even without the filter."""
