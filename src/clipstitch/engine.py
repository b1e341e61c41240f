"""ffmpeg engine — a scratch workspace plus argv execution.

Callers write inputs into the workspace by name, execute an argv that
refers to those names, read the outputs back as bytes and delete what
they wrote. Progress ratios (0..1) and log lines are delivered to
subscribed callbacks while a command runs.

One engine instance is a single serialized worker: `exec` holds a lock,
so two commands never run against the same workspace at once. Create
one instance per caller (or share it knowingly); there is no global.

The ffmpeg binary comes from imageio_ffmpeg, which bundles one.
"""

import logging
import re
import shutil
import subprocess
import tempfile
import threading
from pathlib import Path
from typing import Callable, Protocol

import imageio_ffmpeg

logger = logging.getLogger(__name__)

EVENTS = ("progress", "log")

# Lines ffmpeg writes for `-progress pipe:1`; everything else is log output.
_PROGRESS_LINE = re.compile(
    r"^(frame|fps|stream_\d+_\d+_q|bitrate|total_size|out_time_us|out_time_ms"
    r"|out_time|dup_frames|drop_frames|speed|progress)=(.*)$"
)


class Engine(Protocol):
    """What the stitch, edit and preview workflows need from an engine."""

    def write_input(self, name: str, data) -> None: ...

    def exec(self, argv: list[str], duration: float | None = None) -> int: ...

    def read_output(self, name: str) -> bytes: ...

    def delete_file(self, name: str) -> None: ...

    def on(self, event: str, callback: Callable) -> None: ...

    def off(self, event: str, callback: Callable) -> None: ...


class FFmpegEngine:
    """Run ffmpeg as a subprocess inside a private scratch directory.

    Args:
        ffmpeg_exe: Path to an ffmpeg binary. Defaults to imageio_ffmpeg's.
        work_dir: Workspace directory. Defaults to a fresh temp dir that
                  close() removes again.
    """

    def __init__(self, ffmpeg_exe: str | None = None, work_dir: str | Path | None = None):
        self._exe = ffmpeg_exe
        self._work_dir = Path(work_dir) if work_dir is not None else None
        self._owns_dir = work_dir is None
        self._listeners = {event: [] for event in EVENTS}
        self._lock = threading.Lock()
        self.loaded = False

    # ── Lifecycle ──────────────────────────────────────────────────

    def load(self) -> None:
        """Resolve the binary and create the workspace. Idempotent."""
        if self.loaded:
            return
        if self._exe is None:
            self._exe = imageio_ffmpeg.get_ffmpeg_exe()
        if self._work_dir is None:
            self._work_dir = Path(tempfile.mkdtemp(prefix="clipstitch-"))
        else:
            self._work_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("ffmpeg engine ready: %s (workspace %s)", self._exe, self._work_dir)
        self.loaded = True

    def close(self) -> None:
        if self._owns_dir and self._work_dir is not None:
            shutil.rmtree(self._work_dir, ignore_errors=True)
            self._work_dir = None
        self.loaded = False

    def __enter__(self):
        self.load()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def work_dir(self) -> Path:
        self.load()
        return self._work_dir

    # ── Events ─────────────────────────────────────────────────────

    def on(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown engine event '{event}'. Valid: {list(EVENTS)}")
        self._listeners[event].append(callback)

    def off(self, event: str, callback: Callable) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown engine event '{event}'. Valid: {list(EVENTS)}")
        if callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def _emit(self, event: str, value) -> None:
        for callback in list(self._listeners[event]):
            callback(value)

    # ── Files ──────────────────────────────────────────────────────

    def _path(self, name: str) -> Path:
        # Plain file names only; nothing may escape the workspace.
        if not name or name in (".", "..") or Path(name).name != name:
            raise ValueError(f"Invalid workspace file name: '{name}'")
        return self.work_dir / name

    def write_input(self, name: str, data) -> None:
        """Store bytes, a file path's content, or a readable object as `name`."""
        target = self._path(name)
        if isinstance(data, (bytes, bytearray, memoryview)):
            target.write_bytes(bytes(data))
        elif isinstance(data, (str, Path)):
            shutil.copyfile(data, target)
        elif hasattr(data, "read"):
            with open(target, "wb") as f:
                shutil.copyfileobj(data, f)
        else:
            raise TypeError(f"Cannot write {type(data).__name__} to the workspace")

    def read_output(self, name: str) -> bytes:
        return self._path(name).read_bytes()

    def delete_file(self, name: str) -> None:
        self._path(name).unlink()

    # ── Execution ──────────────────────────────────────────────────

    def exec(self, argv: list[str], duration: float | None = None) -> int:
        """Run ffmpeg with argv inside the workspace and return its exit code.

        Args:
            argv: ffmpeg arguments, without the executable.
            duration: Expected output duration in seconds. Enables
                      progress events; without it only the final 1.0 is sent.
        """
        self.load()
        cmd = [
            self._exe, "-hide_banner", "-nostdin", "-nostats",
            "-progress", "pipe:1",
            *argv,
        ]
        logger.debug("ffmpeg %s", " ".join(argv))

        with self._lock:
            with subprocess.Popen(
                cmd,
                cwd=self._work_dir,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
            ) as proc:
                for line in proc.stdout:
                    self._handle_line(line.rstrip("\r\n"), duration)
                code = proc.wait()

        logger.debug("ffmpeg exited with code %d", code)
        return code

    def _handle_line(self, line: str, duration: float | None) -> None:
        match = _PROGRESS_LINE.match(line)
        if match is None:
            if line.strip():
                self._emit("log", line)
            return

        key, value = match.groups()
        if key == "progress":
            if value == "end":
                self._emit("progress", 1.0)
        elif key == "out_time_us" and duration:
            try:
                seconds = int(value) / 1_000_000
            except ValueError:
                return  # "N/A" before the first frame
            self._emit("progress", max(0.0, min(1.0, seconds / duration)))


def cleanup(engine: Engine, names) -> None:
    """Delete workspace files, logging (never raising) on failure."""
    for name in names:
        if not name:
            continue
        try:
            engine.delete_file(name)
        except Exception as exc:
            logger.warning("Could not delete %s from the engine workspace: %s", name, exc)
