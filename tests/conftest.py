"""Shared test fixtures for clipstitch tests."""

import subprocess

import pytest
import imageio_ffmpeg

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


def _render(out, size="320x240", duration=5, rate=10, color="blue", audio=True):
    cmd = [_FFMPEG, "-y", "-f", "lavfi", "-i", f"color=c={color}:s={size}:d={duration}:r={rate}"]
    if audio:
        cmd += ["-f", "lavfi", "-i", "anullsrc=r=44100:cl=mono", "-shortest"]
    cmd += ["-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p"]
    if audio:
        cmd += ["-c:a", "aac", "-b:a", "32k"]
    cmd.append(str(out))
    subprocess.run(cmd, check=True, capture_output=True)
    return out


@pytest.fixture
def source_video(tmp_path):
    """Create a 5-second test video (320x240, 10fps) with audio using ffmpeg."""
    return _render(tmp_path / "source.mp4")


@pytest.fixture
def make_video(tmp_path):
    """Factory for lavfi test clips: make_video("a.mp4", size="160x120", duration=2)."""
    def _make(name, **kwargs):
        return _render(tmp_path / name, **kwargs)
    return _make


@pytest.fixture
def background_audio(tmp_path):
    """A 3-second sine tone as mp3."""
    out = tmp_path / "music.mp3"
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", "sine=frequency=440:duration=3",
            "-c:a", "libmp3lame", "-b:a", "64k",
            str(out),
        ],
        check=True,
        capture_output=True,
    )
    return out


class FakeEngine:
    """In-memory engine that replays scripted exec results.

    Each script entry is a dict with optional keys:
      code     exit code (default 0)
      logs     lines emitted to "log" listeners before returning
      progress ratios emitted to "progress" listeners
      outputs  {name: bytes} written to the workspace on success
      raises   exception raised from exec (after logs)
    """

    def __init__(self, script=None):
        self.script = list(script or [])
        self.files = {}
        self.calls = []
        self.durations = []
        self.deleted = []
        self.fail_delete = False
        self.listeners = {"progress": [], "log": []}

    def on(self, event, callback):
        self.listeners[event].append(callback)

    def off(self, event, callback):
        self.listeners[event].remove(callback)

    def write_input(self, name, data):
        self.files[name] = data

    def exec(self, argv, duration=None):
        self.calls.append(list(argv))
        self.durations.append(duration)
        step = self.script.pop(0) if self.script else {}
        for line in step.get("logs", ()):
            for cb in list(self.listeners["log"]):
                cb(line)
        if step.get("raises"):
            raise step["raises"]
        for ratio in step.get("progress", ()):
            for cb in list(self.listeners["progress"]):
                cb(ratio)
        self.files.update(step.get("outputs", {}))
        return step.get("code", 0)

    def read_output(self, name):
        if name not in self.files:
            raise FileNotFoundError(name)
        return self.files[name]

    def delete_file(self, name):
        self.deleted.append(name)
        if self.fail_delete:
            raise OSError(f"cannot delete {name}")
        if name not in self.files:
            raise FileNotFoundError(name)
        del self.files[name]


@pytest.fixture
def make_engine():
    """Factory for FakeEngine: make_engine([{"code": 1}, {"outputs": {...}}])."""
    return FakeEngine
