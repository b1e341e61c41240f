"""Tests for probing clips into descriptors (moviepy-backed)."""

import pytest

from clipstitch.clips import Transition, TransitionKind
from clipstitch.probe import describe_clip, guess_mime_type


class TestDescribeClip:
    def test_probes_geometry_and_duration(self, source_video):
        clip = describe_clip(source_video)
        assert (clip.width, clip.height) == (320, 240)
        assert 4.5 < clip.duration < 5.5
        assert clip.container_ext == "mp4"
        assert clip.mime_type == "video/mp4"
        assert clip.source == str(source_video)

    def test_attaches_transition(self, source_video):
        fade = Transition(TransitionKind.FADE, 0.5)
        assert describe_clip(source_video, fade).transition_to_next == fade

    def test_unreadable_file_gives_zeros(self, tmp_path):
        bogus = tmp_path / "broken.mp4"
        bogus.write_bytes(b"not a video")
        clip = describe_clip(bogus)
        assert (clip.width, clip.height, clip.duration) == (0, 0, 0.0)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="not found"):
            describe_clip(tmp_path / "nope.mp4")


class TestGuessMimeType:
    def test_quicktime(self):
        assert guess_mime_type("a.mov") == "video/quicktime"

    def test_non_video_falls_back(self):
        assert guess_mime_type("notes.txt") == "video/mp4"
