"""Tests for the clip model and transition names."""

import pytest

from clipstitch.clips import (
    ClipDescriptor,
    CompositionJob,
    Region,
    Transition,
    TransitionKind,
)


def _clip(**overrides):
    c = {"source": "a.mp4", "width": 1920, "height": 1080, "duration": 5.0}
    c.update(overrides)
    return ClipDescriptor(**c)


class TestTransitionKind:
    def test_slide_spellings_map_to_ffmpeg_names(self):
        assert TransitionKind.SLIDELT.engine_name == "slideleft"
        assert TransitionKind.SLIDERT.engine_name == "slideright"

    def test_other_names_pass_through(self):
        for kind in TransitionKind:
            if kind in (TransitionKind.SLIDELT, TransitionKind.SLIDERT):
                continue
            assert kind.engine_name == kind.value == kind.name.lower()

    def test_parse_accepts_both_spellings(self):
        assert TransitionKind.parse("slidelt") is TransitionKind.SLIDELT
        assert TransitionKind.parse("slideleft") is TransitionKind.SLIDELT
        assert TransitionKind.parse("  Fade ") is TransitionKind.FADE

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError, match="Unknown transition"):
            TransitionKind.parse("spin")


class TestTransition:
    def test_default_duration(self):
        assert Transition(TransitionKind.FADE).duration == 1.0

    def test_negative_duration_raises(self):
        with pytest.raises(ValueError, match=">= 0"):
            Transition(TransitionKind.FADE, -0.5)


class TestClipDescriptor:
    def test_unprobed_clip_is_legal(self):
        clip = ClipDescriptor(source=b"\x00\x01")
        assert (clip.width, clip.height, clip.duration) == (0, 0, 0.0)
        assert clip.mime_type == "video/mp4"

    def test_negative_duration_raises(self):
        with pytest.raises(ValueError, match="duration"):
            _clip(duration=-1.0)

    def test_negative_size_raises(self):
        with pytest.raises(ValueError, match="dimensions"):
            _clip(width=-1)


class TestCompositionJob:
    def test_requires_two_clips(self):
        with pytest.raises(ValueError, match="at least 2"):
            CompositionJob(clips=[_clip()])

    def test_list_is_frozen_to_tuple(self):
        job = CompositionJob(clips=[_clip(), _clip()])
        assert isinstance(job.clips, tuple)

    def test_background_audio_flag_defaults_on(self):
        job = CompositionJob(clips=[_clip(), _clip()], background_audio="music.mp3")
        assert job.replaces_audio

    def test_background_audio_can_be_disabled(self):
        job = CompositionJob(
            clips=[_clip(), _clip()],
            background_audio="music.mp3",
            use_background_audio=False,
        )
        assert not job.replaces_audio

    def test_flag_without_audio_does_nothing(self):
        job = CompositionJob(clips=[_clip(), _clip()], use_background_audio=True)
        assert not job.replaces_audio

    def test_junctions_pair_neighbours(self):
        a, b, c = _clip(source="a"), _clip(source="b"), _clip(source="c")
        job = CompositionJob(clips=[a, b, c])
        assert list(job.junctions()) == [(0, a, b), (1, b, c)]


class TestRegion:
    def test_valid(self):
        assert Region(0, 0, 10, 20).height == 20

    def test_zero_size_raises(self):
        with pytest.raises(ValueError, match="size"):
            Region(0, 0, 0, 10)

    def test_negative_origin_raises(self):
        with pytest.raises(ValueError, match="origin"):
            Region(-1, 0, 10, 10)
