"""Tests for the stitch manifest loader."""

import tempfile

import pytest
import yaml

from clipstitch.clips import TransitionKind


def _write_manifest(content: dict) -> str:
    """Write a manifest dict to a temp YAML file, return path."""
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    yaml.dump(content, f)
    f.close()
    return f.name


def _minimal(**overrides):
    """Return a minimal valid stitch manifest dict."""
    m = {"clips": [{"path": "/fake/a.mp4"}, {"path": "/fake/b.mp4"}]}
    m.update(overrides)
    return m


class TestLoadStitchManifest:
    def test_defaults_to_no_transition(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        config = load_stitch_manifest(_write_manifest(_minimal()))
        t = config["clips"][0]["transition"]
        assert t.kind is TransitionKind.NONE
        assert t.duration == 1.0
        assert config["background_audio"] is None

    def test_global_defaults_apply(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        m = _minimal(video={"transition": "fade", "transition_duration": 0.5})
        config = load_stitch_manifest(_write_manifest(m))
        for clip in config["clips"]:
            assert clip["transition"].kind is TransitionKind.FADE
            assert clip["transition"].duration == 0.5

    def test_per_clip_override(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        m = _minimal(
            video={"transition": "fade"},
            clips=[
                {"path": "/a.mp4", "transition": "slideleft", "transition_duration": 2},
                {"path": "/b.mp4"},
            ],
        )
        config = load_stitch_manifest(_write_manifest(m))
        first = config["clips"][0]["transition"]
        assert first.kind is TransitionKind.SLIDELT
        assert first.duration == 2.0
        assert config["clips"][1]["transition"].kind is TransitionKind.FADE

    def test_plain_string_clips(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        config = load_stitch_manifest(_write_manifest({"clips": ["/a.mp4", "/b.mp4"]}))
        assert [c["path"] for c in config["clips"]] == ["/a.mp4", "/b.mp4"]

    def test_resolves_path_variables(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        m = {
            "paths": {"clips": "/data/clips"},
            "background_audio": "${clips}/music.mp3",
            "clips": ["${clips}/a.mp4", {"path": "${clips}/b.mp4"}],
        }
        config = load_stitch_manifest(_write_manifest(m))
        assert config["clips"][0]["path"] == "/data/clips/a.mp4"
        assert config["clips"][1]["path"] == "/data/clips/b.mp4"
        assert config["background_audio"] == "/data/clips/music.mp3"

    def test_preset_kept(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        config = load_stitch_manifest(_write_manifest(_minimal(video={"preset": "fast"})))
        assert config["video"]["preset"] == "fast"


class TestStitchManifestValidation:
    def test_missing_clips_raises(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        with pytest.raises(ValueError, match="clips"):
            load_stitch_manifest(_write_manifest({"video": {}}))

    def test_single_clip_raises(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        with pytest.raises(ValueError, match="at least 2"):
            load_stitch_manifest(_write_manifest({"clips": ["/a.mp4"]}))

    def test_clip_missing_path_raises(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        m = _minimal(clips=[{"transition": "fade"}, {"path": "/b.mp4"}])
        with pytest.raises(ValueError, match="clip 0.*path"):
            load_stitch_manifest(_write_manifest(m))

    def test_unknown_transition_raises(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        m = _minimal(clips=[{"path": "/a.mp4"}, {"path": "/b.mp4", "transition": "spin"}])
        with pytest.raises(ValueError, match="clip 1.*Unknown transition"):
            load_stitch_manifest(_write_manifest(m))

    def test_negative_duration_raises(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        m = _minimal(video={"transition_duration": -1})
        with pytest.raises(ValueError, match=">= 0"):
            load_stitch_manifest(_write_manifest(m))

    def test_unknown_path_variable_raises(self):
        from clipstitch.stitch_manifest import load_stitch_manifest

        m = _minimal(clips=["${missing}/a.mp4", "/b.mp4"])
        with pytest.raises(ValueError, match="Unknown path variable"):
            load_stitch_manifest(_write_manifest(m))


class TestValidateStitchPaths:
    def test_existing_files_pass(self, tmp_path):
        from clipstitch.stitch_manifest import validate_stitch_paths

        a, b = tmp_path / "a.mp4", tmp_path / "b.mp4"
        a.write_text("fake")
        b.write_text("fake")
        validate_stitch_paths({
            "clips": [{"path": str(a)}, {"path": str(b)}],
            "background_audio": None,
        })  # should not raise

    def test_lists_every_missing_file(self, tmp_path):
        from clipstitch.stitch_manifest import validate_stitch_paths

        config = {
            "clips": [{"path": "/nope/a.mp4"}, {"path": "/nope/b.mp4"}],
            "background_audio": "/nope/music.mp3",
        }
        with pytest.raises(FileNotFoundError, match="Missing 3") as exc_info:
            validate_stitch_paths(config)
        assert "/nope/music.mp3" in str(exc_info.value)
