"""Tests for clipstitch.common utilities."""

import pytest

from clipstitch.clips import Region
from clipstitch.common import (
    ffmpeg_color,
    format_seconds,
    parse_hex_color,
    parse_region,
    resolve_path_vars,
    source_suffix,
)


class TestParseHexColor:
    def test_with_hash(self):
        assert parse_hex_color("#e04c77") == (224, 76, 119)

    def test_without_hash(self):
        assert parse_hex_color("1A1A1A") == (26, 26, 26)

    def test_invalid_raises(self):
        with pytest.raises(ValueError, match="Invalid hex color"):
            parse_hex_color("#12345")

    def test_ffmpeg_color(self):
        assert ffmpeg_color("#e04c77") == "0xE04C77"


class TestResolvePathVars:
    def test_single_var(self):
        result = resolve_path_vars("${videos}/a.mp4", {"videos": "/data/vids"})
        assert result == "/data/vids/a.mp4"

    def test_multiple_vars(self):
        paths = {"videos": "/data/vids", "audio": "/data/audio"}
        result = resolve_path_vars("${videos}/a and ${audio}/b", paths)
        assert result == "/data/vids/a and /data/audio/b"

    def test_no_vars(self):
        assert resolve_path_vars("/plain/path", {}) == "/plain/path"

    def test_unknown_var_raises(self):
        with pytest.raises(ValueError, match="Unknown path variable"):
            resolve_path_vars("${missing}/x", {})


class TestFormatSeconds:
    @pytest.mark.parametrize("value, expected", [
        (4.0, "4"),
        (4, "4"),
        (4.5, "4.5"),
        (0.333333, "0.333"),
        (0.0, "0"),
        (12.25, "12.25"),
    ])
    def test_trims_trailing_zeros(self, value, expected):
        assert format_seconds(value) == expected


class TestSourceSuffix:
    def test_path(self):
        assert source_suffix("/x/clip.MOV") == "mov"

    def test_no_suffix_uses_default(self):
        assert source_suffix("/x/clip") == "mp4"

    def test_bytes_use_default(self):
        assert source_suffix(b"data", "mp3") == "mp3"


class TestParseRegion:
    def test_valid(self):
        assert parse_region("10, 20,300,200") == Region(10, 20, 300, 200)

    def test_wrong_count_raises(self):
        with pytest.raises(ValueError, match="x,y,w,h"):
            parse_region("1,2,3")

    def test_non_integer_raises(self):
        with pytest.raises(ValueError, match="integers"):
            parse_region("1,2,a,4")
