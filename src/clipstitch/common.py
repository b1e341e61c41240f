"""clipstitch.common — shared helpers for manifests and ffmpeg arguments.

Contains: color parsing, path variable resolution, number formatting
for filter parameters, and region parsing for the CLIs.
"""

import re
from pathlib import Path

from .clips import Region


# ── Color utilities ────────────────────────────────────────────────

def parse_hex_color(hex_str: str) -> tuple[int, int, int]:
    """Convert '#RRGGBB' or 'RRGGBB' string to (R, G, B) tuple."""
    hex_str = hex_str.lstrip("#")
    if len(hex_str) != 6 or not all(c in "0123456789abcdefABCDEF" for c in hex_str):
        raise ValueError(f"Invalid hex color: '#{hex_str}'")
    return (int(hex_str[0:2], 16), int(hex_str[2:4], 16), int(hex_str[4:6], 16))


def ffmpeg_color(hex_str: str) -> str:
    """Convert '#RRGGBB' to ffmpeg's '0xRRGGBB' color syntax."""
    r, g, b = parse_hex_color(hex_str)
    return f"0x{r:02X}{g:02X}{b:02X}"


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)


def source_suffix(source, default: str = "mp4") -> str:
    """Lowercased extension (no dot) of a path-like source, else default.

    Raw bytes sources carry no name, so they always get the default.
    """
    if isinstance(source, (str, Path)):
        suffix = Path(source).suffix.lstrip(".").lower()
        if suffix:
            return suffix
    return default


# ── Number formatting ──────────────────────────────────────────────

def format_seconds(value: float) -> str:
    """Format seconds for filter parameters: '4', '4.5', '0.333'.

    Three decimals like the rest of the ffmpeg arguments, without the
    trailing zeros ffmpeg does not need.
    """
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


# ── CLI parsing ────────────────────────────────────────────────────

def parse_region(text: str) -> Region:
    """Parse 'x,y,w,h' into a Region."""
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 4:
        raise ValueError(f"Region must be 'x,y,w,h', got '{text}'")
    try:
        x, y, w, h = (int(p) for p in parts)
    except ValueError:
        raise ValueError(f"Region values must be integers, got '{text}'") from None
    return Region(x, y, w, h)
