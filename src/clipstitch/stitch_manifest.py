"""Stitch manifest loader — clips, transitions and audio from YAML.

Follows the same ${var} path resolution as the other manifests.

Stitch manifest schema:
  video:
    transition: fade            # global default kind ("none" if omitted)
    transition_duration: 1.0    # global default seconds
    preset: ultrafast           # x264 preset for re-encodes
  paths:
    clips: "/data/clips"
  background_audio: "${clips}/music.mp3"   # optional
  clips:
    - path: "${clips}/intro.mp4"
      transition: wipeleft      # per-clip override (outgoing)
      transition_duration: 0.5
    - path: "${clips}/main.mp4"
"""

from pathlib import Path

import yaml

from .clips import Transition, TransitionKind
from .common import resolve_path_vars


DEFAULT_TRANSITION_DURATION = 1.0


def _parse_duration(value, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ValueError(f"{where}: transition_duration must be >= 0, got {value!r}")
    return float(value)


def _parse_kind(value, where: str) -> TransitionKind:
    try:
        return TransitionKind.parse(value)
    except ValueError as exc:
        raise ValueError(f"{where}: {exc}") from exc


def load_stitch_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a stitch manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Validate video defaults (transition, transition_duration, preset).
      3. Resolve ${path} variables in clip and audio paths.
      4. Apply defaults to each clip and parse its Transition.

    Returns:
        Config dict: video defaults, background_audio (path or None), and
        clips as {"path", "transition": Transition}.

    Raises:
        ValueError: Missing/invalid fields, or fewer than 2 clips.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f) or {}

    video = dict(raw.get("video") or {})
    default_kind = _parse_kind(video.get("transition", "none"), "Stitch manifest video")
    default_duration = _parse_duration(
        video.get("transition_duration", DEFAULT_TRANSITION_DURATION),
        "Stitch manifest video",
    )
    video["transition"] = default_kind
    video["transition_duration"] = default_duration
    preset = video.get("preset")
    if preset is not None and not isinstance(preset, str):
        raise ValueError(f"Stitch manifest video: preset must be a string, got {preset!r}")

    paths = raw.get("paths", {})

    audio = raw.get("background_audio")
    if audio is not None:
        audio = resolve_path_vars(str(audio), paths)

    if "clips" not in raw:
        raise ValueError("Stitch manifest: missing required 'clips' field")

    clips = []
    for i, entry in enumerate(raw["clips"] or []):
        if isinstance(entry, str):
            entry = {"path": entry}
        if "path" not in entry:
            raise ValueError(f"Stitch clip {i}: missing required field 'path'")

        where = f"Stitch clip {i}"
        kind = default_kind
        if "transition" in entry:
            kind = _parse_kind(entry["transition"], where)
        duration = default_duration
        if "transition_duration" in entry:
            duration = _parse_duration(entry["transition_duration"], where)

        clips.append({
            "path": resolve_path_vars(str(entry["path"]), paths),
            "transition": Transition(kind, duration),
        })

    if len(clips) < 2:
        raise ValueError(f"Stitch manifest: need at least 2 clips, got {len(clips)}")

    return {"video": video, "background_audio": audio, "clips": clips}


def validate_stitch_paths(config: dict) -> None:
    """Check that all clip and audio paths exist on disk.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    candidates = [c["path"] for c in config["clips"]]
    if config.get("background_audio"):
        candidates.append(config["background_audio"])

    missing = [p for p in candidates if not Path(p).exists()]
    if missing:
        msg = f"Missing {len(missing)} file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)
