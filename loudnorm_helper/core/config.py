from __future__ import annotations
import math
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml

from .errors import ConfigError, InvalidArgument, MissingInput

PROFILES_DIR = Path(__file__).resolve().parents[1] / "profiles"
DEFAULT_PROFILE = "ebu_r128"

# Inclusive (low, high) bounds; out-of-range targets are rejected, never clamped.
TARGET_RANGES = {
    "integrated_loudness": (-70.0, -5.0),
    "loudness_range": (1.0, 20.0),
    "true_peak": (-9.0, 0.0),
}


@dataclass
class TargetsConfig:
    integrated_loudness: float = -23.0  # LUFS
    loudness_range: float = 7.0  # LU
    true_peak: float = -2.0  # dBTP


@dataclass
class FFmpegConfig:
    binary: str = "ffmpeg"
    # None waits forever; otherwise the child is killed after this many seconds.
    timeout_sec: Optional[float] = None
    spinner: bool = True


@dataclass
class Profile:
    name: str = DEFAULT_PROFILE
    description: str = ""
    targets: TargetsConfig = field(default_factory=TargetsConfig)
    ffmpeg: FFmpegConfig = field(default_factory=FFmpegConfig)


@dataclass(frozen=True)
class Configuration:
    input_path: str
    integrated_loudness: float
    loudness_range: float
    true_peak: float
    down_mix: bool = False
    resample: bool = False


def available_profiles() -> list[str]:
    return sorted(p.stem for p in PROFILES_DIR.glob("*.yaml"))


def load_profile(profile: Union[str, Path, None] = None) -> Profile:
    """Load a shipped profile by name, or any YAML file by path."""
    name = str(profile or DEFAULT_PROFILE)
    path = Path(name)
    if path.suffix.lower() not in (".yaml", ".yml"):
        path = PROFILES_DIR / f"{name}.yaml"
    if not path.exists():
        raise ConfigError(
            f"Profile not found: {name} (available: {', '.join(available_profiles())})"
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Profile {path} is not valid YAML: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Profile {path} must be a mapping at the top level")

    p = Profile(name=path.stem, description=str(data.get("description", "")))

    # Shallow mapping; unknown keys are ignored.
    def update_dataclass(dc, upd):
        if upd is None:
            return
        if not isinstance(upd, dict):
            raise ConfigError(f"Profile {path}: expected a mapping, got {upd!r}")
        known = {f.name for f in fields(dc)}
        for k, v in upd.items():
            if k in known:
                setattr(dc, k, v)

    update_dataclass(p.targets, data.get("targets"))
    update_dataclass(p.ffmpeg, data.get("ffmpeg"))

    for key in TARGET_RANGES:
        try:
            setattr(p.targets, key, _parse_target(key, getattr(p.targets, key)))
        except InvalidArgument as e:
            raise ConfigError(f"Profile {p.name}: {e}") from e
    p.ffmpeg.timeout_sec = parse_timeout(p.ffmpeg.timeout_sec)
    p.ffmpeg.binary = str(p.ffmpeg.binary)
    if not isinstance(p.ffmpeg.spinner, bool):
        raise ConfigError(f"Profile {p.name}: spinner must be true or false, got {p.ffmpeg.spinner!r}")
    return p


def default_profile_name() -> str:
    return os.getenv("LOUDNORM_PROFILE") or DEFAULT_PROFILE


def apply_env_overrides(profile: Profile) -> Profile:
    """Apply environment settings (already loaded from .env by the caller)."""
    ffmpeg_binary = os.getenv("LOUDNORM_FFMPEG")
    if ffmpeg_binary:
        profile.ffmpeg.binary = ffmpeg_binary
    return profile


def parse_timeout(value) -> Optional[float]:
    """None means no timeout; anything else must be a positive, finite number."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidArgument("timeout_sec", value, "must be a positive number")
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        raise InvalidArgument("timeout_sec", value, "must be a positive number") from None
    if not math.isfinite(seconds) or seconds <= 0:
        raise InvalidArgument("timeout_sec", value, "must be a positive number")
    return seconds


def resolve_config(
    input_path: Optional[str],
    integrated_loudness: Union[str, float, None] = None,
    loudness_range: Union[str, float, None] = None,
    true_peak: Union[str, float, None] = None,
    down_mix: bool = False,
    resample: bool = False,
    profile: Optional[Profile] = None,
) -> Configuration:
    """Validate raw user input into a Configuration.

    Targets left as None fall back to the profile defaults. Raises
    MissingInput or InvalidArgument; never touches the filesystem.
    """
    if input_path is None or not str(input_path).strip():
        raise MissingInput()
    profile = profile or Profile()

    raw = {
        "integrated_loudness": integrated_loudness,
        "loudness_range": loudness_range,
        "true_peak": true_peak,
    }
    targets = {}
    for key, value in raw.items():
        if value is None:
            value = getattr(profile.targets, key)
        targets[key] = _parse_target(key, value)

    return Configuration(
        input_path=str(input_path),
        down_mix=bool(down_mix),
        resample=bool(resample),
        **targets,
    )


def target_range(key: str) -> Tuple[float, float]:
    return TARGET_RANGES[key]


def _parse_target(key: str, value) -> float:
    if isinstance(value, bool):
        raise InvalidArgument(key, value, "expected a number")
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidArgument(key, value, "expected a number") from None
    if math.isnan(number) or math.isinf(number):
        raise InvalidArgument(key, value, "expected a finite number")

    lo, hi = TARGET_RANGES[key]
    if not lo <= number <= hi:
        raise InvalidArgument(key, value, f"must be between {lo} and {hi}")
    return number
