from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

from .ffmpeg_tools import _run


def apply_loudnorm(
    in_audio: Union[str, Path],
    out_audio: Union[str, Path],
    filter_expression: str,
    ffmpeg_binary: str = "ffmpeg",
    timeout_sec: Optional[float] = None,
) -> Path:
    """Second loudnorm pass: render the corrected file with ffmpeg."""
    out_audio = Path(out_audio)
    out_audio.parent.mkdir(parents=True, exist_ok=True)
    # Video is copied untouched when the container has any.
    cmd = [
        ffmpeg_binary, "-y",
        "-hide_banner",
        "-i", str(in_audio),
        "-af", filter_expression,
        "-c:v", "copy",
        str(out_audio),
    ]
    _run(cmd, "ffmpeg loudnorm correction", timeout_sec=timeout_sec)
    return out_audio
