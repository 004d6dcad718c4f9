from __future__ import annotations
import shlex
import subprocess
from pathlib import Path
from typing import Optional, Union

from ..core.errors import ProcessExecutionFailed, ProcessSpawnFailed
from ..core.log import log_debug
from .spinner import ProgressSpinner


def analysis_command(
    input_path: Union[str, Path],
    filter_expression: str,
    ffmpeg_binary: str = "ffmpeg",
) -> list[str]:
    # Discrete argv elements; the filter never goes through a shell.
    return [
        ffmpeg_binary,
        "-i", str(input_path),
        "-hide_banner",
        "-vn",
        "-af", filter_expression,
        "-f", "null",
        "-",
    ]


def analyze_loudness(
    input_path: Union[str, Path],
    filter_expression: str,
    ffmpeg_binary: str = "ffmpeg",
    timeout_sec: Optional[float] = None,
    show_progress: bool = True,
) -> str:
    """Run the measurement pass and return ffmpeg's stderr text."""
    cmd = analysis_command(input_path, filter_expression, ffmpeg_binary)
    with ProgressSpinner(enabled=show_progress):
        return _run(cmd, "ffmpeg loudnorm analysis", timeout_sec=timeout_sec)


def _run(cmd: list[str], label: str, timeout_sec: Optional[float] = None) -> str:
    log_debug("running", label=label, cmd=shlex.join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            timeout=timeout_sec,
        )
    except FileNotFoundError as e:
        raise ProcessSpawnFailed(cmd[0], "not found") from e
    except PermissionError as e:
        raise ProcessSpawnFailed(cmd[0], "permission denied") from e
    except OSError as e:
        raise ProcessSpawnFailed(cmd[0], str(e)) from e
    except subprocess.TimeoutExpired as e:
        # subprocess.run has already killed and reaped the child.
        raise ProcessExecutionFailed(label, None, _decode(e.stderr)) from e

    stderr = _decode(proc.stderr)
    log_debug("finished", label=label, returncode=proc.returncode, stderr_tail=stderr[-400:])
    if proc.returncode != 0:
        raise ProcessExecutionFailed(label, proc.returncode, stderr)
    return stderr


def _decode(raw: Union[bytes, str, None]) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8", errors="replace")
