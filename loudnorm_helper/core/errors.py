"""
Exception hierarchy for loudnorm-helper.

Every failure is terminal for the current invocation; the CLI catches
LoudnormError at the top level, prints it to stderr and exits non-zero.
"""
from __future__ import annotations
from typing import Optional


class LoudnormError(Exception):
    """Base exception for all loudnorm-helper errors."""
    pass


class ConfigError(LoudnormError):
    """Raised when command-line or profile configuration is unusable."""
    pass


class MissingInput(ConfigError):
    """Raised when no input media path was given."""

    def __init__(self, message: str = "Missing input file path") -> None:
        super().__init__(message)


class InvalidArgument(ConfigError):
    """Raised when a numeric target cannot be parsed or is out of range."""

    def __init__(self, field: str, value, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for {field}: {value!r} ({reason})")


class ProcessFailed(LoudnormError):
    """Raised when the external ffmpeg process cannot run or does not succeed."""
    pass


class ProcessSpawnFailed(ProcessFailed):
    """Raised when the ffmpeg binary is missing or cannot be executed."""

    def __init__(self, binary: str, detail: str = "") -> None:
        self.binary = binary
        msg = f"Could not start {binary!r}"
        if detail:
            msg = f"{msg} ({detail})"
        if detail == "not found":
            msg = f"{msg}. Install ffmpeg and ensure it's in PATH."
        super().__init__(msg)


class ProcessExecutionFailed(ProcessFailed):
    """Raised when ffmpeg exits non-zero or is killed after a timeout."""

    def __init__(self, label: str, returncode: Optional[int], stderr: str = "") -> None:
        self.label = label
        self.returncode = returncode
        self.stderr = stderr or ""
        if returncode is None:
            head = f"{label} timed out and was terminated"
        else:
            head = f"{label} failed with exit status {returncode}"
        tail = self.stderr.strip()[-2000:]
        super().__init__(f"{head}\n{tail}" if tail else head)


class ExtractError(LoudnormError):
    """Raised when the loudnorm JSON report cannot be read from ffmpeg output."""
    pass


class NoJsonFound(ExtractError):
    """Raised when the diagnostic text contains no JSON object at all."""

    def __init__(self, message: str = "No JSON report found in ffmpeg output") -> None:
        super().__init__(message)


class MalformedJson(ExtractError):
    """Raised when the JSON report is truncated, invalid or has the wrong shape."""
    pass


__all__ = [
    "LoudnormError",
    "ConfigError",
    "MissingInput",
    "InvalidArgument",
    "ProcessFailed",
    "ProcessSpawnFailed",
    "ProcessExecutionFailed",
    "ExtractError",
    "NoJsonFound",
    "MalformedJson",
]
