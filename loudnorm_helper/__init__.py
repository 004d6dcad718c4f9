"""Two-pass ffmpeg loudnorm helper."""

__version__ = "0.2.0"
