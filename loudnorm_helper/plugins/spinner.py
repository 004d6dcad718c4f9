from __future__ import annotations
import itertools
import sys
import threading
from typing import Optional, TextIO

FRAMES = ("⠂", "⠃", "⠁", "⠉", "⠈", "⠘", "⠐", "⠰", "⠠", "⠤", "⠄", "⠆")


class ProgressSpinner:
    """Cosmetic progress indicator drawn on a terminal while ffmpeg runs.

    Use as a context manager. Nothing is drawn unless the stream is a TTY,
    so piped output stays clean. The stop event is owned by the instance and
    the thread is joined on exit.
    """

    def __init__(
        self,
        label: str = "Processing 1st Loudnorm Pass",
        stream: Optional[TextIO] = None,
        interval: float = 0.25,
        enabled: bool = True,
    ) -> None:
        self.label = label
        self.stream = stream if stream is not None else sys.stderr
        self.interval = interval
        self.enabled = enabled
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    def _is_tty(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        try:
            return bool(isatty and isatty())
        except ValueError:
            # closed stream
            return False

    def start(self) -> None:
        if not self.enabled or self._thread is not None or not self._is_tty():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._spin, daemon=True, name="loudnorm-spinner")
        self._thread.start()

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join()
        self._thread = None
        self.stream.write("\r" + " " * (len(self.label) + 2) + "\r")
        self.stream.flush()

    def _spin(self) -> None:
        for frame in itertools.cycle(FRAMES):
            if self._stop.is_set():
                break
            self.stream.write(f"{self.label} {frame}\r")
            self.stream.flush()
            self._stop.wait(self.interval)

    def __enter__(self) -> "ProgressSpinner":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
