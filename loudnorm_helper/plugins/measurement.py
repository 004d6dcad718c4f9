from __future__ import annotations
import json

from ..core.errors import MalformedJson, NoJsonFound
from ..core.models import LoudnessMeasurement


def extract_measurement(diagnostic_text: str) -> LoudnessMeasurement:
    """Pull the loudnorm JSON report out of ffmpeg's stderr.

    The report is a flat object printed after all other log lines, so the
    last '{' and the first '}' after it delimit it. Line positions are not
    used: they shift with log verbosity.
    """
    start = diagnostic_text.rfind("{")
    if start == -1:
        raise NoJsonFound()

    end = diagnostic_text.find("}", start)
    if end == -1:
        raise MalformedJson("Loudnorm report is truncated (no closing brace)")

    raw = diagnostic_text[start:end + 1]
    try:
        report = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedJson(f"Loudnorm report is not valid JSON: {e}") from e
    return LoudnessMeasurement.from_report(report)
