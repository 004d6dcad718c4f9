from __future__ import annotations
import re
from dataclasses import asdict, dataclass
from typing import Any, Dict

from .errors import MalformedJson

# Required keys of the loudnorm print_format=json report.
REPORT_KEYS = ("input_i", "input_tp", "input_lra", "input_thresh", "target_offset")
# Decimal text as ffmpeg prints it; "inf" appears for silent input.
FFMPEG_NUMBER = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+|inf)", re.ASCII)


@dataclass(frozen=True)
class LoudnessMeasurement:
    # Values are kept as the exact decimal text ffmpeg printed so they can be
    # echoed back into the correction filter without rounding.
    input_i: str
    input_tp: str
    input_lra: str
    input_thresh: str
    target_offset: str

    @classmethod
    def from_report(cls, report: Any) -> "LoudnessMeasurement":
        if not isinstance(report, dict):
            raise MalformedJson(f"Expected a JSON object, got {type(report).__name__}")

        missing = [k for k in REPORT_KEYS if k not in report]
        if missing:
            raise MalformedJson(f"Loudnorm report is missing fields: {', '.join(missing)}")

        values = {}
        for k in REPORT_KEYS:
            v = report[k]
            if not isinstance(v, str):
                raise MalformedJson(f"Field {k} must be a string, got {type(v).__name__}")
            v = v.strip()
            if not FFMPEG_NUMBER.fullmatch(v):
                raise MalformedJson(f"Field {k} is not numeric: {v!r}")
            values[k] = v
        return cls(**values)

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)
