from __future__ import annotations
from typing import Optional

from ..core.config import Configuration
from ..core.models import LoudnessMeasurement

DOWNMIX_PREFIX = "aformat=sample_fmts=s16:sample_rates=48000:channel_layouts=stereo,"
RESAMPLE_SUFFIX = ",aresample=osr=48000,aresample=resampler=soxr:precision=28"


def build_filter(config: Configuration, measurement: Optional[LoudnessMeasurement] = None) -> str:
    """Build the -af expression for either loudnorm pass.

    Without a measurement the filter only analyzes and prints a JSON report.
    With one, it applies linear correction using the measured values verbatim.
    """
    prefix = DOWNMIX_PREFIX if config.down_mix else ""
    targets = f"I={config.integrated_loudness}:LRA={config.loudness_range}:TP={config.true_peak}"

    if measurement is None:
        return f"{prefix}loudnorm={targets}:print_format=json"

    m = measurement
    measured = (
        f"measured_I={m.input_i}:measured_TP={m.input_tp}:measured_LRA={m.input_lra}"
        f":measured_thresh={m.input_thresh}:offset={m.target_offset}"
    )
    suffix = RESAMPLE_SUFFIX if config.resample else ""
    return f"{prefix}loudnorm=linear=true:{targets}:{measured}{suffix}"
