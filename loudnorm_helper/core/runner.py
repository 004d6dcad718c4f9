from __future__ import annotations
from pathlib import Path
from typing import Optional

from .config import Configuration, Profile
from .log import log_info
from ..plugins.audio_post import apply_loudnorm
from ..plugins.ffmpeg_tools import analyze_loudness
from ..plugins.filters import build_filter
from ..plugins.measurement import extract_measurement


def run_two_pass(
    config: Configuration,
    profile: Profile,
    output_path: Optional[Path] = None,
    show_progress: Optional[bool] = None,
) -> str:
    """Measure the input and return the correction-mode loudnorm filter.

    When output_path is given the correction pass is rendered as well.
    Errors propagate unchanged to the caller.
    """
    if show_progress is None:
        show_progress = profile.ffmpeg.spinner

    # 1) Measurement pass
    analysis_filter = build_filter(config)
    diagnostics = analyze_loudness(
        config.input_path,
        analysis_filter,
        ffmpeg_binary=profile.ffmpeg.binary,
        timeout_sec=profile.ffmpeg.timeout_sec,
        show_progress=show_progress,
    )

    # 2) Parse the JSON report out of stderr
    measurement = extract_measurement(diagnostics)
    log_info(
        "Measured loudness",
        I=measurement.input_i,
        TP=measurement.input_tp,
        LRA=measurement.input_lra,
        thresh=measurement.input_thresh,
        offset=measurement.target_offset,
    )

    # 3) Correction filter
    correction_filter = build_filter(config, measurement)

    # 3b) Optional second pass
    if output_path is not None:
        out = apply_loudnorm(
            config.input_path,
            output_path,
            correction_filter,
            ffmpeg_binary=profile.ffmpeg.binary,
            timeout_sec=profile.ffmpeg.timeout_sec,
        )
        log_info("Wrote normalized file", path=out)

    return correction_filter
