import argparse
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .core.config import (
    DEFAULT_PROFILE,
    apply_env_overrides,
    available_profiles,
    default_profile_name,
    load_profile,
    parse_timeout,
    resolve_config,
)
from .core.errors import LoudnormError
from .core.log import log_error
from .core.runner import run_two_pass


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="loudnorm-helper",
        description="Measure a media file with ffmpeg loudnorm and print the second-pass filter.",
    )
    p.add_argument("input", nargs="?", default=None, help="Path to the input file.")
    p.add_argument("-i", "--integrated_loudness", default=None, help="Integrated loudness target (LUFS, -70..-5). Default from profile.")
    p.add_argument("-l", "--loudness_range", default=None, help="Loudness range target (LU, 1..20). Default from profile.")
    p.add_argument("-t", "--true_peak", default=None, help="Maximum true peak (dBTP, -9..0). Default from profile.")
    p.add_argument("-d", "--down_mix", action="store_true", help="Downmix to 16bit 48kHz stereo.")
    p.add_argument("-r", "--resample", action="store_true", help="Append a 48kHz soxr resample stage after the correction filter.")
    p.add_argument("-p", "--profile", default=None,
                   help=f"Target profile name ({', '.join(available_profiles())}) or YAML path. Default: $LOUDNORM_PROFILE or {DEFAULT_PROFILE}.")
    p.add_argument("--ffmpeg", default=None, help="ffmpeg executable. Default: $LOUDNORM_FFMPEG or the profile setting.")
    p.add_argument("--timeout", default=None, help="Kill the analysis pass after this many seconds.")
    p.add_argument("--no-progress", action="store_true", help="Never draw the progress spinner.")
    p.add_argument("-o", "--output", type=Path, default=None, help="Also run the correction pass and write the result here.")
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        profile = apply_env_overrides(load_profile(args.profile or default_profile_name()))
        if args.ffmpeg:
            profile.ffmpeg.binary = args.ffmpeg
        if args.timeout is not None:
            profile.ffmpeg.timeout_sec = parse_timeout(args.timeout)

        config = resolve_config(
            args.input,
            integrated_loudness=args.integrated_loudness,
            loudness_range=args.loudness_range,
            true_peak=args.true_peak,
            down_mix=args.down_mix,
            resample=args.resample,
            profile=profile,
        )
        correction_filter = run_two_pass(
            config,
            profile,
            output_path=args.output,
            show_progress=profile.ffmpeg.spinner and not args.no_progress,
        )
    except LoudnormError as e:
        log_error(str(e))
        return 1

    print(correction_filter)
    return 0
