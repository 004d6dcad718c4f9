from __future__ import annotations

from pathlib import Path
from typing import Optional

import gradio as gr
from dotenv import load_dotenv

from .core.config import (
    DEFAULT_PROFILE,
    apply_env_overrides,
    available_profiles,
    default_profile_name,
    load_profile,
    resolve_config,
    target_range,
)
from .core.errors import LoudnormError
from .core.runner import run_two_pass


def _coerce_file_path(file_obj) -> Optional[Path]:
    if file_obj is None:
        return None
    # Gradio may return a string path or an object with .name/.path
    if isinstance(file_obj, (str, Path)):
        return Path(file_obj)

    for attr in ("name", "path"):
        if hasattr(file_obj, attr):
            v = getattr(file_obj, attr)
            if v:
                return Path(v)

    if isinstance(file_obj, dict):
        for k in ("name", "path"):
            v = file_obj.get(k)
            if v:
                return Path(v)

    return None


def _profile_defaults(profile_name: str):
    t = load_profile(profile_name).targets
    return t.integrated_loudness, t.loudness_range, t.true_peak


def _run(
    media_file,
    profile_name: str,
    integrated_loudness: float,
    loudness_range: float,
    true_peak: float,
    down_mix: bool,
    resample: bool,
) -> str:
    load_dotenv()
    media_path = _coerce_file_path(media_file)

    try:
        profile = apply_env_overrides(load_profile(profile_name))
        config = resolve_config(
            str(media_path) if media_path else None,
            integrated_loudness=integrated_loudness,
            loudness_range=loudness_range,
            true_peak=true_peak,
            down_mix=bool(down_mix),
            resample=bool(resample),
            profile=profile,
        )
        # No terminal here; the spinner would only write to the server log.
        return run_two_pass(config, profile, show_progress=False)
    except LoudnormError as e:
        return f"Run failed: {e}"


def _start_profile() -> str:
    name = default_profile_name()
    return name if name in available_profiles() else DEFAULT_PROFILE


def build_app() -> gr.Blocks:
    load_dotenv()
    start_profile = _start_profile()
    i_lo, i_hi = target_range("integrated_loudness")
    l_lo, l_hi = target_range("loudness_range")
    t_lo, t_hi = target_range("true_peak")
    i_def, l_def, t_def = _profile_defaults(start_profile)

    with gr.Blocks(title="loudnorm-helper") as demo:
        gr.Markdown(
            """# loudnorm-helper (GUI)

1) Upload an audio or video file
2) Pick a target profile (or tweak the targets)
3) Run: ffmpeg measures the file and the second-pass `loudnorm` filter is shown below
"""
        )

        media_file = gr.File(label="Input media (wav/mp3/mp4/mkv/...)")

        with gr.Row():
            profile_name = gr.Dropdown(
                choices=available_profiles(),
                value=start_profile,
                label="Profile",
            )

        with gr.Accordion("Targets", open=True):
            with gr.Row():
                integrated_loudness = gr.Slider(minimum=i_lo, maximum=i_hi, value=i_def, step=0.5, label="Integrated loudness (LUFS)")
                loudness_range = gr.Slider(minimum=l_lo, maximum=l_hi, value=l_def, step=0.5, label="Loudness range (LU)")
                true_peak = gr.Slider(minimum=t_lo, maximum=t_hi, value=t_def, step=0.1, label="True peak (dBTP)")
            with gr.Row():
                down_mix = gr.Checkbox(value=False, label="Downmix to 16bit 48kHz stereo")
                resample = gr.Checkbox(value=False, label="Resample to 48kHz (soxr) after correction")

        run_btn = gr.Button("Measure", variant="primary")
        result = gr.Textbox(lines=4, label="Second-pass filter (-af)", interactive=False)

        profile_name.change(
            fn=_profile_defaults,
            inputs=[profile_name],
            outputs=[integrated_loudness, loudness_range, true_peak],
        )
        run_btn.click(
            fn=_run,
            inputs=[media_file, profile_name, integrated_loudness, loudness_range, true_peak, down_mix, resample],
            outputs=[result],
        )

        gr.Markdown(
            """### Tips
- Paste the filter into `ffmpeg -i <input> -af "<filter>" <output>`.
- Enable downmix for multichannel sources you want delivered as stereo.
"""
        )

    return demo


def main() -> None:
    app = build_app()
    app.queue().launch()


if __name__ == "__main__":
    main()
