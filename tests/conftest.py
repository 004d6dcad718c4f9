from __future__ import annotations

import pytest

from loudnorm_helper.core.config import Configuration
from loudnorm_helper.core.models import LoudnessMeasurement

FFMPEG_STDERR = """Input #0, wav, from 'in.wav':
  Duration: 00:00:10.00, bitrate: 1536 kb/s
  Stream #0:0: Audio: pcm_s16le ([1][0][0][0] / 0x0001), 48000 Hz, 2 channels, s16, 1536 kb/s
Stream mapping:
  Stream #0:0 -> #0:0 (pcm_s16le (native) -> pcm_s16le (native))
Output #0, null, to 'pipe:':
  Metadata:
    encoder         : Lavf60.3.100
size=N/A time=00:00:10.00 bitrate=N/A speed= 512x
video:0kB audio:1875kB subtitle:0kB other streams:0kB global headers:0kB muxing overhead: unknown
[Parsed_loudnorm_0 @ 0x5581c1f4e7c0] 
{
	"input_i" : "-27.61",
	"input_tp" : "-4.47",
	"input_lra" : "18.06",
	"input_thresh" : "-39.20",
	"output_i" : "-23.09",
	"output_tp" : "-2.00",
	"output_lra" : "6.40",
	"output_thresh" : "-34.10",
	"normalization_type" : "dynamic",
	"target_offset" : "0.09"
}
"""


@pytest.fixture
def ffmpeg_stderr() -> str:
    return FFMPEG_STDERR


@pytest.fixture
def config() -> Configuration:
    return Configuration(
        input_path="in.wav",
        integrated_loudness=-23.0,
        loudness_range=7.0,
        true_peak=-2.0,
    )


@pytest.fixture
def measurement() -> LoudnessMeasurement:
    return LoudnessMeasurement(
        input_i="-23.5",
        input_tp="-1.0",
        input_lra="5.0",
        input_thresh="-34.0",
        target_offset="0.5",
    )
