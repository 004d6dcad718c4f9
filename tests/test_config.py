"""Tests for configuration resolution and profile loading."""
from __future__ import annotations

import dataclasses

import pytest

from loudnorm_helper.core.config import (
    Configuration,
    Profile,
    apply_env_overrides,
    default_profile_name,
    parse_timeout,
    available_profiles,
    load_profile,
    resolve_config,
)
from loudnorm_helper.core.errors import ConfigError, InvalidArgument, MissingInput


class TestResolveConfig:
    def test_defaults_from_builtin_profile(self):
        cfg = resolve_config("in.wav")
        assert cfg == Configuration("in.wav", -23.0, 7.0, -2.0, down_mix=False, resample=False)

    def test_string_targets_parsed(self):
        cfg = resolve_config("in.wav", integrated_loudness="-16", loudness_range="11", true_peak="-1.5")
        assert cfg.integrated_loudness == -16.0
        assert cfg.loudness_range == 11.0
        assert cfg.true_peak == -1.5

    def test_flags(self):
        cfg = resolve_config("in.wav", down_mix=True, resample=True)
        assert cfg.down_mix is True
        assert cfg.resample is True

    def test_profile_defaults_apply(self):
        cfg = resolve_config("in.wav", profile=load_profile("atsc_a85"))
        assert cfg.integrated_loudness == -24.0

    def test_explicit_value_beats_profile(self):
        cfg = resolve_config("in.wav", integrated_loudness="-20", profile=load_profile("atsc_a85"))
        assert cfg.integrated_loudness == -20.0

    @pytest.mark.parametrize("path", [None, "", "   "])
    def test_missing_input(self, path):
        with pytest.raises(MissingInput):
            resolve_config(path)

    def test_input_path_not_checked_locally(self):
        assert resolve_config("/does/not/exist.wav").input_path == "/does/not/exist.wav"

    @pytest.mark.parametrize("field,value", [
        ("integrated_loudness", "loud"),
        ("loudness_range", ""),
        ("true_peak", "nan"),
        ("true_peak", "-inf"),
    ])
    def test_unparseable(self, field, value):
        with pytest.raises(InvalidArgument) as exc:
            resolve_config("in.wav", **{field: value})
        assert exc.value.field == field

    @pytest.mark.parametrize("field,value", [
        ("integrated_loudness", "-71"),
        ("integrated_loudness", "-4.9"),
        ("loudness_range", "0.5"),
        ("loudness_range", "21"),
        ("true_peak", "-9.1"),
        ("true_peak", "0.5"),
    ])
    def test_out_of_range_rejected(self, field, value):
        with pytest.raises(InvalidArgument, match="must be between") as exc:
            resolve_config("in.wav", **{field: value})
        assert exc.value.field == field

    @pytest.mark.parametrize("field,value", [
        ("integrated_loudness", "-70"),
        ("integrated_loudness", "-5"),
        ("loudness_range", "1"),
        ("loudness_range", "20"),
        ("true_peak", "-9"),
        ("true_peak", "0"),
    ])
    def test_bounds_inclusive(self, field, value):
        assert getattr(resolve_config("in.wav", **{field: value}), field) == float(value)

    def test_configuration_is_frozen(self):
        cfg = resolve_config("in.wav")
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.true_peak = 0.0


class TestLoadProfile:
    def test_shipped_profiles(self):
        assert {"ebu_r128", "atsc_a85", "streaming"} <= set(available_profiles())

    def test_default_is_ebu(self):
        p = load_profile()
        assert p.name == "ebu_r128"
        assert p.targets.integrated_loudness == -23.0
        assert p.ffmpeg.binary == "ffmpeg"
        assert p.ffmpeg.timeout_sec is None

    def test_streaming(self):
        t = load_profile("streaming").targets
        assert (t.integrated_loudness, t.loudness_range, t.true_peak) == (-16.0, 11.0, -1.5)

    def test_unknown_profile(self):
        with pytest.raises(ConfigError, match="Profile not found"):
            load_profile("nope")

    def test_yaml_path(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "targets:\n  integrated_loudness: -18\n  unknown_key: 1\nffmpeg:\n  timeout_sec: 30\n",
            encoding="utf-8",
        )
        p = load_profile(path)
        assert p.name == "custom"
        assert p.targets.integrated_loudness == -18.0
        assert p.targets.loudness_range == 7.0
        assert p.ffmpeg.timeout_sec == 30.0

    def test_out_of_range_profile_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("targets:\n  true_peak: 3\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="true_peak"):
            load_profile(path)

    def test_non_mapping_profile_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_profile(path)

    def test_profile_dataclass_defaults(self):
        assert Profile().targets.integrated_loudness == -23.0

    @pytest.mark.parametrize("value", ["0", "-5", "nan", "inf", "soon", True])
    def test_bad_timeout_rejected(self, tmp_path, value):
        path = tmp_path / "slow.yaml"
        path.write_text(f"ffmpeg:\n  timeout_sec: {str(value).lower()}\n", encoding="utf-8")
        with pytest.raises(InvalidArgument) as exc:
            load_profile(path)
        assert exc.value.field == "timeout_sec"

    @pytest.mark.parametrize("value", ['"false"', "0", "yes please"])
    def test_non_bool_spinner_rejected(self, tmp_path, value):
        path = tmp_path / "spin.yaml"
        path.write_text(f"ffmpeg:\n  spinner: {value}\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="spinner"):
            load_profile(path)

    def test_bool_spinner(self, tmp_path):
        path = tmp_path / "quiet.yaml"
        path.write_text("ffmpeg:\n  spinner: false\n", encoding="utf-8")
        assert load_profile(path).ffmpeg.spinner is False


class TestParseTimeout:
    def test_none_means_no_timeout(self):
        assert parse_timeout(None) is None

    @pytest.mark.parametrize("value,expected", [("30", 30.0), (0.5, 0.5), (12, 12.0)])
    def test_positive(self, value, expected):
        assert parse_timeout(value) == expected

    @pytest.mark.parametrize("value", ["0", 0, "-5", -0.1, "nan", "inf", "-inf", "", "soon", False])
    def test_rejected(self, value):
        with pytest.raises(InvalidArgument, match="must be a positive number") as exc:
            parse_timeout(value)
        assert exc.value.field == "timeout_sec"


class TestEnvOverrides:
    def test_ffmpeg_from_env(self, monkeypatch):
        monkeypatch.setenv("LOUDNORM_FFMPEG", "/opt/ffmpeg/bin/ffmpeg")
        assert apply_env_overrides(load_profile()).ffmpeg.binary == "/opt/ffmpeg/bin/ffmpeg"

    def test_no_env_keeps_profile(self, monkeypatch):
        monkeypatch.delenv("LOUDNORM_FFMPEG", raising=False)
        assert apply_env_overrides(load_profile()).ffmpeg.binary == "ffmpeg"

    def test_default_profile_name(self, monkeypatch):
        monkeypatch.delenv("LOUDNORM_PROFILE", raising=False)
        assert default_profile_name() == "ebu_r128"
        monkeypatch.setenv("LOUDNORM_PROFILE", "atsc_a85")
        assert default_profile_name() == "atsc_a85"
