"""설정 로드·변환 테스트."""

import json
import logging

import pytest

from config import build_finish_config, default_settings, load_settings
from models import (
    DEFAULT_COMPOSITION,
    BackgroundKind,
    BackgroundSpec,
    CompositionConfig,
    FinishConfig,
    ShadowConfig,
)


def write(tmp_path, payload) -> object:
    path = tmp_path / "settings.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_missing_file_uses_defaults(tmp_path):
    settings = load_settings(tmp_path / "absent.json")
    assert settings == default_settings()
    assert settings["defaultBackgroundType"] == "image"
    assert settings["defaultCustomColor"] == "#667eea"
    assert settings["forensicMetadataEnabled"] is False


@pytest.mark.parametrize("payload", ["{not json", "[1, 2, 3]"])
def test_corrupt_file_falls_back_with_warning(tmp_path, caplog, payload):
    with caplog.at_level(logging.WARNING, logger="config"):
        settings = load_settings(write(tmp_path, payload))
    assert settings == default_settings()
    assert caplog.records


def test_partial_file_is_merged(tmp_path):
    settings = load_settings(write(tmp_path, {
        "defaultBackgroundType": "custom",
        "composition": {"padding": 40, "shadow": {"opacity": 10}},
    }))
    assert settings["defaultBackgroundType"] == "custom"
    assert settings["defaultCustomColor"] == "#667eea"
    assert settings["composition"]["padding"] == 40
    assert settings["composition"]["shadow"]["opacity"] == 10
    assert settings["composition"]["shadow"]["blur"] == 33


def test_defaults_build_image_background_config():
    config = build_finish_config(default_settings())
    assert config.background == BackgroundSpec.image(None)
    assert config.composition == DEFAULT_COMPOSITION
    assert config.forensic is None


def test_custom_background_and_reference():
    settings = default_settings()
    settings.update(defaultBackgroundType="custom", defaultCustomColor="#123456")
    assert build_finish_config(settings).background == BackgroundSpec.custom("#123456")

    settings.update(defaultBackgroundType="gradient", defaultBackgroundImage="sunset")
    assert build_finish_config(settings).background == BackgroundSpec.gradient("sunset")


def test_unknown_background_type_falls_back_to_image(caplog):
    settings = default_settings()
    settings["defaultBackgroundType"] = "sparkly"
    with caplog.at_level(logging.WARNING, logger="config"):
        config = build_finish_config(settings)
    assert config.background.kind is BackgroundKind.IMAGE
    assert caplog.records


def test_invalid_custom_color_falls_back_to_default_color():
    settings = default_settings()
    settings.update(defaultBackgroundType="custom", defaultCustomColor="#zzzzzz")
    assert build_finish_config(settings).background == BackgroundSpec.custom("#667eea")


def test_invalid_composition_falls_back():
    settings = default_settings()
    settings["composition"]["padding"] = "wide"
    assert build_finish_config(settings).composition == DEFAULT_COMPOSITION


def test_forensic_enabled_builds_metadata():
    settings = default_settings()
    settings.update(forensicMetadataEnabled=True, forensicTeam="security", forensicUser="")
    config = build_finish_config(settings, timestamp_utc="2024-01-01T00:00:00Z")
    assert config.forensic.timestamp_utc == "2024-01-01T00:00:00Z"
    assert config.forensic.label == "security/unknown"


def test_forensic_timestamp_defaults_to_now():
    settings = default_settings()
    settings["forensicMetadataEnabled"] = True
    stamp = build_finish_config(settings).forensic.timestamp_utc
    assert stamp.endswith("Z") and "T" in stamp


def test_transparent_forces_padding_and_shadow_off():
    config = FinishConfig(BackgroundSpec.transparent(), DEFAULT_COMPOSITION)
    effective = config.effective_composition()
    assert effective.padding == 0
    assert effective.shadow is None
    assert effective.border_radius == DEFAULT_COMPOSITION.border_radius


def test_model_validation():
    with pytest.raises(ValueError):
        CompositionConfig(padding=-1)
    with pytest.raises(ValueError):
        BackgroundSpec.custom("#zzzzzz")
    with pytest.raises(ValueError):
        BackgroundSpec.from_setting("sparkly")
    assert ShadowConfig(opacity_percent=150).opacity_percent == 100


def test_non_string_image_reference_uses_default_background(caplog):
    settings = default_settings()
    settings.update(defaultBackgroundType="image", defaultBackgroundImage=123)
    with caplog.at_level(logging.WARNING, logger="config"):
        config = build_finish_config(settings)
    assert config.background == BackgroundSpec.image(None)
    assert caplog.records


def test_non_finite_composition_falls_back(tmp_path, caplog):
    path = write(tmp_path, '{"composition": {"padding": Infinity}}')
    with caplog.at_level(logging.WARNING, logger="config"):
        config = build_finish_config(load_settings(path))
    assert config.composition == DEFAULT_COMPOSITION
    assert caplog.records

    path = write(tmp_path, '{"composition": {"shadow": {"blur": Infinity}, "noiseAmount": NaN}}')
    assert build_finish_config(load_settings(path)).composition == DEFAULT_COMPOSITION


@pytest.mark.parametrize("kwargs", [
    {"border_radius": float("inf")},
    {"noise_amount": float("nan")},
    {"blur_amount": float("inf")},
])
def test_composition_rejects_non_finite(kwargs):
    with pytest.raises(ValueError):
        CompositionConfig(**kwargs)


def test_shadow_rejects_non_finite():
    with pytest.raises(ValueError):
        ShadowConfig(blur_radius=float("inf"))
    with pytest.raises(ValueError):
        ShadowConfig(opacity_percent=float("nan"))


def test_custom_color_is_normalized():
    assert BackgroundSpec.custom(" #667EEA ").color == "#667eea"
    assert BackgroundSpec.custom("667eea") == BackgroundSpec.custom("#667eea")

    settings = default_settings()
    settings.update(defaultBackgroundType="custom", defaultCustomColor=" #123456")
    assert build_finish_config(settings).background == BackgroundSpec.custom("#123456")
