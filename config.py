"""설정 파일 로더 모듈 — settings.json을 읽어 FinishConfig로 변환한다.

설정 읽기 실패는 치명적이지 않다. 경고를 남기고 기본값으로 진행한다.
"""

import copy
import json
import logging
from pathlib import Path

from models import (
    DEFAULT_COMPOSITION,
    DEFAULT_CUSTOM_COLOR,
    BackgroundSpec,
    CompositionConfig,
    FinishConfig,
    ForensicMetadata,
    ShadowConfig,
    utc_timestamp,
)

logger = logging.getLogger(__name__)

# 기본 설정 경로
_SETTINGS_PATH = Path(__file__).parent / "settings.json"

# 기본값 — settings.json에 누락된 키가 있을 때 사용
_DEFAULTS = {
    "defaultBackgroundType": "image",
    "defaultCustomColor": DEFAULT_CUSTOM_COLOR,
    "defaultBackgroundImage": "",
    "forensicMetadataEnabled": False,
    "forensicTeam": "",
    "forensicUser": "",
    "composition": {
        "padding": DEFAULT_COMPOSITION.padding,
        "borderRadius": DEFAULT_COMPOSITION.border_radius,
        "shadow": {
            "blur": DEFAULT_COMPOSITION.shadow.blur_radius,
            "offsetX": DEFAULT_COMPOSITION.shadow.offset_x,
            "offsetY": DEFAULT_COMPOSITION.shadow.offset_y,
            "opacity": DEFAULT_COMPOSITION.shadow.opacity_percent,
        },
        "noiseAmount": DEFAULT_COMPOSITION.noise_amount,
        "blurAmount": DEFAULT_COMPOSITION.blur_amount,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """base 딕셔너리에 override 값을 병합한다 (깊은 병합)."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def default_settings() -> dict:
    return copy.deepcopy(_DEFAULTS)


def load_settings(path: Path | None = None) -> dict:
    """설정 파일을 읽어 딕셔너리로 반환한다.

    파일이 없으면 기본값을 사용한다. 읽을 수 없거나 JSON 객체가 아니면
    경고를 남기고 기본값을 사용한다.
    """
    settings_path = path or _SETTINGS_PATH
    if not settings_path.exists():
        return default_settings()
    try:
        with open(settings_path, encoding="utf-8") as f:
            user_settings = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("설정 로드 실패, 기본값 사용: %s (%s)", settings_path, e)
        return default_settings()
    if not isinstance(user_settings, dict):
        logger.warning("설정 형식 오류, 기본값 사용: %s", settings_path)
        return default_settings()
    return _deep_merge(default_settings(), user_settings)


def _background_spec(settings: dict) -> BackgroundSpec:
    kind = settings.get("defaultBackgroundType") or _DEFAULTS["defaultBackgroundType"]
    color = settings.get("defaultCustomColor") or DEFAULT_CUSTOM_COLOR
    reference = settings.get("defaultBackgroundImage") or None
    if reference is not None and not isinstance(reference, str):
        logger.warning("배경 이미지 참조 형식 오류, 기본 배경 사용: %r", reference)
        reference = None
    try:
        return BackgroundSpec.from_setting(str(kind), str(color), reference)
    except ValueError as e:
        logger.warning("배경 설정 오류, 기본값 사용: type=%r color=%r (%s)", kind, color, e)
    try:
        return BackgroundSpec.from_setting(str(kind), DEFAULT_CUSTOM_COLOR, reference)
    except ValueError:
        return BackgroundSpec.image(reference)


def _composition(settings: dict) -> CompositionConfig:
    comp = settings.get("composition")
    if not isinstance(comp, dict):
        return DEFAULT_COMPOSITION
    comp = _deep_merge(_DEFAULTS["composition"], comp)
    shadow = comp.get("shadow") or {}
    try:
        return CompositionConfig(
            padding=int(comp["padding"]),
            border_radius=float(comp["borderRadius"]),
            shadow=ShadowConfig(
                blur_radius=float(shadow.get("blur", 0)),
                offset_x=int(shadow.get("offsetX", 0)),
                offset_y=int(shadow.get("offsetY", 0)),
                opacity_percent=float(shadow.get("opacity", 0)),
            ),
            noise_amount=float(comp["noiseAmount"]),
            blur_amount=float(comp["blurAmount"]),
        )
    except (TypeError, ValueError, AttributeError, OverflowError) as e:
        logger.warning("합성 설정 오류, 기본값 사용: %s", e)
        return DEFAULT_COMPOSITION


def _forensic(settings: dict, timestamp_utc: str | None) -> ForensicMetadata | None:
    if settings.get("forensicMetadataEnabled") is not True:
        return None
    return ForensicMetadata(
        timestamp_utc=timestamp_utc or utc_timestamp(),
        team_label=str(settings.get("forensicTeam") or ""),
        user_label=str(settings.get("forensicUser") or ""),
    )


def build_finish_config(settings: dict, timestamp_utc: str | None = None) -> FinishConfig:
    """설정 딕셔너리를 파이프라인 입력(FinishConfig)으로 변환한다."""
    return FinishConfig(
        background=_background_spec(settings),
        composition=_composition(settings),
        forensic=_forensic(settings, timestamp_utc),
    )
