"""마무리 파이프라인 데이터 모델 — 배경 지정, 합성 파라미터, 포렌식 메타데이터, 결과물."""

import base64
import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

from PIL import ImageColor


class BackgroundKind(Enum):
    """배경 종류 (닫힌 집합)."""

    TRANSPARENT = "transparent"
    WHITE = "white"
    BLACK = "black"
    GRAY = "gray"
    CUSTOM = "custom"
    IMAGE = "image"
    GRADIENT = "gradient"


# 단색 배경 팔레트
SOLID_COLORS = {
    BackgroundKind.WHITE: "#ffffff",
    BackgroundKind.BLACK: "#000000",
    BackgroundKind.GRAY: "#f5f5f5",
}

DEFAULT_CUSTOM_COLOR = "#667eea"


def normalize_color(value: str) -> str:
    """색상 문자열을 '#rrggbb' 형태로 정리한다. 잘못된 값은 ValueError."""
    text = value.strip().lower()
    if not text.startswith("#"):
        text = "#" + text
    ImageColor.getrgb(text)
    return text


def _require_finite(name: str, value: float) -> None:
    if not math.isfinite(value):
        raise ValueError(f"{name}는 유한한 값이어야 합니다: {value!r}")


@dataclass(frozen=True)
class BackgroundSpec:
    """배경 지정값. kind에 따라 color 또는 reference 중 하나만 의미를 가진다."""

    kind: BackgroundKind
    color: str | None = None
    reference: str | None = None

    def __post_init__(self):
        if self.kind is BackgroundKind.CUSTOM:
            if not self.color:
                raise ValueError("custom 배경에는 color가 필요합니다")
            object.__setattr__(self, "color", normalize_color(self.color))
        elif self.color is not None:
            raise ValueError(f"{self.kind.value} 배경은 color를 받지 않습니다")
        if self.reference is not None and not self.is_bitmap:
            raise ValueError(f"{self.kind.value} 배경은 reference를 받지 않습니다")

    @property
    def is_bitmap(self) -> bool:
        return self.kind in (BackgroundKind.IMAGE, BackgroundKind.GRADIENT)

    @classmethod
    def transparent(cls) -> "BackgroundSpec":
        return cls(BackgroundKind.TRANSPARENT)

    @classmethod
    def solid(cls, kind: BackgroundKind) -> "BackgroundSpec":
        if kind not in SOLID_COLORS:
            raise ValueError(f"단색 배경이 아닙니다: {kind.value}")
        return cls(kind)

    @classmethod
    def custom(cls, color: str) -> "BackgroundSpec":
        return cls(BackgroundKind.CUSTOM, color=color)

    @classmethod
    def image(cls, reference: str | None) -> "BackgroundSpec":
        return cls(BackgroundKind.IMAGE, reference=reference or None)

    @classmethod
    def gradient(cls, reference: str | None) -> "BackgroundSpec":
        return cls(BackgroundKind.GRADIENT, reference=reference or None)

    @classmethod
    def from_setting(cls, kind: str, color: str | None = None,
                     reference: str | None = None) -> "BackgroundSpec":
        """설정 문자열에서 배경 지정값을 만든다. 알 수 없는 종류는 ValueError."""
        bg_kind = BackgroundKind(kind)
        if bg_kind is BackgroundKind.TRANSPARENT:
            return cls.transparent()
        if bg_kind in SOLID_COLORS:
            return cls.solid(bg_kind)
        if bg_kind is BackgroundKind.CUSTOM:
            return cls.custom(color or DEFAULT_CUSTOM_COLOR)
        if bg_kind is BackgroundKind.IMAGE:
            return cls.image(reference)
        return cls.gradient(reference)


@dataclass(frozen=True)
class ShadowConfig:
    """그림자 파라미터 (px, 불투명도는 0~100%)."""

    blur_radius: float = 0
    offset_x: int = 0
    offset_y: int = 0
    opacity_percent: float = 0

    def __post_init__(self):
        _require_finite("blur_radius", self.blur_radius)
        _require_finite("opacity_percent", self.opacity_percent)
        if self.blur_radius < 0:
            raise ValueError("blur_radius는 0 이상이어야 합니다")
        object.__setattr__(self, "opacity_percent", max(0.0, min(100.0, float(self.opacity_percent))))

    @property
    def alpha(self) -> int:
        return round(self.opacity_percent / 100 * 255)

    @property
    def visible(self) -> bool:
        return self.alpha > 0


@dataclass(frozen=True)
class CompositionConfig:
    """합성 파라미터."""

    padding: int = 0
    border_radius: float = 0
    shadow: ShadowConfig | None = None
    noise_amount: float = 0
    blur_amount: float = 0

    def __post_init__(self):
        for name in ("border_radius", "noise_amount", "blur_amount"):
            _require_finite(name, getattr(self, name))
        if self.padding < 0:
            raise ValueError("padding은 0 이상이어야 합니다")
        if self.border_radius < 0:
            raise ValueError("border_radius는 0 이상이어야 합니다")
        if self.blur_amount < 0:
            raise ValueError("blur_amount는 0 이상이어야 합니다")
        object.__setattr__(self, "noise_amount", max(0.0, min(100.0, float(self.noise_amount))))


# 자동 마무리 기본값
DEFAULT_COMPOSITION = CompositionConfig(
    padding=100,
    border_radius=18,
    shadow=ShadowConfig(blur_radius=33, offset_x=18, offset_y=23, opacity_percent=39),
    noise_amount=20,
    blur_amount=0,
)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC 문자열 (밀리초, Z 접미사)."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass(frozen=True)
class ForensicMetadata:
    """포렌식 푸터에 찍을 값."""

    timestamp_utc: str
    team_label: str = ""
    user_label: str = ""

    @property
    def label(self) -> str:
        team = self.team_label.strip() or "unknown"
        user = self.user_label.strip() or "unknown"
        return f"{team}/{user}"


@dataclass(frozen=True)
class FinishConfig:
    """한 번의 마무리 호출에 쓰이는 확정 설정."""

    background: BackgroundSpec = field(default_factory=BackgroundSpec.transparent)
    composition: CompositionConfig = field(default_factory=CompositionConfig)
    forensic: ForensicMetadata | None = None

    def effective_composition(self) -> CompositionConfig:
        """투명 배경이면 padding과 그림자를 제거한 합성 파라미터를 반환한다."""
        if self.background.kind is BackgroundKind.TRANSPARENT:
            return replace(self.composition, padding=0, shadow=None)
        return self.composition


@dataclass(frozen=True)
class OutputArtifact:
    """인코딩된 PNG 결과물."""

    png: bytes
    width: int
    height: int

    def to_data_url(self) -> str:
        return "data:image/png;base64," + base64.b64encode(self.png).decode("ascii")

    def save(self, path: str | Path) -> Path:
        path = Path(path)
        path.write_bytes(self.png)
        return path
