"""배경 모듈 — 배경 지정값을 실제 채우기 색/비트맵으로 해석하고 캔버스에 그린다."""

import asyncio
import base64
import binascii
import logging
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageColor, ImageDraw

from errors import BackgroundLoadError
from models import SOLID_COLORS, BackgroundKind, BackgroundSpec, normalize_color
from renderer.canvas import Canvas

from .assets import BUILTIN_SCHEME, DEFAULT_ASSET_ID, AssetRegistry, is_data_url

logger = logging.getLogger(__name__)

# 내장 기본 그라데이션 (좌상단 → 우하단)
_GRADIENT_SIZE = 256
_GRADIENT_START = (0x66, 0x7E, 0xEA)
_GRADIENT_END = (0x76, 0x4B, 0xA2)

_DECODE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


@dataclass
class ResolvedBackground:
    """해석된 배경: 투명, 단색(color), 비트맵(image) 중 하나."""

    kind: BackgroundKind
    color: tuple[int, int, int] | None = None
    image: Image.Image | None = None


def parse_color(value: str) -> tuple[int, int, int]:
    """'#667eea' 형태의 색상을 RGB 튜플로 변환한다. 잘못된 값은 ValueError."""
    return ImageColor.getrgb(normalize_color(value))[:3]


def default_gradient() -> Image.Image:
    """기본 보라색 대각선 그라데이션 배경."""
    img = Image.new("RGB", (_GRADIENT_SIZE, _GRADIENT_SIZE))
    draw = ImageDraw.Draw(img)
    span = 2 * (_GRADIENT_SIZE - 1)
    for d in range(span + 1):
        t = d / span
        c = tuple(int(a + (b - a) * t) for a, b in zip(_GRADIENT_START, _GRADIENT_END))
        # 대각선 d 위의 픽셀 (x + y == d)
        x0 = max(0, d - (_GRADIENT_SIZE - 1))
        x1 = min(d, _GRADIENT_SIZE - 1)
        draw.line([(x0, d - x0), (x1, d - x1)], fill=c)
    return img


_BUILTINS = {
    BUILTIN_SCHEME + DEFAULT_ASSET_ID: default_gradient,
}


def decode_location(location: str) -> Image.Image:
    """위치(파일 경로, data URL, 내장 배경)를 디코딩해 RGBA 이미지로 반환한다.

    디코딩 실패는 OSError/ValueError로 전파된다.
    """
    if location.startswith(BUILTIN_SCHEME):
        factory = _BUILTINS.get(location)
        if factory is None:
            raise ValueError(f"알 수 없는 내장 배경: {location}")
        return factory().convert("RGBA")

    if is_data_url(location):
        _, sep, payload = location.partition(",")
        if not sep:
            raise ValueError("잘못된 data URL")
        try:
            source = BytesIO(base64.b64decode(payload, validate=True))
        except binascii.Error as e:
            raise ValueError("data URL base64 디코딩 실패") from e
    else:
        source = location

    with Image.open(source) as img:
        img.load()
        return img.convert("RGBA")


class BackgroundResolver:
    """배경 지정값을 ResolvedBackground로 변환한다."""

    def __init__(self, registry: AssetRegistry | None = None):
        self._registry = registry or AssetRegistry()

    async def resolve(self, spec: BackgroundSpec) -> ResolvedBackground:
        if spec.kind is BackgroundKind.TRANSPARENT:
            return ResolvedBackground(spec.kind)
        if spec.kind in SOLID_COLORS:
            return ResolvedBackground(spec.kind, color=parse_color(SOLID_COLORS[spec.kind]))
        if spec.kind is BackgroundKind.CUSTOM:
            return ResolvedBackground(spec.kind, color=parse_color(spec.color))
        if spec.is_bitmap:
            image = await self._load_bitmap(spec.reference)
            return ResolvedBackground(spec.kind, image=image)
        raise TypeError(f"처리되지 않은 배경 종류: {spec.kind}")

    async def _load_bitmap(self, reference: str | None) -> Image.Image:
        default = self._registry.get_default_background_path()
        location = self._registry.resolve_background_path(reference)
        if location is None:
            # 오래된 참조는 조용히 기본 배경으로 대체
            logger.debug("배경 참조 해석 불가, 기본 배경 사용: %r", reference)
            location = default

        try:
            return await asyncio.to_thread(decode_location, location)
        except _DECODE_ERRORS as e:
            if location == default:
                raise BackgroundLoadError(f"기본 배경 디코딩 실패: {_short(location)}") from e
            logger.warning("배경 디코딩 실패, 기본 배경으로 재시도: %s (%s)", _short(location), e)

        try:
            return await asyncio.to_thread(decode_location, default)
        except _DECODE_ERRORS as e:
            raise BackgroundLoadError(f"기본 배경 디코딩 실패: {_short(default)}") from e


def _short(location: str) -> str:
    return location if len(location) <= 64 else location[:61] + "..."


def render_background(resolved: ResolvedBackground, size: tuple[int, int]) -> Canvas:
    """해석된 배경으로 size 크기의 캔버스를 만든다.

    비트맵 배경은 비율 유지 없이 캔버스 전체에 늘려 그린다.
    투명 배경은 아무것도 칠하지 않는다 (알파 0).
    """
    w, h = size
    if resolved.color is not None:
        return Canvas(w, h, (*resolved.color, 255))
    canvas = Canvas(w, h)
    if resolved.image is not None:
        bg = resolved.image
        if bg.size != size:
            bg = bg.resize(size, Image.Resampling.LANCZOS)
        canvas.paste(bg)
    return canvas
