"""텍스트 렌더링 모듈 — 포렌식 푸터용 고정폭 폰트.

시스템 고정폭 폰트를 찾고, 없으면 Pillow 기본 폰트를 쓴다.
"""

import logging
import os
import sys as _sys

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)


def _find_monospace() -> str:
    """OS에 맞는 고정폭 폰트 경로를 반환한다."""
    if _sys.platform == "win32":
        candidates = [
            "C:/Windows/Fonts/consola.ttf",
            "C:/Windows/Fonts/cour.ttf",
        ]
    elif _sys.platform == "darwin":
        candidates = [
            "/System/Library/Fonts/SFNSMono.ttf",
            "/System/Library/Fonts/Menlo.ttc",
            "/System/Library/Fonts/Monaco.ttf",
        ]
    else:
        candidates = [
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
            "/usr/share/fonts/liberation-mono/LiberationMono-Regular.ttf",
            "/usr/share/fonts/TTF/DejaVuSansMono.ttf",
        ]
    for path in candidates:
        if os.path.exists(path):
            return path
    return ""

_MONOSPACE_FONT = _find_monospace()

# 폰트 캐시
_font_cache: dict[tuple[str, int], ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}


def get_font(size: int, path: str | None = None) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
    """고정폭 폰트를 로드한다 (캐싱)."""
    path = _MONOSPACE_FONT if path is None else path
    key = (path, size)
    if key not in _font_cache:
        if path and os.path.exists(path):
            _font_cache[key] = ImageFont.truetype(path, size)
        else:
            logger.debug("고정폭 폰트 없음, 기본 폰트 사용 (size=%d)", size)
            _font_cache[key] = ImageFont.load_default(size)
    return _font_cache[key]


def draw_text(
    image: Image.Image,
    position: tuple[int, int],
    text: str,
    font_size: int = 14,
    color: tuple = (15, 23, 42, 255),
) -> None:
    """image 위에 텍스트를 위쪽 기준으로 그린다 (안티앨리어싱)."""
    font = get_font(font_size)
    draw = ImageDraw.Draw(image)
    draw.text(position, text, font=font, fill=color)

