"""포렌식 푸터 모듈 — 캔버스 아래에 UTC 시각과 팀/사용자 라벨 띠를 붙인다."""

import logging

from models import ForensicMetadata
from renderer.canvas import Canvas
from renderer.text import draw_text

logger = logging.getLogger(__name__)

# 고정 레이아웃 (px)
FOOTER_PADDING_X = 24
FOOTER_PADDING_Y = 12
LINE_GAP = 4
FONT_SIZE = 14
LINE_HEIGHT = 18
FOOTER_HEIGHT = FOOTER_PADDING_Y * 2 + LINE_HEIGHT * 2 + LINE_GAP

FOOTER_BG = (0xF8, 0xFA, 0xFC, 255)       # #f8fafc
SEPARATOR_COLOR = (0xE2, 0xE8, 0xF0, 255)  # #e2e8f0
TEXT_COLOR = (0x0F, 0x17, 0x2A, 255)       # #0f172a


def footer_lines(meta: ForensicMetadata) -> list[str]:
    """푸터에 찍을 두 줄."""
    return [
        f"UTC: {meta.timestamp_utc}",
        f"User: {meta.label}",
    ]


def append_footer(canvas: Canvas, meta: ForensicMetadata) -> Canvas:
    """캔버스를 FOOTER_HEIGHT만큼 아래로 늘리고 푸터를 그린다. 너비는 그대로."""
    original_height = canvas.extend_bottom(FOOTER_HEIGHT)
    width = canvas.width

    canvas.fill(FOOTER_BG, (0, original_height, width, original_height + FOOTER_HEIGHT))
    # 경계 구분선 (1px)
    canvas.fill(SEPARATOR_COLOR, (0, original_height, width, original_height + 1))

    x = FOOTER_PADDING_X
    y = original_height + FOOTER_PADDING_Y
    for line in footer_lines(meta):
        draw_text(canvas.image, (x, y), line, font_size=FONT_SIZE, color=TEXT_COLOR)
        y += LINE_HEIGHT + LINE_GAP

    logger.debug("포렌식 푸터 추가: %dx%d → %dx%d",
                 width, original_height, width, canvas.height)
    return canvas
