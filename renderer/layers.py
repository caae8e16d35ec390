"""전경 합성 모듈 — 배경 위에 그림자 + 둥근 모서리 스크린샷을 올린다."""

import logging

from PIL import Image, ImageFilter

from models import CompositionConfig

from .canvas import Canvas
from .layout import Rect, placement_rect, rounded_mask

logger = logging.getLogger(__name__)


class ForegroundCompositor:
    """원본 비트맵을 패딩된 캔버스 중앙에 그림자와 함께 배치한다."""

    def compose(self, canvas: Canvas, source: Image.Image, composition: CompositionConfig) -> Rect:
        """canvas 위에 source를 합성하고 배치 사각형을 반환한다.

        순서: (선택) 원본 블러 → 그림자 → 둥근 모서리 클립 → 원본 그리기.
        source는 변경하지 않는다.
        """
        bitmap = source
        if composition.blur_amount > 0:
            bitmap = source.filter(ImageFilter.GaussianBlur(radius=composition.blur_amount))

        rect = placement_rect(source.size, composition.padding)
        clip = rounded_mask(rect.size, composition.border_radius)

        shadow = composition.shadow
        if shadow is not None and shadow.visible:
            # canvas shadowBlur는 표준편차의 2배
            canvas.draw_blurred_shape(
                clip,
                (rect.x + shadow.offset_x, rect.y + shadow.offset_y),
                (0, 0, 0, shadow.alpha),
                shadow.blur_radius / 2,
            )
            logger.debug("그림자: blur=%s offset=(%d, %d) alpha=%d",
                         shadow.blur_radius, shadow.offset_x, shadow.offset_y, shadow.alpha)

        canvas.draw_clipped_bitmap(bitmap, rect, clip)
        return rect
