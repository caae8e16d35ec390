"""가변 크기 Pillow RGBA 캔버스 — 마무리 파이프라인의 작업 표면."""

import logging
from io import BytesIO

from PIL import Image, ImageChops, ImageFilter

from errors import EncodeError, SurfaceAllocationError

from .layout import Rect

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def _new_image(size: tuple[int, int], color: tuple) -> Image.Image:
    w, h = size
    if w <= 0 or h <= 0:
        raise SurfaceAllocationError(f"잘못된 캔버스 크기: {w}x{h}")
    try:
        return Image.new("RGBA", (w, h), color)
    except (ValueError, MemoryError) as e:
        raise SurfaceAllocationError(f"캔버스 생성 실패: {w}x{h}") from e


class Canvas:
    """RGBA 캔버스. 한 번의 마무리 호출이 단독으로 소유한다."""

    def __init__(self, width: int = 0, height: int = 0, color: tuple = TRANSPARENT,
                 image: Image.Image | None = None):
        """image를 주면 그 이미지를 감싸고, 아니면 width x height 캔버스를 새로 만든다."""
        if image is not None:
            self._image = image if image.mode == "RGBA" else image.convert("RGBA")
        else:
            self._image = _new_image((width, height), color)

    @property
    def image(self) -> Image.Image:
        return self._image

    @property
    def size(self) -> tuple[int, int]:
        return self._image.size

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    def fill(self, color: tuple, box: tuple[int, int, int, int] | None = None) -> None:
        """캔버스 전체(또는 box 영역)를 지정 색상으로 채운다."""
        if len(color) == 3:
            color = (*color, 255)
        self._image.paste(color, box or (0, 0, self.width, self.height))

    def paste(self, layer: Image.Image, position: tuple[int, int] = (0, 0)) -> None:
        """레이어를 캔버스 위에 합성한다 (알파 블렌딩)."""
        if layer.mode != "RGBA":
            layer = layer.convert("RGBA")
        self._image.alpha_composite(layer, dest=position)

    def draw_blurred_shape(
        self,
        mask: Image.Image,
        position: tuple[int, int],
        color: tuple,
        blur_radius: float,
    ) -> None:
        """mask 모양을 color로 채우고 가우시안 블러를 적용해 합성한다 (그림자용)."""
        layer = Image.new("RGBA", self.size, TRANSPARENT)
        shape = Image.new("RGBA", mask.size, color)
        layer.paste(shape, position, mask)
        if blur_radius > 0:
            layer = layer.filter(ImageFilter.GaussianBlur(radius=blur_radius))
        self._image = Image.alpha_composite(self._image, layer)

    def draw_clipped_bitmap(self, bitmap: Image.Image, rect: Rect, clip: Image.Image) -> None:
        """bitmap을 rect에 그리되 clip 마스크 바깥 픽셀은 쓰지 않는다."""
        if bitmap.mode != "RGBA":
            bitmap = bitmap.convert("RGBA")
        if bitmap.size != rect.size:
            bitmap = bitmap.resize(rect.size, Image.Resampling.LANCZOS)
        else:
            bitmap = bitmap.copy()
        alpha = bitmap.getchannel("A")
        if clip.size != rect.size:
            clip = clip.resize(rect.size, Image.Resampling.LANCZOS)
        bitmap.putalpha(ImageChops.multiply(alpha, clip))
        self._image.alpha_composite(bitmap, dest=(rect.x, rect.y))

    def extend_bottom(self, extra: int, color: tuple = TRANSPARENT) -> int:
        """캔버스를 아래로 extra px 늘리고 기존 높이를 반환한다."""
        original_height = self.height
        grown = _new_image((self.width, original_height + extra), color)
        grown.paste(self._image, (0, 0))
        self._image = grown
        return original_height

    def encode_png(self) -> bytes:
        """무손실 PNG 바이트로 인코딩한다."""
        buf = BytesIO()
        try:
            self._image.save(buf, format="PNG")
        except (OSError, ValueError) as e:
            raise EncodeError("PNG 인코딩 실패") from e
        png_bytes = buf.getvalue()
        logger.debug("PNG 인코딩: %dx%d, %d 바이트", self.width, self.height, len(png_bytes))
        return png_bytes
