"""배치 계산 모듈 — 캔버스 크기, 배치 사각형, 둥근 모서리 마스크."""

import math
from dataclasses import dataclass

from PIL import Image, ImageDraw

from errors import SurfaceAllocationError

# 둥근 모서리 안티앨리어싱용 슈퍼샘플링 배율
SUPERSAMPLE = 4


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height


def surface_size(source_size: tuple[int, int], padding: int) -> tuple[int, int]:
    """원본 크기 + 사방 padding."""
    w, h = source_size
    return w + 2 * padding, h + 2 * padding


def placement_rect(source_size: tuple[int, int], padding: int) -> Rect:
    """패딩된 캔버스 안에서 원본이 놓일 사각형 (사방 균일 padding → 중앙)."""
    w, h = source_size
    return Rect(padding, padding, w, h)


def clamp_radius(radius: float, size: tuple[int, int]) -> float:
    """모서리 반경을 짧은 변의 절반 이하로 제한한다."""
    return max(0.0, min(float(radius), min(size) / 2))


def _new_mask(size: tuple[int, int], fill: int) -> Image.Image:
    try:
        return Image.new("L", size, fill)
    except (ValueError, MemoryError) as e:
        raise SurfaceAllocationError(f"마스크 생성 실패: {size[0]}x{size[1]}") from e


def _corner_patch(radius: float) -> Image.Image:
    """왼쪽 위 모서리 한 칸(ceil(radius) 정사각형)만 슈퍼샘플링해서 그린다."""
    side = math.ceil(radius)
    big_side = side * SUPERSAMPLE
    big_radius = round(radius * SUPERSAMPLE)
    big = _new_mask((big_side, big_side), 0)
    draw = ImageDraw.Draw(big)
    if big_radius > 0:
        draw.ellipse([(0, 0), (2 * big_radius - 1, 2 * big_radius - 1)], fill=255)
    if big_radius < big_side:
        # 원호 바깥쪽은 사각형 내부
        draw.rectangle([(big_radius, 0), (big_side - 1, big_side - 1)], fill=255)
        draw.rectangle([(0, big_radius), (big_side - 1, big_side - 1)], fill=255)
    return big.reduce(SUPERSAMPLE)


def rounded_mask(size: tuple[int, int], radius: float) -> Image.Image:
    """둥근 사각형 L 마스크를 만든다.

    원본 크기의 마스크는 불투명으로 채우고, 네 모서리만 슈퍼샘플링한
    조각으로 덮어쓴다. 반경이 짧은 변의 절반이면 스타디움(정사각형이면 원),
    반경 0이면 날카로운 사각형이 된다.
    """
    w, h = size
    radius = clamp_radius(radius, size)
    mask = _new_mask((w, h), 255)
    if radius <= 0:
        return mask

    corner = _corner_patch(radius)
    side = corner.width
    mask.paste(corner, (0, 0))
    mask.paste(corner.transpose(Image.Transpose.FLIP_LEFT_RIGHT), (w - side, 0))
    mask.paste(corner.transpose(Image.Transpose.FLIP_TOP_BOTTOM), (0, h - side))
    mask.paste(corner.transpose(Image.Transpose.ROTATE_180), (w - side, h - side))
    return mask
