"""노이즈 오버레이 모듈 — 완성된 합성 이미지 전체에 미세한 그레인을 더한다."""

import logging

import numpy as np
from PIL import Image

logger = logging.getLogger(__name__)

# noise_amount 100일 때의 최대 밝기 변화량 (±)
MAX_NOISE_DELTA = 32


def noise_magnitude(amount: float) -> float:
    """noise_amount(0~100)를 픽셀당 최대 변화량으로 변환한다."""
    return max(0.0, min(100.0, amount)) / 100 * MAX_NOISE_DELTA


def apply_noise(image: Image.Image, amount: float,
                rng: np.random.Generator | None = None) -> Image.Image:
    """RGBA 이미지에 픽셀별 독립 밝기 노이즈를 더한 새 이미지를 반환한다.

    각 픽셀의 R, G, B에 같은 값을 더하고 알파는 건드리지 않는다.
    amount가 0이면 image를 그대로 반환한다.
    """
    magnitude = noise_magnitude(amount)
    if magnitude <= 0:
        return image

    if rng is None:
        rng = np.random.default_rng()
    pixels = np.asarray(image.convert("RGBA"), dtype=np.int16).copy()
    h, w = pixels.shape[:2]
    delta = np.rint(rng.uniform(-magnitude, magnitude, size=(h, w, 1))).astype(np.int16)
    pixels[..., :3] = np.clip(pixels[..., :3] + delta, 0, 255)
    logger.debug("노이즈 적용: amount=%s, ±%.1f", amount, magnitude)
    return Image.fromarray(pixels.astype(np.uint8))
