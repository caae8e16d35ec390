"""마무리 파이프라인 — 원본 스크린샷 + 설정 → 인코딩된 PNG.

순서: 배경 → 전경(그림자·둥근 모서리) → 노이즈 → 포렌식 푸터 → PNG 인코딩.
재시도하지 않는다. 어느 단계든 실패하면 FinishError 하위 예외로 전파된다.
"""

import asyncio
import base64
import logging
from io import BytesIO
from pathlib import Path

import numpy as np
from PIL import Image

from decor.assets import AssetRegistry, is_data_url
from decor.background import BackgroundResolver, render_background
from decor.forensic import append_footer
from decor.noise import apply_noise
from errors import SourceDecodeError
from models import FinishConfig, OutputArtifact
from renderer.canvas import Canvas
from renderer.layers import ForegroundCompositor
from renderer.layout import surface_size

logger = logging.getLogger(__name__)

# 원본으로 받을 수 있는 형태: Pillow 이미지, PNG 등 인코딩 바이트, data URL, 파일 경로
SourceInput = Image.Image | bytes | str | Path


def decode_source(source: SourceInput) -> Image.Image:
    """원본 스크린샷을 RGBA 이미지로 디코딩한다. 입력 객체는 변경하지 않는다."""
    try:
        if isinstance(source, Image.Image):
            return source.convert("RGBA") if source.mode != "RGBA" else source.copy()
        if isinstance(source, bytes):
            fp = BytesIO(source)
        elif isinstance(source, str) and is_data_url(source):
            fp = BytesIO(base64.b64decode(source.partition(",")[2], validate=True))
        else:
            fp = Path(source)
        with Image.open(fp) as img:
            img.load()
            return img.convert("RGBA")
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise SourceDecodeError(f"원본 이미지 디코딩 실패: {_describe(source)}") from e


def _describe(source: SourceInput) -> str:
    if isinstance(source, bytes):
        return f"<{len(source)} 바이트>"
    text = str(source)
    return text if len(text) <= 64 else text[:61] + "..."


class ScreenshotFinisher:
    """스크린샷 마무리 파이프라인. 호출마다 자기 캔버스를 단독으로 쓴다."""

    def __init__(self, registry: AssetRegistry | None = None,
                 rng: np.random.Generator | None = None):
        self._resolver = BackgroundResolver(registry)
        self._compositor = ForegroundCompositor()
        self._rng = rng

    async def finish(self, source: SourceInput, config: FinishConfig) -> OutputArtifact:
        """원본을 마무리해 PNG 결과물을 반환한다.

        원본 디코딩과 배경 디코딩은 동시에 진행하며, 원본 디코딩이 실패하거나
        호출자가 취소하면 진행 중인 배경 디코딩도 취소한다.
        """
        composition = config.effective_composition()
        bg_task = asyncio.create_task(self._resolver.resolve(config.background))
        try:
            image = await asyncio.to_thread(decode_source, source)
            resolved = await bg_task
        except BaseException:
            if bg_task.done():
                if not bg_task.cancelled():
                    bg_task.exception()
            else:
                bg_task.cancel()
            raise

        logger.info("마무리 시작: 원본 %dx%d, 배경=%s, padding=%d",
                    image.width, image.height, config.background.kind.value, composition.padding)

        canvas = render_background(resolved, surface_size(image.size, composition.padding))
        self._compositor.compose(canvas, image, composition)

        if composition.noise_amount > 0:
            canvas = Canvas(image=apply_noise(canvas.image, composition.noise_amount, self._rng))

        if config.forensic is not None:
            canvas = append_footer(canvas, config.forensic)

        png_bytes = await asyncio.to_thread(canvas.encode_png)
        logger.info("마무리 완료: %dx%d, %d 바이트", canvas.width, canvas.height, len(png_bytes))
        return OutputArtifact(png=png_bytes, width=canvas.width, height=canvas.height)


async def finish(source: SourceInput, config: FinishConfig,
                 registry: AssetRegistry | None = None,
                 rng: np.random.Generator | None = None) -> OutputArtifact:
    """ScreenshotFinisher 한 번 실행 단축 함수."""
    return await ScreenshotFinisher(registry, rng).finish(source, config)
