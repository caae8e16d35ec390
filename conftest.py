"""공용 pytest 픽스처 — 원본 이미지, 에셋 디렉토리, 디코딩 도우미."""

from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from decor.assets import AssetRegistry

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
WHITE = (255, 255, 255, 255)


def png_bytes(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def decode_png(data: bytes) -> Image.Image:
    with Image.open(BytesIO(data)) as img:
        img.load()
        return img.convert("RGBA")


@pytest.fixture
def make_source():
    def _make(width: int = 80, height: int = 60, color: tuple = RED) -> Image.Image:
        return Image.new("RGBA", (width, height), color)
    return _make


@pytest.fixture
def asset_dir(tmp_path: Path) -> Path:
    """파란 배경 하나와 깨진 파일 하나가 있는 에셋 디렉토리."""
    directory = tmp_path / "backgrounds"
    directory.mkdir()
    Image.new("RGB", (10, 10), BLUE[:3]).save(directory / "blue.png")
    (directory / "broken.png").write_bytes(b"not a png")
    return directory


@pytest.fixture
def registry(asset_dir: Path) -> AssetRegistry:
    return AssetRegistry(asset_dir)
