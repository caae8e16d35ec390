"""배경 해석·렌더링 테스트."""

import asyncio
import base64
import logging

import pytest
from PIL import Image

from conftest import BLUE, png_bytes
from decor.assets import BUILTIN_SCHEME, DEFAULT_ASSET_ID, AssetRegistry
from decor.background import (
    BackgroundResolver,
    ResolvedBackground,
    decode_location,
    parse_color,
    render_background,
)
from errors import BackgroundLoadError
from models import BackgroundKind, BackgroundSpec


def resolve(registry, spec):
    return asyncio.run(BackgroundResolver(registry).resolve(spec))


def test_parse_color_accepts_with_or_without_hash():
    assert parse_color("#667eea") == (102, 126, 234)
    assert parse_color("667eea") == (102, 126, 234)
    with pytest.raises(ValueError):
        parse_color("#nothex")


def test_transparent_has_no_fill(registry):
    resolved = resolve(registry, BackgroundSpec.transparent())
    assert resolved.color is None and resolved.image is None


@pytest.mark.parametrize("kind, rgb", [
    (BackgroundKind.WHITE, (255, 255, 255)),
    (BackgroundKind.BLACK, (0, 0, 0)),
    (BackgroundKind.GRAY, (245, 245, 245)),
])
def test_solid_colors(registry, kind, rgb):
    assert resolve(registry, BackgroundSpec.solid(kind)).color == rgb


def test_custom_color(registry):
    assert resolve(registry, BackgroundSpec.custom("#667eea")).color == (102, 126, 234)


def test_image_asset_id_is_decoded(registry):
    resolved = resolve(registry, BackgroundSpec.image("blue"))
    assert resolved.image.size == (10, 10)
    assert resolved.image.getpixel((5, 5)) == BLUE


def test_data_url_reference_is_decoded(registry):
    data_url = "data:image/png;base64," + base64.b64encode(
        png_bytes(Image.new("RGB", (4, 3), (0, 255, 0)))).decode("ascii")
    resolved = resolve(registry, BackgroundSpec.gradient(data_url))
    assert resolved.image.size == (4, 3)
    assert resolved.image.getpixel((0, 0)) == (0, 255, 0, 255)


def test_stale_reference_falls_back_to_default(registry, caplog):
    with caplog.at_level(logging.WARNING):
        resolved = resolve(registry, BackgroundSpec.image("deleted-wallpaper"))
    assert resolved.image.size == (256, 256)
    assert not caplog.records


def test_missing_reference_uses_default(registry):
    resolved = resolve(registry, BackgroundSpec.gradient(None))
    assert resolved.kind is BackgroundKind.GRADIENT
    assert resolved.image.size == (256, 256)


def test_undecodable_asset_retries_default(registry, caplog):
    with caplog.at_level(logging.WARNING):
        resolved = resolve(registry, BackgroundSpec.image("broken"))
    assert resolved.image.size == (256, 256)
    assert any("기본 배경으로 재시도" in r.getMessage() for r in caplog.records)


def test_default_failure_raises_background_load_error(tmp_path):
    registry = AssetRegistry(tmp_path, assets={DEFAULT_ASSET_ID: str(tmp_path / "gone.png")})
    with pytest.raises(BackgroundLoadError):
        resolve(registry, BackgroundSpec.image("nowhere"))


def test_unknown_builtin_is_rejected():
    with pytest.raises(ValueError):
        decode_location(BUILTIN_SCHEME + "sunset")


def test_registry_inverse_lookup(registry, asset_dir):
    path = registry.get_asset_path("blue")
    assert path == str(asset_dir / "blue.png")
    assert registry.get_asset_id_from_path(path) == "blue"
    assert registry.resolve_background_path(path) == path
    assert registry.resolve_background_path("") is None


def test_render_flat_color_fills_surface():
    canvas = render_background(ResolvedBackground(BackgroundKind.CUSTOM, color=(102, 126, 234)), (30, 20))
    assert canvas.size == (30, 20)
    assert canvas.image.getpixel((0, 0)) == (102, 126, 234, 255)
    assert canvas.image.getpixel((29, 19)) == (102, 126, 234, 255)


def test_render_image_is_stretched_to_cover():
    bg = Image.new("RGBA", (10, 10), BLUE)
    canvas = render_background(ResolvedBackground(BackgroundKind.IMAGE, image=bg), (40, 15))
    assert canvas.size == (40, 15)
    for xy in [(0, 0), (39, 0), (0, 14), (39, 14), (20, 7)]:
        r, g, b, a = canvas.image.getpixel(xy)
        assert r <= 1 and g <= 1 and b >= 254 and a >= 254


def test_render_transparent_leaves_alpha_zero():
    canvas = render_background(ResolvedBackground(BackgroundKind.TRANSPARENT), (12, 8))
    assert canvas.image.getchannel("A").getextrema() == (0, 0)
