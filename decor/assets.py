"""배경 에셋 레지스트리 — 에셋 ID ↔ 로드 가능한 위치 매핑."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

BUILTIN_SCHEME = "builtin:"
DEFAULT_ASSET_ID = "default-gradient"

_IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".webp", ".bmp")
_DEFAULT_ASSET_DIR = Path(__file__).parent.parent / "assets" / "backgrounds"


def is_data_url(ref: str) -> bool:
    return ref.startswith("data:")


class AssetRegistry:
    """배경 에셋 ID를 파일 경로 / 내장 위치로 변환한다."""

    def __init__(self, asset_dir: str | Path | None = None, assets: dict[str, str] | None = None):
        self._asset_dir = Path(asset_dir) if asset_dir is not None else _DEFAULT_ASSET_DIR
        self._assets: dict[str, str] = {DEFAULT_ASSET_ID: BUILTIN_SCHEME + DEFAULT_ASSET_ID}
        self._scan()
        if assets:
            self._assets.update(assets)

    def _scan(self) -> None:
        """에셋 디렉토리의 이미지를 파일명(확장자 제외)을 ID로 등록한다."""
        if not self._asset_dir.is_dir():
            logger.debug("에셋 디렉토리 없음: %s", self._asset_dir)
            return
        for path in sorted(self._asset_dir.iterdir()):
            if path.suffix.lower() in _IMAGE_SUFFIXES:
                self._assets[path.stem] = str(path)
        logger.debug("에셋 %d개 등록", len(self._assets))

    def get_default_background_path(self) -> str:
        return self._assets[DEFAULT_ASSET_ID]

    def get_asset_path(self, asset_id: str) -> str | None:
        return self._assets.get(asset_id)

    def get_asset_id_from_path(self, path: str) -> str | None:
        for asset_id, location in self._assets.items():
            if location == path:
                return asset_id
        return None

    def resolve_background_path(self, ref: str | None) -> str | None:
        """저장된 참조를 로드 가능한 위치로 변환한다. 해석할 수 없으면 None."""
        if not ref:
            return None
        if is_data_url(ref):
            return ref
        if ref in self._assets:
            return self._assets[ref]
        if ref.startswith(BUILTIN_SCHEME):
            return ref if ref in self._assets.values() else None
        if Path(ref).is_file():
            return ref
        return None
