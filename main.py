"""명령행 진입점 — 스크린샷 한 장을 설정대로 마무리해 PNG로 저장한다."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from config import build_finish_config, load_settings
from decor.assets import AssetRegistry
from errors import FinishError
from pipeline import ScreenshotFinisher

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(message)s")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="스크린샷 배경·그림자·푸터 마무리")
    parser.add_argument("source", help="원본 스크린샷 경로")
    parser.add_argument("-o", "--output", help="출력 PNG 경로 (기본: <원본>_finished.png)")
    parser.add_argument("--settings", type=Path, help="settings.json 경로")
    parser.add_argument("--assets", type=Path, help="배경 에셋 디렉토리")
    parser.add_argument("--timestamp", help="푸터에 찍을 UTC 시각 (ISO-8601)")
    parser.add_argument("--data-url", action="store_true", help="파일 대신 data URL을 출력")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = load_settings(args.settings)
    config = build_finish_config(settings, timestamp_utc=args.timestamp)
    finisher = ScreenshotFinisher(registry=AssetRegistry(args.assets))

    try:
        artifact = await finisher.finish(args.source, config)
    except FinishError as e:
        logging.error("마무리 실패: %s", e)
        return 1

    if args.data_url:
        print(artifact.to_data_url())
        return 0

    source = Path(args.source)
    output = Path(args.output) if args.output else source.with_name(f"{source.stem}_finished.png")
    artifact.save(output)
    logging.info("저장: %s (%dx%d)", output, artifact.width, artifact.height)
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logging.info("종료")
