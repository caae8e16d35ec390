"""마무리 파이프라인 오류 종류. 모두 해당 호출에 대해 치명적이다."""


class FinishError(Exception):
    """마무리 파이프라인 오류의 기반 클래스."""


class SourceDecodeError(FinishError):
    """원본 스크린샷을 디코딩하지 못했다."""


class BackgroundLoadError(FinishError):
    """배경 이미지를 (기본 배경 폴백 후에도) 디코딩하지 못했다."""


class SurfaceAllocationError(FinishError):
    """렌더링 캔버스를 만들지 못했다."""


class EncodeError(FinishError):
    """최종 캔버스를 PNG로 인코딩하지 못했다."""
