from __future__ import annotations
from typing import Optional


class OcrLoaderError(Exception):
    pass


class InputError(OcrLoaderError):
    """업로드가 없거나 해석할 수 없을 때"""


class ExtractionError(OcrLoaderError):
    pass


class RemoteOcrError(ExtractionError):
    """Custom OCR API 호출/응답 해석 실패. 재시도하지 않는다."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class LocalExtractionError(ExtractionError):
    pass
