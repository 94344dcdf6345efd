from __future__ import annotations
import os
from typing import Optional
from pydantic import BaseModel

DEFAULT_TIMEOUT = 120.0


class LoaderSettings(BaseModel):
    """
    환경변수 기반 설정. .env 로드는 CLI 에서만 한다(라이브러리는 환경이 준비됐다고 가정).
    - CUSTOM_OCR_API_URL / CUSTOM_OCR_API_KEY : 외부 OCR 엔드포인트
    - CUSTOM_OCR_TIMEOUT : 요청 타임아웃(초)
    - STORAGE_DIR : FILE-STORAGE:: 키를 찾을 로컬 루트
    """
    custom_ocr_api_url: Optional[str] = None
    custom_ocr_api_key: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    storage_dir: str = "storage"
    log_dir: str = "logs"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LoaderSettings":
        return cls(
            custom_ocr_api_url=os.getenv("CUSTOM_OCR_API_URL") or None,
            custom_ocr_api_key=os.getenv("CUSTOM_OCR_API_KEY") or None,
            timeout=float(os.getenv("CUSTOM_OCR_TIMEOUT") or DEFAULT_TIMEOUT),
            storage_dir=os.getenv("STORAGE_DIR", "storage"),
            log_dir=os.getenv("LM_LOG_DIR", "logs"),
            log_level=os.getenv("LM_LOG_LEVEL", "INFO").upper(),
        )
