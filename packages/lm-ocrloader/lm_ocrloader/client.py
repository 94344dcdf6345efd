from __future__ import annotations
import base64
import logging
from typing import Any, List, Optional

import requests

from .config import DEFAULT_TIMEOUT
from .errors import RemoteOcrError

# 실제 파일 형식과 무관하게 고정 (호스트 원본 동작 유지)
UPLOAD_CONTENT_TYPE = "application/pdf"
UPLOAD_FIELD = "files"


def encode_filename(filename: str) -> str:
    """헤더에 실을 파일명 (UTF-8 → base64)"""
    return base64.b64encode(filename.encode("utf-8")).decode("ascii")


class CustomOcrClient:
    def __init__(
        self,
        url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
        session: Optional[requests.Session] = None,
    ):
        if not url:
            raise ValueError("Custom OCR API URL is required")
        if not api_key:
            raise ValueError("Custom OCR API key is required")
        self.url = url
        self.timeout = timeout
        self.log = logger or logging.getLogger(__name__)
        self._api_key = api_key
        self._session = session or requests.Session()
        self._session.headers.update({"Authorization": f"Bearer {api_key}"})

    def post_file(self, data: bytes, filename: str) -> List[Any]:
        """
        파일 1개를 POST 하고 페이지 배열(JSON)을 그대로 돌려준다.
        어떤 실패든 RemoteOcrError 하나로 감싼다. 재시도 없음.
        """
        try:
            self.log.info(f"[CustomOCR] POST {self.url} filename={filename!r} size={len(data)} bytes")
            self.log.debug(f"[CustomOCR] API key exists: {bool(self._api_key)}")

            files = {UPLOAD_FIELD: (filename, data, UPLOAD_CONTENT_TYPE)}
            headers = {"X-Filename": encode_filename(filename)}
            resp = self._session.post(self.url, files=files, headers=headers, timeout=self.timeout)

            self.log.info(f"[CustomOCR] Response status: {resp.status_code}")
            if not resp.ok:
                raise RemoteOcrError(
                    f"Custom OCR API request failed with status {resp.status_code}: {resp.text}",
                    status_code=resp.status_code,
                    body=resp.text,
                )

            result = resp.json()
            if not isinstance(result, list):
                raise RemoteOcrError("Invalid response format from Custom OCR API: expected array of pages")
            return result
        except Exception as e:
            self.log.error(f"[CustomOCR] request failed: {e}")
            raise RemoteOcrError(
                f"Failed to process file with Custom OCR API: {e}",
                status_code=getattr(e, "status_code", None),
                body=getattr(e, "body", None),
            ) from e

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
