from __future__ import annotations
import logging
from typing import Any, List, Optional

from ..client import CustomOcrClient
from ..config import DEFAULT_TIMEOUT
from ..errors import RemoteOcrError
from ..normalize import normalize_ocr_result
from ..schema import OcrPage, RawFileInput, UsageMode
from .registry import register


@register("remote")
class RemoteOcrExtractor:
    name = "remote"

    def __init__(
        self,
        *,
        api_url: str,
        api_key: str,
        usage: Any = UsageMode.PER_PAGE,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
        client: Optional[CustomOcrClient] = None,
        **_: Any,
    ):
        self.usage = UsageMode.coerce(usage)
        self.log = logger or logging.getLogger(__name__)
        self.client = client or CustomOcrClient(api_url, api_key, timeout=timeout, logger=self.log)

    def extract(self, raw: RawFileInput) -> List[OcrPage]:
        result = self.client.post_file(raw.data, raw.filename)
        try:
            pages = normalize_ocr_result(result, raw.filename, self.usage)
        except Exception as e:
            raise RemoteOcrError(f"Failed to process file with Custom OCR API: {e}") from e
        self.log.info(f"[CustomOCR] {raw.filename}: {len(result)} pages → {len(pages)} documents ({self.usage.value})")
        return pages

    def close(self) -> None:
        self.client.close()
