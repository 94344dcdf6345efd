from __future__ import annotations
from typing import List, Protocol, runtime_checkable

from ..schema import OcrPage, RawFileInput


@runtime_checkable
class TextExtractor(Protocol):
    """파일 1개 → OcrPage 목록. 원격 OCR / 로컬 PDF 추출이 같은 모양을 따른다."""
    name: str

    def extract(self, raw: RawFileInput) -> List[OcrPage]:
        ...


@runtime_checkable
class TextSplitter(Protocol):
    def split_documents(self, documents: List[OcrPage]) -> List[OcrPage]:
        ...
