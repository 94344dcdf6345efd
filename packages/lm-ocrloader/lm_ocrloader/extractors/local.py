from __future__ import annotations
import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

from ..errors import LocalExtractionError
from ..schema import OcrPage, RawFileInput, UsageMode
from .registry import register

PdfInfo = Dict[str, Any]


def _pages_pymupdf(data: bytes) -> Tuple[List[str], PdfInfo]:
    import fitz  # PyMuPDF

    doc = fitz.open(stream=data, filetype="pdf")
    try:
        texts = [doc.load_page(i).get_text().strip() for i in range(len(doc))]
        info = {
            "version": f"pymupdf {getattr(fitz, 'VersionBind', '')}".strip(),
            "info": dict(doc.metadata or {}),
            "metadata": doc.get_xml_metadata() or None,
            "totalPages": len(doc),
        }
    finally:
        doc.close()
    return texts, info


def _pages_pdfium(data: bytes) -> Tuple[List[str], PdfInfo]:
    import pypdfium2 as pdfium

    doc = pdfium.PdfDocument(data)
    try:
        texts = []
        for i in range(len(doc)):
            page = doc[i]
            textpage = page.get_textpage()
            try:
                text = textpage.get_text_range()
            finally:
                textpage.close()
                page.close()
            texts.append(text.replace("\r\n", "\n").strip())
        info = {
            "version": f"pypdfium2 {getattr(pdfium, '__version__', '')}".strip(),
            "info": dict(doc.get_metadata_dict() or {}),
            "metadata": None,
            "totalPages": len(doc),
        }
    finally:
        doc.close()
    return texts, info


@register("local")
class LocalPdfExtractor:
    """
    로컬 PDF 텍스트 추출.
    - perPage: 텍스트가 있는 물리 페이지마다 한 문서 (loc.pageNumber 는 실제 페이지 번호)
    - perFile: 페이지 텍스트를 빈 줄로 이어 한 문서
    legacy_build=True 면 pypdfium2 엔진 사용.
    """
    name = "local"

    def __init__(
        self,
        *,
        usage: Any = UsageMode.PER_PAGE,
        legacy_build: bool = False,
        logger: Optional[logging.Logger] = None,
        **_: Any,
    ):
        self.usage = UsageMode.coerce(usage)
        self.legacy_build = bool(legacy_build)
        self.log = logger or logging.getLogger(__name__)

    def _load(self, data: bytes) -> Tuple[List[str], PdfInfo]:
        engine = _pages_pdfium if self.legacy_build else _pages_pymupdf
        try:
            return engine(data)
        except Exception as e:
            raise LocalExtractionError(f"Failed to extract PDF text: {e}") from e

    def extract(self, raw: RawFileInput) -> List[OcrPage]:
        texts, info = self._load(raw.data)
        self.log.info(f"[LocalPDF] {raw.filename or '<unnamed>'}: {info['totalPages']} pages (legacy_build={self.legacy_build})")

        if self.usage is UsageMode.PER_FILE:
            content = "\n\n".join(t for t in texts if t)
            return [OcrPage(page_content=content, metadata={"source": raw.filename, "pdf": copy.deepcopy(info)})]

        pages: List[OcrPage] = []
        for i, text in enumerate(texts, start=1):
            if not text:
                continue
            pages.append(
                OcrPage(
                    page_content=text,
                    metadata={"source": raw.filename, "pdf": copy.deepcopy(info), "loc": {"pageNumber": i}},
                )
            )
        return pages
