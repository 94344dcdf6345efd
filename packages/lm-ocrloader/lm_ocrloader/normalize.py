from __future__ import annotations
from typing import Any, Dict, List, Mapping, Sequence

from .schema import OcrPage, UsageMode

TEXT_KEYS = ("pageContent", "text", "content")


def _present(value: Any) -> bool:
    # 빈 컨테이너({}, [])도 값이 있는 것으로 본다. 없음으로 치는 건 None, False, "", 0 뿐
    if value is None or value is False or value == "":
        return False
    if isinstance(value, (int, float)) and value == 0:
        return False
    return True


def page_break(page_number: int) -> str:
    return f"<PAGE_BREAK>{page_number}</PAGE_BREAK>"


def is_pdf(filename: str) -> bool:
    return (filename or "").lower().endswith(".pdf")


def item_text(item: Any) -> str:
    """
    응답 항목 하나에서 텍스트 추출:
    - 문자열이면 그대로
    - dict 면 pageContent → text → content 중 처음으로 비어있지 않은 값
    - 그 외는 빈 문자열
    """
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        for k in TEXT_KEYS:
            v = item.get(k)
            if _present(v):
                return v if isinstance(v, str) else str(v)
    return ""


def _item_metadata(item: Any) -> Dict[str, Any]:
    if isinstance(item, Mapping) and isinstance(item.get("metadata"), Mapping):
        return dict(item["metadata"])
    return {}


def _lines_of(item: Any, text: str) -> Any:
    # 우선순위: item.lines → item.metadata.lines → 텍스트 줄 수로 계산
    if isinstance(item, Mapping):
        if _present(item.get("lines")):
            return item["lines"]
        meta = item.get("metadata")
        if isinstance(meta, Mapping) and _present(meta.get("lines")):
            return meta["lines"]
    if text:
        return {"from": 1, "to": len(text.split("\n"))}
    return None


def normalize_ocr_result(result: Sequence[Any], filename: str, usage: Any = UsageMode.PER_PAGE) -> List[OcrPage]:
    """
    Custom OCR API 응답(페이지 배열) → OcrPage 목록.

    perFile: 전체를 한 문서로 합치고 두 번째 항목부터 <PAGE_BREAK>n</PAGE_BREAK> 표시
    perPage: 항목마다 한 문서, PDF 면 loc.pageNumber / loc.lines 부착
    """
    usage = UsageMode.coerce(usage)
    base = {"source": filename, "custom_ocr": True}

    if usage is UsageMode.PER_FILE:
        parts = []
        for index, item in enumerate(result):
            text = item_text(item)
            parts.append(text if index == 0 else f"{page_break(index + 1)}\n\n{text}")
        metadata = dict(base)
        # 첫 항목의 metadata 만 반영
        if result:
            metadata.update(_item_metadata(result[0]))
        return [OcrPage(page_content="\n\n".join(parts), metadata=metadata)]

    pdf = is_pdf(filename)
    pages: List[OcrPage] = []
    for index, item in enumerate(result):
        text = item_text(item)
        metadata = dict(base)
        metadata.update(_item_metadata(item))

        if pdf:
            loc: Dict[str, Any] = {"pageNumber": index + 1}
            lines = _lines_of(item, text)
            if lines is not None:
                loc["lines"] = lines
            metadata["loc"] = loc

        pages.append(OcrPage(page_content=text, metadata=metadata))
    return pages
