from __future__ import annotations
import base64
import binascii
import json
import logging
import mimetypes
import pathlib
from typing import List, Optional

from .errors import InputError
from .schema import NodeData, RawFileInput
from .storage import FileStorage

logger = logging.getLogger(__name__)

STORAGE_PREFIX = "FILE-STORAGE::"

# 업로드가 실려 올 수 있는 입력 필드 (앞에서부터 첫 값 사용)
UPLOAD_FIELDS = (
    "processFile",
    "txtFile",
    "yamlFile",
    "docxFile",
    "jsonlinesFile",
    "csvFile",
    "jsonFile",
    "fileObject",
)


def find_upload(node_data: NodeData) -> Optional[str]:
    for field in UPLOAD_FIELDS:
        value = node_data.inputs.get(field)
        if value:
            return value
    return None


def _parse_list_literal(value: str) -> List[str]:
    """'[...]' 형태면 JSON 배열로, 아니면 단일 항목 리스트로"""
    if value.startswith("[") and value.endswith("]"):
        try:
            items = json.loads(value)
        except json.JSONDecodeError as e:
            raise InputError(f"Invalid upload list: {e}") from e
        if not isinstance(items, list):
            raise InputError("Upload list must be a JSON array")
        return [str(x) if x is not None else "" for x in items]
    return [value]


def _b64decode(payload: str) -> bytes:
    # 줄바꿈 된 payload 허용, 알파벳 밖 문자는 거부
    payload = "".join(payload.split())
    try:
        return base64.b64decode(payload + "=" * (-len(payload) % 4), validate=True)
    except (binascii.Error, ValueError) as e:
        raise InputError(f"Invalid base64 payload: {e}") from e


def _filename_from_prefix(prefix: str) -> str:
    # data:application/pdf;name=doc.pdf;base64
    for param in prefix.split(";")[1:]:
        k, _, v = param.partition("=")
        if k.strip().lower() == "name" and v:
            return v.strip()
    return ""


def decode_data_uri(value: str) -> RawFileInput:
    """
    호스트 업로드 포맷 해석:
    data:<mime>;base64,<payload>,filename:<name>
    """
    prefix, _, rest = value.partition(",")
    if not rest:
        raise InputError("Invalid data URI: missing payload")
    payload, _, tail = rest.partition(",")
    if tail.startswith("filename:"):
        filename = tail.split(":", 1)[1]
    else:
        filename = _filename_from_prefix(prefix)
    return RawFileInput(data=_b64decode(payload), filename=filename)


def to_data_uri(path: str, mime: Optional[str] = None) -> str:
    p = pathlib.Path(path)
    mime = mime or mimetypes.guess_type(p.name)[0] or "application/octet-stream"
    payload = base64.b64encode(p.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{payload},filename:{p.name}"


def resolve_files(
    node_data: NodeData,
    *,
    storage: Optional[FileStorage] = None,
    org_id: Optional[str] = None,
    flow_id: Optional[str] = None,
) -> List[RawFileInput]:
    """업로드 값 → RawFileInput 목록 (입력 순서 유지)"""
    upload = find_upload(node_data)
    if not upload:
        raise InputError("File upload is required")
    if not isinstance(upload, str):
        raise InputError(f"Unsupported upload value type: {type(upload).__name__}")

    files: List[RawFileInput] = []

    # FILE-STORAGE::["a.pdf","b.pdf"] 또는 FILE-STORAGE::a.pdf
    if upload.startswith(STORAGE_PREFIX):
        if storage is None:
            raise InputError("File storage is not configured")
        keys = _parse_list_literal(upload[len(STORAGE_PREFIX):])
        for key in keys:
            if not key:
                continue
            data = storage.get_file(key, org_id, flow_id)
            logger.debug(f"storage file resolved: {key} ({len(data)} bytes)")
            files.append(RawFileInput(data=bytes(data), filename=key))
        return files

    for item in _parse_list_literal(upload):
        if not item:
            continue
        raw = decode_data_uri(item)
        logger.debug(f"inline file resolved: {raw.filename or '<unnamed>'} ({len(raw.data)} bytes)")
        files.append(raw)
    return files
