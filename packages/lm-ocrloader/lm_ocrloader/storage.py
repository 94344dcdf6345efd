from __future__ import annotations
import os
import pathlib
from typing import Dict, Optional, Protocol, Tuple

from .errors import InputError


class FileStorage(Protocol):
    def get_file(self, key: str, org_id: Optional[str], flow_id: Optional[str]) -> bytes:
        ...


class LocalFileStorage:
    """
    <STORAGE_DIR>/<org_id>/<flow_id>/<key> 에서 업로드 원본을 읽는다.
    org_id/flow_id 가 비어 있으면 해당 단계는 생략.
    """

    def __init__(self, root: Optional[str] = None):
        self.root = pathlib.Path(root or os.getenv("STORAGE_DIR", "storage")).resolve()

    def path_of(self, key: str, org_id: Optional[str], flow_id: Optional[str]) -> pathlib.Path:
        base = self.root
        for part in (org_id, flow_id):
            if part:
                base = base / part
        candidate = (base / key).resolve()
        if not candidate.is_relative_to(self.root):
            raise InputError(f"Storage key escapes storage root: {key!r}")
        return candidate

    def get_file(self, key: str, org_id: Optional[str], flow_id: Optional[str]) -> bytes:
        p = self.path_of(key, org_id, flow_id)
        if not p.is_file():
            raise InputError(f"File not found in storage: {key}")
        return p.read_bytes()


class MemoryFileStorage:
    def __init__(self):
        self._files: Dict[Tuple[Optional[str], Optional[str], str], bytes] = {}

    def put(self, key: str, data: bytes, org_id: Optional[str] = None, flow_id: Optional[str] = None) -> None:
        self._files[(org_id, flow_id, key)] = data

    def get_file(self, key: str, org_id: Optional[str], flow_id: Optional[str]) -> bytes:
        try:
            return self._files[(org_id, flow_id, key)]
        except KeyError:
            raise InputError(f"File not found in storage: {key}") from None
