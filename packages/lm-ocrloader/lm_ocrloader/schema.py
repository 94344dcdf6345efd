from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class UsageMode(str, Enum):
    PER_PAGE = "perPage"
    PER_FILE = "perFile"

    @classmethod
    def coerce(cls, value: Any) -> "UsageMode":
        # perFile 이외의 값(None 포함)은 모두 perPage 로 취급
        if isinstance(value, UsageMode):
            return value
        return cls.PER_FILE if value == cls.PER_FILE.value else cls.PER_PAGE


class OutputChannel(str, Enum):
    DOCUMENT = "document"
    TEXT = "text"


@dataclass(frozen=True)
class RawFileInput:
    """추출 전 업로드 파일 1개 (바이트 + 파일명)"""
    data: bytes
    filename: str


class OcrPage(BaseModel):
    """추출 결과의 논리 단위 (페이지 또는 파일 하나)"""
    model_config = ConfigDict(populate_by_name=True)

    page_content: str = Field(default="", alias="pageContent")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class NodeParam(BaseModel):
    label: str
    name: str
    type: str
    description: Optional[str] = None
    placeholder: Optional[str] = None
    file_type: Optional[str] = None
    options: List[Dict[str, str]] = Field(default_factory=list)
    credential_names: List[str] = Field(default_factory=list)
    default: Any = None
    optional: bool = False
    additional_params: bool = False


class NodeOutput(BaseModel):
    label: str
    name: str
    description: str = ""
    base_classes: List[str] = Field(default_factory=list)


class NodeData(BaseModel):
    """호스트가 넘겨주는 노드 입력/출력 선택값"""
    inputs: Dict[str, Any] = Field(default_factory=dict)
    outputs: Dict[str, Any] = Field(default_factory=dict)
    credential: Optional[str] = None
