from __future__ import annotations
import os
from typing import Any, Dict, List, Mapping, Optional, Protocol

from pydantic import BaseModel, Field

from .errors import InputError
from .schema import NodeData, NodeParam

API_KEY_PARAM = "customOcrApiKey"


class CustomOcrApiCredential(BaseModel):
    """Custom OCR API 인증 스키마 (API 키 1개)"""
    label: str = "Custom OCR API"
    name: str = "customOcrApi"
    version: float = 1.0
    inputs: List[NodeParam] = Field(
        default_factory=lambda: [
            NodeParam(label="Custom OCR Api Key", name=API_KEY_PARAM, type="password"),
        ]
    )


class CredentialStore(Protocol):
    def get(self, credential_id: str) -> Mapping[str, Any]:
        ...


class DictCredentialStore:
    def __init__(self, credentials: Optional[Dict[str, Mapping[str, Any]]] = None):
        self._credentials: Dict[str, Mapping[str, Any]] = dict(credentials or {})

    def add(self, credential_id: str, data: Mapping[str, Any]) -> None:
        self._credentials[credential_id] = data

    def get(self, credential_id: str) -> Mapping[str, Any]:
        try:
            return self._credentials[credential_id]
        except KeyError:
            raise InputError(f"Credential not found: {credential_id}") from None


class EnvCredentialStore:
    """어떤 credential id 든 CUSTOM_OCR_API_KEY 환경변수로 응답"""

    def __init__(self, env_var: str = "CUSTOM_OCR_API_KEY"):
        self.env_var = env_var

    def get(self, credential_id: str) -> Mapping[str, Any]:
        key = os.getenv(self.env_var)
        return {API_KEY_PARAM: key} if key else {}


def get_credential_data(credential_id: Optional[str], store: Optional[CredentialStore]) -> Dict[str, Any]:
    if not credential_id or store is None:
        return {}
    return dict(store.get(credential_id))


def get_credential_param(
    name: str,
    credential_data: Mapping[str, Any],
    node_data: NodeData,
    default: Any = None,
) -> Any:
    # 노드 입력값 → credential → 기본값 순
    value = node_data.inputs.get(name)
    if value is not None:
        return value
    value = credential_data.get(name)
    if value is not None:
        return value
    return default
