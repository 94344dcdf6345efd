from __future__ import annotations
from typing import Callable, Dict, Optional

from .base import TextExtractor

_REG: Dict[str, Callable[..., TextExtractor]] = {}


def register(name: str):
    def deco(factory: Callable[..., TextExtractor]):
        _REG[name] = factory
        return factory
    return deco


def build(name: str, **kwargs) -> TextExtractor:
    try:
        factory = _REG[name]
    except KeyError:
        raise ValueError(f"Unknown extractor: {name}") from None
    return factory(**kwargs)


def strategy_name(api_url: Optional[str], api_key: Optional[str]) -> str:
    # URL 과 키가 모두 있어야 원격 OCR, 아니면 로컬 PDF 추출
    return "remote" if (api_url and api_key) else "local"
