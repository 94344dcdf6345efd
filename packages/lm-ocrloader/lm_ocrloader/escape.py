from __future__ import annotations
from typing import Any


def handle_escape_characters(value: Any, reverse: bool = False) -> Any:
    """개행/탭을 리터럴 \\n, \\t 로 바꾼다 (reverse=True 면 복원). list/dict 는 재귀 처리."""
    if isinstance(value, str):
        if reverse:
            return value.replace("\\n", "\n").replace("\\t", "\t")
        return value.replace("\n", "\\n").replace("\t", "\\t")
    if isinstance(value, list):
        return [handle_escape_characters(v, reverse) for v in value]
    if isinstance(value, dict):
        return {k: handle_escape_characters(v, reverse) for k, v in value.items()}
    return value
