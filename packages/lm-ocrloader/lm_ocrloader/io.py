from __future__ import annotations
import os, json
from typing import Dict, Sequence

from .schema import OcrPage


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def save_documents(docs: Sequence[OcrPage], out_dir: str, basename: str) -> str:
    ensure_dir(out_dir)
    out_path = os.path.join(out_dir, f"{basename}.docs.json")
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump([d.to_dict() for d in docs], f, ensure_ascii=False, indent=2)
    return out_path


def save_text(text: str, out_dir: str, basename: str) -> str:
    ensure_dir(out_dir)
    out_path = os.path.join(out_dir, f"{basename}.txt")
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(text)
    return out_path


def load_documents(path: str) -> list[OcrPage]:
    with open(path, encoding="utf-8") as f:
        rows = json.load(f)
    return [OcrPage.model_validate(r) for r in rows]


def summarize(docs: Sequence[OcrPage]) -> Dict[str, int]:
    return {
        "documents": len(docs),
        "characters": sum(len(d.page_content) for d in docs),
    }
