"""Unit tests for output escaping, settings and document persistence."""

from __future__ import annotations

import json

from lm_ocrloader.config import LoaderSettings
from lm_ocrloader.escape import handle_escape_characters
from lm_ocrloader.io import load_documents, save_documents, save_text, summarize
from lm_ocrloader.schema import OcrPage, UsageMode


def test_escape_newlines_and_tabs() -> None:
  assert handle_escape_characters("a\nb\tc\n") == "a\\nb\\tc\\n"
  assert handle_escape_characters("a\\nb", reverse=True) == "a\nb"


def test_escape_recurses_into_containers() -> None:
  value = {"k": ["x\ny", 3], "n": None}
  assert handle_escape_characters(value) == {"k": ["x\\ny", 3], "n": None}


def test_save_and_load_documents(tmp_path) -> None:
  docs = [OcrPage(page_content="안녕", metadata={"loc": {"pageNumber": 1}})]
  path = save_documents(docs, str(tmp_path / "out"), "doc")
  payload = json.loads(open(path, encoding="utf-8").read())
  assert payload == [{"pageContent": "안녕", "metadata": {"loc": {"pageNumber": 1}}}]
  assert load_documents(path) == docs
  assert summarize(docs) == {"documents": 1, "characters": 2}


def test_save_text(tmp_path) -> None:
  path = save_text("a\\nb\\n", str(tmp_path), "doc")
  assert path.endswith("doc.txt")
  assert open(path, encoding="utf-8").read() == "a\\nb\\n"


def test_settings_from_env(monkeypatch) -> None:
  monkeypatch.setenv("CUSTOM_OCR_API_URL", "http://ocr")
  monkeypatch.setenv("CUSTOM_OCR_TIMEOUT", "7.5")
  monkeypatch.delenv("CUSTOM_OCR_API_KEY", raising=False)
  s = LoaderSettings.from_env()
  assert s.custom_ocr_api_url == "http://ocr"
  assert s.custom_ocr_api_key is None
  assert s.timeout == 7.5


def test_usage_mode_coerce() -> None:
  assert UsageMode.coerce("perFile") is UsageMode.PER_FILE
  assert UsageMode.coerce(None) is UsageMode.PER_PAGE
  assert UsageMode.coerce(UsageMode.PER_FILE) is UsageMode.PER_FILE
