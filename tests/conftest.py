"""Test configuration for importing the loader package."""

from __future__ import annotations

import base64
import json
import sys
from pathlib import Path
from typing import Any, List

ROOT = Path(__file__).resolve().parents[1]
PKG_DIR = ROOT / "packages" / "lm-ocrloader"
if str(PKG_DIR) not in sys.path:
  sys.path.insert(0, str(PKG_DIR))

import fitz  # noqa: E402
import pytest  # noqa: E402
import requests  # noqa: E402


def make_pdf(pages: List[str]) -> bytes:
  """Build an in-memory PDF, one page per entry (empty string = blank page)."""
  doc = fitz.open()
  for text in pages:
    page = doc.new_page()
    if text:
      page.insert_text((72, 72), text)
  data = doc.tobytes()
  doc.close()
  return data


def make_response(status: int = 200, body: Any = None, text: str | None = None) -> requests.Response:
  resp = requests.Response()
  resp.status_code = status
  resp.encoding = "utf-8"
  raw = text if text is not None else json.dumps(body)
  resp._content = raw.encode("utf-8")
  return resp


def data_uri(data: bytes, filename: str, mime: str = "application/pdf") -> str:
  return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')},filename:{filename}"


@pytest.fixture
def pdf_bytes() -> bytes:
  return make_pdf(["Hello page one", "", "Second line\nthird"])


@pytest.fixture
def session():
  return requests.Session()
