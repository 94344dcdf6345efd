"""CLI tests using Typer's runner (local extraction path, no network)."""

from __future__ import annotations

import json
import logging

import pytest
from typer.testing import CliRunner

from conftest import make_pdf
from lm_ocrloader.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
  monkeypatch.chdir(tmp_path)
  for var in ("CUSTOM_OCR_API_URL", "CUSTOM_OCR_API_KEY"):
    monkeypatch.delenv(var, raising=False)


def test_one_writes_documents_json(tmp_path) -> None:
  pdf = tmp_path / "doc.pdf"
  pdf.write_bytes(make_pdf(["alpha", "beta"]))
  result = runner.invoke(app, ["one", str(pdf), "--out-dir", "out", "--metadata", '{"tag": "x"}'])
  assert result.exit_code == 0, result.output

  docs = json.loads((tmp_path / "out" / "doc.docs.json").read_text(encoding="utf-8"))
  assert [d["pageContent"] for d in docs] == ["alpha", "beta"]
  assert all(d["metadata"]["tag"] == "x" for d in docs)
  assert docs[1]["metadata"]["loc"] == {"pageNumber": 2}


def test_one_text_output_per_file(tmp_path) -> None:
  pdf = tmp_path / "doc.pdf"
  pdf.write_bytes(make_pdf(["alpha", "beta"]))
  result = runner.invoke(app, ["one", str(pdf), "--usage", "perFile", "--output", "text", "--out-dir", "out"])
  assert result.exit_code == 0, result.output
  assert (tmp_path / "out" / "doc.txt").read_text(encoding="utf-8") == "alpha\\n\\nbeta\\n"


def test_one_missing_file_exits_with_error() -> None:
  result = runner.invoke(app, ["one", "nope.pdf"])
  assert result.exit_code == 1


def test_one_reports_extraction_failure(tmp_path) -> None:
  bad = tmp_path / "bad.pdf"
  bad.write_bytes(b"not a pdf")
  result = runner.invoke(app, ["one", str(bad)])
  assert result.exit_code == 1


def test_batch_counts_successes_and_failures(tmp_path) -> None:
  (tmp_path / "in").mkdir()
  (tmp_path / "in" / "a.pdf").write_bytes(make_pdf(["a"]))
  (tmp_path / "in" / "b.pdf").write_bytes(b"broken")
  result = runner.invoke(app, ["batch", "in/*.pdf", "--out-dir", "out"])
  assert result.exit_code == 0, result.output
  assert (tmp_path / "out" / "a.docs.json").exists()
  assert not (tmp_path / "out" / "b.docs.json").exists()


def test_batch_without_matches_exits() -> None:
  result = runner.invoke(app, ["batch", "none/*.pdf"])
  assert result.exit_code == 1


@pytest.fixture
def _restore_root_logging():
  root = logging.getLogger()
  handlers, level = root.handlers[:], root.level
  yield
  for h in root.handlers:
    if h not in handlers:
      h.close()
  root.handlers[:] = handlers
  root.setLevel(level)


def test_log_file_option_writes_rotating_log(tmp_path, monkeypatch, _restore_root_logging) -> None:
  monkeypatch.delenv("LM_LOG_DIR", raising=False)
  pdf = tmp_path / "doc.pdf"
  pdf.write_bytes(make_pdf(["alpha"]))
  result = runner.invoke(app, ["--log-file", "--verbose", "one", str(pdf), "--out-dir", "out"])
  assert result.exit_code == 0, result.output

  for h in logging.getLogger().handlers:
    h.flush()
  logs = list((tmp_path / "logs").glob("ocr_loader_*.log"))
  assert len(logs) == 1
  assert "DEBUG" in logs[0].read_text(encoding="utf-8")
