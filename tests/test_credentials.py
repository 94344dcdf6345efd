"""Unit tests for credential schema and lookup helpers."""

from __future__ import annotations

import pytest

from lm_ocrloader.credentials import (
  API_KEY_PARAM,
  CustomOcrApiCredential,
  DictCredentialStore,
  EnvCredentialStore,
  get_credential_data,
  get_credential_param,
)
from lm_ocrloader.errors import InputError
from lm_ocrloader.schema import NodeData


def test_credential_schema() -> None:
  cred = CustomOcrApiCredential()
  assert (cred.label, cred.name, cred.version) == ("Custom OCR API", "customOcrApi", 1.0)
  assert [(p.name, p.type) for p in cred.inputs] == [(API_KEY_PARAM, "password")]


def test_get_credential_data() -> None:
  store = DictCredentialStore({"c1": {API_KEY_PARAM: "k"}})
  assert get_credential_data("c1", store) == {API_KEY_PARAM: "k"}
  assert get_credential_data(None, store) == {}
  assert get_credential_data("c1", None) == {}
  with pytest.raises(InputError):
    get_credential_data("missing", store)


def test_get_credential_param_prefers_node_inputs() -> None:
  node = NodeData(inputs={API_KEY_PARAM: "from-node"})
  assert get_credential_param(API_KEY_PARAM, {API_KEY_PARAM: "from-cred"}, node) == "from-node"
  assert get_credential_param(API_KEY_PARAM, {API_KEY_PARAM: "from-cred"}, NodeData()) == "from-cred"
  assert get_credential_param(API_KEY_PARAM, {}, NodeData(), default="d") == "d"


def test_env_credential_store(monkeypatch) -> None:
  monkeypatch.setenv("CUSTOM_OCR_API_KEY", "env-key")
  assert EnvCredentialStore().get("anything") == {API_KEY_PARAM: "env-key"}
  monkeypatch.delenv("CUSTOM_OCR_API_KEY")
  assert EnvCredentialStore().get("anything") == {}
