from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import DEFAULT_TIMEOUT
from .credentials import API_KEY_PARAM, CredentialStore, get_credential_data, get_credential_param
from .errors import InputError
from .escape import handle_escape_characters
from .extractors import local, remote  # noqa: F401  (registry 등록)
from .extractors.base import TextExtractor, TextSplitter
from .extractors.registry import build, strategy_name
from .schema import NodeData, NodeOutput, NodeParam, OcrPage, OutputChannel, RawFileInput, UsageMode
from .sources import resolve_files
from .storage import FileStorage

LoaderResult = Union[List[OcrPage], str]

ACCEPTED_FILE_TYPES = ".txt, .text, .pdf, .docx, .doc, .xlsx, .xls, .csv, .jpg, .jpeg, .png"


def parse_metadata(metadata: Any) -> Optional[Dict[str, Any]]:
    """dict 는 그대로, 문자열은 JSON 파싱 (파싱 오류는 그대로 전파)"""
    if not metadata:
        return None
    if isinstance(metadata, Mapping):
        parsed = metadata
    elif isinstance(metadata, (str, bytes)):
        parsed = json.loads(metadata)
    else:
        raise InputError("Additional metadata must be a JSON object")
    if not isinstance(parsed, Mapping):
        raise InputError("Additional metadata must be a JSON object")
    return dict(parsed)


def apply_metadata(docs: List[OcrPage], overlay: Optional[Mapping[str, Any]]) -> List[OcrPage]:
    # 얕은 병합, 같은 키는 overlay 우선
    if not overlay:
        return docs
    return [
        OcrPage(page_content=d.page_content, metadata={**d.metadata, **overlay})
        for d in docs
    ]


def format_output(docs: List[OcrPage], output: Any) -> LoaderResult:
    if output == OutputChannel.DOCUMENT.value:
        return docs
    final_text = "".join(f"{d.page_content}\n" for d in docs)
    return handle_escape_characters(final_text, False)


class CustomOcrLoader:
    """
    업로드 파일을 Custom OCR API 로 보내 문서화하고,
    API 설정이 없으면 로컬 PDF 추출로 폴백하는 문서 로더 노드.
    """

    def __init__(
        self,
        *,
        credential_store: Optional[CredentialStore] = None,
        storage: Optional[FileStorage] = None,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        self.label = "Custom OCR PDF Loader"
        self.name = "customOcr"
        self.version = 2.0
        self.type = "Document"
        self.icon = "customOcr.svg"
        self.category = "Document Loaders"
        self.description = "Upload file to external url to process files"
        self.base_classes = [self.type]
        self.credential = NodeParam(
            label="Connect Credential",
            name="credential",
            type="credential",
            credential_names=["customOcrApi"],
            optional=True,
        )
        self.inputs = [
            NodeParam(
                label="File Upload",
                name="processFile",
                type="file",
                file_type=ACCEPTED_FILE_TYPES,
                description="Upload text, PDF, Office files (Word, Excel), images, or CSV files",
            ),
            NodeParam(
                label="Custom OCR API URL",
                name="customOcrApiUrl",
                type="string",
                description="Custom OCR API endpoint URL",
                placeholder="http://localhost:8000/api/process",
                optional=True,
            ),
            NodeParam(label="Text Splitter", name="textSplitter", type="TextSplitter", optional=True),
            NodeParam(
                label="Usage",
                name="usage",
                type="options",
                options=[
                    {"label": "One document per page", "name": UsageMode.PER_PAGE.value},
                    {"label": "One document per file", "name": UsageMode.PER_FILE.value},
                ],
                default=UsageMode.PER_PAGE.value,
            ),
            NodeParam(
                label="Additional Metadata",
                name="metadata",
                type="json",
                description="Additional metadata to be added to the extracted documents",
                optional=True,
                additional_params=True,
            ),
        ]
        self.outputs = [
            NodeOutput(
                label="Document",
                name=OutputChannel.DOCUMENT.value,
                description="Array of document objects containing metadata and pageContent",
                base_classes=[*self.base_classes, "json"],
            ),
            NodeOutput(
                label="Text",
                name=OutputChannel.TEXT.value,
                description="Concatenated string from pageContent of documents",
                base_classes=["string", "json"],
            ),
        ]

        self.credential_store = credential_store
        self.storage = storage
        self.timeout = timeout
        self.log = logger or logging.getLogger(__name__)

    def _extractor(self, node_data: NodeData, api_url: Optional[str], api_key: Optional[str], usage: UsageMode) -> TextExtractor:
        name = strategy_name(api_url, api_key)
        self.log.info(f"extraction strategy: {name} (usage={usage.value})")
        return build(
            name,
            api_url=api_url,
            api_key=api_key,
            usage=usage,
            legacy_build=bool(node_data.inputs.get("legacyBuild")),
            timeout=self.timeout,
            logger=self.log,
        )

    def extract_file(self, extractor: TextExtractor, raw: RawFileInput, splitter: Optional[TextSplitter]) -> List[OcrPage]:
        pages = extractor.extract(raw)
        if splitter is not None:
            pages = splitter.split_documents(pages)
        return pages

    def init(self, node_data: NodeData, options: Optional[Mapping[str, Any]] = None) -> LoaderResult:
        options = options or {}
        inputs = node_data.inputs

        splitter = inputs.get("textSplitter") or None
        if splitter is not None and not isinstance(splitter, TextSplitter):
            raise InputError("textSplitter must provide split_documents()")
        api_url = inputs.get("customOcrApiUrl") or None
        usage = UsageMode.coerce(inputs.get("usage"))

        credential_data = get_credential_data(node_data.credential, self.credential_store)
        api_key = get_credential_param(API_KEY_PARAM, credential_data, node_data) or None

        files = resolve_files(
            node_data,
            storage=self.storage,
            org_id=options.get("orgId"),
            flow_id=options.get("chatflowid"),
        )
        overlay = parse_metadata(inputs.get("metadata"))

        docs: List[OcrPage] = []
        extractor = self._extractor(node_data, api_url, api_key, usage)
        try:
            for raw in files:
                docs.extend(self.extract_file(extractor, raw, splitter))
        finally:
            close = getattr(extractor, "close", None)
            if close is not None:
                close()

        docs = apply_metadata(docs, overlay)
        self.log.info(f"loaded {len(docs)} documents from {len(files)} files")
        return format_output(docs, node_data.outputs.get("output"))
