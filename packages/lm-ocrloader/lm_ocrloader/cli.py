"""
lm-ocrloader: Custom OCR 문서 로더 CLI (Typer)

명령:
1) 단일 파일
   lm-ocrloader one <file.pdf> [--url http://localhost:8000/api/process] [--api-key KEY]
       [--usage perPage|perFile] [--output document|text] [--metadata '{"tag":"x"}']
       [--legacy-build] [--out-dir out/docs]

2) 배치 (글롭 패턴)
   lm-ocrloader batch "data/*.pdf" --out-dir out/docs [다른 옵션 동일]

--url / --api-key 가 없으면 .env 의 CUSTOM_OCR_API_URL / CUSTOM_OCR_API_KEY 를 쓰고,
그래도 없으면 로컬 PDF 추출로 처리한다.
"""

from __future__ import annotations
import json
import logging
import pathlib
from glob import glob
from typing import Optional

import typer
from dotenv import load_dotenv

from .config import LoaderSettings
from .credentials import EnvCredentialStore, DictCredentialStore, API_KEY_PARAM
from .errors import OcrLoaderError
from .io import save_documents, save_text, summarize
from .loader import CustomOcrLoader
from .logging_config import setup_logging
from .schema import NodeData, OutputChannel, UsageMode
from .sources import to_data_uri

app = typer.Typer(help="Custom OCR 문서 로더: 단일/배치 추출")

logger = logging.getLogger(__name__)

CREDENTIAL_ID = "cli"


@app.callback()
def init(
    log_file: bool = typer.Option(False, "--log-file/--no-log-file", help="logs/ 에 파일 로그도 남김"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    # 환경 로드는 오직 여기서만
    load_dotenv()
    settings = LoaderSettings.from_env()
    setup_logging(
        log_dir=settings.log_dir if log_file else None,
        log_level="DEBUG" if verbose else settings.log_level,
    )


def _build_loader(settings: LoaderSettings, api_key: Optional[str]) -> CustomOcrLoader:
    if api_key:
        store = DictCredentialStore({CREDENTIAL_ID: {API_KEY_PARAM: api_key}})
    else:
        store = EnvCredentialStore()
    return CustomOcrLoader(credential_store=store, timeout=settings.timeout)


def _run_one(
    loader: CustomOcrLoader,
    path: pathlib.Path,
    *,
    url: Optional[str],
    usage: UsageMode,
    output: OutputChannel,
    metadata: Optional[str],
    legacy_build: bool,
    out_dir: Optional[str],
) -> Optional[str]:
    node_data = NodeData(
        inputs={
            "processFile": to_data_uri(str(path)),
            "customOcrApiUrl": url,
            "usage": usage.value,
            "metadata": metadata,
            "legacyBuild": legacy_build,
        },
        outputs={"output": output.value},
        credential=CREDENTIAL_ID,
    )
    result = loader.init(node_data)

    if output is OutputChannel.DOCUMENT:
        typer.echo(f"  • {json.dumps(summarize(result), ensure_ascii=False)}")
        if out_dir:
            return save_documents(result, out_dir, path.stem)
        typer.echo(json.dumps([d.to_dict() for d in result], ensure_ascii=False, indent=2))
        return None

    if out_dir:
        return save_text(result, out_dir, path.stem)
    typer.echo(result)
    return None


@app.command("one")
def load_one(
    file: str = typer.Argument(..., help="처리할 파일 경로"),
    url: Optional[str] = typer.Option(None, "--url", help="Custom OCR API URL (기본: CUSTOM_OCR_API_URL)"),
    api_key: Optional[str] = typer.Option(None, "--api-key", help="기본: CUSTOM_OCR_API_KEY"),
    usage: UsageMode = typer.Option(UsageMode.PER_PAGE, "--usage"),
    output: OutputChannel = typer.Option(OutputChannel.DOCUMENT, "--output"),
    metadata: Optional[str] = typer.Option(None, "--metadata", help="추가 메타데이터(JSON)"),
    legacy_build: bool = typer.Option(False, "--legacy-build"),
    out_dir: Optional[str] = typer.Option(None, "--out-dir", help="없으면 stdout 출력"),
):
    p = pathlib.Path(file)
    if not p.exists():
        typer.secho(f"❌ 파일이 없습니다: {file}", fg="red"); raise typer.Exit(1)

    settings = LoaderSettings.from_env()
    loader = _build_loader(settings, api_key)
    url = url or settings.custom_ocr_api_url

    typer.secho("▶ 시작: 문서 추출", fg="cyan")
    typer.echo(f"  • file={p}")
    typer.echo(f"  • url={url or '(local)'} usage={usage.value} output={output.value}")

    try:
        saved = _run_one(
            loader, p,
            url=url, usage=usage, output=output, metadata=metadata,
            legacy_build=legacy_build, out_dir=out_dir,
        )
    except (OcrLoaderError, json.JSONDecodeError) as e:
        typer.secho(f"✖ 실패: {e}", fg="red"); raise typer.Exit(1)

    typer.secho(f"✅ 완료{': ' + saved if saved else ''}", fg="green")


@app.command("batch")
def load_batch(
    pattern: str = typer.Argument(..., help="글롭 패턴 (예: 'data/*.pdf')"),
    out_dir: str = typer.Option("out/docs", "--out-dir"),
    url: Optional[str] = typer.Option(None, "--url"),
    api_key: Optional[str] = typer.Option(None, "--api-key"),
    usage: UsageMode = typer.Option(UsageMode.PER_PAGE, "--usage"),
    output: OutputChannel = typer.Option(OutputChannel.DOCUMENT, "--output"),
    metadata: Optional[str] = typer.Option(None, "--metadata"),
    legacy_build: bool = typer.Option(False, "--legacy-build"),
):
    files = sorted(glob(pattern))
    typer.secho(f"▶ 배치 시작: {len(files)}개, pattern={pattern}", fg="cyan")
    if not files:
        typer.secho("❌ 매치되는 파일이 없습니다.", fg="red"); raise typer.Exit(1)

    settings = LoaderSettings.from_env()
    loader = _build_loader(settings, api_key)
    url = url or settings.custom_ocr_api_url

    ok = fail = 0
    for fp in files:
        try:
            typer.echo(f"  → {fp}")
            saved = _run_one(
                loader, pathlib.Path(fp),
                url=url, usage=usage, output=output, metadata=metadata,
                legacy_build=legacy_build, out_dir=out_dir,
            )
            typer.secho(f"    ✓ Saved {saved}", fg="green")
            ok += 1
        except (OcrLoaderError, json.JSONDecodeError) as e:
            logger.error(f"batch item failed: {fp}: {e}")
            typer.secho(f"    ✖ 실패: {e}", fg="red")
            fail += 1
    typer.secho(f"종료: 성공 {ok} / 실패 {fail}", fg=("green" if fail == 0 else "yellow"))


if __name__ == "__main__":
    app()
