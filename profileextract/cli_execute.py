"""
CLI Phase 3: Execute pipeline.

Runs the requested operation with explicit inputs and outputs and maps the
outcome to an exit code.
"""

from __future__ import annotations

import json
import shutil
import tempfile
import traceback
from pathlib import Path
from typing import Optional

from .acquirers import PDF_MEDIA_TYPE, list_acquirers
from .cli_config import ExecutionMode, UserConfig
from .errors import ProfileExtractError
from .extractors import list_extractors
from .logging_utils import LOG, fmt_issues
from .pipeline import PipelineResult, ProfilePipeline
from .settings import Settings
from .verifiers import list_verifiers

_LISTERS = {
    "acquirers": list_acquirers,
    "extractors": list_extractors,
    "verifiers": list_verifiers,
}


def _list_components(what: str) -> int:
    for entry in _LISTERS[what]():
        print(f"{entry['name']:<20} {entry['description']}")
    return 0


def _serve(config: UserConfig, settings: Settings) -> int:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(settings), host=config.host, port=config.port, log_level="info" if config.debug else "warning")
    return 0


def _run_pdf(pipeline: ProfilePipeline, pdf: Path) -> PipelineResult:
    # The acquirer removes the file it reads; hand it a copy.
    with tempfile.NamedTemporaryFile(prefix="profileextract-", suffix=".pdf", delete=False) as tmp:
        with pdf.open("rb") as src:
            shutil.copyfileobj(src, tmp)
    return pipeline.run_pdf(Path(tmp.name), PDF_MEDIA_TYPE)


def _run_extraction(config: UserConfig, pipeline: ProfilePipeline) -> PipelineResult:
    if config.mode is ExecutionMode.EXTRACT_PDF:
        return _run_pdf(pipeline, config.pdf)
    if config.mode is ExecutionMode.EXTRACT_TEXT:
        return pipeline.extract_linkedin(config.text.read_text(encoding="utf-8"))
    return pipeline.run_orcid(config.orcid)


def _write_record(record: dict, output: Optional[Path]) -> None:
    if output is None:
        print(json.dumps(record, ensure_ascii=False, indent=2))
        return
    with output.open("w", encoding="utf-8") as wf:
        json.dump(record, wf, ensure_ascii=False, indent=2)


def execute_pipeline(config: UserConfig, settings: Optional[Settings] = None) -> int:
    """
    Phase 3: Execute the operation described by `config`.

    Returns exit code (0 = success, 1 = failure, 2 = strict mode and the
    record came from the mock, the safe fallback, or carries warnings).
    """
    if config.mode is ExecutionMode.LIST:
        return _list_components(config.list_what)

    settings = settings or Settings.from_env()

    if config.mode is ExecutionMode.SERVE:
        return _serve(config, settings)

    pipeline = ProfilePipeline.from_settings(settings)
    try:
        result = _run_extraction(config, pipeline)
    except ProfileExtractError as e:
        LOG.error(e.message)
        if config.debug:
            LOG.error(traceback.format_exc())
        return 1
    finally:
        pipeline.close()

    _write_record(result.record, config.output)

    errs = result.work.all_errors()
    warns = result.work.all_warnings()
    label = config.pdf or config.text or config.orcid
    icon = "✅" if result.ok and not result.mocked and not warns else "⚠️ "
    LOG.info("%s %s [%s] | %s", icon, label, result.source, fmt_issues(errs, warns))

    if result.mocked:
        LOG.warning("Generation service not configured (OPENAI_API_KEY); returned the placeholder record.")
    elif result.error is not None:
        LOG.warning("Extraction failed (%s); returned the empty record.", result.error)

    if config.strict and (result.mocked or result.error is not None or warns):
        LOG.error("Strict mode enabled: placeholder, fallback or warnings treated as failure.")
        return 2
    return 0
