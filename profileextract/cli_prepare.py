"""
CLI Phase 2: Prepare execution environment.

Validates inputs and prepares directories for execution.
No actual execution - just setup.
"""

from __future__ import annotations

from .cli_config import ExecutionMode, UserConfig
from .logging_utils import LOG


def prepare_execution_environment(config: UserConfig) -> UserConfig:
    """
    Phase 2: Validate inputs and prepare execution environment.

    - Validates input files exist
    - Creates the output directory
    - No execution yet

    Returns the same config (for chaining).
    """
    if config.mode is ExecutionMode.EXTRACT_PDF:
        if not config.pdf.is_file() or config.pdf.suffix.lower() != ".pdf":
            LOG.error("PDF not found or not a .pdf: %s", config.pdf)
            raise ValueError(f"Invalid PDF: {config.pdf}")

    if config.mode is ExecutionMode.EXTRACT_TEXT and not config.text.is_file():
        LOG.error("Text file not found: %s", config.text)
        raise ValueError(f"Invalid text file: {config.text}")

    if config.mode is ExecutionMode.SERVE and not 0 < config.port < 65536:
        raise ValueError(f"Invalid port: {config.port}")

    if config.output is not None and config.mode.needs_extraction:
        config.output.parent.mkdir(parents=True, exist_ok=True)
        if config.output.is_dir():
            LOG.error("Output is a directory: %s", config.output)
            raise ValueError(f"Output is a directory: {config.output}")

    return config
