"""
Package logger and console/file logging setup.

The CLI calls setup_logging once; library code only ever logs through LOG.
"""

from __future__ import annotations

import logging
from typing import List, Optional

LOG = logging.getLogger("profileextract")

VERBOSITY_QUIET = 0
VERBOSITY_NORMAL = 1
VERBOSITY_VERBOSE = 2

_LEVELS = {
    VERBOSITY_QUIET: logging.WARNING,
    VERBOSITY_NORMAL: logging.INFO,
    VERBOSITY_VERBOSE: logging.DEBUG,
}

_FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Client libraries that log every request at INFO.
_NOISY_LOGGERS = ("httpx", "httpcore", "openai", "urllib3", "uvicorn.access")


def _console_handlers() -> List[logging.Handler]:
    return [
        h for h in logging.root.handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    ]


def setup_logging(debug: bool, log_file: Optional[str] = None, verbosity: int = VERBOSITY_QUIET) -> None:
    """
    Configure root logging for a CLI run.

    Quiet mode prints bare warnings and errors; normal adds INFO with a level
    prefix; verbose (or `debug`) goes down to DEBUG. When the root logger
    already has console handlers (pytest, uvicorn) they are retuned in place
    instead of replaced. `log_file`, when given, always receives DEBUG.
    """
    if debug:
        verbosity = VERBOSITY_VERBOSE
    verbosity = max(VERBOSITY_QUIET, min(verbosity, VERBOSITY_VERBOSE))
    level = _LEVELS[verbosity]
    formatter = logging.Formatter("%(message)s" if verbosity == VERBOSITY_QUIET else "%(levelname)s: %(message)s")

    existing = _console_handlers()
    if existing:
        for handler in existing:
            handler.setLevel(level)
            handler.setFormatter(formatter)
        logging.root.setLevel(level)
    else:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(formatter)
        logging.basicConfig(level=level, handlers=[console], force=True)

    if log_file:
        to_file = logging.FileHandler(log_file, encoding="utf-8")
        to_file.setLevel(logging.DEBUG)
        to_file.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        logging.root.addHandler(to_file)
        if logging.root.level > logging.DEBUG:
            # Root must pass DEBUG through for the file; console keeps its own level.
            logging.root.setLevel(logging.DEBUG)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def fmt_issues(errors: List[str], warnings: List[str]) -> str:
    """One-line summary of step errors and warnings ("-" when clean)."""
    sections = [
        f"{label}: {', '.join(items)}"
        for label, items in (("errors", errors), ("warnings", warnings))
        if items
    ]
    return " | ".join(sections) or "-"
