"""
CLI Phase 1: Gather user requirements.

Parses command-line arguments and returns UserConfig dataclass.
No side effects - just parsing and conversion.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .cli_config import ExecutionMode, UserConfig

LISTABLE = ("acquirers", "extractors", "verifiers")


def _mode_from_args(args: argparse.Namespace) -> ExecutionMode:
    if args.list:
        return ExecutionMode.LIST
    if args.serve:
        return ExecutionMode.SERVE
    if args.pdf:
        return ExecutionMode.EXTRACT_PDF
    if args.text:
        return ExecutionMode.EXTRACT_TEXT
    return ExecutionMode.EXTRACT_ORCID


def gather_user_requirements(argv: Optional[List[str]] = None) -> UserConfig:
    """
    Phase 1: Parse command-line arguments and return user configuration.

    No side effects - just parsing and conversion to UserConfig.
    """
    parser = argparse.ArgumentParser(
        description="Extract a structured profile from a LinkedIn PDF export or an ORCID record.",
        epilog="""
Examples:
  Extract a LinkedIn PDF export to JSON:
    python -m profileextract.cli --pdf Profile.pdf --output profile.json

  Extract from already extracted profile text:
    python -m profileextract.cli --text profile.txt

  Fetch and extract a public ORCID record:
    python -m profileextract.cli --orcid 0000-0002-1825-0097 --output orcid.json

  Run the HTTP service:
    python -m profileextract.cli --serve --host 0.0.0.0 --port 8000

  List registered extractors:
    python -m profileextract.cli --list extractors
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--pdf", help="LinkedIn PDF export to extract.")
    source.add_argument("--text", help="Plain-text file with profile text to extract.")
    source.add_argument("--orcid", help="ORCID iD to fetch and extract (e.g. 0000-0002-1825-0097).")
    source.add_argument("--serve", action="store_true", help="Run the HTTP service.")
    source.add_argument("--list", choices=LISTABLE, help="List registered components and exit.")

    parser.add_argument("--output", help="Output JSON path (defaults to stdout).")
    parser.add_argument("--host", default="127.0.0.1", help="Service bind address (with --serve).")
    parser.add_argument("--port", type=int, default=8000, help="Service port (with --serve).")

    parser.add_argument("--strict", action="store_true",
                        help="Exit with code 2 when the record comes from the mock or the safe fallback, "
                             "or carries validation warnings.")
    parser.add_argument("--debug", action="store_true",
                        help="Verbose logs + stack traces on failure.")
    parser.add_argument("--log-file",
                        help="Optional path to a log file. If set, all output is also written there.")
    parser.add_argument("--verbosity", type=int, choices=(0, 1, 2), default=0,
                        help="0=quiet, 1=normal, 2=verbose.")

    args = parser.parse_args(argv)

    return UserConfig(
        mode=_mode_from_args(args),
        pdf=Path(args.pdf) if args.pdf else None,
        text=Path(args.text) if args.text else None,
        orcid=args.orcid,
        output=Path(args.output) if args.output else None,
        host=args.host,
        port=args.port,
        list_what=args.list,
        strict=args.strict,
        debug=args.debug,
        log_file=args.log_file,
        verbosity=args.verbosity,
    )
