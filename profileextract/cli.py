#!/usr/bin/env python3
# Copyright 2025 Ivo Mateev
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
profileextract command line.

Runs in three phases: argument parsing into a UserConfig, input validation
and output directory setup, then extraction, serving, or component listing.
Exit codes: 0 ok, 1 failure, 2 strict-mode rejection.
"""

from __future__ import annotations

import traceback
from pathlib import Path
from typing import List, Optional

from .cli_config import UserConfig
from .cli_execute import execute_pipeline
from .cli_gather import gather_user_requirements
from .cli_prepare import prepare_execution_environment
from .logging_utils import LOG, setup_logging


def _configure_logging(config: UserConfig) -> None:
    if config.log_file:
        Path(config.log_file).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
    setup_logging(config.debug, log_file=config.log_file, verbosity=config.verbosity)


def main(argv: Optional[List[str]] = None) -> int:
    config = gather_user_requirements(argv)
    _configure_logging(config)

    try:
        return execute_pipeline(prepare_execution_environment(config))
    except Exception as e:
        LOG.error("%s: %s", type(e).__name__, e)
        if config.debug:
            LOG.error(traceback.format_exc())
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
