# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
#
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


"""Logging setup for the command-line host."""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
HANDLER_NAME = "pipeline-runner"


def setup_logging(level: Optional[str] = None) -> None:
    """Configure the root logger with a stderr handler, once.

    Args:
        level: Level name; falls back to ``LOG_LEVEL`` and then ``WARNING``.
    """
    level_name = (level or os.environ.get("LOG_LEVEL", "WARNING")).upper()
    log_level = getattr(logging, level_name, logging.WARNING)
    if not isinstance(log_level, int):
        log_level = logging.WARNING

    root_logger = logging.getLogger()
    if any(h.get_name() == HANDLER_NAME for h in root_logger.handlers):
        root_logger.setLevel(log_level)
        return

    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))
