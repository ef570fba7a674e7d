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


"""JSON file store for parameter override files."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping

logger = logging.getLogger(__name__)


class JsonParameterStore:
    """Reads and writes ``*.params.json`` files beside pipeline scripts.

    Files are written with two-space indentation so they stay pleasant to
    edit by hand.
    """

    INDENT = 2

    async def exists(self, path: Path) -> bool:
        return await asyncio.to_thread(Path(path).is_file)

    async def read(self, path: Path) -> Dict[str, Any]:
        """Load the mapping stored at ``path``.

        Raises:
            OSError: If the file cannot be read.
            ValueError: If the file is not UTF-8 encoded JSON.
        """
        text = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
        return json.loads(text)

    async def write(self, path: Path, values: Mapping[str, Any]) -> None:
        """Replace the file at ``path`` with ``values``."""
        text = json.dumps(dict(values), indent=self.INDENT) + "\n"
        await asyncio.to_thread(Path(path).write_text, text, encoding="utf-8")
        logger.debug("Wrote %d parameters to %s", len(values), path)
