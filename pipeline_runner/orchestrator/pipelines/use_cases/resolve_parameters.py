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


"""ResolveParameters use case implementation."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pipeline_runner.core.pipelines.entities import JobHandle
from pipeline_runner.core.pipelines.exceptions import (
    NoActiveDocumentError,
    ParameterFileError,
)
from pipeline_runner.core.pipelines.repositories import (
    InteractiveUI,
    ParameterStore,
    ProgressReporter,
)
from pipeline_runner.core.pipelines.value_objects import (
    Empty,
    NotApplicable,
    ParameterResolution,
    Resolved,
    SourceDocument,
)

logger = logging.getLogger(__name__)


class ResolveParametersUseCase:
    """Use case negotiating build parameters through a local override file.

    The override file lives beside the source document as
    ``<base>.params.json``. It is seeded with the job's remote defaults,
    merged on every build (override wins) and never deleted.

    Attributes:
        store: Parameter file store port.
        ui: Interactive UI port used for the first-run edit.
    """

    def __init__(self, store: ParameterStore, ui: InteractiveUI) -> None:
        """Initialize use case with its ports.

        Args:
            store: Parameter file store implementation.
            ui: Interactive UI implementation.
        """
        self._store = store
        self._ui = ui

    async def execute(
        self,
        job: JobHandle,
        document: Optional[SourceDocument],
        params_enabled: bool,
        progress: ProgressReporter,
    ) -> ParameterResolution:
        """Resolve the parameters the next build is triggered with.

        Args:
            job: Job about to be built.
            document: Source document, None without an editor context.
            params_enabled: Whether the parameters file is used at all.
            progress: Progress reporter of the running workflow.

        Returns:
            NotApplicable when the job declares no parameters, Empty when the
            feature is disabled or the file holds no entries, otherwise the
            Resolved mapping read back from the file.

        Raises:
            NoActiveDocumentError: If the job has parameters but there is no
                document to derive the file path from.
            ParameterFileError: If the file cannot be read or written.
        """
        if not job.has_parameters:
            return NotApplicable()
        if not params_enabled:
            logger.debug("Parameters disabled, triggering %s with no values", job.name)
            return Empty()
        if document is None:
            raise NoActiveDocumentError(job_name=str(job.name))

        path = document.params_path
        first_run = not await self._exists(path)
        candidate = await self._merge(job, path, first_run)

        await self._write(path, candidate, str(job.name))
        progress.report(message=f"{path} {'created' if first_run else 'updated'}!")
        logger.info("Parameters file %s %s", path, "created" if first_run else "updated")

        if first_run:
            progress.report(message=f"Close {path.name} to continue build.")
            await self._ui.edit_document(path)

        values = await self._read(path, str(job.name))
        if not values:
            return Empty()
        return Resolved(values)

    async def _merge(self, job: JobHandle, path: Path, first_run: bool) -> Dict[str, Any]:
        """Overlay the existing overrides on the remote defaults."""
        candidate = job.default_parameters()
        if not first_run:
            candidate.update(await self._read(path, str(job.name)))
        return candidate

    async def _exists(self, path: Path) -> bool:
        return await self._store.exists(path)

    async def _read(self, path: Path, job_name: str) -> Dict[str, Any]:
        """Read the override mapping, wrapping decode and I/O failures."""
        try:
            values = await self._store.read(path)
        except (OSError, ValueError) as exc:
            raise ParameterFileError(str(path), str(exc), job_name=job_name) from exc
        if not isinstance(values, dict):
            raise ParameterFileError(str(path), "expected a JSON object", job_name=job_name)
        return values

    async def _write(self, path: Path, values: Dict[str, Any], job_name: str) -> None:
        try:
            await self._store.write(path, values)
        except (OSError, TypeError) as exc:
            raise ParameterFileError(str(path), str(exc), job_name=job_name) from exc
