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


"""User-facing pipeline commands."""

import logging
from typing import List, Optional

from pipeline_runner.core.pipelines.entities import JobHandle
from pipeline_runner.core.pipelines.repositories import InteractiveUI, OutputSink
from pipeline_runner.core.pipelines.value_objects import (
    ActiveBuild,
    BuildStatus,
    JobName,
    PipelineOptions,
    SharedLibraryEntry,
    SourceDocument,
)

from ..commands import RunPipelineCommand
from ..dtos import BuildResult, CommandDescriptor
from .browse_shared_library import SharedLibraryBrowser
from .pipeline_orchestrator import PipelineOrchestrator
from .relay_log import LogRelayUseCase

logger = logging.getLogger(__name__)


class PipelineCommands:
    """Entry points behind the command menu.

    Validates the source document, drives the orchestrator and streams the
    build log of a started build into the output sink.

    Attributes:
        orchestrator: Build orchestrator holding the active build.
        options: Settings snapshot passed to every workflow.
    """

    def __init__(
        self,
        orchestrator: PipelineOrchestrator,
        relay: LogRelayUseCase,
        browser: SharedLibraryBrowser,
        ui: InteractiveUI,
        sink: OutputSink,
        options: PipelineOptions,
    ) -> None:
        self.orchestrator = orchestrator
        self.options = options
        self._relay = relay
        self._browser = browser
        self._ui = ui
        self._sink = sink

    def available_commands(self) -> List[CommandDescriptor]:
        return self.orchestrator.available_commands()

    async def execute(self, document: SourceDocument) -> BuildResult:
        """Build ``document`` as a pipeline job and stream the build log.

        Raises:
            InvalidSourceDocumentError: If the document is not a usable script.
            JenkinsApiError: If a remote call fails.
        """
        result = await self.start(document)
        if result.status is BuildStatus.STARTED:
            await self.stream(result.job)
        return result

    async def start(self, document: SourceDocument) -> BuildResult:
        """Build ``document`` without streaming its log."""
        document.validate()
        self._sink.show()
        self._sink.clear()
        return await self.orchestrator.trigger_build(
            RunPipelineCommand.from_document(document), self.options
        )

    async def stream(self, job: JobHandle) -> None:
        """Stream the log of ``job``'s triggered build, then complete it.

        An interrupted stream leaves the build active so it can be aborted.
        """
        try:
            await self._relay.relay(job.name, job.next_build_number, self._sink)
        except Exception:
            self.orchestrator.complete(job)
            raise
        self.orchestrator.complete(job)

    async def update(self, document: SourceDocument) -> BuildResult:
        """Push ``document`` to its job without building.

        Raises:
            InvalidSourceDocumentError: If the document is not a usable script.
            JenkinsApiError: If a remote call fails.
        """
        document.validate()
        self._sink.show()
        self._sink.clear()
        result = await self.orchestrator.update_only(RunPipelineCommand.from_document(document))
        if result.status is BuildStatus.UPDATED:
            logger.info("Updated %s without building", result.job_name)
            self._ui.show_info(f"Updated {result.job_name}")
        return result

    async def abort(self) -> Optional[ActiveBuild]:
        return await self.orchestrator.abort_active()

    async def reference(self, job_name: Optional[JobName] = None) -> Optional[SharedLibraryEntry]:
        """Show the Shared Library reference.

        Args:
            job_name: Scope to this job's libraries; defaults to the job of
                the last completed build.
        """
        last = self.orchestrator.last_build
        if job_name is None and last is not None:
            job_name = last.name
        return await self._browser.show_reference(self.options, job_name)

    async def download_log(self) -> Optional[int]:
        return await self._relay.download(self._ui, self._sink)
